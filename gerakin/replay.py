"""
Replay recorded landmark frames through a detection session.

Input is JSON lines, one frame per line, in the same shape as the body of
POST /sessions/{id}/frames:

	{"width": 720, "height": 1280, "poses": [{"landmarks": [{"name": "left_ear", ...}]}]}
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, Iterator, List, Optional

from pydantic import ValidationError

from gerakin.config import get_config, set_config_path
from gerakin.detection_session import DetectionSession, FrameResult
from schemas.requests import FramePayload

logger = logging.getLogger(__name__)


def iter_frames(fh: IO[str]) -> Iterator[FramePayload]:
	for lineno, line in enumerate(fh, start=1):
		line = line.strip()
		if not line:
			continue
		try:
			yield FramePayload.model_validate_json(line)
		except ValidationError as e:
			logger.warning("[Replay] skipping line %d: %s", lineno, e.errors()[0].get("msg"))


def replay(fh: IO[str], session: DetectionSession) -> List[FrameResult]:
	results = []
	for frame in iter_frames(fh):
		results.append(session.process_poses(frame.to_poses(), frame.frame_size()))
	return results


def main(argv: Optional[List[str]] = None) -> None:
	import argparse

	parser = argparse.ArgumentParser(description="Replay recorded pose landmarks and print posture status lines.")
	parser.add_argument("path", nargs="?", default="-", help="JSON lines file ('-' for stdin).")
	parser.add_argument("--config", help="Path to config.json (defaults to the repo root one).")
	parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
	args = parser.parse_args(argv)

	if args.debug:
		logging.basicConfig(level=logging.DEBUG, format="%(levelname)s:%(name)s:%(message)s")
	else:
		logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

	if args.config:
		set_config_path(args.config)

	session = DetectionSession("replay", config=get_config())
	try:
		if args.path == "-":
			results = replay(sys.stdin, session)
		else:
			with open(Path(args.path), "r", encoding="utf-8") as fh:
				results = replay(fh, session)
	except OSError as e:
		logging.error("Cannot read %s: %s", args.path, e)
		sys.exit(1)
	finally:
		session.close()

	for i, res in enumerate(results):
		print(f"--- frame {i} [{res.outcome}]")
		for line in res.statuses:
			print(line)


if __name__ == "__main__":
	main()
