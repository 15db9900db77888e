"""
Gerakin posture feedback package.

Holds the landmark post-processing pipeline (filter, smoother, classifier),
the detection session that drives it frame by frame, and config loading.
"""

from pathlib import Path


def _read_version() -> str:
	try:
		vf = Path(__file__).resolve().parents[1] / "VERSION"
		if vf.exists():
			val = vf.read_text(encoding="utf-8").strip()
			if val:
				return val
	except OSError:
		pass
	return "0.1.0"


__version__ = _read_version()
