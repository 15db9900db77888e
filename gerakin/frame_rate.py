from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque

FPS_GOOD = 24
FPS_FAIR = 15


def fps_tier(fps: int) -> str:
	if fps >= FPS_GOOD:
		return "good"
	if fps >= FPS_FAIR:
		return "fair"
	return "poor"


class FrameRateMeter:
	"""
	Rolling one-second frame counter.

	Every arrival is recorded (dropped frames included, since they still reached
	the camera callback). The published value is refreshed at most once per
	`publish_interval_s` so an overlay doesn't flicker.
	"""

	def __init__(
		self,
		window_s: float = 1.0,
		publish_interval_s: float = 0.5,
		clock: Callable[[], float] = time.monotonic,
	) -> None:
		self.window_s = float(window_s)
		self.publish_interval_s = float(publish_interval_s)
		self._clock = clock
		self._arrivals: Deque[float] = deque()
		self._last_publish = self._clock()
		self.fps = 0

	def tick(self) -> int:
		now = self._clock()
		self._arrivals.append(now)
		cut = now - self.window_s
		while self._arrivals and self._arrivals[0] <= cut:
			self._arrivals.popleft()
		if now - self._last_publish >= self.publish_interval_s:
			self.fps = len(self._arrivals)
			self._last_publish = now
		return self.fps

	@property
	def tier(self) -> str:
		return fps_tier(self.fps)

	def reset(self) -> None:
		self._arrivals.clear()
		self._last_publish = self._clock()
		self.fps = 0
