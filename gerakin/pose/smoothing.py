from __future__ import annotations

import math
from collections import deque
from typing import Deque, Dict, List

from gerakin.pose.types import Landmark, Pose

HISTORY_SIZE = 5
DECAY = 0.5


class LandmarkHistory:
	"""
	Per-landmark rolling buffer of raw samples (most recent last).

	One instance belongs to one detection session. Each buffer holds at most
	`size` samples; appending beyond that evicts the oldest one.
	"""

	def __init__(self, size: int = HISTORY_SIZE) -> None:
		self.size = int(size) if int(size) > 0 else HISTORY_SIZE
		self._buffers: Dict[str, Deque[Landmark]] = {}

	def append(self, landmark: Landmark) -> List[Landmark]:
		buf = self._buffers.get(landmark.name)
		if buf is None:
			buf = deque(maxlen=self.size)
			self._buffers[landmark.name] = buf
		buf.append(landmark)
		return list(buf)

	def samples(self, name: str) -> List[Landmark]:
		return list(self._buffers.get(name, ()))

	def clear(self) -> None:
		self._buffers.clear()

	def __len__(self) -> int:
		return len(self._buffers)

	def __contains__(self, name: object) -> bool:
		return name in self._buffers


def _is_finite(lm: Landmark) -> bool:
	return math.isfinite(lm.x) and math.isfinite(lm.y) and math.isfinite(lm.z) and math.isfinite(lm.likelihood)


def weighted_average(samples: List[Landmark], decay: float = DECAY) -> Landmark:
	"""
	Exponentially weighted average of a history, oldest first.

	Sample i of L gets weight exp(-(L-1-i) * decay) * likelihood, so the newest
	sample counts fully and older ones fade. The result carries the newest
	sample's likelihood. Samples with a non-finite coordinate or likelihood get no
	weight. If every weight is zero the newest sample is returned.
	"""
	current = samples[-1]
	n = len(samples)
	sum_x = sum_y = sum_z = total = 0.0
	for i, s in enumerate(samples):
		if not _is_finite(s):
			continue
		w = math.exp(-(n - 1 - i) * decay) * s.likelihood
		sum_x += s.x * w
		sum_y += s.y * w
		sum_z += s.z * w
		total += w
	if total <= 0.0:
		return current
	return Landmark(
		name=current.name,
		x=sum_x / total,
		y=sum_y / total,
		z=sum_z / total,
		likelihood=current.likelihood,
	)


def apply_smoothing(pose: Pose, history: LandmarkHistory, decay: float = DECAY) -> Pose:
	"""
	Smooth the current frame against the session's history.

	Every landmark of `pose` is appended to `history` (mutated in place) and
	replaced by its weighted average. Only the current frame's landmarks are
	emitted; buffers for landmarks missing this frame are kept for later frames.
	"""
	if not pose.landmarks:
		return pose
	smoothed: Dict[str, Landmark] = {}
	for name, lm in pose.landmarks.items():
		smoothed[name] = weighted_average(history.append(lm), decay)
	return Pose(landmarks=smoothed)
