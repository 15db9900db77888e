from __future__ import annotations

from gerakin.pose.types import Pose

CONFIDENCE_THRESHOLD = 0.7
MIN_LANDMARKS = 4


def filter_landmarks(pose: Pose, threshold: float = CONFIDENCE_THRESHOLD) -> Pose:
	"""
	Keep only landmarks the detector is confident about (likelihood >= threshold).
	Kept landmarks are passed through untouched; the input pose is not modified.
	"""
	return Pose(landmarks={name: lm for name, lm in pose.landmarks.items() if lm.likelihood >= threshold})


def has_enough_landmarks(pose: Pose, minimum: int = MIN_LANDMARKS) -> bool:
	return len(pose.landmarks) >= int(minimum)
