from __future__ import annotations

import math
from typing import List, Optional, Sequence

from gerakin.config import ClassifierConfig
from gerakin.pose import status
from gerakin.pose.types import FrameSize, Landmark, Pose

HEAD_TILT_KEYPOINTS = ("left_ear", "right_ear")
ELBOW_KEYPOINTS = (
	"left_wrist",
	"right_wrist",
	"left_elbow",
	"right_elbow",
	"left_shoulder",
	"right_shoulder",
)
HAND_KEYPOINTS = ("left_wrist", "right_wrist", "left_shoulder", "right_shoulder")
BODY_KEYPOINTS = ("left_knee", "right_knee", "left_hip", "right_hip")


def has_keypoints(pose: Pose, names: Sequence[str], min_likelihood: float = 0.5) -> bool:
	"""True when every named landmark is present with likelihood >= min_likelihood."""
	for name in names:
		lm = pose.get(name)
		if lm is None or lm.likelihood < min_likelihood:
			return False
	return True


def calculate_angle(a: Landmark, b: Landmark, c: Landmark) -> float:
	"""
	Interior angle at vertex b formed by a and c, in degrees [0, 180].
	"""
	radians = math.atan2(c.y - b.y, c.x - b.x) - math.atan2(a.y - b.y, a.x - b.x)
	angle = abs(math.degrees(radians))
	if angle > 180.0:
		angle = 360.0 - angle
	return angle


def _head_status(pose: Pose, cfg: ClassifierConfig) -> str:
	ear_diff = pose.landmarks["left_ear"].y - pose.landmarks["right_ear"].y
	if ear_diff > cfg.head_tilt_px:
		value = status.HEAD_TILTED_LEFT
	elif ear_diff < -cfg.head_tilt_px:
		value = status.HEAD_TILTED_RIGHT
	else:
		value = status.HEAD_NORMAL
	return status.status_line(status.HEAD, value)


def _elbow_status(pose: Pose, cfg: ClassifierConfig) -> str:
	lm = pose.landmarks
	left_angle = calculate_angle(lm["left_wrist"], lm["left_elbow"], lm["left_shoulder"])
	right_angle = calculate_angle(lm["right_wrist"], lm["right_elbow"], lm["right_shoulder"])
	left_bent = left_angle < cfg.elbow_bent_deg
	right_bent = right_angle < cfg.elbow_bent_deg
	if left_bent and right_bent:
		value = status.ELBOW_BOTH_BENT
	elif left_bent:
		value = status.ELBOW_LEFT_BENT
	elif right_bent:
		value = status.ELBOW_RIGHT_BENT
	else:
		value = status.ELBOW_BOTH_STRAIGHT
	return status.status_line(status.ELBOW, value)


def _hand_status(pose: Pose) -> str:
	lm = pose.landmarks
	# Image y grows downwards, so a raised wrist has the smaller y.
	left_raised = lm["left_wrist"].y < lm["left_shoulder"].y
	right_raised = lm["right_wrist"].y < lm["right_shoulder"].y
	if left_raised and right_raised:
		value = status.HAND_BOTH_RAISED
	elif left_raised:
		value = status.HAND_LEFT_RAISED
	elif right_raised:
		value = status.HAND_RIGHT_RAISED
	else:
		value = status.HAND_NORMAL
	return status.status_line(status.HAND, value)


def standing_ratio(pose: Pose, frame_size: FrameSize) -> float:
	lm = pose.landmarks
	height = float(frame_size.height)
	left = (lm["left_knee"].y - lm["left_hip"].y) / height
	right = (lm["right_knee"].y - lm["right_hip"].y) / height
	return (left + right) / 2.0


def _body_status(pose: Pose, frame_size: FrameSize, cfg: ClassifierConfig) -> str:
	if standing_ratio(pose, frame_size) > cfg.standing_ratio:
		return status.status_line(status.POSITION, status.POSITION_STANDING)
	return status.POSITION_PLACEHOLDER


def analyze_pose(pose: Pose, frame_size: FrameSize, config: Optional[ClassifierConfig] = None) -> List[str]:
	"""
	Classify a smoothed pose into ordered status lines.

	Rules run in a fixed order (head, elbow, hand, body) and each one only
	fires when all of its landmarks pass the likelihood gate. When none fires
	the result is a single advisory asking the user to move.
	"""
	cfg = config or ClassifierConfig()
	out: List[str] = []

	if has_keypoints(pose, HEAD_TILT_KEYPOINTS, cfg.min_likelihood):
		out.append(_head_status(pose, cfg))

	if has_keypoints(pose, ELBOW_KEYPOINTS, cfg.min_likelihood):
		out.append(_elbow_status(pose, cfg))

	if has_keypoints(pose, HAND_KEYPOINTS, cfg.min_likelihood):
		out.append(_hand_status(pose))

	if has_keypoints(pose, BODY_KEYPOINTS, cfg.min_likelihood):
		out.append(_body_status(pose, frame_size, cfg))

	if not out:
		out.append(status.MOVE_MORE)
	return out
