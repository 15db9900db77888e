from __future__ import annotations

import logging
from typing import List

from gerakin.config import DetectorConfig
from gerakin.pose.base import PoseProvider
from gerakin.pose.types import LANDMARK_NAMES, Landmark, Pose

logger = logging.getLogger(__name__)


class MediaPipePoseProvider(PoseProvider):
	"""
	MediaPipe Pose provider emitting the 33 BlazePose landmarks.

	Notes:
	- MediaPipe uses normalized coordinates; we convert x/y to pixel space and
	  scale z by the image width, as MediaPipe documents for its depth value.
	- `visibility` is used as the landmark likelihood.
	- MediaPipe Pose tracks a single body, so at most one Pose is returned.
	"""

	def __init__(self, config: DetectorConfig | None = None) -> None:
		cfg = config or DetectorConfig()
		try:
			import mediapipe as mp  # type: ignore
		except ImportError as e:
			raise RuntimeError(
				"MediaPipe is not installed. Install pose deps with: pip install -e .[pose]"
			) from e

		self._mp = mp
		self._pose = mp.solutions.pose.Pose(
			static_image_mode=False,
			model_complexity=int(cfg.model_complexity),
			enable_segmentation=False,
			# Temporal smoothing is done by our own history; keep raw detector output.
			smooth_landmarks=False,
			min_detection_confidence=float(cfg.min_detection_confidence),
			min_tracking_confidence=float(cfg.min_tracking_confidence),
		)

	def name(self) -> str:
		return "mediapipe_pose"

	def infer_rgb(self, rgb) -> List[Pose]:
		# rgb: HxWx3
		h, w = int(rgb.shape[0]), int(rgb.shape[1])
		res = self._pose.process(rgb)
		if not res or not getattr(res, "pose_landmarks", None):
			return []

		lm = res.pose_landmarks.landmark
		landmarks = {}
		# MediaPipe's PoseLandmark enum uses the same index order as LANDMARK_NAMES.
		for idx, name in enumerate(LANDMARK_NAMES):
			if idx >= len(lm):
				break
			p = lm[idx]
			landmarks[name] = Landmark(
				name=name,
				x=float(p.x) * float(w),
				y=float(p.y) * float(h),
				z=float(p.z) * float(w),
				likelihood=float(getattr(p, "visibility", 0.0) or 0.0),
			)
		return [Pose(landmarks=landmarks)]

	def close(self) -> None:
		if self._pose is None:
			return
		try:
			self._pose.close()
		except Exception as e:
			logger.warning("[Pose] Closing MediaPipe graph failed: %s", e)
		finally:
			self._pose = None
