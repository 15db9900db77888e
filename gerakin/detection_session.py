from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from gerakin.config import AppConfig, get_config
from gerakin.frame_rate import FrameRateMeter
from gerakin.pose import status
from gerakin.pose.base import PoseProvider
from gerakin.pose.landmark_filter import filter_landmarks, has_enough_landmarks
from gerakin.pose.posture import analyze_pose
from gerakin.pose.smoothing import LandmarkHistory, apply_smoothing
from gerakin.pose.types import FrameSize, Pose

logger = logging.getLogger(__name__)

OUTCOME_OK = "ok"
OUTCOME_NO_POSE = "no_pose"
OUTCOME_INSUFFICIENT = "insufficient"
OUTCOME_ERROR = "error"
OUTCOME_DROPPED = "dropped"
OUTCOME_CLOSED = "closed"


@dataclass(frozen=True)
class FrameResult:
	outcome: str
	statuses: List[str] = field(default_factory=list)
	fps: int = 0
	fps_tier: str = "poor"

	@property
	def text(self) -> str:
		return "\n".join(self.statuses)


class DetectionSession:
	"""
	One camera's detection pipeline: filter -> smooth -> classify.

	- Owns the LandmarkHistory; a camera switch starts a fresh one.
	- At most one frame is in flight. A frame arriving while another is being
	  processed is dropped, not queued, and the previous statuses stay on screen.
	- Failures inside a frame are reported as an "Error: ..." line; the next
	  frame runs normally.
	- close() releases the detector, then stops the camera stream, then drops
	  the history.
	"""

	def __init__(
		self,
		session_id: str,
		config: Optional[AppConfig] = None,
		provider: Optional[PoseProvider] = None,
		stop_stream: Optional[Callable[[], None]] = None,
		clock: Callable[[], float] = time.monotonic,
	) -> None:
		self.session_id = session_id
		self.cfg = config or get_config()
		self.provider = provider
		self._stop_stream = stop_stream
		self._clock = clock
		self.history = LandmarkHistory(self.cfg.smoothing.history_size)
		self.fps_meter = FrameRateMeter(clock=clock)
		self._inflight = threading.Lock()
		self._closed = False
		# Only a real detector needs to warm up; landmark submissions are ready at once.
		warmup = float(self.cfg.detector.warmup_seconds) if provider is not None else 0.0
		self._ready_at = self._clock() + warmup
		self.camera_index = 0
		self.frames_processed = 0
		self.frames_dropped = 0
		self.last_outcome: Optional[str] = None
		self.last_statuses: List[str] = []
		logger.info("[Session] %s started (provider=%s)", session_id, provider.name() if provider else None)

	@property
	def closed(self) -> bool:
		return self._closed

	@property
	def busy(self) -> bool:
		return self._inflight.locked()

	def process_poses(self, poses: Sequence[Pose], frame_size: FrameSize) -> FrameResult:
		"""Run one frame of already-detected poses (first pose = tracked body)."""
		return self._process(lambda: (list(poses), frame_size))

	def process_rgb(self, rgb) -> FrameResult:
		"""Detect poses in an RGB frame with the attached provider and run the pipeline."""
		if self.provider is None:
			raise RuntimeError("Session has no pose provider attached")
		provider = self.provider

		def _infer():
			size = FrameSize(width=float(rgb.shape[1]), height=float(rgb.shape[0]))
			return provider.infer_rgb(rgb), size

		return self._process(_infer)

	def _process(self, load: Callable[[], Any]) -> FrameResult:
		self.fps_meter.tick()
		if self._closed:
			return self._result(OUTCOME_CLOSED, [])
		if self._clock() < self._ready_at or not self._inflight.acquire(blocking=False):
			self.frames_dropped += 1
			return self._result(OUTCOME_DROPPED, self.last_statuses)
		try:
			try:
				poses, frame_size = load()
				outcome, statuses = self._run_pipeline(poses, frame_size)
			except Exception as e:
				logger.exception("[Session] %s frame failed", self.session_id)
				outcome, statuses = OUTCOME_ERROR, [status.error_line(e)]
			self.frames_processed += 1
			self.last_outcome = outcome
			self.last_statuses = statuses
			return self._result(outcome, statuses)
		finally:
			self._inflight.release()

	def _run_pipeline(self, poses: List[Pose], frame_size: FrameSize):
		if not poses:
			return OUTCOME_NO_POSE, [status.NO_POSE]
		filtered = filter_landmarks(poses[0], self.cfg.filter.confidence_threshold)
		if not has_enough_landmarks(filtered, self.cfg.filter.min_landmarks):
			logger.debug("[Session] %s only %d confident landmarks", self.session_id, len(filtered))
			return OUTCOME_INSUFFICIENT, [status.MOVE_MORE]
		smoothed = apply_smoothing(filtered, self.history, self.cfg.smoothing.decay)
		return OUTCOME_OK, analyze_pose(smoothed, frame_size, self.cfg.classifier)

	def _result(self, outcome: str, statuses: List[str]) -> FrameResult:
		return FrameResult(
			outcome=outcome,
			statuses=list(statuses),
			fps=self.fps_meter.fps,
			fps_tier=self.fps_meter.tier,
		)

	def switch_camera(self) -> None:
		"""Start over with an empty history for the next camera."""
		with self._inflight:
			self.camera_index += 1
			self.history = LandmarkHistory(self.cfg.smoothing.history_size)
			self.fps_meter.reset()
			self.last_outcome = None
			self.last_statuses = []
		logger.info("[Session] %s switched to camera %d", self.session_id, self.camera_index)

	def close(self) -> None:
		if self._closed:
			return
		self._closed = True
		# Wait for a frame still in flight before tearing anything down.
		with self._inflight:
			if self.provider is not None:
				try:
					self.provider.close()
				except Exception as e:
					logger.warning("[Session] %s detector close failed: %s", self.session_id, e)
			if self._stop_stream is not None:
				try:
					self._stop_stream()
				except Exception as e:
					logger.warning("[Session] %s stopping camera stream failed: %s", self.session_id, e)
			self.history.clear()
		logger.info(
			"[Session] %s closed (processed=%d dropped=%d)",
			self.session_id,
			self.frames_processed,
			self.frames_dropped,
		)

	def snapshot(self) -> Dict[str, Any]:
		return {
			"session_id": self.session_id,
			"closed": self._closed,
			"busy": self.busy,
			"camera_index": self.camera_index,
			"frames_processed": self.frames_processed,
			"frames_dropped": self.frames_dropped,
			"fps": self.fps_meter.fps,
			"fps_tier": self.fps_meter.tier,
			"tracked_landmarks": len(self.history),
			"last_outcome": self.last_outcome,
			"last_statuses": list(self.last_statuses),
		}
