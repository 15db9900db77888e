"""Pydantic request body models for the session and frame endpoints."""
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from gerakin.pose.types import LANDMARK_NAME_SET, FrameSize, Landmark, Pose


class SessionStartPayload(BaseModel):
	"""Request body for POST /sessions. Optional session_id; auto-generated if omitted."""

	session_id: Optional[str] = Field(None, description="Session identifier; generated if empty")
	provider: Optional[str] = Field(None, description="Attach a pose detector, e.g. 'mediapipe', to accept raw RGB frames")


class LandmarkPayload(BaseModel):
	"""One detected landmark in image pixel coordinates."""

	name: str = Field(..., description="BlazePose landmark name, e.g. left_wrist")
	x: float = Field(..., allow_inf_nan=False)
	y: float = Field(..., allow_inf_nan=False)
	z: float = Field(0.0, allow_inf_nan=False, description="Depth; carried through smoothing, unused by classification")
	likelihood: float = Field(..., ge=0.0, le=1.0, allow_inf_nan=False, description="Detector confidence")

	@field_validator("name")
	@classmethod
	def _known_name(cls, v: str) -> str:
		v = v.strip()
		if v not in LANDMARK_NAME_SET:
			raise ValueError(f"unknown landmark name: {v!r}")
		return v

	def to_landmark(self) -> Landmark:
		return Landmark(name=self.name, x=self.x, y=self.y, z=self.z, likelihood=self.likelihood)


class PosePayload(BaseModel):
	landmarks: List[LandmarkPayload] = Field(default_factory=list)

	@field_validator("landmarks")
	@classmethod
	def _unique_names(cls, v: List[LandmarkPayload]) -> List[LandmarkPayload]:
		seen = set()
		for lm in v:
			if lm.name in seen:
				raise ValueError(f"duplicate landmark name: {lm.name!r}")
			seen.add(lm.name)
		return v

	def to_pose(self) -> Pose:
		return Pose.from_landmarks(lm.to_landmark() for lm in self.landmarks)


class FramePayload(BaseModel):
	"""Request body for POST /sessions/{id}/frames. Empty `poses` means nothing was detected."""

	width: float = Field(..., gt=0, allow_inf_nan=False, description="Source image width in pixels")
	height: float = Field(..., gt=0, allow_inf_nan=False, description="Source image height in pixels")
	poses: List[PosePayload] = Field(default_factory=list)

	def frame_size(self) -> FrameSize:
		return FrameSize(width=self.width, height=self.height)

	def to_poses(self) -> List[Pose]:
		return [p.to_pose() for p in self.poses]
