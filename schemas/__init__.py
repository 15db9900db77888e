"""Pydantic request/response models for API validation and docs."""
from schemas.requests import (
	FramePayload,
	LandmarkPayload,
	PosePayload,
	SessionStartPayload,
)
from schemas.responses import (
	FrameResponse,
	SessionStartResponse,
	StatusLine,
)

__all__ = [
	"FramePayload",
	"LandmarkPayload",
	"PosePayload",
	"SessionStartPayload",
	"FrameResponse",
	"SessionStartResponse",
	"StatusLine",
]
