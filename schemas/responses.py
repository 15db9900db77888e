"""Pydantic response models for API docs."""
from typing import List, Optional

from pydantic import BaseModel

from gerakin.detection_session import FrameResult
from gerakin.pose.status import split_line, status_tone


class SessionStartResponse(BaseModel):
	"""Response from POST /sessions."""

	detail: str
	session_id: str


class StatusLine(BaseModel):
	text: str
	label: Optional[str] = None
	value: str
	tone: str

	@classmethod
	def from_text(cls, text: str) -> "StatusLine":
		label, value = split_line(text)
		return cls(text=text, label=label, value=value, tone=status_tone(text))


class FrameResponse(BaseModel):
	"""Response from POST /sessions/{id}/frames."""

	session_id: str
	outcome: str
	statuses: List[str]
	lines: List[StatusLine]
	fps: int
	fps_tier: str

	@classmethod
	def from_result(cls, session_id: str, result: FrameResult) -> "FrameResponse":
		return cls(
			session_id=session_id,
			outcome=result.outcome,
			statuses=result.statuses,
			lines=[StatusLine.from_text(s) for s in result.statuses],
			fps=result.fps,
			fps_tier=result.fps_tier,
		)
