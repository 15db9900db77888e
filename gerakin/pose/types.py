from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional


# BlazePose / ML Kit landmark set, in detector index order.
LANDMARK_NAMES = [
	"nose",
	"left_eye_inner",
	"left_eye",
	"left_eye_outer",
	"right_eye_inner",
	"right_eye",
	"right_eye_outer",
	"left_ear",
	"right_ear",
	"mouth_left",
	"mouth_right",
	"left_shoulder",
	"right_shoulder",
	"left_elbow",
	"right_elbow",
	"left_wrist",
	"right_wrist",
	"left_pinky",
	"right_pinky",
	"left_index",
	"right_index",
	"left_thumb",
	"right_thumb",
	"left_hip",
	"right_hip",
	"left_knee",
	"right_knee",
	"left_ankle",
	"right_ankle",
	"left_heel",
	"right_heel",
	"left_foot_index",
	"right_foot_index",
]

LANDMARK_NAME_SET = frozenset(LANDMARK_NAMES)


@dataclass(frozen=True)
class Landmark:
	"""
	A single body landmark in the frame's pixel coordinate space.
	"""

	name: str
	x: float
	y: float
	z: float = 0.0  # depth, carried through smoothing but not classified
	likelihood: float = 0.0  # detector confidence [0..1]


@dataclass(frozen=True)
class FrameSize:
	width: float
	height: float


@dataclass(frozen=True)
class Pose:
	"""
	Landmarks detected for one body in one frame.

	Keys depend on detector confidence; callers must not assume a full set.
	"""

	landmarks: Dict[str, Landmark] = field(default_factory=dict)

	@classmethod
	def from_landmarks(cls, landmarks: Iterable[Landmark]) -> "Pose":
		return cls(landmarks={lm.name: lm for lm in landmarks})

	def get(self, name: str) -> Optional[Landmark]:
		return self.landmarks.get(name)

	def __len__(self) -> int:
		return len(self.landmarks)

	def __contains__(self, name: object) -> bool:
		return name in self.landmarks

	def __iter__(self) -> Iterator[Landmark]:
		return iter(self.landmarks.values())
