from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from gerakin.pose.types import Pose


class PoseProvider(ABC):
	"""
	Detector adapter interface.

	Implementations take an RGB image (H,W,3 uint8) and return the poses found
	in it, in pixel coordinates. An empty list means no body was detected.
	"""

	@abstractmethod
	def name(self) -> str: ...

	@abstractmethod
	def infer_rgb(self, rgb) -> List[Pose]: ...

	@abstractmethod
	def close(self) -> None: ...
