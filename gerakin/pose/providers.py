from __future__ import annotations

from typing import Callable, Dict

from gerakin.config import DetectorConfig
from gerakin.pose.base import PoseProvider
from gerakin.pose.mediapipe_provider import MediaPipePoseProvider

# Detector backends by name; each is built from the detector config section.
PROVIDERS: Dict[str, Callable[[DetectorConfig], PoseProvider]] = {
	"mediapipe": MediaPipePoseProvider,
}


def create_provider(name: str, config: DetectorConfig | None = None) -> PoseProvider:
	"""
	Build a named detector. Raises ValueError for an unknown name and
	RuntimeError when the backend's optional dependency is missing.
	"""
	key = (name or "").strip().lower()
	factory = PROVIDERS.get(key)
	if factory is None:
		raise ValueError(f"unknown pose provider: {name!r} (available: {', '.join(sorted(PROVIDERS))})")
	return factory(config or DetectorConfig())


def rgb_from_bytes(data: bytes, width: int, height: int):
	"""Wrap packed HxWx3 uint8 RGB bytes as the array providers expect."""
	if width <= 0 or height <= 0:
		raise ValueError("width and height must be positive")
	expected = int(width) * int(height) * 3
	if len(data) != expected:
		raise ValueError(f"expected {expected} RGB bytes for {width}x{height}, got {len(data)}")
	try:
		import numpy as np  # type: ignore
	except ImportError as e:
		raise RuntimeError("numpy is not installed. Install pose deps with: pip install -e .[pose]") from e
	return np.frombuffer(data, dtype=np.uint8).reshape(int(height), int(width), 3)
