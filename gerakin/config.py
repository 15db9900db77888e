from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterConfig:
	# Landmarks below this detector likelihood are dropped before smoothing.
	confidence_threshold: float = 0.7
	# Frames with fewer confident landmarks are not classified.
	min_landmarks: int = 4


@dataclass(frozen=True)
class SmoothingConfig:
	history_size: int = 5
	# Exponential decay per frame of age: weight = exp(-age * decay) * likelihood
	decay: float = 0.5


@dataclass(frozen=True)
class ClassifierConfig:
	# Per-rule gate, independent of FilterConfig.confidence_threshold.
	min_likelihood: float = 0.5
	head_tilt_px: float = 15.0
	elbow_bent_deg: float = 120.0
	standing_ratio: float = 0.15


@dataclass(frozen=True)
class DetectorConfig:
	model_complexity: int = 1
	min_detection_confidence: float = 0.5
	min_tracking_confidence: float = 0.5
	# Frames arriving before the detector has warmed up are dropped.
	warmup_seconds: float = 0.3


@dataclass(frozen=True)
class ServerConfig:
	host: str = "127.0.0.1"
	port: int = 8000
	log_level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
	filter: FilterConfig = field(default_factory=FilterConfig)
	smoothing: SmoothingConfig = field(default_factory=SmoothingConfig)
	classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
	detector: DetectorConfig = field(default_factory=DetectorConfig)
	server: ServerConfig = field(default_factory=ServerConfig)


_CONFIG_PATH: Optional[Path] = None
_CONFIG_CACHE: Optional[AppConfig] = None


def _repo_root() -> Path:
	# gerakin/config.py -> repo root is one level up.
	return Path(__file__).resolve().parents[1]


def get_default_config_path() -> Path:
	env = os.getenv("GERAKIN_CONFIG")
	if env:
		return Path(env).expanduser().resolve()
	return _repo_root() / "config.json"


def set_config_path(path: str | Path) -> None:
	"""
	Override the config path (must be called before first get_config()).
	Intended for tooling such as the replay script; the server normally uses the default path.
	"""
	global _CONFIG_PATH
	global _CONFIG_CACHE
	_CONFIG_PATH = Path(path).expanduser().resolve()
	_CONFIG_CACHE = None


def _deep_get(d: Dict[str, Any], keys: list[str], default: Any = None) -> Any:
	cur: Any = d
	for k in keys:
		if not isinstance(cur, dict):
			return default
		cur = cur.get(k)
	return cur if cur is not None else default


def _as_int(v: Any, default: int) -> int:
	try:
		return int(v)
	except (TypeError, ValueError, OverflowError):
		return int(default)


def _as_float(v: Any, default: float) -> float:
	try:
		out = float(v)
	except (TypeError, ValueError, OverflowError):
		return float(default)
	# Non-finite values (JSON 1e400 parses to inf) fall back to the default.
	return out if math.isfinite(out) else float(default)


def _as_str(v: Any, default: str = "") -> str:
	return str(v) if v is not None else str(default)


def _unit_interval(v: float, default: float) -> float:
	return float(v) if 0.0 <= float(v) <= 1.0 else float(default)


def load_config(path: Optional[str | Path] = None) -> AppConfig:
	p = Path(path).expanduser().resolve() if path else (_CONFIG_PATH or get_default_config_path())
	if not p.exists():
		# Defaults-only config; app can still run.
		return AppConfig()
	try:
		raw = json.loads(p.read_text(encoding="utf-8"))
	except (OSError, ValueError) as e:
		# If config is malformed, fail safe to defaults (but keep app running).
		logger.warning("[Config] Could not read %s, using defaults: %s", p, e)
		return AppConfig()

	if not isinstance(raw, dict):
		logger.warning("[Config] %s is not a JSON object, using defaults", p)
		return AppConfig()

	f_threshold = _as_float(_deep_get(raw, ["filter", "confidence_threshold"], 0.7), 0.7)
	f_min = _as_int(_deep_get(raw, ["filter", "min_landmarks"], 4), 4)

	s_size = _as_int(_deep_get(raw, ["smoothing", "history_size"], 5), 5)
	s_decay = _as_float(_deep_get(raw, ["smoothing", "decay"], 0.5), 0.5)

	c_min = _as_float(_deep_get(raw, ["classifier", "min_likelihood"], 0.5), 0.5)
	c_head = _as_float(_deep_get(raw, ["classifier", "head_tilt_px"], 15.0), 15.0)
	c_elbow = _as_float(_deep_get(raw, ["classifier", "elbow_bent_deg"], 120.0), 120.0)
	c_stand = _as_float(_deep_get(raw, ["classifier", "standing_ratio"], 0.15), 0.15)

	d_complexity = _as_int(_deep_get(raw, ["detector", "model_complexity"], 1), 1)
	d_det = _as_float(_deep_get(raw, ["detector", "min_detection_confidence"], 0.5), 0.5)
	d_track = _as_float(_deep_get(raw, ["detector", "min_tracking_confidence"], 0.5), 0.5)
	d_warmup = _as_float(_deep_get(raw, ["detector", "warmup_seconds"], 0.3), 0.3)

	srv_host = _as_str(_deep_get(raw, ["server", "host"], "127.0.0.1"), "127.0.0.1").strip()
	srv_port = _as_int(_deep_get(raw, ["server", "port"], 8000), 8000)
	srv_level = _as_str(_deep_get(raw, ["server", "log_level"], "INFO"), "INFO").strip().upper()

	return AppConfig(
		filter=FilterConfig(
			confidence_threshold=_unit_interval(f_threshold, 0.7),
			min_landmarks=int(f_min) if int(f_min) >= 0 else 4,
		),
		smoothing=SmoothingConfig(
			history_size=int(s_size) if int(s_size) > 0 else 5,
			decay=float(s_decay) if float(s_decay) >= 0.0 else 0.5,
		),
		classifier=ClassifierConfig(
			min_likelihood=_unit_interval(c_min, 0.5),
			head_tilt_px=float(c_head) if float(c_head) >= 0.0 else 15.0,
			elbow_bent_deg=float(c_elbow) if 0.0 < float(c_elbow) <= 180.0 else 120.0,
			standing_ratio=float(c_stand),
		),
		detector=DetectorConfig(
			model_complexity=int(d_complexity) if int(d_complexity) in (0, 1, 2) else 1,
			min_detection_confidence=_unit_interval(d_det, 0.5),
			min_tracking_confidence=_unit_interval(d_track, 0.5),
			warmup_seconds=float(d_warmup) if float(d_warmup) >= 0.0 else 0.3,
		),
		server=ServerConfig(
			host=srv_host or "127.0.0.1",
			port=int(srv_port) if 0 < int(srv_port) < 65536 else 8000,
			log_level=srv_level or "INFO",
		),
	)


def get_config() -> AppConfig:
	global _CONFIG_CACHE
	if _CONFIG_CACHE is None:
		_CONFIG_CACHE = load_config()
	return _CONFIG_CACHE
