"""
Explicit app state, single source of truth for runtime lifecycle.
Created in lifespan, attached to app.state.state; injected into routes via Depends(get_state).
"""
import asyncio
from typing import Any, Dict, Optional

from gerakin.config import AppConfig
from gerakin.detection_session import DetectionSession


class AppState:
	"""
	Holds all runtime state for the app instead of module globals.
	Populated in server lifespan; routes receive this instance via Depends(get_state).
	"""
	# WebSocket broadcast manager (set at app load)
	manager: Any = None

	# Config
	cfg: Optional[AppConfig] = None

	# Active detection sessions keyed by session id; each owns its own history.
	sessions: Dict[str, DetectionSession]
	sessions_lock: asyncio.Lock

	def __init__(self, cfg: Optional[AppConfig] = None, manager: Any = None) -> None:
		self.cfg = cfg
		self.manager = manager
		self.sessions = {}
		self.sessions_lock = asyncio.Lock()

	def get_session(self, session_id: str) -> Optional[DetectionSession]:
		return self.sessions.get(session_id)

	def close_all(self) -> None:
		for sess in list(self.sessions.values()):
			sess.close()
		self.sessions.clear()
