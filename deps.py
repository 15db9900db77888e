"""
FastAPI dependencies. Use Depends(get_state) for the AppState attached in lifespan,
or Depends(get_session) for a route with a {session_id} path parameter.
"""
from fastapi import Depends, HTTPException, Request

from app_state import AppState
from gerakin.detection_session import DetectionSession


def get_state(request: Request) -> AppState:
	"""Return the app state instance attached in lifespan."""
	return request.app.state.state


def get_session(session_id: str, st: AppState = Depends(get_state)) -> DetectionSession:
	"""Resolve an active detection session or answer 404."""
	sess = st.get_session(session_id)
	if sess is None:
		raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
	return sess
