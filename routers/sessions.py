"""Detection session routes. Routes: /sessions, /sessions/{id}, /sessions/{id}/frames, /sessions/{id}/rgb, /sessions/{id}/switch_camera."""
import asyncio
import logging
import time

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from app_state import AppState
from deps import get_session, get_state
from gerakin.detection_session import OUTCOME_DROPPED, DetectionSession, FrameResult
from gerakin.pose.providers import create_provider, rgb_from_bytes
from schemas.requests import FramePayload, SessionStartPayload
from schemas.responses import FrameResponse, SessionStartResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["sessions"])


async def _publish(st: AppState, sess: DetectionSession, result: FrameResult) -> FrameResponse:
	resp = FrameResponse.from_result(sess.session_id, result)
	if st.manager is not None and result.outcome != OUTCOME_DROPPED:
		try:
			await st.manager.broadcast_json({"type": "status", **resp.model_dump()})
		except Exception as e:
			logger.warning("[Sessions] broadcast failed for %s: %s", sess.session_id, e)
	return resp


@router.post("/sessions", response_model=SessionStartResponse)
async def session_start(payload: SessionStartPayload, st: AppState = Depends(get_state)):
	"""Start a detection session. Returns the existing one if the id is already active."""
	async with st.sessions_lock:
		sid = (payload.session_id or "").strip()
		if not sid:
			sid = time.strftime("%Y%m%d_%H%M%S")
		if sid in st.sessions:
			return SessionStartResponse(detail="Session already running", session_id=sid)
		provider = None
		if payload.provider:
			try:
				provider = create_provider(payload.provider, st.cfg.detector if st.cfg else None)
			except ValueError as e:
				raise HTTPException(status_code=400, detail=str(e))
			except RuntimeError as e:
				raise HTTPException(status_code=503, detail=str(e))
		st.sessions[sid] = DetectionSession(sid, config=st.cfg, provider=provider)
		return SessionStartResponse(detail="Session started", session_id=sid)


@router.get("/sessions")
async def session_list(st: AppState = Depends(get_state)):
	return {"sessions": [s.snapshot() for s in st.sessions.values()]}


@router.get("/sessions/{session_id}")
async def session_status(sess: DetectionSession = Depends(get_session)):
	return sess.snapshot()


@router.post("/sessions/{session_id}/frames", response_model=FrameResponse)
async def session_frame(
	payload: FramePayload,
	sess: DetectionSession = Depends(get_session),
	st: AppState = Depends(get_state),
):
	"""Run one frame of detected landmarks through filter, smoother and classifier."""
	result = sess.process_poses(payload.to_poses(), payload.frame_size())
	return await _publish(st, sess, result)


@router.post("/sessions/{session_id}/rgb", response_model=FrameResponse)
async def session_rgb_frame(
	request: Request,
	width: int = Query(..., gt=0),
	height: int = Query(..., gt=0),
	sess: DetectionSession = Depends(get_session),
	st: AppState = Depends(get_state),
):
	"""
	Run pose detection on a raw frame (packed HxWx3 uint8 RGB body) with the
	session's detector, then the usual pipeline. Frames arriving while the
	detector is busy are dropped.
	"""
	if sess.provider is None:
		raise HTTPException(status_code=409, detail=f"Session {sess.session_id} has no pose provider")
	data = await request.body()
	try:
		rgb = rgb_from_bytes(data, width, height)
	except ValueError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except RuntimeError as e:
		raise HTTPException(status_code=503, detail=str(e))
	result = await asyncio.to_thread(sess.process_rgb, rgb)
	return await _publish(st, sess, result)


@router.post("/sessions/{session_id}/switch_camera")
async def session_switch_camera(sess: DetectionSession = Depends(get_session)):
	"""Reset the smoothing history for the newly selected camera."""
	sess.switch_camera()
	return {"detail": "Camera switched", "session_id": sess.session_id, "camera_index": sess.camera_index}


@router.delete("/sessions/{session_id}")
async def session_stop(session_id: str, st: AppState = Depends(get_state)):
	"""Tear the session down and discard its history."""
	async with st.sessions_lock:
		sess = st.sessions.pop(session_id, None)
	if sess is None:
		raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
	sess.close()
	return {"detail": "Session stopped", "session_id": session_id, "stats": sess.snapshot()}
