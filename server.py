import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from app_state import AppState
from deps import get_state
from gerakin import __version__
from gerakin.config import get_config
from routers import sessions, ws

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	cfg = get_config()
	app.state.state = AppState(cfg=cfg, manager=ws.manager)
	logger.info("[Server] gerakin %s ready", __version__)
	try:
		yield
	finally:
		# Tear down every session so detectors and camera streams are released.
		app.state.state.close_all()


app = FastAPI(title="gerakin", version=__version__, lifespan=lifespan)
app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)
app.include_router(sessions.router)
app.include_router(ws.router)


@app.get("/health")
async def health(st: AppState = Depends(get_state)):
	return {
		"status": "ok",
		"version": __version__,
		"sessions": len(st.sessions),
		"ws_clients": ws.manager.client_count,
	}


if __name__ == "__main__":
	import uvicorn

	cfg = get_config()
	logging.basicConfig(level=getattr(logging, cfg.server.log_level, logging.INFO), format="%(levelname)s:%(name)s:%(message)s")
	uvicorn.run(app, host=cfg.server.host, port=cfg.server.port)
