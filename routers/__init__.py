"""FastAPI routers, included by server.py."""
