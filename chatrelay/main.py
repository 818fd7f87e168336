# chatrelay/main.py

from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chatrelay.core.config import settings
from chatrelay.core.logging import setup_logging, get_logger
from chatrelay.api.routes import health, rooms
from chatrelay.api import websocket as websocket_module

# Configure logging first
setup_logging()
logger = get_logger(__name__)

# FastAPI app
app = FastAPI(title="XeroxChat Relay")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# REST routes
app.include_router(health.router)
app.include_router(rooms.router)

# WebSocket routes
app.include_router(websocket_module.router)

# Static client, mounted last so it never shadows the routes above
if os.path.isdir(settings.STATIC_DIR):
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")
else:
    logger.warning("Static directory '%s' not found; serving API only", settings.STATIC_DIR)


@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Chat relay listening on %s:%d", settings.HOST, settings.PORT)


def run() -> None:
    import uvicorn
    uvicorn.run("chatrelay.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
