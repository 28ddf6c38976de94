"""
FastAPI application — local command inlet for the RhythmWatch timer.
Runs on http://127.0.0.1:8766 by default.

The session objects (store, event bus, scheduler, controller, sinks) live on
app.state so that each call to create_app() produces a fully independent
instance with no shared module-level globals. The lifespan is the process
init/teardown hook: init loads the persisted session and resumes it, teardown
stops the tick loop and saves a final record.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import Config, config
from ..sinks.audio import SoundPlayer
from ..sinks.notifications import DesktopNotifier
from ..timer.clock import Clock
from ..timer.controller import SessionController
from ..timer.events import SessionEvents
from ..timer.scheduler import TimerScheduler
from ..timer.store import JsonSessionStore

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def _lifespan(cfg: Config, clock: Optional[Clock]):

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = JsonSessionStore(cfg.state_path, interval_mark_seconds=cfg.interval_mark_seconds)
        events = SessionEvents()
        scheduler = TimerScheduler(
            store, events, clock=clock, interval_mark_seconds=cfg.interval_mark_seconds
        )
        controller = SessionController(scheduler, store, events)

        app.state.notifier = DesktopNotifier(enabled=cfg.desktop_notifications)
        app.state.sounds = SoundPlayer(cfg.sounds_dir, enabled=cfg.sounds_enabled)
        events.subscribe(app.state.notifier)
        events.subscribe_signals(app.state.sounds)

        app.state.store = store
        app.state.controller = controller

        state = await controller.start()
        logger.info("Session loaded from %s: %s %s", store.path, state.mode.value, state.formatted_time)

        yield

        await controller.shutdown()
        state = controller.state
        logger.info("Session saved: %s %s", state.mode.value, state.formatted_time)
        app.state.notifier.close()
        app.state.sounds.close()

    return lifespan


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(cfg: Optional[Config] = None, clock: Optional[Clock] = None) -> FastAPI:
    cfg = cfg or config
    app = FastAPI(
        title="RhythmWatch",
        description="Work/break interval timer that survives restarts",
        version=VERSION,
        lifespan=_lifespan(cfg, clock),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000", "null"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routers import session

    app.include_router(session.router)

    @app.get("/health")
    def health():
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()
