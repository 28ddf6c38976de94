"""
/session — timer commands (work, break, reset), current state, and a
WebSocket stream of change events.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect

from ...api.schemas import BreakRequest, SessionEventOut, SessionStateOut
from ...timer.state import SessionSnapshot

router = APIRouter(prefix="/session", tags=["session"])


def _get_controller(request: Request):
    return request.app.state.controller


def _state_out(controller) -> SessionStateOut:
    state = controller.state   # one consistent copy
    return SessionStateOut(
        mode=state.mode.value,
        formatted_time=state.formatted_time,
        elapsed_seconds=state.elapsed_seconds,
        remaining_seconds=state.remaining_seconds,
        interval_marks=state.interval_marks,
        running=controller.running,
    )


@router.get("", response_model=SessionStateOut)
async def get_session(controller=Depends(_get_controller)):
    """Return the current session snapshot."""
    return _state_out(controller)


@router.post("/work", response_model=SessionStateOut)
async def start_work(controller=Depends(_get_controller)):
    """Start (or restart from zero) a work run."""
    await controller.start_work()
    return _state_out(controller)


@router.post("/break", response_model=SessionStateOut)
async def start_break(req: BreakRequest, controller=Depends(_get_controller)):
    """Count down a break of the given length; a bad or missing time ends up idle."""
    await controller.start_break(req.time)
    return _state_out(controller)


@router.post("/reset", response_model=SessionStateOut)
async def reset(controller=Depends(_get_controller)):
    await controller.reset()
    return _state_out(controller)


@router.websocket("/ws")
async def session_websocket(websocket: WebSocket):
    """
    WebSocket stream — sends the current value on connect, then one message
    per change event. A slow client only ever gets the newest pending value.
    """
    controller = websocket.app.state.controller
    pending: asyncio.Queue = asyncio.Queue(maxsize=1)

    def _enqueue(snapshot: SessionSnapshot) -> None:
        if pending.full():
            pending.get_nowait()
        pending.put_nowait(snapshot)

    async def _until_disconnect() -> None:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                return

    await websocket.accept()
    controller.subscribe(_enqueue, replay=True)
    closed = asyncio.create_task(_until_disconnect())
    next_value: Optional[asyncio.Task] = None
    try:
        while True:
            next_value = asyncio.create_task(pending.get())
            done, _ = await asyncio.wait(
                {next_value, closed}, return_when=asyncio.FIRST_COMPLETED
            )
            if closed in done:
                next_value.cancel()
                break
            payload = SessionEventOut(**next_value.result().to_dict())
            await websocket.send_json(payload.model_dump())
    except WebSocketDisconnect:
        pass
    finally:
        controller.unsubscribe(_enqueue)
        closed.cancel()
        if next_value is not None:
            next_value.cancel()
