"""
WebSocket endpoint streaming change events to an owner's live sessions.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from app.auth import resolve_owner
from app.exceptions import Unauthenticated
from app.realtime import ConnectionManager, Subscription

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


async def _forward(websocket: WebSocket, subscription: Subscription) -> None:
    while True:
        event = await subscription.queue.get()
        await websocket.send_json(event)


async def _stop_forwarding(sender: asyncio.Task) -> None:
    """Cancel the forwarder and collect its outcome, including a failed send."""
    sender.cancel()
    try:
        await sender
    except (asyncio.CancelledError, WebSocketDisconnect):
        pass
    except Exception as e:
        logger.warning(f"Forwarding to WebSocket session failed: {e}")


@router.websocket("/ws")
async def todo_updates(websocket: WebSocket, token: Optional[str] = Query(None)):
    """Authenticate with ?token=, then receive every change made to the owner's data."""
    try:
        owner_id = resolve_owner(token)
    except Unauthenticated as e:
        logger.info(f"Rejected WebSocket session: {e.message}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    manager: ConnectionManager = websocket.app.state.publisher
    subscription = manager.subscribe(owner_id)
    await websocket.accept()
    sender = asyncio.create_task(_forward(websocket, subscription))

    try:
        while True:
            # Inbound frames are ignored; receiving detects the disconnect
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        manager.unsubscribe(subscription)
        await _stop_forwarding(sender)
