"""
sos/websocket.py

SOS WebSocket Route

- Authenticates the subscriber (header, cookie or ?token=) on a short-lived session
- Joins the company group, or the platform group for super admins
- Keeps the socket open; alert changes are pushed by the SOS service
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from guardhub.core.dependencies import WebSocketAuthError, get_current_user_from_ws
from guardhub.database.session import AsyncSessionLocal
from guardhub.sos.manager import manager, subscription_group

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/sos/ws")
async def sos_websocket(websocket: WebSocket) -> None:
    # The session is closed before the socket starts listening
    async with AsyncSessionLocal() as db:
        try:
            user = await get_current_user_from_ws(websocket, db)
        except WebSocketAuthError as e:
            logger.warning(f"[SOS WS] Authentication failed: {e}")
            return None

    group = subscription_group(user)
    if group is None:
        logger.warning(f"[SOS WS] Profile {user.id} has no company; refusing subscription")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason="No company assigned")
        return None

    await manager.connect(group, websocket, owner=user.id)
    logger.info(f"[SOS WS] Profile {user.id} subscribed to group {group}")

    try:
        while True:
            # Client messages are ignored; this keeps the connection alive
            await websocket.receive_text()
    except WebSocketDisconnect as exc:
        logger.info(f"[SOS WS] Profile {user.id} disconnected from {group} (code: {exc.code})")
    finally:
        manager.disconnect(group, websocket)

    return None
