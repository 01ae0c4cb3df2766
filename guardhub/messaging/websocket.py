"""
messaging/websocket.py

Chat WebSocket Route

- Authenticates the client (header, cookie or ?token=)
- Joins the profile's own group
- Accepts {"recipient_id": ..., "message": ...} frames, stores them and
  pushes them to the recipient
- Each frame runs on its own session and re-checks the token and profile,
  so a logged-out or deactivated sender is cut off
"""

import json
import logging

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from guardhub.core.dependencies import WebSocketAuthError, get_current_user_from_ws
from guardhub.database.session import AsyncSessionLocal
from guardhub.messaging import schemas
from guardhub.messaging.manager import manager, profile_group
from guardhub.messaging.services import MessagingService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/chat/ws")
async def chat_websocket(websocket: WebSocket) -> None:
    async with AsyncSessionLocal() as db:
        try:
            user = await get_current_user_from_ws(websocket, db)
        except WebSocketAuthError as e:
            logger.warning(f"[CHAT WS] Authentication failed: {e}")
            return None

    profile_id = user.id
    group = profile_group(profile_id)
    await manager.connect(group, websocket, owner=profile_id)
    logger.info(f"[CHAT WS] Profile {profile_id} connected")

    try:
        while True:
            raw_data = await websocket.receive_text()
            try:
                payload = schemas.ChatMessageCreate.model_validate(json.loads(raw_data))
            except json.JSONDecodeError:
                logger.warning(f"[CHAT WS] Invalid JSON from {profile_id}")
                await websocket.send_json({"error": "Invalid JSON format"})
                continue
            except ValidationError as e:
                logger.debug(f"[CHAT WS] Rejected frame from {profile_id}: {e.error_count()} errors")
                await websocket.send_json({"error": "Invalid message"})
                continue

            async with AsyncSessionLocal() as db:
                try:
                    sender = await get_current_user_from_ws(websocket, db)
                    await MessagingService(db).send_message(sender, payload)
                except WebSocketAuthError as e:
                    logger.warning(f"[CHAT WS] Profile {profile_id} no longer authorized: {e}")
                    break
                except HTTPException as e:
                    await websocket.send_json({"error": e.detail})
    except WebSocketDisconnect as exc:
        logger.info(f"[CHAT WS] Profile {profile_id} disconnected (code: {exc.code})")
    finally:
        manager.disconnect(group, websocket)

    return None
