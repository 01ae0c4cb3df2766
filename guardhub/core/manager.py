"""
core/manager.py

WebSocket connection manager shared by the realtime channels.
- Groups connections under a string key (company, platform, profile)
- Broadcasts JSON payloads to every connection in one or more groups
- Closes every socket a profile owns when its session ends
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import WebSocket, status

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages WebSocket connections per group key.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        # Mapping of group key to list of connected WebSocket clients
        self.active_connections: dict[str, list[WebSocket]] = {}
        # Owning profile per socket, keyed by id() since WebSocket is unhashable
        self.owners: dict[int, UUID] = {}

    async def connect(self, group: str, websocket: WebSocket, owner: UUID | None = None) -> None:
        """
        Accepts a new WebSocket connection and adds it to the group.
        """
        await websocket.accept()
        self.active_connections.setdefault(group, []).append(websocket)
        if owner is not None:
            self.owners[id(websocket)] = owner
        logger.debug(f"[{self.name}] Connection joined group {group}")

    def disconnect(self, group: str, websocket: WebSocket) -> None:
        """
        Removes a WebSocket connection from the group.
        """
        connections = self.active_connections.get(group)
        if connections and websocket in connections:
            connections.remove(websocket)
            self.owners.pop(id(websocket), None)
            if not connections:
                del self.active_connections[group]

    def connection_count(self, group: str) -> int:
        return len(self.active_connections.get(group, []))

    async def broadcast(self, groups: list[str], message: dict[str, Any]) -> None:
        """
        Sends a JSON message to every connection in the given groups.
        Connections that fail to receive are dropped.
        """
        for group in dict.fromkeys(groups):
            for connection in list(self.active_connections.get(group, [])):
                try:
                    await connection.send_json(message)
                except Exception as e:
                    logger.warning(f"[{self.name}] Dropping dead connection in group {group}: {e}")
                    self.disconnect(group, connection)

    async def close_profile(self, profile_id: UUID, reason: str = "Session ended") -> int:
        """
        Closes every connection owned by the profile and returns how many were closed.
        Used on logout and deactivation so the profile stops receiving events.
        """
        closed = 0
        for group, connections in list(self.active_connections.items()):
            for connection in list(connections):
                if self.owners.get(id(connection)) != profile_id:
                    continue
                self.disconnect(group, connection)
                closed += 1
                try:
                    await connection.close(code=status.WS_1008_POLICY_VIOLATION, reason=reason)
                except RuntimeError as e:
                    logger.debug(f"[{self.name}] Socket in group {group} already closed: {e}")

        if closed:
            logger.info(f"[{self.name}] Closed {closed} connection(s) for profile {profile_id}")
        return closed
