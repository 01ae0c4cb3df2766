"""
messaging/manager.py

Realtime chat channel. Each profile listens on its own group so a new
message is pushed only to the recipient's (and sender's) open sockets.
"""

from uuid import UUID

from guardhub.core.manager import ConnectionManager

manager = ConnectionManager("CHAT WS")


def profile_group(profile_id: UUID) -> str:
    return f"profile:{profile_id}"
