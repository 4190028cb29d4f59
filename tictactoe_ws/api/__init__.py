"""
API Module - Network interface to the shared game.

Clients talk to the server over one WebSocket each:
1. Connect and receive an `assign` notice (X, O or spectator)
2. Send `move` and `reset` requests
3. Receive an `update` snapshot after every change

A few read-only HTTP endpoints expose the same state for monitoring.
"""

from .schemas import (
    # Server -> client
    AssignMessage,
    UpdateMessage,
    # Client -> server
    MoveMessage,
    ResetMessage,
    ClientMessage,
    decode_client_message,
    ProtocolError,
    # HTTP
    HealthResponse,
    PlayersResponse,
)
from .broadcast import BroadcastChannel
from .router import MessageRouter
from .app import create_app

__all__ = [
    "AssignMessage",
    "UpdateMessage",
    "MoveMessage",
    "ResetMessage",
    "ClientMessage",
    "decode_client_message",
    "ProtocolError",
    "HealthResponse",
    "PlayersResponse",
    "BroadcastChannel",
    "MessageRouter",
    "create_app",
]
