"""
FastAPI Application - WebSocket transport for the shared game.

Endpoints:
    WS   /          Game protocol (assign/update out, move/reset in)
    GET  /state     Current update snapshot
    GET  /players   Role occupancy and connection count
    GET  /health    Health check

The application owns one MessageRouter, and with it the single
GameSession and SessionRegistry of the process. Tests build their own
app through create_app() to get an isolated game.
"""

from __future__ import annotations
from typing import Any, Optional
import itertools
import logging

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import Settings
from ..engine_core.state import Role
from .router import MessageRouter
from .schemas import HealthResponse, PlayersResponse, UpdateMessage

logger = logging.getLogger(__name__)

_connection_ids = itertools.count(1)


class WebSocketConnection:
    """
    Opaque, hashable handle for one accepted WebSocket.

    Starlette WebSocket objects are not hashable, so the registry keys
    on this wrapper instead. Identity equality: one handle per socket.
    """

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.connection_id = next(_connection_ids)

    async def send_json(self, data: Any) -> None:
        await self.websocket.send_json(data)

    def __repr__(self) -> str:
        client = self.websocket.client
        peer = f"{client.host}:{client.port}" if client else "unknown"
        return f"<WebSocketConnection #{self.connection_id} {peer}>"


def create_app(
    router: Optional[MessageRouter] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        router: Optional MessageRouter (creates one from settings if not provided)
        settings: Optional Settings (read from the environment if not provided)

    Returns:
        FastAPI application instance
    """
    settings = settings or Settings.from_env()
    router = router or MessageRouter.create(players_only_reset=settings.players_only_reset)

    app = FastAPI(
        title="Tic-Tac-Toe WebSocket Server",
        description="Authoritative server for one shared tic-tac-toe game.",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.router = router

    # =========================================================================
    # Game protocol
    # =========================================================================

    @app.websocket("/")
    async def game_socket(websocket: WebSocket):
        """
        WebSocket for the game protocol.

        Messages from server:
        - assign: role for this connection (sent once, on connect)
        - update: full game state (after every accepted move or reset)

        Messages from client:
        - move: {"type": "move", "x": 0-2, "y": 0-2}
        - reset: {"type": "reset"}
        """
        await websocket.accept()
        connection = WebSocketConnection(websocket)
        logger.info("Client connected: %r", connection)

        try:
            await router.connect(connection)
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    raw = message.get("bytes") or b""
                await router.handle(connection, raw)
        except WebSocketDisconnect:
            pass
        finally:
            await router.disconnect(connection)
            logger.info("Client disconnected: %r", connection)

    # =========================================================================
    # Read-only HTTP endpoints
    # =========================================================================

    @app.get(
        "/state",
        response_model=UpdateMessage,
        tags=["Game"],
        summary="Current game snapshot",
    )
    async def get_state() -> UpdateMessage:
        """Same payload every connection received in the last update."""
        return router.snapshot_message()

    @app.get(
        "/players",
        response_model=PlayersResponse,
        tags=["Game"],
        summary="Role occupancy",
    )
    async def get_players() -> PlayersResponse:
        registry = router.registry
        return PlayersResponse(
            X=registry.holder_of(Role.X) is not None,
            O=registry.holder_of(Role.O) is not None,
            connections=len(registry),
        )

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(version=__version__)

    return app


# For running directly: uvicorn tictactoe_ws.api.app:app
app = create_app()
