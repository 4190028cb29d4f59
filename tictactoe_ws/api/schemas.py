"""
Pydantic Schemas for the WebSocket protocol.

Every frame is a JSON object tagged by its `type` field:

    assign   server -> client   unicast on connect
    update   server -> client   broadcast after every move/reset
    move     client -> server   {x, y} with x, y in 0..2
    reset    client -> server   no fields

Client messages are decoded through a discriminated union. Unknown
types decode to None and are ignored; anything malformed raises
ProtocolError.
"""

from __future__ import annotations
from typing import Annotated, Any, Literal, Optional, Union
import json

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..session.game_session import GameSnapshot

PlayerMark = Literal["X", "O"]
CellValue = Optional[PlayerMark]
BoardRow = Annotated[list[CellValue], Field(min_length=3, max_length=3)]
Coordinate = Annotated[int, Field(strict=True, ge=0, le=2)]


class ProtocolError(ValueError):
    """An inbound frame could not be decoded into a client message."""


# =============================================================================
# Server -> client
# =============================================================================

class AssignMessage(BaseModel):
    """Role notice sent to a single connection when it joins. None = spectator."""
    type: Literal["assign"] = "assign"
    player: Optional[PlayerMark] = None


class UpdateMessage(BaseModel):
    """Full game snapshot, identical for every receiver."""
    type: Literal["update"] = "update"
    board: list[BoardRow] = Field(min_length=3, max_length=3)
    next: PlayerMark
    winner: Optional[Literal["X", "O", "draw"]] = None

    model_config = {"frozen": True}

    @classmethod
    def from_snapshot(cls, snapshot: GameSnapshot) -> UpdateMessage:
        return cls(
            board=snapshot.board,
            next=snapshot.next.value,
            winner=snapshot.outcome.to_wire(),
        )


# =============================================================================
# Client -> server
# =============================================================================

class MoveMessage(BaseModel):
    """Place the sender's mark at column x, row y."""
    type: Literal["move"]
    x: Coordinate
    y: Coordinate


class ResetMessage(BaseModel):
    """Clear the board and start over with X to move."""
    type: Literal["reset"]


ClientMessage = Annotated[
    Union[MoveMessage, ResetMessage],
    Field(discriminator="type"),
]

_client_message_adapter = TypeAdapter(ClientMessage)

CLIENT_MESSAGE_TYPES = frozenset({"move", "reset"})


def decode_client_message(raw: str | bytes) -> MoveMessage | ResetMessage | None:
    """
    Decode one inbound frame.

    Returns:
        The validated message, or None when `type` names a message
        this server does not handle.

    Raises:
        ProtocolError: unparsable JSON, non-object payload, missing or
            non-string `type`, or invalid fields for a known type
    """
    try:
        data: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise ProtocolError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ProtocolError("Message must be a JSON object")

    message_type = data.get("type")
    if not isinstance(message_type, str):
        raise ProtocolError("Message is missing a string 'type' field")
    if message_type not in CLIENT_MESSAGE_TYPES:
        return None

    try:
        return _client_message_adapter.validate_python(data)
    except ValidationError as e:
        raise ProtocolError(f"Invalid '{message_type}' message: {e.error_count()} error(s)") from e


# =============================================================================
# HTTP responses
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "tictactoe-ws"
    version: str


class PlayersResponse(BaseModel):
    """Which roles are taken and how many connections are live."""
    X: bool = Field(description="A connection currently plays X")
    O: bool = Field(description="A connection currently plays O")
    connections: int = Field(ge=0, description="Live connections, spectators included")
