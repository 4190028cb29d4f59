"""
Tests for the FastAPI transport.

Drives the real WebSocket endpoint through TestClient:
- Connection handshake (assign + snapshot)
- Moves broadcast to players and spectators
- Malformed input does not kill the connection
- Disconnect frees the role
- HTTP monitoring endpoints
"""

from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient

from ..api.app import create_app
from ..config import Settings


@pytest.fixture
def client():
    app = create_app(settings=Settings())
    with TestClient(app) as test_client:
        yield test_client


def join(client, stack):
    """Open a game socket on the stack and consume the handshake. Returns (ws, assign, update)."""
    ws = stack.enter_context(client.websocket_connect("/"))
    assign = ws.receive_json()
    update = ws.receive_json()
    return ws, assign, update


class TestWebSocket:
    """Tests for the game socket."""

    def test_handshake(self, client):
        with client.websocket_connect("/") as ws:
            assert ws.receive_json() == {"type": "assign", "player": "X"}
            assert ws.receive_json() == {
                "type": "update",
                "board": [[None, None, None]] * 3,
                "next": "X",
                "winner": None,
            }

    def test_roles_and_broadcast(self, client):
        with ExitStack() as stack:
            x, assign_x, _ = join(client, stack)
            o, assign_o, _ = join(client, stack)
            watcher, assign_w, _ = join(client, stack)

            assert assign_x["player"] == "X"
            assert assign_o["player"] == "O"
            assert assign_w["player"] is None

            x.send_json({"type": "move", "x": 0, "y": 0})

            updates = [ws.receive_json() for ws in (x, o, watcher)]
            assert updates[0] == updates[1] == updates[2]
            assert updates[0]["board"][0][0] == "X"
            assert updates[0]["next"] == "O"

    def test_bad_input_keeps_connection(self, client):
        with client.websocket_connect("/") as ws:
            ws.receive_json()
            ws.receive_json()

            ws.send_text("not json")
            ws.send_json({"type": "move", "x": 9, "y": 9})
            ws.send_json({"type": "hello"})
            ws.send_json({"type": "move", "x": 2, "y": 1})

            update = ws.receive_json()
            assert update["board"][1][2] == "X"

    def test_full_game_over_socket(self, client):
        with ExitStack() as stack:
            x, _, _ = join(client, stack)
            o, _, _ = join(client, stack)

            moves = [(x, 0, 0), (o, 1, 0), (x, 0, 1), (o, 1, 1), (x, 0, 2)]
            for ws, mx, my in moves:
                ws.send_json({"type": "move", "x": mx, "y": my})
                x.receive_json()
                last = o.receive_json()
            assert last["winner"] == "X"

            o.send_json({"type": "reset"})
            assert x.receive_json()["winner"] is None
            assert o.receive_json()["next"] == "X"

    def test_disconnect_frees_role(self, client):
        with client.websocket_connect("/") as first:
            assert first.receive_json()["player"] == "X"
        # The server handles the close before the next connection is routed.
        assert client.get("/players").json()["X"] is False

        with client.websocket_connect("/") as second:
            assert second.receive_json()["player"] == "X"


class TestHTTPEndpoints:
    """Tests for the read-only HTTP endpoints."""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_state(self, client):
        response = client.get("/state")
        assert response.status_code == 200
        assert response.json() == {
            "type": "update",
            "board": [[None, None, None]] * 3,
            "next": "X",
            "winner": None,
        }

    def test_state_follows_moves(self, client):
        with client.websocket_connect("/") as ws:
            ws.receive_json()
            ws.receive_json()
            ws.send_json({"type": "move", "x": 1, "y": 2})
            ws.receive_json()

            assert client.get("/state").json()["board"][2][1] == "X"

    def test_players(self, client):
        assert client.get("/players").json() == {"X": False, "O": False, "connections": 0}

        with client.websocket_connect("/") as ws:
            ws.receive_json()
            assert client.get("/players").json() == {"X": True, "O": False, "connections": 1}
