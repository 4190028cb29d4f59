"""
tictactoe-ws - Authoritative shared tic-tac-toe session server.

One process holds one shared 3x3 board and serves it over WebSocket:
- The first two connections play X and O, everyone else spectates
- Turn order and cell occupancy are enforced server-side
- Win/draw detection after every move
- Every accepted move or reset is broadcast to all connections
"""

__version__ = "0.1.0"
