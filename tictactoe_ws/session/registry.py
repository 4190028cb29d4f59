"""
Session Registry - Maps live connections to roles.

LIFECYCLE:
1. Transport accepts a connection -> on_connect() assigns X, then O,
   then spectator
2. Connection stays registered while the transport keeps it open
3. Transport reports the close -> on_disconnect() removes the entry
   and the role (if any) becomes assignable again

The registry never owns connections. It keeps a plain association
connection -> assignment that the transport must remove explicitly.
No two live connections can hold the same role: a role is only
handed out when no registered connection holds it.
"""

from __future__ import annotations
from typing import Any, Hashable
import logging

from ..engine_core.state import Role

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Tracks which connection plays which role.

    Responsibilities:
    - Assign roles in connection order
    - Free roles on disconnect
    - Provide a stable snapshot of live connections for broadcasting
    """

    def __init__(self):
        # Insertion order is connection order.
        self._assignments: dict[Hashable, Role | None] = {}

    def on_connect(self, connection: Hashable) -> Role | None:
        """
        Register a connection and return its assignment.

        Returns:
            Role.X if X is free, else Role.O if O is free, else None
            (spectator). A connection that is already registered keeps
            its current assignment.
        """
        if connection in self._assignments:
            return self._assignments[connection]

        assignment = None
        for role in (Role.X, Role.O):
            if self.holder_of(role) is None:
                assignment = role
                break

        self._assignments[connection] = assignment
        logger.info(
            "Connection registered as %s (%d live)",
            assignment.value if assignment else "spectator",
            len(self._assignments),
        )
        return assignment

    def on_disconnect(self, connection: Hashable) -> Role | None:
        """
        Remove a connection. Unknown connections are ignored.

        Returns the role that was freed, if any. The turn is not
        touched: the freed slot stays empty until the next connect.
        """
        if connection not in self._assignments:
            return None
        role = self._assignments.pop(connection)
        logger.info(
            "Connection removed, %s freed (%d live)",
            role.value if role else "no role",
            len(self._assignments),
        )
        return role

    def role_of(self, connection: Hashable) -> Role | None:
        """Role held by a connection. Spectators and unknown connections get None."""
        return self._assignments.get(connection)

    def holder_of(self, role: Role) -> Any | None:
        for connection, assigned in self._assignments.items():
            if assigned is role:
                return connection
        return None

    def connections(self) -> list[Any]:
        """Copy of the live connections, safe to iterate while others disconnect."""
        return list(self._assignments)

    @property
    def player_count(self) -> int:
        return sum(1 for role in self._assignments.values() if role is not None)

    def __len__(self) -> int:
        return len(self._assignments)

    def __contains__(self, connection: object) -> bool:
        return connection in self._assignments
