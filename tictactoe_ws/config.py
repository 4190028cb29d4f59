"""
Configuration - Environment-driven server settings.

Environment variables:
    HOST                           Bind address (default 0.0.0.0)
    PORT                           Listen port (default 8080)
    LOG_LEVEL                      Logging level name (default INFO)
    ALLOWED_ORIGINS                Comma-separated CORS origins (default *)
    TICTACTOE_PLAYERS_ONLY_RESET   Only X/O may reset the game (default false)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping, Optional
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _parse_port(value: Optional[str]) -> int:
    if value is None or value == "":
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError:
        logger.warning("Invalid PORT %r, using %d", value, DEFAULT_PORT)
        return DEFAULT_PORT
    if not 0 < port < 65536:
        logger.warning("PORT %d out of range, using %d", port, DEFAULT_PORT)
        return DEFAULT_PORT
    return port


def _parse_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUE_VALUES


@dataclass
class Settings:
    """Server settings. CLI flags override values read from the environment."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    players_only_reset: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        env = os.environ if environ is None else environ
        origins = env.get("ALLOWED_ORIGINS", "*")
        return cls(
            host=env.get("HOST", DEFAULT_HOST),
            port=_parse_port(env.get("PORT")),
            log_level=env.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            allowed_origins=[o.strip() for o in origins.split(",") if o.strip()],
            players_only_reset=_parse_bool(env.get("TICTACTOE_PLAYERS_ONLY_RESET")),
        )
