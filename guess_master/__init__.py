"""Core helpers for the Guess Master number-guessing bot."""

from .config import ConfigError, GameConfig, build_config, load_config
from .dispatcher import GuessDispatcher, InboundEvent
from .games import GameState, SessionStore
from .messages import MessageCatalog
from .persistence import PersistenceStore
from .replies import PendingReply

__all__ = [
    "ConfigError",
    "GameConfig",
    "GameState",
    "GuessDispatcher",
    "InboundEvent",
    "MessageCatalog",
    "PendingReply",
    "PersistenceStore",
    "SessionStore",
    "build_config",
    "load_config",
]
