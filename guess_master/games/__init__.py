"""Number-guessing game: state, difficulty ladder and the shared session store."""

from .ladder import next_start_attempts, remaining_before_reset
from .session_store import SessionStore
from .state import GameState, SessionPhase, composite_key, phase_of, session_key

__all__ = [
    "GameState",
    "SessionPhase",
    "SessionStore",
    "composite_key",
    "next_start_attempts",
    "phase_of",
    "remaining_before_reset",
    "session_key",
]
