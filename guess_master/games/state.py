"""Per-session game state and its lifecycle phases."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

SessionKey = Tuple[int, int]


def session_key(chat_id: int, user_id: int) -> SessionKey:
    return (int(chat_id), int(user_id))


def composite_key(key: SessionKey) -> str:
    """String form of a session key used by the JSON maps and the allow-list."""
    chat_id, user_id = key
    return f"{chat_id}:{user_id}"


class SessionPhase(str, Enum):
    ABSENT = "absent"
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


@dataclass
class GameState:
    target: int
    attempts_left: int
    start_attempts: int

    def __post_init__(self) -> None:
        if not 0 <= self.attempts_left <= self.start_attempts:
            raise ValueError(
                f"attempts_left ({self.attempts_left}) must be within 0..{self.start_attempts}"
            )

    @classmethod
    def fresh(cls, target: int, start_attempts: int) -> "GameState":
        return cls(target=target, attempts_left=start_attempts, start_attempts=start_attempts)

    @property
    def is_exhausted(self) -> bool:
        return self.attempts_left == 0

    def consume_attempt(self) -> int:
        self.attempts_left = max(0, self.attempts_left - 1)
        return self.attempts_left


def phase_of(state: Optional[GameState]) -> SessionPhase:
    """Won is transient (the store swaps in a fresh game), so it never rests here."""
    if state is None:
        return SessionPhase.ABSENT
    if state.is_exhausted:
        return SessionPhase.EXHAUSTED
    return SessionPhase.ACTIVE


__all__ = ["GameState", "SessionKey", "SessionPhase", "composite_key", "phase_of", "session_key"]
