"""Structured results handed back to the transport for rendering.

Every inbound event produces exactly one of these. They carry facts only,
never text; ``guess_master.messages`` turns them into localized replies.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Dict, Tuple, Union


@dataclass(frozen=True)
class Outcome:
    kind: ClassVar[str] = "outcome"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ----------------------------
# Game outcomes
# ----------------------------

@dataclass(frozen=True)
class GameStarted(Outcome):
    kind: ClassVar[str] = "game_started"
    min: int
    max: int
    attempts: int


@dataclass(frozen=True)
class TooLow(Outcome):
    kind: ClassVar[str] = "too_low"
    remaining: int


@dataclass(frozen=True)
class TooHigh(Outcome):
    kind: ClassVar[str] = "too_high"
    remaining: int


@dataclass(frozen=True)
class Won(Outcome):
    kind: ClassVar[str] = "won"
    next_attempts: int
    threshold: int


@dataclass(frozen=True)
class Exhausted(Outcome):
    """``final_guess`` is False when a guess hits an already exhausted game."""

    kind: ClassVar[str] = "exhausted"
    target: int
    remaining_before_reset: int
    final_guess: bool = True


@dataclass(frozen=True)
class NoActiveSession(Outcome):
    kind: ClassVar[str] = "no_active_session"


@dataclass(frozen=True)
class NotAuthorized(Outcome):
    kind: ClassVar[str] = "not_authorized"


# ----------------------------
# Command outcomes
# ----------------------------

@dataclass(frozen=True)
class StartsReset(Outcome):
    kind: ClassVar[str] = "starts_reset"
    cleared: int


@dataclass(frozen=True)
class Pong(Outcome):
    kind: ClassVar[str] = "pong"


@dataclass(frozen=True)
class ConfigShown(Outcome):
    kind: ClassVar[str] = "config"
    min: int
    max: int
    attempts: int
    number_attempts: int


@dataclass(frozen=True)
class LanguageShown(Outcome):
    kind: ClassVar[str] = "language_shown"
    current: str
    available: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LanguageSet(Outcome):
    kind: ClassVar[str] = "language_set"
    scope: str
    lang: str


@dataclass(frozen=True)
class LanguageInvalid(Outcome):
    kind: ClassVar[str] = "language_invalid"


@dataclass(frozen=True)
class WelcomePrompt(Outcome):
    kind: ClassVar[str] = "welcome_prompt"
    name: str


@dataclass(frozen=True)
class CannotIdentify(Outcome):
    kind: ClassVar[str] = "cannot_identify"
    action: str


@dataclass(frozen=True)
class Ignored(Outcome):
    kind: ClassVar[str] = "ignored"


GuessOutcome = Union[TooLow, TooHigh, Won, Exhausted, NoActiveSession]


__all__ = [
    "CannotIdentify",
    "ConfigShown",
    "Exhausted",
    "GameStarted",
    "GuessOutcome",
    "Ignored",
    "LanguageInvalid",
    "LanguageSet",
    "LanguageShown",
    "NoActiveSession",
    "NotAuthorized",
    "Outcome",
    "Pong",
    "StartsReset",
    "TooHigh",
    "TooLow",
    "WelcomePrompt",
    "Won",
]
