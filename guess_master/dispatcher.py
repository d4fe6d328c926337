"""Interpret one inbound chat event against the shared session store.

The dispatcher never produces text: it returns an ``Outcome`` that the
transport renders through ``MessageCatalog``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from .games.outcomes import (
    CannotIdentify,
    ConfigShown,
    GameStarted,
    Ignored,
    LanguageInvalid,
    LanguageSet,
    LanguageShown,
    NotAuthorized,
    Outcome,
    Pong,
    WelcomePrompt,
)
from .games.session_store import SessionStore
from .games.state import SessionKey, session_key
from .languages import SUPPORTED_LANGUAGES, effective_lang, parse_lang
from .log import LogFn

START_COMMANDS = {"/gioco", "/play"}
GUESS_PATTERN = re.compile(r"^[+-]?[0-9]+$")
# guesses are 32-bit signed integers; anything wider is not a number
GUESS_MIN = -(2 ** 31)
GUESS_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class InboundEvent:
    chat_id: int
    text: str
    user_id: Optional[int] = None
    first_name: str = ""
    language_code: Optional[str] = None

    @property
    def key(self) -> Optional[SessionKey]:
        if self.user_id is None:
            return None
        return session_key(self.chat_id, self.user_id)


def _command_token(text: str) -> str:
    """First word, lowercased, with a trailing "@botname" removed."""
    token = text.split(None, 1)[0].lower() if text else ""
    if token.startswith("/") and "@" in token:
        token = token.split("@", 1)[0]
    return token


def parse_guess(text: str) -> Optional[int]:
    if not GUESS_PATTERN.match(text or ""):
        return None
    if len(text.lstrip("+-").lstrip("0")) > 10:
        return None
    value = int(text)
    if not GUESS_MIN <= value <= GUESS_MAX:
        return None
    return value


class GuessDispatcher:
    def __init__(
        self,
        store: SessionStore,
        *,
        available_languages: Sequence[str] = SUPPORTED_LANGUAGES,
        clean_log: Optional[LogFn] = None,
    ) -> None:
        self.store = store
        self.config = store.config
        self.available_languages = tuple(available_languages)
        self.clean_log = clean_log or (lambda *args, **kwargs: None)

    def language_for(self, event: InboundEvent) -> str:
        return effective_lang(
            self.store,
            event.chat_id,
            event.user_id,
            event.language_code,
            self.config.default_language,
        )

    # ------------------------
    # Public dispatcher
    # ------------------------
    def handle_event(self, event: InboundEvent) -> Outcome:
        text = (event.text or "").strip()
        if not text:
            return Ignored()
        token = _command_token(text)

        if token == "/reset_starts":
            outcome = self.store.reset_all_start_attempts(event.key)
            if isinstance(outcome, NotAuthorized):
                self.clean_log(f"Unauthorized /reset_starts from chat={event.chat_id} user={event.user_id}", "🚫")
            return outcome
        if token == "/ping":
            return Pong()
        if token in START_COMMANDS:
            return self._handle_start(event)
        if token == "/lang":
            return self._handle_lang(event, text)
        if token == "/config":
            attempts, remaining = self.store.config_view(event.key)
            return ConfigShown(
                min=self.config.min,
                max=self.config.max,
                attempts=attempts,
                number_attempts=remaining,
            )

        guess = parse_guess(text)
        key = event.key
        if key is not None and guess is None and not text.startswith("/"):
            if not self.store.has_session(key) and self.store.note_welcome_shown(key):
                return WelcomePrompt(name=event.first_name or "")

        if guess is None:
            return Ignored()
        if key is None:
            return CannotIdentify(action="guess")
        return self.store.submit_guess(key, guess)

    # ------------------------
    # Commands
    # ------------------------
    def _handle_start(self, event: InboundEvent) -> Outcome:
        key = event.key
        if key is None:
            return CannotIdentify(action="start")
        game = self.store.start_session(key)
        self.clean_log(
            f"Game started: chat={event.chat_id} user={event.user_id} attempts={game.start_attempts}",
            "🎮",
        )
        return GameStarted(min=self.config.min, max=self.config.max, attempts=game.attempts_left)

    def _available_lang(self, value: str) -> Optional[str]:
        tag = parse_lang(value)
        return tag if tag in self.available_languages else None

    def _handle_lang(self, event: InboundEvent, text: str) -> Outcome:
        parts = text.split()
        if len(parts) == 1:
            return LanguageShown(current=self.language_for(event), available=self.available_languages)
        if len(parts) == 2:
            new_lang = self._available_lang(parts[1])
            if new_lang:
                if event.key is None:
                    return CannotIdentify(action="start")
                self.store.set_user_language(event.key, new_lang)
                return LanguageSet(scope="user", lang=new_lang)
        if len(parts) == 3 and parts[1].lower() == "chat":
            new_lang = self._available_lang(parts[2])
            if new_lang:
                self.store.set_chat_language(event.chat_id, new_lang)
                return LanguageSet(scope="chat", lang=new_lang)
        return LanguageInvalid()


__all__ = ["GuessDispatcher", "InboundEvent", "parse_guess"]
