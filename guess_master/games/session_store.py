"""Single owner of every mutable per-user map of the guessing game.

One lock guards the in-memory maps and the snapshot writes that follow each
mutation, so two events for the same (chat, user) are strictly serialized and
an operation's persisted snapshot is written before the next one begins.
"""

from __future__ import annotations

import copy
import random
import threading
import time
from dataclasses import replace
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..config import GameConfig
from ..log import LogFn
from ..persistence import (
    SEEN_WELCOME,
    USER_MISS_STREAKS,
    USER_START_ATTEMPTS,
    PersistenceStore,
)
from .ladder import MIN_START_ATTEMPTS, draw_target, next_start_attempts, remaining_before_reset
from .outcomes import Exhausted, GuessOutcome, NoActiveSession, NotAuthorized, StartsReset, TooHigh, TooLow, Won
from .state import GameState, SessionKey, composite_key


class SessionStore:
    """Active games plus the adaptive start-attempts / miss-streak / welcome maps."""

    def __init__(
        self,
        config: GameConfig,
        persistence: PersistenceStore,
        *,
        clean_log: Optional[LogFn] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.persistence = persistence
        self.clean_log = clean_log or (lambda *args, **kwargs: None)
        self._rng = rng
        self._clock = clock

        self._lock = threading.Lock()
        self._sessions: Dict[SessionKey, GameState] = {}
        self._user_langs: Dict[SessionKey, str] = {}
        self._chat_langs: Dict[int, str] = {}
        maps = persistence.load_all()
        self._seen_welcome: Dict[str, int] = maps[SEEN_WELCOME]
        self._user_start_attempts: Dict[str, int] = maps[USER_START_ATTEMPTS]
        self._user_miss_streaks: Dict[str, int] = maps[USER_MISS_STREAKS]

    # ------------------------------------------------------------------
    # Persistence helpers (caller holds the lock)
    # ------------------------------------------------------------------

    def _persist_locked(self, *kinds: str) -> None:
        sources = {
            SEEN_WELCOME: self._seen_welcome,
            USER_START_ATTEMPTS: self._user_start_attempts,
            USER_MISS_STREAKS: self._user_miss_streaks,
        }
        for kind in kinds:
            self.persistence.save(kind, dict(sources[kind]))

    def _start_attempts_locked(self, composite: str) -> int:
        stored = self._user_start_attempts.get(composite)
        if stored is None or stored < MIN_START_ATTEMPTS:
            return self.config.attempts
        return stored

    def _new_game_locked(self, start_attempts: int) -> GameState:
        target = draw_target(self.config.min, self.config.max, self._rng)
        return GameState.fresh(target, start_attempts)

    # ------------------------------------------------------------------
    # Game operations
    # ------------------------------------------------------------------

    def start_session(self, key: SessionKey) -> GameState:
        """Install a fresh game for ``key``, discarding any previous one."""
        composite = composite_key(key)
        with self._lock:
            start_attempts = self._start_attempts_locked(composite)
            game = self._new_game_locked(start_attempts)
            self._sessions[key] = game
            self._user_start_attempts[composite] = start_attempts
            self._persist_locked(USER_START_ATTEMPTS)
            return replace(game)

    def submit_guess(self, key: SessionKey, value: int) -> GuessOutcome:
        composite = composite_key(key)
        threshold = self.config.restart_threshold
        with self._lock:
            game = self._sessions.get(key)
            if game is None:
                return NoActiveSession()

            if game.is_exhausted:
                streak = self._user_miss_streaks.get(composite, 0)
                return Exhausted(
                    target=game.target,
                    remaining_before_reset=remaining_before_reset(streak, threshold),
                    final_guess=False,
                )

            remaining = game.consume_attempt()

            if value == game.target:
                next_attempts = next_start_attempts(game.start_attempts)
                self.clean_log(
                    f"win: chat={key[0]} user={key[1]} prev_start={game.start_attempts} "
                    f"remaining_after_guess={remaining} next={next_attempts}",
                    "🎯",
                    rate_limit=False,
                )
                self._sessions[key] = self._new_game_locked(next_attempts)
                self._user_miss_streaks[composite] = 0
                self._user_start_attempts[composite] = next_attempts
                self._persist_locked(USER_START_ATTEMPTS, USER_MISS_STREAKS)
                return Won(next_attempts=next_attempts, threshold=threshold)

            if remaining == 0:
                streak = self._user_miss_streaks.get(composite, 0) + 1
                self._user_miss_streaks[composite] = streak
                if streak >= threshold:
                    self._user_start_attempts[composite] = self.config.attempts
                    self._user_miss_streaks[composite] = 0
                    self.clean_log(
                        f"miss streak reset: chat={key[0]} user={key[1]} start={self.config.attempts}",
                        "🔁",
                        rate_limit=False,
                    )
                self._persist_locked(USER_START_ATTEMPTS, USER_MISS_STREAKS)
                return Exhausted(
                    target=game.target,
                    remaining_before_reset=remaining_before_reset(streak, threshold),
                )

            if value < game.target:
                return TooLow(remaining=remaining)
            return TooHigh(remaining=remaining)

    def note_welcome_shown(self, key: SessionKey) -> bool:
        """Stamp and persist the welcome time when the prompt is due again."""
        composite = composite_key(key)
        with self._lock:
            now = int(self._clock())
            seen = self._seen_welcome.get(composite, 0)
            if seen and max(0, now - seen) <= self.config.ttl_seconds:
                return False
            self._seen_welcome[composite] = now
            self._persist_locked(SEEN_WELCOME)
            return True

    # ------------------------------------------------------------------
    # Privileged reset
    # ------------------------------------------------------------------

    def is_reset_authorized(self, key: Optional[SessionKey]) -> bool:
        if key is None:
            return False
        owner = self.config.bot_owner_id
        if owner is not None and key[1] == owner:
            return True
        return composite_key(key) in self.config.reset_user_starts

    def reset_all_start_attempts(self, caller: Optional[SessionKey]) -> Union[StartsReset, NotAuthorized]:
        if not self.is_reset_authorized(caller):
            return NotAuthorized()
        with self._lock:
            cleared = len(self._user_start_attempts)
            self._user_start_attempts.clear()
            self._persist_locked(USER_START_ATTEMPTS)
        self.clean_log(f"Cleared {cleared} persisted start attempts", "🧹", show_always=True, rate_limit=False)
        return StartsReset(cleared=cleared)

    # ------------------------------------------------------------------
    # Languages (memory only)
    # ------------------------------------------------------------------

    def set_user_language(self, key: SessionKey, lang: str) -> None:
        with self._lock:
            self._user_langs[key] = lang

    def set_chat_language(self, chat_id: int, lang: str) -> None:
        with self._lock:
            self._chat_langs[int(chat_id)] = lang

    def user_language(self, key: SessionKey) -> Optional[str]:
        with self._lock:
            return self._user_langs.get(key)

    def chat_language(self, chat_id: int) -> Optional[str]:
        with self._lock:
            return self._chat_langs.get(int(chat_id))

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def get_session(self, key: SessionKey) -> Optional[GameState]:
        with self._lock:
            game = self._sessions.get(key)
            return replace(game) if game is not None else None

    def has_session(self, key: SessionKey) -> bool:
        with self._lock:
            return key in self._sessions

    def miss_streak(self, key: SessionKey) -> int:
        with self._lock:
            return self._user_miss_streaks.get(composite_key(key), 0)

    def start_attempts_for(self, key: SessionKey) -> int:
        with self._lock:
            return self._start_attempts_locked(composite_key(key))

    def config_view(self, key: Optional[SessionKey]) -> Tuple[int, int]:
        """(attempts shown to the caller, losses left before the reset)."""
        with self._lock:
            game = self._sessions.get(key) if key is not None else None
            attempts = game.attempts_left if game is not None else self.config.attempts
            streak = self._user_miss_streaks.get(composite_key(key), 0) if key is not None else 0
        return attempts, remaining_before_reset(streak, self.config.restart_threshold)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return copy.deepcopy(
                {
                    "sessions": self._sessions,
                    "user_langs": self._user_langs,
                    "chat_langs": self._chat_langs,
                    SEEN_WELCOME: self._seen_welcome,
                    USER_START_ATTEMPTS: self._user_start_attempts,
                    USER_MISS_STREAKS: self._user_miss_streaks,
                }
            )


__all__ = ["SessionStore"]
