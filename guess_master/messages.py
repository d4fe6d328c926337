"""Localized message catalog and rendering of game outcomes into replies."""

from __future__ import annotations

import json
import os
from typing import Dict, List, Optional

from .games.outcomes import (
    CannotIdentify,
    ConfigShown,
    Exhausted,
    GameStarted,
    Ignored,
    LanguageInvalid,
    LanguageSet,
    LanguageShown,
    NoActiveSession,
    NotAuthorized,
    Outcome,
    Pong,
    StartsReset,
    TooHigh,
    TooLow,
    WelcomePrompt,
    Won,
)
from .languages import SUPPORTED_LANGUAGES, display_name
from .log import LogFn
from .replies import PendingReply

Messages = Dict[str, str]

DEFAULT_MESSAGES: Messages = {
    "cannot_start": "I can't start a game for channels or messages without a user.",
    "cannot_guess": "I can't handle guesses without a user.",
    "game_started": "🎯 Game started for you! Guess a number between {min} and {max}. Attempts left: {attempts}",
    "config": "Current configuration: min = {min}, max = {max}, attempts = {attempts}, number_attempts = {number_attempts}",
    "welcome_prompt": "Hi {name}! Use /gioco to start your personal game.",
    "no_attempts": "No attempts left. Use /gioco to restart.",
    "revealed": "❌ You've run out of attempts. The number was {target}. Use /gioco to restart.",
    "too_low": "Too low. Attempts left: {attempts}",
    "too_high": "Too high. Attempts left: {attempts}",
    "lang_set_user": "Your language preference was set.",
    "lang_set_chat": "Chat language preference was set.",
    "lang_invalid": "Invalid usage. Examples: `/lang en`, `/lang it`, `/lang chat en`",
    "pong": "pong",
    "not_started_prompt": "You don't have an active game yet. Use /gioco to start.",
    "current_language_label": "Current language:",
    "language_name": "English",
    "reset_starts_ok": "Persisted per-user start attempts cleared.",
    "success_correct": (
        "✅ You guessed it!! Guess a new random number in {next_attempts} attempts. "
        "You will have {number_attempts} attempts before failing and starting over."
    ),
    "not_authorized": "Not authorized.",
    "available_languages_label": "Available languages:",
}

MESSAGE_KEYS = tuple(DEFAULT_MESSAGES)


def format_with(template: str, **values) -> str:
    """Replace each ``{key}`` in ``template``; unknown placeholders stay as-is."""
    text = template
    for key, value in values.items():
        text = text.replace("{" + key + "}", str(value))
    return text


def load_messages_file(path: str, *, lang: str = "en", clean_log: Optional[LogFn] = None) -> Messages:
    """Read one language file; missing keys come from English, except the language name."""
    log = clean_log or (lambda *args, **kwargs: None)
    fallback = dict(DEFAULT_MESSAGES, language_name=display_name(lang))
    try:
        with open(path, "r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except Exception as exc:
        log(f"Failed to read {path}: {exc}. Falling back to defaults.", "⚠️")
        return fallback
    if not isinstance(raw, dict):
        log(f"{path} is not a JSON object. Falling back to defaults.", "⚠️")
        return fallback

    messages = dict(fallback)
    missing: List[str] = []
    for key in MESSAGE_KEYS:
        value = raw.get(key)
        if isinstance(value, str) and value.strip():
            messages[key] = value
        else:
            missing.append(key)
    if missing:
        log(f"{path} missing keys: {', '.join(missing)}", "⚠️")
    return messages


def load_all_messages(directory: str, *, clean_log: Optional[LogFn] = None) -> Dict[str, Messages]:
    """Load every ``<tag>.json`` file in ``directory``; English is always present."""
    log = clean_log or (lambda *args, **kwargs: None)
    catalog: Dict[str, Messages] = {}
    try:
        names = sorted(os.listdir(directory))
    except OSError:
        names = []
    for fname in names:
        if not fname.lower().endswith(".json"):
            continue
        tag = fname[: -len(".json")].lower()
        if tag not in SUPPORTED_LANGUAGES:
            log(f"Skipping unknown language file: {fname}", "⚠️")
            continue
        catalog[tag] = load_messages_file(os.path.join(directory, fname), lang=tag, clean_log=clean_log)
    catalog.setdefault("en", dict(DEFAULT_MESSAGES))
    return catalog


class MessageCatalog:
    """Pick the right language table and turn outcomes into ``PendingReply``s."""

    def __init__(self, messages: Dict[str, Messages], default_language: str = "en") -> None:
        self.messages = dict(messages)
        self.messages.setdefault("en", dict(DEFAULT_MESSAGES))
        self.default_language = default_language if default_language in self.messages else "en"

    @classmethod
    def from_directory(cls, directory: str, default_language: str = "en", *, clean_log: Optional[LogFn] = None) -> "MessageCatalog":
        return cls(load_all_messages(directory, clean_log=clean_log), default_language)

    def languages(self) -> List[str]:
        return sorted(self.messages)

    def for_lang(self, lang: Optional[str]) -> Messages:
        return (
            self.messages.get(lang or "")
            or self.messages.get(self.default_language)
            or self.messages["en"]
        )

    def _language_listing(self, outcome: LanguageShown, msgs: Messages) -> str:
        current = f"{msgs['current_language_label']} {msgs['language_name']} ({outcome.current})"
        names = []
        for tag in outcome.available:
            entry = self.messages.get(tag)
            name = entry["language_name"] if entry else display_name(tag)
            names.append(f"{name} ({tag})")
        return f"{current}\n{msgs['available_languages_label']} {', '.join(sorted(names))}"

    def text_for(self, outcome: Outcome, lang: Optional[str] = None) -> Optional[str]:
        msgs = self.for_lang(lang)
        if isinstance(outcome, GameStarted):
            return format_with(msgs["game_started"], min=outcome.min, max=outcome.max, attempts=outcome.attempts)
        if isinstance(outcome, TooLow):
            return format_with(msgs["too_low"], attempts=outcome.remaining)
        if isinstance(outcome, TooHigh):
            return format_with(msgs["too_high"], attempts=outcome.remaining)
        if isinstance(outcome, Won):
            return format_with(
                msgs["success_correct"],
                next_attempts=outcome.next_attempts,
                number_attempts=outcome.threshold,
            )
        if isinstance(outcome, Exhausted):
            if not outcome.final_guess:
                return msgs["no_attempts"]
            return format_with(
                msgs["revealed"],
                target=outcome.target,
                number_attempts=outcome.remaining_before_reset,
            )
        if isinstance(outcome, NoActiveSession):
            return msgs["not_started_prompt"]
        if isinstance(outcome, NotAuthorized):
            return msgs["not_authorized"]
        if isinstance(outcome, StartsReset):
            return msgs["reset_starts_ok"]
        if isinstance(outcome, Pong):
            return msgs["pong"]
        if isinstance(outcome, ConfigShown):
            return format_with(
                msgs["config"],
                min=outcome.min,
                max=outcome.max,
                attempts=outcome.attempts,
                number_attempts=outcome.number_attempts,
            )
        if isinstance(outcome, LanguageShown):
            return self._language_listing(outcome, msgs)
        if isinstance(outcome, LanguageSet):
            return msgs["lang_set_chat"] if outcome.scope == "chat" else msgs["lang_set_user"]
        if isinstance(outcome, LanguageInvalid):
            return msgs["lang_invalid"]
        if isinstance(outcome, WelcomePrompt):
            return format_with(msgs["welcome_prompt"], name=outcome.name)
        if isinstance(outcome, CannotIdentify):
            return msgs["cannot_start"] if outcome.action == "start" else msgs["cannot_guess"]
        if isinstance(outcome, Ignored):
            return None
        raise TypeError(f"No message for outcome {type(outcome).__name__}")

    def render(self, outcome: Outcome, lang: Optional[str] = None, *, chat_id: Optional[int] = None) -> Optional[PendingReply]:
        text = self.text_for(outcome, lang)
        if text is None:
            return None
        resolved = lang if lang in self.messages else self.default_language
        return PendingReply(text, outcome.kind, lang=resolved, chat_id=chat_id)


__all__ = [
    "DEFAULT_MESSAGES",
    "MESSAGE_KEYS",
    "MessageCatalog",
    "format_with",
    "load_all_messages",
    "load_messages_file",
]
