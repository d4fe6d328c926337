"""Runtime configuration: config.json values overridden by environment variables."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from .languages import language_from_code

CONFIG_FILE = "config.json"

DEFAULT_WELCOME_TTL_SECS = 60 * 60 * 24 * 30


class ConfigError(ValueError):
    """Configuration the game refuses to run with."""


def safe_load_json(path, default_value):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        print(f"⚠️ {path} not found. Using defaults.")
    except Exception as e:
        print(f"⚠️ Could not load {path}: {e}")
    return default_value


@dataclass(frozen=True)
class GameConfig:
    min: int = 1
    max: int = 100
    attempts: int = 5
    # consecutive exhausted games before start attempts snap back to `attempts`
    restart_threshold: int = 3
    default_language: str = "en"
    ttl_seconds: int = DEFAULT_WELCOME_TTL_SECS
    bot_owner_id: Optional[int] = None
    reset_user_starts: FrozenSet[str] = field(default_factory=frozenset)
    data_dir: str = "data"
    messages_dir: str = "messages"
    web_port: int = 5000
    debug: bool = False
    clean_logs: bool = True

    def validate(self) -> "GameConfig":
        if self.min >= self.max:
            raise ConfigError(
                f"Invalid configuration: GAME_MIN ({self.min}) must be less than GAME_MAX ({self.max})."
            )
        if self.attempts <= 0:
            raise ConfigError(
                f"Invalid configuration: GAME_ATTEMPTS ({self.attempts}) must be a positive integer."
            )
        if self.restart_threshold < 0:
            raise ConfigError(
                f"Invalid configuration: NUMBER_ATTEMPTS ({self.restart_threshold}) must be a non-negative integer."
            )
        if self.ttl_seconds < 0:
            raise ConfigError(
                f"Invalid configuration: SEEN_WELCOME_TTL_SECS ({self.ttl_seconds}) must be a non-negative integer."
            )
        return self

    def public_view(self) -> Dict[str, Any]:
        return {
            "min": self.min,
            "max": self.max,
            "attempts": self.attempts,
            "number_attempts": self.restart_threshold,
            "default_language": self.default_language,
        }


def _coerce_int(value: Any, default: Optional[int]) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def parse_reset_list(raw: Any) -> FrozenSet[str]:
    """Accept a list or a comma separated string of "chat:user" entries."""
    if raw is None:
        return frozenset()
    if isinstance(raw, str):
        items: Iterable[Any] = raw.split(",")
    elif isinstance(raw, (list, tuple, set, frozenset)):
        items = raw
    else:
        return frozenset()
    cleaned = (str(item).strip().strip('"') for item in items)
    return frozenset(item for item in cleaned if item)


# config.json key -> environment override
ENV_OVERRIDES = {
    "game_min": "GAME_MIN",
    "game_max": "GAME_MAX",
    "game_attempts": "GAME_ATTEMPTS",
    "number_attempts": "NUMBER_ATTEMPTS",
    "default_language": "DEFAULT_LANG",
    "seen_welcome_ttl_secs": "SEEN_WELCOME_TTL_SECS",
    "bot_owner_id": "BOT_OWNER_ID",
    "reset_user_starts": "RESET_USER_STARTS",
    "data_dir": "GUESS_MASTER_DATA_DIR",
    "web_port": "GUESS_MASTER_PORT",
}


def _merged_values(raw: Mapping[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    values = dict(raw)
    for key, env_name in ENV_OVERRIDES.items():
        env_value = environ.get(env_name)
        if env_value is not None and env_value.strip():
            values[key] = env_value
    return values


def build_config(raw: Optional[Mapping[str, Any]] = None, environ: Optional[Mapping[str, str]] = None) -> GameConfig:
    defaults = GameConfig()
    values = _merged_values(raw or {}, os.environ if environ is None else environ)
    default_language = language_from_code(values.get("default_language")) or defaults.default_language
    config = GameConfig(
        min=_coerce_int(values.get("game_min"), defaults.min),
        max=_coerce_int(values.get("game_max"), defaults.max),
        attempts=_coerce_int(values.get("game_attempts"), defaults.attempts),
        restart_threshold=_coerce_int(values.get("number_attempts"), defaults.restart_threshold),
        default_language=default_language,
        ttl_seconds=_coerce_int(values.get("seen_welcome_ttl_secs"), defaults.ttl_seconds),
        bot_owner_id=_coerce_int(values.get("bot_owner_id"), None),
        reset_user_starts=parse_reset_list(values.get("reset_user_starts")),
        data_dir=str(values.get("data_dir") or defaults.data_dir),
        messages_dir=str(values.get("messages_dir") or defaults.messages_dir),
        web_port=_coerce_int(values.get("web_port"), defaults.web_port),
        debug=_coerce_bool(values.get("debug"), defaults.debug),
        clean_logs=_coerce_bool(values.get("clean_logs"), defaults.clean_logs),
    )
    return config.validate()


def load_config(path: str = CONFIG_FILE, environ: Optional[Mapping[str, str]] = None) -> GameConfig:
    raw = safe_load_json(path, {})
    if not isinstance(raw, dict):
        print(f"⚠️ {path} must hold a JSON object. Using defaults.")
        raw = {}
    return build_config(raw, environ)


__all__ = ["CONFIG_FILE", "ConfigError", "GameConfig", "build_config", "load_config", "parse_reset_list", "safe_load_json"]
