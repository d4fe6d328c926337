"""Whole-file JSON snapshots for the adaptive per-user maps.

Each map lives in its own file under the data directory::

    data/seen_welcome.json          "chat:user" -> unix seconds
    data/user_start_attempts.json   "chat:user" -> next game's attempts
    data/user_miss_streaks.json     "chat:user" -> consecutive losses

Loading never fails: a missing, unreadable or malformed file is an empty map.
Saving never raises: a failed write is logged and reported as ``False`` so the
in-memory copy stays authoritative until the next successful write.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Mapping, Optional

from .log import LogFn

SEEN_WELCOME = "seen_welcome"
USER_START_ATTEMPTS = "user_start_attempts"
USER_MISS_STREAKS = "user_miss_streaks"

MAP_KINDS = (SEEN_WELCOME, USER_START_ATTEMPTS, USER_MISS_STREAKS)


def _write_json_atomic(path: str, payload: Mapping[str, Any]) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as fh:
        json.dump(dict(payload), fh, indent=2, sort_keys=True)
    os.replace(tmp_path, path)


def _coerce_int_map(raw: Any) -> Optional[Dict[str, int]]:
    if not isinstance(raw, dict):
        return None
    clean: Dict[str, int] = {}
    for key, value in raw.items():
        # bool is an int subclass but never a valid counter or timestamp
        if not isinstance(key, str) or isinstance(value, bool) or not isinstance(value, int):
            return None
        clean[key] = value
    return clean


class PersistenceStore:
    """Load and save the three adaptive maps as independent JSON files."""

    def __init__(self, data_dir: str = "data", *, clean_log: Optional[LogFn] = None) -> None:
        self.data_dir = data_dir or "data"
        self.clean_log = clean_log or (lambda *args, **kwargs: None)

    def path_for(self, map_kind: str) -> str:
        if map_kind not in MAP_KINDS:
            raise KeyError(f"Unknown state map: {map_kind}")
        return os.path.join(self.data_dir, f"{map_kind}.json")

    def load(self, map_kind: str) -> Dict[str, int]:
        path = self.path_for(map_kind)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except FileNotFoundError:
            return {}
        except Exception as exc:
            self.clean_log(f"{map_kind} load failed: {exc}; starting empty", "⚠️")
            return {}

        data = _coerce_int_map(raw)
        if data is None:
            self.clean_log(f"{map_kind} snapshot is malformed; starting empty", "⚠️")
            return {}
        return data

    def save(self, map_kind: str, mapping: Mapping[str, int]) -> bool:
        path = self.path_for(map_kind)
        try:
            _write_json_atomic(path, mapping)
        except Exception as exc:
            self.clean_log(f"{map_kind} save failed: {exc}", "⚠️")
            return False
        return True

    def load_all(self) -> Dict[str, Dict[str, int]]:
        return {kind: self.load(kind) for kind in MAP_KINDS}


__all__ = [
    "MAP_KINDS",
    "PersistenceStore",
    "SEEN_WELCOME",
    "USER_MISS_STREAKS",
    "USER_START_ATTEMPTS",
]
