"""Emoji-tagged, rate-limited logging helper shared by every component."""

from __future__ import annotations

import logging
import sys
import threading
import time
from collections import defaultdict
from typing import Callable, Dict

LogFn = Callable[..., None]

logger = logging.getLogger("guess_master")

DEBUG_ENABLED = False
CLEAN_LOGS = True

_rate_limit_seconds = 2.0
_last_message_time: Dict[str, float] = defaultdict(float)
_message_counts: Dict[str, int] = defaultdict(int)
_rate_lock = threading.Lock()


def configure(*, debug: bool = False, clean_logs: bool = True) -> None:
    """Install a stdout handler on the package logger."""
    global DEBUG_ENABLED, CLEAN_LOGS
    DEBUG_ENABLED = bool(debug)
    CLEAN_LOGS = bool(clean_logs)
    level = logging.DEBUG if DEBUG_ENABLED else logging.INFO
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s', datefmt='%H:%M:%S'))
    logger.addHandler(handler)


def clean_log(message, emoji="📝", show_always=False, rate_limit=True):
    """Clean, emoji-enhanced logging with rate limiting of repeated lines"""
    message = str(message)
    if rate_limit and not DEBUG_ENABLED:
        message_key = f"{emoji}_{message[:50]}"
        current_time = time.time()
        with _rate_lock:
            if current_time - _last_message_time[message_key] < _rate_limit_seconds:
                _message_counts[message_key] += 1
                return
            suppressed_count = _message_counts[message_key]
            if suppressed_count > 0:
                _message_counts[message_key] = 0
                if suppressed_count > 1:
                    message += f" (suppressed {suppressed_count} similar messages)"
            _last_message_time[message_key] = current_time

    if show_always or (not DEBUG_ENABLED and CLEAN_LOGS):
        logger.info(f"{emoji} {message}")
    elif DEBUG_ENABLED:
        logger.debug(f"{emoji} {message}")
    else:
        logger.info(f"[Info] {message}")


__all__ = ["LogFn", "clean_log", "configure", "logger"]
