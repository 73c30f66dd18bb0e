# =============================================
# File: portfolio/services/sessions.py
# Purpose: In-process registry of chat widgets (TTL + LRU, nothing persisted)
# =============================================
from __future__ import annotations

import os
import threading
import time
from collections import OrderedDict
from typing import Callable, Tuple

from loguru import logger

from .chat import ChatWidget


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        logger.warning("sessions: ignoring invalid {}={!r}", name, os.getenv(name))
        return default


def _get_limits() -> Tuple[int, int]:
    """Read limits at call time so tests/env overrides take effect."""
    return _env_int("CHAT_SESSION_TTL_SECONDS", 1800), _env_int("CHAT_MAX_SESSIONS", 1000)


class SessionRegistry:
    """
    One ChatWidget per page view.
    - Entries expire `ttl` seconds after their last access.
    - When full, the least recently used session is evicted.
    """
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        # session_id -> (expires_at, widget)
        self._store: "OrderedDict[str, Tuple[float, ChatWidget]]" = OrderedDict()

    def _prune(self, now: float) -> None:
        dead = [k for k, (exp, _) in self._store.items() if exp < now]
        for k in dead:
            self._store.pop(k, None)
        if dead:
            logger.debug("sessions: expired {}", len(dead))

    def create(self) -> ChatWidget:
        ttl, max_sessions = _get_limits()
        widget = ChatWidget()
        now = self._clock()
        with self._lock:
            self._prune(now)
            self._store[widget.session_id] = (now + ttl, widget)
            while len(self._store) > max_sessions:
                sid, _ = self._store.popitem(last=False)
                logger.info("sessions: evicted {}", sid)
        return widget

    def get(self, session_id: str) -> ChatWidget | None:
        ttl, _ = _get_limits()
        now = self._clock()
        with self._lock:
            self._prune(now)
            item = self._store.get(session_id)
            if not item:
                return None
            _, widget = item
            # touch: extend TTL and mark most recently used
            self._store[session_id] = (now + ttl, widget)
            self._store.move_to_end(session_id, last=True)
            return widget

    def drop(self, session_id: str) -> bool:
        with self._lock:
            return self._store.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


# Global instance
SESSIONS = SessionRegistry()
