# =============================================
# File: portfolio/utils/ratelimit.py
# Purpose: Sliding-window limiter for chat submissions (in-memory, per key)
# =============================================
from __future__ import annotations
import os
import threading
import time
from collections import deque
from typing import Deque, Dict

# key (session id or client ip) -> submission timestamps
_store: Dict[str, Deque[float]] = {}
_lock = threading.Lock()
_last_sweep = 0.0


class RateLimited(RuntimeError):
    """Raised when a key exceeds its window; carries seconds until a slot frees up."""

    def __init__(self, retry_after: int) -> None:
        super().__init__("Rate limit exceeded")
        self.retry_after = retry_after


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _get_limits() -> tuple[int, int]:
    """Read limits at call time so tests/env overrides take effect."""
    return _env_int("RL_MAX_REQS", 60), _env_int("RL_WINDOW_SECONDS", 60)


def _sweep(cutoff: float) -> None:
    # drop keys with no hit inside the window (caller holds _lock)
    idle = [k for k, dq in _store.items() if not dq or dq[-1] < cutoff]
    for k in idle:
        del _store[k]


def check_rate_limit(key: str) -> int:
    """Record one hit for `key`. Returns remaining hits in the window; raises RateLimited."""
    global _last_sweep
    now = time.time()
    max_reqs, window_s = _get_limits()

    with _lock:
        cutoff = now - window_s
        # at most one full scan per window
        if now - _last_sweep >= window_s:
            _sweep(cutoff)
            _last_sweep = now

        dq = _store.setdefault(key, deque())
        while dq and dq[0] < cutoff:
            dq.popleft()

        if len(dq) >= max_reqs:
            retry_after = max(1, int(dq[0] + window_s - now) + 1) if dq else window_s
            raise RateLimited(retry_after)

        dq.append(now)
        return max_reqs - len(dq)


def tracked_keys() -> int:
    with _lock:
        return len(_store)


def reset_rate_limit() -> None:
    """For tests: clear in-memory counters."""
    global _last_sweep
    with _lock:
        _store.clear()
        _last_sweep = 0.0
