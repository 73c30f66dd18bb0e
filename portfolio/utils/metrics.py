# =============================================
# File: portfolio/utils/metrics.py
# Purpose: In-process counters & histograms for /metrics
# =============================================
from __future__ import annotations
import threading
import time
from collections import Counter, defaultdict, deque
from typing import Any, Deque, Dict, List

_lock = threading.Lock()

COUNTERS = (
    "requests_total",
    "rate_limit_hits_total",
    "replies_total",
    "sessions_created_total",
    "contact_messages_total",
    "contact_forward_failures_total",
)
_counters: Counter = Counter()
_rule_hits: Counter = Counter()       # rule name -> replies
_fallback: Counter = Counter()        # "true"/"false"

# latency histogram upper bounds (ms); one extra slot for +Inf
LATENCY_BUCKETS_MS: List[int] = [10, 50, 100, 250, 500, 1000, 2500, 5000]
_latency_counts: List[int] = [0] * (len(LATENCY_BUCKETS_MS) + 1)

# per-endpoint samples, bounded, for avg/p95
_MAX_SAMPLES = 1000
_samples: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=_MAX_SAMPLES))
_hits: Counter = Counter()


def _bucket(ms: int) -> int:
    for i, upper in enumerate(LATENCY_BUCKETS_MS):
        if ms <= upper:
            return i
    return len(LATENCY_BUCKETS_MS)


def _p95(values: List[float]) -> float:
    if not values:
        return 0.0
    xs = sorted(values)
    return xs[int(0.95 * (len(xs) - 1))]


def record_request(latency_ms: int) -> None:
    with _lock:
        _counters["requests_total"] += 1
        _latency_counts[_bucket(int(latency_ms))] += 1


def record_endpoint(method: str, path: str, latency_ms: float) -> None:
    key = f"{method.upper()} {path}"
    with _lock:
        _hits[key] += 1
        _samples[key].append(float(latency_ms))


def record_reply(rule: str) -> None:
    with _lock:
        _counters["replies_total"] += 1
        _rule_hits[rule] += 1
        _fallback["true" if rule == "fallback" else "false"] += 1


def record_session_created() -> None:
    with _lock:
        _counters["sessions_created_total"] += 1


def record_contact(forward_failed: bool = False) -> None:
    with _lock:
        _counters["contact_messages_total"] += 1
        if forward_failed:
            _counters["contact_forward_failures_total"] += 1


def record_rate_limit_hit() -> None:
    with _lock:
        _counters["rate_limit_hits_total"] += 1


def snapshot() -> Dict[str, Any]:
    with _lock:
        endpoints = {}
        for key, buf in _samples.items():
            vals = list(buf)
            endpoints[key] = {
                "count": float(_hits[key]),
                "avg_latency_ms": sum(vals) / len(vals) if vals else 0.0,
                "p95_latency_ms": _p95(vals),
            }
        return {
            "counters": {name: _counters[name] for name in COUNTERS},
            "rules": dict(_rule_hits),
            "fallback": {"true": _fallback["true"], "false": _fallback["false"]},
            "latency_ms": {
                "buckets": list(LATENCY_BUCKETS_MS) + ["+Inf"],
                "counts": list(_latency_counts),
            },
            "performance": {"endpoints": endpoints, "generated_at": time.time()},
        }


def reset() -> None:
    with _lock:
        _counters.clear()
        _rule_hits.clear()
        _fallback.clear()
        _samples.clear()
        _hits.clear()
        _latency_counts[:] = [0] * len(_latency_counts)
