# =============================================
# File: tests/test_rate_limit.py
# Purpose: Validate per-session rate limiting on chat messages
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest
from types import SimpleNamespace

from portfolio.utils.ratelimit import RateLimited, check_rate_limit, reset_rate_limit


def test_limiter_counts_down_then_raises(monkeypatch):
    monkeypatch.setenv("RL_MAX_REQS", "2")
    monkeypatch.setenv("RL_WINDOW_SECONDS", "60")
    reset_rate_limit()

    assert check_rate_limit("k") == 1
    assert check_rate_limit("k") == 0
    with pytest.raises(RateLimited) as ei:
        check_rate_limit("k")
    assert 1 <= ei.value.retry_after <= 61
    # other keys are independent
    assert check_rate_limit("other") == 1


def test_rate_limit_per_session(client, monkeypatch):
    sid = client.post("/chat/sessions").json()["session_id"]
    monkeypatch.setenv("RL_MAX_REQS", "1")

    r1 = client.post(f"/chat/sessions/{sid}/messages", json={"text": "hello"})
    assert r1.status_code == 200

    r2 = client.post(f"/chat/sessions/{sid}/messages", json={"text": "hello again"})
    assert r2.status_code == 429
    assert "retry-after" in {k.lower() for k in r2.headers.keys()}

    # the rejected message never reached the transcript
    assert len(client.get(f"/chat/sessions/{sid}").json()["transcript"]) == 2


def test_idle_keys_are_swept(monkeypatch):
    import portfolio.utils.ratelimit as rl

    monkeypatch.setenv("RL_MAX_REQS", "5")
    monkeypatch.setenv("RL_WINDOW_SECONDS", "10")
    reset_rate_limit()

    now = [1000.0]
    monkeypatch.setattr(rl, "time", SimpleNamespace(time=lambda: now[0]))
    for i in range(50):
        check_rate_limit(f"session-{i}")
    assert rl.tracked_keys() == 50

    now[0] += 30
    check_rate_limit("fresh")
    assert rl.tracked_keys() == 1


def test_malformed_env_uses_defaults(monkeypatch):
    monkeypatch.setenv("RL_MAX_REQS", "lots")
    monkeypatch.setenv("RL_WINDOW_SECONDS", "1m")
    reset_rate_limit()
    assert check_rate_limit("k") == 59
