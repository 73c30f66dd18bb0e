# =============================================
# File: tests/test_sessions.py
# Purpose: Session registry TTL expiry and LRU eviction
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from portfolio.services.sessions import SessionRegistry


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_create_get_drop(monkeypatch):
    monkeypatch.setenv("CHAT_SESSION_TTL_SECONDS", "60")
    reg = SessionRegistry(clock=_Clock())
    w = reg.create()
    assert reg.get(w.session_id) is w
    assert reg.drop(w.session_id) is True
    assert reg.get(w.session_id) is None
    assert reg.drop(w.session_id) is False


def test_sessions_expire_after_ttl(monkeypatch):
    monkeypatch.setenv("CHAT_SESSION_TTL_SECONDS", "60")
    clock = _Clock()
    reg = SessionRegistry(clock=clock)
    w = reg.create()

    clock.now += 30
    assert reg.get(w.session_id) is w  # touch extends the TTL
    clock.now += 59
    assert reg.get(w.session_id) is w
    clock.now += 61
    assert reg.get(w.session_id) is None
    assert len(reg) == 0


def test_least_recently_used_is_evicted(monkeypatch):
    monkeypatch.setenv("CHAT_SESSION_TTL_SECONDS", "600")
    monkeypatch.setenv("CHAT_MAX_SESSIONS", "2")
    reg = SessionRegistry(clock=_Clock())
    a = reg.create()
    b = reg.create()
    reg.get(a.session_id)  # a is now most recent
    c = reg.create()

    assert reg.get(b.session_id) is None
    assert reg.get(a.session_id) is a
    assert reg.get(c.session_id) is c


def test_malformed_limits_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("CHAT_SESSION_TTL_SECONDS", "thirty")
    monkeypatch.setenv("CHAT_MAX_SESSIONS", "")
    reg = SessionRegistry(clock=_Clock())
    w = reg.create()
    assert reg.get(w.session_id) is w
    assert len(reg) == 1
