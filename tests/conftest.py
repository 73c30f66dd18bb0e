# =============================================
# File: tests/conftest.py
# Purpose: Shared fixtures: fresh limiter/metrics/sessions and no typing delay
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(monkeypatch):
    # permissive limiter, instant replies
    monkeypatch.setenv("RL_MAX_REQS", "100")
    monkeypatch.setenv("RL_WINDOW_SECONDS", "60")
    monkeypatch.setenv("CHAT_TYPING_DELAY_MS", "0")

    from portfolio.utils.ratelimit import reset_rate_limit
    from portfolio.utils.metrics import reset as metrics_reset
    from portfolio.services.sessions import SESSIONS

    reset_rate_limit()
    metrics_reset()
    SESSIONS.clear()

    from portfolio.main import app
    return TestClient(app)
