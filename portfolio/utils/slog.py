# =============================================
# File: portfolio/utils/slog.py
# Purpose: One-line JSON events on the stdlib "portfolio" logger + per-request context
# =============================================
from __future__ import annotations
import hashlib
import json
import logging
import os
import uuid
from typing import Any, Dict

LOGGER_NAME = "portfolio"


def _configure() -> logging.Logger:
    log = logging.getLogger(LOGGER_NAME)
    if log.handlers:
        return log
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    log.setLevel(getattr(logging, level, logging.INFO))
    h = logging.StreamHandler()
    h.setFormatter(logging.Formatter("%(message)s"))  # message is already JSON
    log.addHandler(h)
    log.propagate = True  # pytest caplog listens on the root logger
    return log


_logger = _configure()


def qhash(text: str) -> str:
    """10-char digest of the normalized text; chat input itself is never logged."""
    norm = " ".join((text or "").lower().split())
    return hashlib.sha256(norm.encode("utf-8")).hexdigest()[:10]


def new_request_id() -> str:
    return uuid.uuid4().hex


def bind_context(request: Any, **fields: Any) -> Dict[str, Any]:
    """
    Merge fields into request.state.log_context; the access-log middleware
    appends them to the request.completed event.
    """
    ctx = getattr(request.state, "log_context", None)
    if not isinstance(ctx, dict):
        ctx = {}
        request.state.log_context = ctx
    ctx.update(fields)
    return ctx


def context_of(request: Any) -> Dict[str, Any]:
    ctx = getattr(request.state, "log_context", None)
    return dict(ctx) if isinstance(ctx, dict) else {}


def log_event(event: str, **fields: Any) -> None:
    _logger.info(json.dumps({"event": event, **fields}, ensure_ascii=False, default=str))


def finalize_request_log(
    request_id: str,
    method: str,
    path: str,
    status: int,
    latency_ms: int,
    client_ip: str | None,
    ctx: Dict[str, Any] | None = None,
) -> None:
    log_event(
        "request.completed",
        request_id=request_id,
        method=method,
        path=path,
        status=status,
        latency_ms=latency_ms,
        client_ip=client_ip or "",
        **(ctx or {}),
    )
