# =============================================
# File: portfolio/services/contact.py
# Purpose: Contact form -> prefilled mailto link (+ optional forward to a form endpoint)
# =============================================
from __future__ import annotations

import os
import re
from typing import Any, Dict, Tuple
from urllib.parse import quote

import requests
from loguru import logger

from portfolio.utils.sanitize import single_line

from .knowledge import KNOWLEDGE

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# encodeURIComponent leaves these unescaped; mail clients expect the same
_URI_SAFE = "-_.!~*'()"


class ForwardError(RuntimeError):
    """The configured form endpoint did not accept the message."""


def _get_forward_config() -> Tuple[str, float]:
    url = os.getenv("CONTACT_FORWARD_URL", "").strip()
    timeout = float(os.getenv("CONTACT_FORWARD_TIMEOUT", "10"))
    return url, timeout


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match((email or "").strip()))


def build_mailto(name: str, email: str, message: str, to: str | None = None) -> str:
    """
    mailto:<owner>?subject=...&body=...

    The subject is flattened to one line so a crafted name cannot add
    headers. The body keeps the message's own line breaks.
    """
    to = to or KNOWLEDGE.contact.email
    subject = f"Portfolio message from {single_line(name, max_chars=80)}"
    body = "\n".join([
        f"Name: {single_line(name)}",
        f"Email: {single_line(email)}",
        "",
        "Message:",
        message.strip(),
    ])
    return f"mailto:{to}?subject={quote(subject, safe=_URI_SAFE)}&body={quote(body, safe=_URI_SAFE)}"


def forward_message(name: str, email: str, message: str) -> bool:
    """
    POST the message to CONTACT_FORWARD_URL when configured.
    Returns False when forwarding is disabled; raises ForwardError on failure.
    """
    url, timeout = _get_forward_config()
    if not url:
        return False

    payload: Dict[str, Any] = {"name": name, "email": email, "message": message}
    try:
        r = requests.post(url, json=payload, headers={"Accept": "application/json"}, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        logger.warning("contact forward to {} failed: {}", url, e)
        raise ForwardError(str(e)) from e

    logger.info("contact message forwarded ({} chars)", len(message))
    return True
