# portfolio/utils/sanitize.py
from __future__ import annotations
import re

_ALLOWED_SCHEMES = ("http://", "https://", "mailto:")

_WHITESPACE_RE = re.compile(r"\s+")
_HEADER_BREAK_RE = re.compile(r"[\r\n]+")

def safe_url(url: str) -> str:
    """Keep only http(s)/mailto links; anything else (javascript:, data:) becomes ''."""
    if not url:
        return ""
    u = url.strip()
    if any(u.lower().startswith(s) for s in _ALLOWED_SCHEMES):
        return u
    return ""

def collapse_ws(text: str) -> str:
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip()

def single_line(text: str, max_chars: int = 0) -> str:
    """
    Flatten to one line (no CR/LF survives) and optionally truncate.
    Used for values that end up in mail headers such as the subject.
    """
    t = collapse_ws(_HEADER_BREAK_RE.sub(" ", text or ""))
    if max_chars and len(t) > max_chars:
        t = t[:max_chars].rstrip() + "…"
    return t
