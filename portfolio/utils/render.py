# =============================================
# File: portfolio/utils/render.py
# Purpose: Turn structured replies into HTML / Markdown for the transcript view
# =============================================
from __future__ import annotations

from typing import Any, Dict, List

from markupsafe import Markup, escape

from portfolio.services.responder import Line, Reply

BULLET = "• "


def _span_html(text: str, bold: bool) -> str:
    t = str(escape(text))
    return f"<strong>{t}</strong>" if bold else t


def line_html(line: Line) -> str:
    body = "".join(_span_html(s.text, s.bold) for s in line.spans)
    return (BULLET + body) if line.bullet else body


def render_html(reply: Reply) -> Markup:
    """
    Only <strong> and <br> are emitted; every piece of text is escaped,
    so knowledge-base content can never inject markup.
    """
    return Markup("<br>".join(line_html(ln) for ln in reply.lines))


def _md_escape(text: str) -> str:
    # enough for bold markers and list syntax
    return text.replace("\\", "\\\\").replace("*", "\\*").replace("_", "\\_")


def render_markdown(reply: Reply) -> str:
    out: List[str] = []
    prev_bullet = False
    for ln in reply.lines:
        body = "".join(
            f"**{_md_escape(s.text.strip())}**{' ' if s.text.endswith(' ') else ''}" if s.bold else _md_escape(s.text)
            for s in ln.spans
        )
        if ln.bullet:
            if not prev_bullet and out:
                out.append("")
            out.append(f"- {body}")
        else:
            if prev_bullet:
                out.append("")
            out.append(body + "  ")
        prev_bullet = ln.bullet
    return "\n".join(out).rstrip()


def reply_payload(reply: Reply) -> Dict[str, Any]:
    """JSON-friendly view used by the HTTP layer."""
    return {
        "rule": reply.rule,
        "text": reply.text,
        "html": str(render_html(reply)),
        "quick_replies": [q.model_dump() for q in reply.quick_replies],
    }
