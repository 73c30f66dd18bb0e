# portfolio/routers/chat.py
from __future__ import annotations

import time
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel, Field, field_validator

from portfolio.services.chat import ChatWidget, Message
from portfolio.services.responder import matching_rules, respond
from portfolio.services.sessions import SESSIONS
from portfolio.utils import slog
from portfolio.utils.metrics import record_rate_limit_hit, record_reply, record_session_created
from portfolio.utils.ratelimit import RateLimited, check_rate_limit
from portfolio.utils.render import render_html, reply_payload

router = APIRouter(prefix="/chat", tags=["chat"])


# --------- Schemas ---------

class MessageRequest(BaseModel):
    """
    A line typed into the chat input.
    Blank text is rejected here; the widget itself treats it as a no-op.
    """
    text: str = Field(..., min_length=1, max_length=500)

    @field_validator("text")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not (v or "").strip():
            raise ValueError("text must not be empty")
        return v


class QuickReplyRequest(BaseModel):
    action: str = Field(..., min_length=1, max_length=32)


class QuickReplyOut(BaseModel):
    label: str
    action: str


class ReplyResponse(BaseModel):
    rule: str
    text: str
    html: str
    quick_replies: List[QuickReplyOut]
    matched_rules: List[str]


class TranscriptEntry(BaseModel):
    sender: str
    text: str
    html: Optional[str] = None
    quick_replies: List[QuickReplyOut] = []


class WidgetResponse(BaseModel):
    session_id: str
    state: str
    has_been_opened: bool
    badge_visible: bool
    transcript: List[TranscriptEntry]


# --------- Helpers ---------

def _entry(m: Message) -> TranscriptEntry:
    if m.reply is None:
        return TranscriptEntry(sender=m.sender, text=m.text)
    return TranscriptEntry(
        sender=m.sender,
        text=m.text,
        html=str(render_html(m.reply)),
        quick_replies=[QuickReplyOut(**q.model_dump()) for q in m.quick_replies],
    )


def _view(widget: ChatWidget) -> WidgetResponse:
    return WidgetResponse(
        session_id=widget.session_id,
        state=widget.state.value,
        has_been_opened=widget.has_been_opened,
        badge_visible=widget.badge_visible,
        transcript=[_entry(m) for m in widget.transcript],
    )


def _widget_or_404(session_id: str) -> ChatWidget:
    widget = SESSIONS.get(session_id)
    if widget is None:
        raise HTTPException(status_code=404, detail="Unknown chat session")
    return widget


def _limit(request: Request, key: str) -> None:
    try:
        check_rate_limit(key)
    except RateLimited as e:
        record_rate_limit_hit()
        slog.bind_context(request, rate_limited=True)
        raise HTTPException(
            status_code=429,
            detail="Too Many Requests",
            headers={"Retry-After": str(e.retry_after)},
        )


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "anon"


# --------- Stateless ---------

@router.post("/respond", response_model=ReplyResponse)
def post_respond(req: MessageRequest, request: Request) -> ReplyResponse:
    """Answer one message without a session (no transcript, no delay)."""
    slog.bind_context(request, qhash=slog.qhash(req.text))
    _limit(request, _client_key(request))

    reply = respond(req.text.strip().lower())
    hits = matching_rules(req.text)
    record_reply(reply.rule)
    slog.bind_context(request, rule=reply.rule, matched_rules=hits)
    return ReplyResponse(matched_rules=hits, **reply_payload(reply))


# --------- Session lifecycle ---------

@router.post("/sessions", response_model=WidgetResponse, status_code=201)
def create_session(request: Request) -> WidgetResponse:
    widget = SESSIONS.create()
    record_session_created()
    slog.bind_context(request, session_id=widget.session_id)
    return _view(widget)


@router.get("/sessions/{session_id}", response_model=WidgetResponse)
def get_session(session_id: str) -> WidgetResponse:
    return _view(_widget_or_404(session_id))


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(session_id: str) -> Response:
    if not SESSIONS.drop(session_id):
        raise HTTPException(status_code=404, detail="Unknown chat session")
    return Response(status_code=204)


# --------- Widget state machine ---------

@router.post("/sessions/{session_id}/toggle", response_model=WidgetResponse)
def toggle(session_id: str) -> WidgetResponse:
    widget = _widget_or_404(session_id)
    widget.toggle()
    return _view(widget)


@router.post("/sessions/{session_id}/open", response_model=WidgetResponse)
def open_widget(session_id: str) -> WidgetResponse:
    widget = _widget_or_404(session_id)
    widget.open()
    return _view(widget)


@router.post("/sessions/{session_id}/close", response_model=WidgetResponse)
def close_widget(session_id: str) -> WidgetResponse:
    widget = _widget_or_404(session_id)
    widget.close()
    return _view(widget)


@router.post("/sessions/{session_id}/escape", response_model=WidgetResponse)
def escape_widget(session_id: str) -> WidgetResponse:
    widget = _widget_or_404(session_id)
    widget.escape()
    return _view(widget)


# --------- Conversation ---------

@router.post("/sessions/{session_id}/messages", response_model=WidgetResponse)
async def post_message(session_id: str, req: MessageRequest, request: Request) -> WidgetResponse:
    """
    Append the user's message, wait the typing delay, append the bot reply.
    Returns the full widget view.
    """
    widget = _widget_or_404(session_id)
    slog.bind_context(request, session_id=session_id, qhash=slog.qhash(req.text))
    _limit(request, session_id)

    t0 = time.perf_counter()
    bot = await widget.submit(req.text)
    if bot is not None and bot.reply is not None:
        record_reply(bot.reply.rule)
        ctx = slog.bind_context(
            request,
            rule=bot.reply.rule,
            matched_rules=matching_rules(req.text),
            reply_ms=int((time.perf_counter() - t0) * 1000),
        )
        slog.log_event("chat.reply", **ctx)
    return _view(widget)


@router.post("/sessions/{session_id}/quick-replies", response_model=WidgetResponse)
async def post_quick_reply(session_id: str, req: QuickReplyRequest, request: Request) -> WidgetResponse:
    widget = _widget_or_404(session_id)
    slog.bind_context(request, session_id=session_id, action=req.action)
    _limit(request, session_id)

    bot = await widget.quick_reply(req.action)
    if bot is not None and bot.reply is not None:
        record_reply(bot.reply.rule)
        ctx = slog.bind_context(request, rule=bot.reply.rule)
        slog.log_event("chat.quick_reply", **ctx)
    return _view(widget)
