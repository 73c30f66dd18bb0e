# =============================================
# File: portfolio/services/chat.py
# Purpose: Chat widget state machine + append-only transcript
# =============================================
from __future__ import annotations

import asyncio
import os
import time
import uuid
from enum import Enum
from typing import Callable, List, Literal, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from .knowledge import KNOWLEDGE, KnowledgeBase
from .responder import QuickReply, Reply, phrase_for, respond


def typing_delay_seconds() -> float:
    """Read at call time so env overrides (tests) take effect."""
    try:
        ms = int(os.getenv("CHAT_TYPING_DELAY_MS", "900"))
    except ValueError:
        ms = 900
    return max(0, ms) / 1000.0


class WidgetState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class Message(BaseModel):
    """
    One transcript entry.
    - text: user text verbatim, or the plain-text rendition of a bot reply
    - reply: structured bot reply (None for user messages)
    """
    model_config = ConfigDict(frozen=True)

    sender: Literal["user", "bot"]
    text: str
    quick_replies: Tuple[QuickReply, ...] = ()
    reply: Optional[Reply] = None
    ts: float = Field(default_factory=time.time)


class ChatWidget:
    """
    One chat widget for one page view.

    closed --toggle--> open --toggle/close/escape--> closed

    The attention badge shows until the widget is opened for the first
    time and never comes back. `submit` appends the user message, waits
    the typing delay, then appends exactly one bot message; blank input
    does nothing.
    """

    def __init__(
        self,
        session_id: str | None = None,
        kb: KnowledgeBase = KNOWLEDGE,
        responder: Callable[[str, KnowledgeBase], Reply] = respond,
        typing_delay_s: float | None = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.state = WidgetState.CLOSED
        self.has_been_opened = False
        self._kb = kb
        self._respond = responder
        self._typing_delay_s = typing_delay_s
        self._transcript: List[Message] = []

    # ----- state machine -----

    @property
    def is_open(self) -> bool:
        return self.state is WidgetState.OPEN

    @property
    def badge_visible(self) -> bool:
        return not self.has_been_opened

    @property
    def transcript(self) -> Tuple[Message, ...]:
        return tuple(self._transcript)

    def open(self) -> None:
        if self.state is WidgetState.OPEN:
            return
        self.state = WidgetState.OPEN
        if not self.has_been_opened:
            self.has_been_opened = True
            logger.debug("chat {}: first open, badge cleared", self.session_id)

    def close(self) -> None:
        self.state = WidgetState.CLOSED

    def escape(self) -> None:
        # Escape only closes; it never opens
        self.close()

    def toggle(self) -> WidgetState:
        if self.is_open:
            self.close()
        else:
            self.open()
        return self.state

    # ----- conversation -----

    def _delay(self) -> float:
        if self._typing_delay_s is not None:
            return self._typing_delay_s
        return typing_delay_seconds()

    async def submit(self, raw_text: str) -> Optional[Message]:
        """Returns the bot message, or None when the input was blank."""
        text = raw_text or ""
        if not text.strip():
            return None

        self._transcript.append(Message(sender="user", text=text))

        # simulated typing; not cancellable from the widget
        delay = self._delay()
        if delay > 0:
            await asyncio.sleep(delay)

        reply = self._respond(text.strip().lower(), self._kb)
        bot = Message(
            sender="bot",
            text=reply.text,
            quick_replies=reply.quick_replies,
            reply=reply,
        )
        self._transcript.append(bot)
        logger.debug("chat {}: rule={} transcript={}", self.session_id, reply.rule, len(self._transcript))
        return bot

    async def quick_reply(self, action: str) -> Optional[Message]:
        """Re-inject the canned phrase for `action` as if the user typed it."""
        self.open()
        return await self.submit(phrase_for(action))
