# =============================================
# File: portfolio/services/responder.py
# Purpose: Scripted chat responder: ordered keyword rules -> structured canned replies
# =============================================
"""
Maps free text to exactly one canned reply.

Rules are evaluated top to bottom and the first rule whose keywords occur
(case-insensitive substring) in the message wins. Declaration order is the
precedence: "show me your project and contact email" is a *contact* reply
even though it also mentions projects. The last rule has no keywords and
always matches, so `respond` is total.

Replies are structured (lines of spans, some flagged as bullets); turning
them into markup is the job of `portfolio.utils.render`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Tuple, Union

from pydantic import BaseModel, ConfigDict

from .knowledge import KNOWLEDGE, KnowledgeBase


# --------- Reply schema ---------

class Span(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    bold: bool = False


class Line(BaseModel):
    model_config = ConfigDict(frozen=True)

    spans: Tuple[Span, ...]
    bullet: bool = False

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.spans)


class QuickReply(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    action: str


class Reply(BaseModel):
    """
    One bot answer.
    - rule: name of the rule that produced it ("fallback" for the menu).
    - lines: ordered lines; bullet lines are list items.
    - quick_replies: follow-up buttons (label + opaque action tag).
    """
    model_config = ConfigDict(frozen=True)

    rule: str
    lines: Tuple[Line, ...]
    quick_replies: Tuple[QuickReply, ...] = ()

    @property
    def text(self) -> str:
        """Plain-text rendition (bullets prefixed with '• ')."""
        out = []
        for ln in self.lines:
            out.append(("• " + ln.text) if ln.bullet else ln.text)
        return "\n".join(out)


# --------- Small builders ---------

Part = Union[str, Span]


def _b(text: str) -> Span:
    return Span(text=text, bold=True)


def _line(*parts: Part, bullet: bool = False) -> Line:
    spans = tuple(p if isinstance(p, Span) else Span(text=p) for p in parts if p)
    return Line(spans=spans, bullet=bullet)


def _item(*parts: Part) -> Line:
    return _line(*parts, bullet=True)


# Quick-reply buttons (label -> action tag)
_CONTACT = QuickReply(label="Contact", action="contact")
_SKILLS = QuickReply(label="Skills", action="skills")
_PROJECTS = QuickReply(label="Projects", action="projects")
_CERTS = QuickReply(label="Certifications", action="certifications")
_MORE_INFO = QuickReply(label="More Info", action="about")

# Canned phrase re-injected when a quick reply is clicked
QUICK_REPLY_PHRASES = {
    "contact": "contact information",
    "skills": "skills and experience",
    "projects": "show me your projects",
    "certifications": "certifications",
    "about": "tell me about your experience",
    "help": "help",
}


def phrase_for(action: str) -> str:
    """Canned user phrase for a quick-reply tag; unknown tags fall back to 'help'."""
    key = (action or "").strip().lower()
    return QUICK_REPLY_PHRASES.get(key, QUICK_REPLY_PHRASES["help"])


# --------- Reply builders (pure projections of the knowledge base) ---------

Built = Tuple[List[Line], Tuple[QuickReply, ...]]


def _contact(kb: KnowledgeBase) -> Built:
    c = kb.contact
    lines = [
        _line(f"Here's how you can reach {kb.owner}:"),
        _line(_b("Email: "), c.email),
        _line(_b("Phone: "), c.phone),
        _line(_b("Location: "), c.location),
    ]
    return lines, (_PROJECTS, _SKILLS)


def _phone(kb: KnowledgeBase) -> Built:
    c = kb.contact
    lines = [
        _line(f"You can call {kb.owner} on ", _b(c.phone), "."),
        _line("Prefer writing? Email ", _b(c.email), "."),
    ]
    return lines, (_PROJECTS, _MORE_INFO)


def _skills(kb: KnowledgeBase) -> Built:
    lines = [_line(_b("Technical skills:"))]
    lines += [_item(s) for s in kb.skills]
    lines.append(_line(f"{kb.owner} brings {kb.experience}."))
    return lines, (_PROJECTS, _CONTACT)


def _projects(kb: KnowledgeBase) -> Built:
    lines = [_line(_b("Featured projects:"))]
    lines += [_item(_b(p.name), ": ", p.description) for p in kb.projects]
    return lines, (_CONTACT, _SKILLS)


def _certifications(kb: KnowledgeBase) -> Built:
    lines = [_line(_b("Certifications:"))]
    lines += [_item(c) for c in kb.certifications]
    return lines, (_PROJECTS, _CONTACT)


def _experience(kb: KnowledgeBase) -> Built:
    lines = [
        _line(_b("Experience: "), kb.experience[:1].upper() + kb.experience[1:], "."),
        _line(_b("Education: "), kb.education, "."),
    ]
    return lines, (_PROJECTS, _CERTS, _CONTACT)


def _hire(kb: KnowledgeBase) -> Built:
    c = kb.contact
    lines = [
        _line(f"{kb.owner} is ", _b("available"), " for freelance projects and full-time roles."),
        _line(_b("Email: "), c.email),
        _line(_b("Phone: "), c.phone),
    ]
    return lines, (_PROJECTS, _SKILLS)


def _greeting(kb: KnowledgeBase) -> Built:
    lines = [
        _line(f"Hi there! I'm {kb.owner}'s portfolio assistant."),
        _line("Ask me about skills, projects, certifications or how to get in touch."),
    ]
    return lines, (_CONTACT, _SKILLS, _PROJECTS)


def _menu(kb: KnowledgeBase) -> Built:
    lines = [
        _line("I can help you with:"),
        _item("Contact information"),
        _item("Skills and technologies"),
        _item("Projects and portfolio"),
        _item("Certifications"),
        _item("Experience and education"),
        _item("Hiring availability"),
        _line("What would you like to know?"),
    ]
    return lines, (_CONTACT, _CERTS, _PROJECTS)


# --------- Rule table ---------

@dataclass(frozen=True)
class Rule:
    name: str
    keywords: Tuple[str, ...]
    build: Callable[[KnowledgeBase], Built]

    def matches(self, lowered: str) -> bool:
        # no keywords == unconditional
        if not self.keywords:
            return True
        return any(k in lowered for k in self.keywords)


RULES: Tuple[Rule, ...] = (
    Rule("contact", ("contact", "email", "reach"), _contact),
    Rule("phone", ("phone", "call", "number"), _phone),
    Rule("skills", ("skill", "technology", "tech stack"), _skills),
    Rule("projects", ("project", "work", "portfolio"), _projects),
    Rule("certifications", ("certificate", "certification", "credential"), _certifications),
    Rule("experience", ("experience", "background", "about"), _experience),
    Rule("hire", ("hire", "available", "freelance"), _hire),
    Rule("greeting", ("hello", "hi", "hey"), _greeting),
    Rule("fallback", (), _menu),
)


def respond(text: str, kb: KnowledgeBase = KNOWLEDGE) -> Reply:
    """First matching rule wins. Never raises; the fallback always matches."""
    lowered = (text or "").lower()
    for rule in RULES:
        if rule.matches(lowered):
            lines, quick = rule.build(kb)
            return Reply(rule=rule.name, lines=tuple(lines), quick_replies=quick)
    # unreachable while the last rule is unconditional
    raise AssertionError("rule table has no fallback")


def matching_rules(text: str) -> List[str]:
    """
    Every keyword rule that matches, in precedence order.
    Falls back to ["fallback"] when none do. Diagnostic only: `respond`
    still uses the first entry.
    """
    lowered = (text or "").lower()
    hits = [r.name for r in RULES if r.keywords and r.matches(lowered)]
    return hits or ["fallback"]
