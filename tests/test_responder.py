# =============================================
# File: tests/test_responder.py
# Purpose: Rule table: totality, determinism, precedence, fallback, quick-reply phrases
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import pytest
from pydantic import ValidationError

from portfolio.services.knowledge import KNOWLEDGE
from portfolio.services.responder import RULES, matching_rules, phrase_for, respond


def _labels(reply):
    return [q.label for q in reply.quick_replies]


@pytest.mark.parametrize(
    "text, rule, labels",
    [
        ("what's your email?", "contact", ["Projects", "Skills"]),
        ("can I give you a call", "phone", ["Projects", "More Info"]),
        ("which technology do you use", "skills", ["Projects", "Contact"]),
        ("show me your portfolio", "projects", ["Contact", "Skills"]),
        ("any credentials?", "certifications", ["Projects", "Contact"]),
        ("tell me about yourself", "experience", ["Projects", "Certifications", "Contact"]),
        ("are you available for freelance", "hire", ["Projects", "Skills"]),
        ("hello", "greeting", ["Contact", "Skills", "Projects"]),
        ("banana", "fallback", ["Contact", "Certifications", "Projects"]),
    ],
)
def test_each_rule_and_its_quick_replies(text, rule, labels):
    reply = respond(text)
    assert reply.rule == rule
    assert _labels(reply) == labels


@pytest.mark.parametrize("text", ["x", "banana", "???", "HELLO THERE", "   spaced   ", "ünïcödé"])
def test_total_for_any_non_empty_input(text):
    reply = respond(text)
    assert reply.text.strip()
    assert reply.quick_replies is not None


def test_deterministic():
    a = respond("show me your project and contact email")
    b = respond("show me your project and contact email")
    assert a == b


def test_first_declared_rule_wins():
    text = "show me your project and contact email"
    assert respond(text).rule == "contact"
    # both rules are visible to diagnostics, in declaration order
    assert matching_rules(text) == ["contact", "projects"]


def test_case_insensitive():
    assert respond("SKILLS").rule == "skills"


def test_substring_not_whole_word():
    # "this" contains "hi"
    assert respond("this").rule == "greeting"


def test_fallback_is_last_and_unconditional():
    assert RULES[-1].name == "fallback"
    assert RULES[-1].keywords == ()
    assert matching_rules("banana") == ["fallback"]


def test_contact_card_projects_knowledge():
    text = respond("contact").text
    c = KNOWLEDGE.contact
    assert c.email in text and c.phone in text and c.location in text


def test_skills_reply_lists_every_skill_as_bullet():
    reply = respond("skill")
    bullets = [ln.text for ln in reply.lines if ln.bullet]
    assert bullets == list(KNOWLEDGE.skills)


def test_projects_reply_uses_name_and_description():
    reply = respond("projects")
    bullets = [ln.text for ln in reply.lines if ln.bullet]
    assert bullets == [f"{p.name}: {p.description}" for p in KNOWLEDGE.projects]


@pytest.mark.parametrize(
    "action, phrase",
    [
        ("contact", "contact information"),
        ("skills", "skills and experience"),
        ("projects", "show me your projects"),
        ("certifications", "certifications"),
        ("about", "tell me about your experience"),
        ("unknown-tag", "help"),
        ("", "help"),
    ],
)
def test_quick_reply_phrases(action, phrase):
    assert phrase_for(action) == phrase


@pytest.mark.parametrize(
    "action, rule",
    [
        ("contact", "contact"),
        ("skills", "skills"),
        ("projects", "projects"),
        ("certifications", "certifications"),
        ("about", "experience"),
        ("help", "fallback"),
    ],
)
def test_quick_reply_phrases_land_on_their_topic(action, rule):
    assert respond(phrase_for(action)).rule == rule


def test_knowledge_base_is_immutable():
    with pytest.raises(ValidationError):
        KNOWLEDGE.owner = "someone else"
    assert isinstance(KNOWLEDGE.skills, tuple)
    assert isinstance(KNOWLEDGE.projects, tuple)


def test_empty_experience_does_not_break_reply():
    kb = KNOWLEDGE.model_copy(update={"experience": ""})
    reply = respond("tell me about your background", kb)
    assert reply.rule == "experience"
    assert reply.lines[0].text == "Experience: ."
