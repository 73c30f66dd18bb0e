# =============================================
# File: tests/test_contact.py
# Purpose: Contact form validation, mailto building and optional forwarding
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from urllib.parse import unquote

import requests

import portfolio.services.contact as contact_mod
from portfolio.services.contact import build_mailto, is_valid_email

_OK = {"name": "Ada", "email": "ada@example.com", "message": "Hi!\nLet's talk."}


def test_email_pattern():
    assert is_valid_email("a@b.co")
    assert not is_valid_email("a@b")
    assert not is_valid_email("a b@c.de")
    assert not is_valid_email("")


def test_mailto_targets_owner_and_encodes_fields():
    link = build_mailto("Ada Lovelace", "ada@example.com", "Line one\nLine two")
    assert link.startswith("mailto:sibabalod@gmail.com?subject=")
    assert "subject=Portfolio%20message%20from%20Ada%20Lovelace&body=" in link
    body = unquote(link.split("&body=", 1)[1])
    assert body == "Name: Ada Lovelace\nEmail: ada@example.com\n\nMessage:\nLine one\nLine two"


def test_mailto_subject_cannot_carry_line_breaks():
    link = build_mailto("Eve\r\nBcc: x@y.z", "eve@example.com", "hello")
    subject = link.split("subject=", 1)[1].split("&body=", 1)[0]
    assert "%0A" not in subject and "%0D" not in subject


def test_missing_fields_rejected(client):
    r = client.post("/contact", json={"name": "Ada", "email": "ada@example.com", "message": "   "})
    assert r.status_code == 422
    assert "Please fill in all fields." in r.text


def test_invalid_email_rejected(client):
    r = client.post("/contact", json={**_OK, "email": "not-an-email"})
    assert r.status_code == 422
    assert "Please enter a valid email address." in r.text


def test_contact_without_forward(client, monkeypatch):
    monkeypatch.delenv("CONTACT_FORWARD_URL", raising=False)
    r = client.post("/contact", json=_OK)
    assert r.status_code == 200
    data = r.json()
    assert data["forwarded"] is False
    assert data["mailto"].startswith("mailto:sibabalod@gmail.com")
    assert data["detail"] == "Opening your email client to send the message."


class _Resp:
    def __init__(self, status):
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def test_contact_forwarded(client, monkeypatch):
    monkeypatch.setenv("CONTACT_FORWARD_URL", "https://forms.example.com/f/abc")
    sent = {}

    def _fake_post(url, json=None, headers=None, timeout=None):
        sent.update(url=url, json=json, timeout=timeout)
        return _Resp(200)

    monkeypatch.setattr(contact_mod.requests, "post", _fake_post)
    r = client.post("/contact", json=_OK)
    assert r.status_code == 200
    assert r.json()["forwarded"] is True
    assert sent["url"] == "https://forms.example.com/f/abc"
    assert sent["json"] == {"name": "Ada", "email": "ada@example.com", "message": "Hi!\nLet's talk."}
    assert sent["timeout"] == 10.0


def test_contact_forward_failure_is_502(client, monkeypatch):
    monkeypatch.setenv("CONTACT_FORWARD_URL", "https://forms.example.com/f/abc")
    monkeypatch.setattr(contact_mod.requests, "post", lambda *a, **k: _Resp(500))
    r = client.post("/contact", json=_OK)
    assert r.status_code == 502
    detail = r.json()["detail"]
    assert "email link" in detail["message"]
    assert detail["mailto"].startswith("mailto:")
    assert detail["mailto"] == build_mailto(_OK["name"], _OK["email"], _OK["message"])

    m = client.get("/metrics").json()
    assert m["counters"]["contact_forward_failures_total"] == 1
