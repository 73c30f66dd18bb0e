# =============================================
# File: scripts/streamlit_app.py
# Purpose: Streamlit front end for the portfolio assistant
# =============================================

# streamlit_app.py
# -----------------------------------------------------------
# Portfolio: chat widget, projects and contact form (Streamlit frontend)
#
# Talks to the FastAPI backend:
#   POST /chat/sessions                         -> new widget (closed, badge on)
#   POST /chat/sessions/{id}/toggle             -> open / close
#   POST /chat/sessions/{id}/messages  {text}   -> user msg + bot reply
#   POST /chat/sessions/{id}/quick-replies {action}
#   GET  /projects, GET /projects/{slug}
#   POST /contact {name, email, message}
#
# How to run:
#   streamlit run scripts/streamlit_app.py
# -----------------------------------------------------------

from __future__ import annotations

import html
import os
from typing import Any, Dict, List, Optional

import requests
import streamlit as st

# ---------- Page setup ----------

st.set_page_config(
    page_title="Portfolio — Assistant",
    page_icon="💬",
    layout="wide",
)

# ----------- Enter input -----------
def _mark_enter_submit():
    # toggled by the text_input's on_change (Enter or input commit)
    st.session_state["_send_from_enter"] = True

# ---------- Backend helpers ----------

def _api(path: str) -> str:
    return f"{st.session_state.api_base.rstrip('/')}{path}"

def _call(method: str, path: str, **kwargs) -> Optional[Dict[str, Any]]:
    """
    Thin wrapper around requests; shows the error in the page and
    returns None instead of raising.
    """
    try:
        r = requests.request(method, _api(path), timeout=30, **kwargs)
    except requests.RequestException as e:
        st.error(f"Could not reach backend at {st.session_state.api_base}: {e}")
        return None
    if r.status_code == 429:
        st.warning(f"Slow down a little, retry in {r.headers.get('Retry-After', 'a few')} seconds.")
        return None
    is_json = r.headers.get("content-type", "").startswith("application/json")
    if r.status_code == 502 and is_json and isinstance(r.json().get("detail"), dict):
        detail = r.json()["detail"]
        st.error(detail["message"])
        st.markdown(f"[Open email client]({detail['mailto']})")
        return None
    if not r.ok:
        st.error(f"Backend returned {r.status_code}: {r.text}")
        return None
    return r.json() if r.content else {}

def _ensure_session() -> Optional[Dict[str, Any]]:
    """Create the widget on first run, or re-create it if the backend forgot it (TTL)."""
    sid = st.session_state.get("chat_sid")
    if sid:
        try:
            r = requests.get(_api(f"/chat/sessions/{sid}"), timeout=30)
            if r.ok:
                return r.json()
        except requests.RequestException:
            pass
    view = _call("POST", "/chat/sessions")
    if view:
        st.session_state.chat_sid = view["session_id"]
    return view

def _send(text: str) -> Optional[Dict[str, Any]]:
    if not text.strip():
        return None  # blank input is a no-op
    return _call("POST", f"/chat/sessions/{st.session_state.chat_sid}/messages", json={"text": text})

def _quick(action: str) -> Optional[Dict[str, Any]]:
    return _call("POST", f"/chat/sessions/{st.session_state.chat_sid}/quick-replies", json={"action": action})

def _toggle() -> Optional[Dict[str, Any]]:
    return _call("POST", f"/chat/sessions/{st.session_state.chat_sid}/toggle")

# ---------- Session state ----------

if "api_base" not in st.session_state:
    st.session_state.api_base = os.getenv("PORTFOLIO_API_BASE", "http://localhost:8000")

if "dark" not in st.session_state:
    st.session_state.dark = False

# ---------- Styles ----------

_BG, _FG = ("#0f172a", "#e5e7eb") if st.session_state.dark else ("#ffffff", "#111827")
st.markdown(
    f"""
    <style>
      .stApp {{ background: {_BG}; color: {_FG}; }}
      .muted {{ color: #6b7280; font-size: 0.95rem; }}
      .bubble {{ padding: 0.55rem 0.9rem; border-radius: 14px; margin: 0.3rem 0; max-width: 80%; }}
      .bubble.user {{ background: #2563eb; color: white; margin-left: auto; }}
      .bubble.bot {{ background: #f3f4f6; color: #111827; }}
      .badge {{ display: inline-block; width: 0.6rem; height: 0.6rem; border-radius: 9999px; background: #ef4444; }}
    </style>
    """,
    unsafe_allow_html=True,
)

# ---------- Sidebar (settings) ----------

st.sidebar.header("Settings")
api_base = st.sidebar.text_input("API base URL", st.session_state.api_base)
st.session_state.api_base = api_base.strip() or st.session_state.api_base
if st.sidebar.button("Dark mode" if not st.session_state.dark else "Light mode"):
    st.session_state.dark = not st.session_state.dark
    st.rerun()

view = _ensure_session()
if view:
    st.sidebar.caption(f"Chat session: `{view['session_id'][:8]}`")

left, right = st.columns([0.6, 0.4])

# ---------- Projects ----------

with left:
    st.title("Projects")
    projects: List[Dict[str, Any]] = _call("GET", "/projects") or []
    for p in projects:
        with st.expander(p["title"]):
            st.write(p["description"])
            if p.get("tech"):
                st.caption(", ".join(p["tech"]))
            if p.get("link"):
                st.markdown(f"[Source]({p['link']})")

    # ---------- Contact form ----------
    st.subheader("Contact")
    with st.form("contact", clear_on_submit=True):
        name = st.text_input("Name")
        email = st.text_input("Email")
        message = st.text_area("Message")
        sent = st.form_submit_button("Send")
    if sent:
        res = _call("POST", "/contact", json={"name": name, "email": email, "message": message})
        if res:
            st.success(res["detail"])
            st.markdown(f"[Open email client]({res['mailto']})")

# ---------- Chat widget ----------

with right:
    if view:
        badge = ' <span class="badge"></span>' if view["badge_visible"] else ""
        st.markdown(f"### Chat{badge}", unsafe_allow_html=True)
        label = "Close chat" if view["state"] == "open" else "Open chat"
        if st.button(label):
            view = _toggle() or view
            st.rerun()

    if view and view["state"] == "open":
        st.text_input(
            "Message",
            key="chat_input",
            placeholder="Ask about skills, projects or contact…",
            on_change=_mark_enter_submit,
        )
        send_clicked = st.button("Send", type="primary")
        if send_clicked or st.session_state.pop("_send_from_enter", False):
            with st.spinner("typing…"):
                view = _send((st.session_state.get("chat_input") or "")) or view

        # transcript, newest at the bottom
        for m in view["transcript"]:
            if m["sender"] == "user":
                st.markdown(f'<div class="bubble user">{html.escape(m["text"])}</div>', unsafe_allow_html=True)
            else:
                # html is produced (and escaped) by the backend renderer
                st.markdown(f'<div class="bubble bot">{m["html"]}</div>', unsafe_allow_html=True)

        # quick replies of the last bot message only
        last_bot = next((m for m in reversed(view["transcript"]) if m["sender"] == "bot"), None)
        if last_bot and last_bot["quick_replies"]:
            cols = st.columns(len(last_bot["quick_replies"]))
            for col, qr in zip(cols, last_bot["quick_replies"]):
                with col:
                    if st.button(qr["label"], key=f"qr-{len(view['transcript'])}-{qr['action']}"):
                        with st.spinner("typing…"):
                            _quick(qr["action"])
                        st.rerun()

# ---------- Footer ----------

st.markdown(
    f'<div class="muted">Backend running? Visit <a href="{st.session_state.api_base.rstrip("/")}/docs">/docs</a> for API docs.</div>',
    unsafe_allow_html=True,
)
