# =============================================
# File: portfolio/routers/preferences.py
# Purpose: Theme preference (dark/light) kept client-side in the `site-theme` cookie
# =============================================
from __future__ import annotations

import os
from typing import Literal

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel

router = APIRouter(prefix="/preferences", tags=["preferences"])

THEME_COOKIE = "site-theme"
Theme = Literal["dark", "light"]


class ThemeRequest(BaseModel):
    theme: Theme


class ThemeResponse(BaseModel):
    theme: Theme
    dark: bool


def current_theme(request: Request) -> Theme:
    """Only an explicit 'dark' switches the theme; anything else is light."""
    return "dark" if request.cookies.get(THEME_COOKIE) == "dark" else "light"


def _store(response: Response, theme: Theme) -> ThemeResponse:
    max_age = int(os.getenv("THEME_COOKIE_MAX_AGE", str(365 * 24 * 3600)))
    response.set_cookie(THEME_COOKIE, theme, max_age=max_age, samesite="lax")
    return ThemeResponse(theme=theme, dark=theme == "dark")


@router.get("/theme", response_model=ThemeResponse)
def get_theme(request: Request) -> ThemeResponse:
    theme = current_theme(request)
    return ThemeResponse(theme=theme, dark=theme == "dark")


@router.post("/theme/toggle", response_model=ThemeResponse)
def toggle_theme(request: Request, response: Response) -> ThemeResponse:
    theme: Theme = "light" if current_theme(request) == "dark" else "dark"
    return _store(response, theme)


@router.put("/theme", response_model=ThemeResponse)
def put_theme(req: ThemeRequest, response: Response) -> ThemeResponse:
    return _store(response, req.theme)
