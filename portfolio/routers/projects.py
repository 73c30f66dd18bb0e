# portfolio/routers/projects.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from portfolio.services.knowledge import KNOWLEDGE, Project
from portfolio.utils.sanitize import safe_url

router = APIRouter(prefix="/projects", tags=["projects"])


class ProjectOut(BaseModel):
    """Payload for the project-details overlay."""
    slug: str
    title: str
    description: str
    link: str
    tech: List[str]


def _out(p: Project) -> ProjectOut:
    return ProjectOut(
        slug=p.slug,
        title=p.name.strip() or "Project",
        description=p.description.strip() or "No description provided.",
        link=safe_url(p.link),
        tech=list(p.tech),
    )


@router.get("", response_model=List[ProjectOut])
def list_projects() -> List[ProjectOut]:
    return [_out(p) for p in KNOWLEDGE.projects]


@router.get("/{slug}", response_model=ProjectOut)
def get_project(slug: str) -> ProjectOut:
    p = KNOWLEDGE.project(slug)
    if p is None:
        raise HTTPException(status_code=404, detail="Unknown project")
    return _out(p)
