# =============================================
# File: portfolio/services/knowledge.py
# Purpose: Compiled-in, read-only portfolio knowledge base
# =============================================
from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Contact(_Frozen):
    email: str
    phone: str
    location: str
    github: str = ""
    linkedin: str = ""


class Project(_Frozen):
    slug: str
    name: str
    description: str
    link: str = ""
    tech: Tuple[str, ...] = ()


class KnowledgeBase(_Frozen):
    """
    Everything the assistant and the page know about the portfolio owner.
    Frozen models + tuples: nothing here can be mutated after import.
    """
    owner: str
    contact: Contact
    skills: Tuple[str, ...]
    projects: Tuple[Project, ...]
    certifications: Tuple[str, ...]
    experience: str
    education: str
    taglines: Tuple[str, ...] = ()

    def project(self, slug: str) -> Project | None:
        key = (slug or "").strip().lower()
        for p in self.projects:
            if p.slug == key:
                return p
        return None


KNOWLEDGE = KnowledgeBase(
    owner="Sibabalo",
    contact=Contact(
        email="sibabalod@gmail.com",
        phone="+27 71 234 5678",
        location="Cape Town, South Africa",
        github="https://github.com/sibabalod",
        linkedin="https://www.linkedin.com/in/sibabalod",
    ),
    skills=(
        "Python",
        "JavaScript (ES6+)",
        "HTML5 & CSS3",
        "React",
        "Node.js & Express",
        "SQL & PostgreSQL",
        "Git & GitHub",
        "Prompt Engineering",
        "Data Analysis (pandas)",
    ),
    projects=(
        Project(
            slug="ai-study-buddy",
            name="AI Study Buddy",
            description="A prompt-driven tutor that turns lecture notes into quizzes and flashcards.",
            link="https://github.com/sibabalod/ai-study-buddy",
            tech=("Python", "FastAPI", "OpenAI API"),
        ),
        Project(
            slug="taskflow",
            name="TaskFlow",
            description="A fullstack task board with drag-and-drop columns and team sharing.",
            link="https://github.com/sibabalod/taskflow",
            tech=("React", "Node.js", "PostgreSQL"),
        ),
        Project(
            slug="sales-insights",
            name="Sales Insights Dashboard",
            description="An interactive dashboard that cleans raw sales exports and charts monthly trends.",
            link="https://github.com/sibabalod/sales-insights",
            tech=("Python", "pandas", "Plotly"),
        ),
        Project(
            slug="portfolio-site",
            name="Portfolio Website",
            description="This responsive portfolio with a dark mode toggle and a scripted chat assistant.",
            link="https://github.com/sibabalod/portfolio",
            tech=("HTML", "CSS", "JavaScript"),
        ),
    ),
    certifications=(
        "Responsive Web Design (freeCodeCamp)",
        "JavaScript Algorithms and Data Structures (freeCodeCamp)",
        "Prompt Engineering for Developers (DeepLearning.AI)",
        "Google Data Analytics Professional Certificate (Coursera)",
    ),
    experience=(
        "2+ years building fullstack web applications and AI-assisted tools, "
        "from freelance client sites to data dashboards"
    ),
    education="Diploma in Information Technology (Software Development)",
    taglines=(
        "Fullstack Developer",
        "AI & Prompt Engineer",
        "Data Enthusiast",
        "Problem Solver",
    ),
)
