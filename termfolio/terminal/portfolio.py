"""Portfolio content models, loaded from a JSON data file."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_PORTFOLIO_PATH = Path(__file__).resolve().parent.parent / "data" / "portfolio.json"


class About(BaseModel):
    name: str
    role: str
    location: str
    phone: str
    email: str
    bio: str


class Skills(BaseModel):
    languages: list[str] = []
    libraries: list[str] = []
    datatools: list[str] = []
    databases: list[str] = []
    frameworks: list[str] = []
    apis: list[str] = []
    concepts: list[str] = []
    tools: list[str] = []


class Project(BaseModel):
    id: int
    name: str
    description: str
    tech: list[str] = []
    status: str = ""
    details: str = ""


class Contact(BaseModel):
    email: str
    phone: str
    github: str
    linkedin: str
    instagram: str
    location: str


class Experience(BaseModel):
    company: str
    position: str
    duration: str
    description: str


class Education(BaseModel):
    institution: str
    degree: str
    year: str
    status: str | None = None


class PortfolioProfile(BaseModel):
    about: About
    skills: Skills
    projects: list[Project] = []
    contact: Contact
    experience: list[Experience] = []
    education: list[Education] = []
    certifications: list[str] = []


@lru_cache
def load_profile(path: str = "") -> PortfolioProfile:
    """Read and validate the portfolio content.

    An empty *path* selects the data file shipped with the package.
    """
    source = Path(path).expanduser() if path else DEFAULT_PORTFOLIO_PATH
    profile = PortfolioProfile.model_validate_json(source.read_text(encoding="utf-8"))
    logger.debug("portfolio loaded", extra={"path": str(source), "projects": len(profile.projects)})
    return profile
