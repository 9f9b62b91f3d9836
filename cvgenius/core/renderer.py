"""
CVGenius • core/renderer.py
Pure function from CVData to a document description.

The description is layout-agnostic: latex.py turns it into a LaTeX
article, /api/cv/preview returns it as JSON. Nothing here mutates the CV.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from cvgenius.core.cv_model import CVData, DEFAULT_SKILL_LEVEL, Education, Project, Skill, WorkExperience


MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
PRESENT = "Present"
_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


# ============================================================
# 🧱 Document Description
# ============================================================

@dataclass
class Link:
    label: str
    href: str = ""


@dataclass
class Item:
    title: str
    subtitle: str = ""
    date_range: str = ""
    body: str = ""
    note: str = ""
    bullets: List[str] = field(default_factory=list)
    link: Optional[Link] = None


@dataclass
class Section:
    key: str
    title: str
    text: str = ""
    items: List[Item] = field(default_factory=list)
    badges: List[str] = field(default_factory=list)


@dataclass
class Header:
    name: str
    contact_rows: List[List[Link]] = field(default_factory=list)


@dataclass
class CVDocument:
    header: Header
    sections: List[Section] = field(default_factory=list)
    page_size: str = "A4"
    font_size: str = "medium"
    color_scheme: Optional[str] = None

    def section(self, key: str) -> Optional[Section]:
        return next((s for s in self.sections if s.key == key), None)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================
# 🔤 Field Formatting
# ============================================================

def format_date(value: Optional[str]) -> str:
    """`2021-03` -> `Mar 2021`; empty stays empty; anything unparseable is returned as-is."""
    if not value:
        return ""
    parts = value.split("-")
    try:
        year, month = parts[0], int(parts[1])
    except (IndexError, ValueError):
        return value
    if not year or not 1 <= month <= 12:
        return value
    return f"{MONTHS[month - 1]} {year}"


def date_range(start: str, end: str, current: bool = False) -> str:
    return f"{format_date(start)} - {PRESENT if current else format_date(end)}"


def ensure_absolute_url(url: Optional[str]) -> str:
    if not url:
        return ""
    return url if _SCHEME_RE.match(url) else f"https://{url}"


def visible_highlights(highlights: List[str]) -> List[str]:
    return [h for h in highlights if h and h.strip()]


def skill_label(skill: Skill) -> str:
    if skill.level and skill.level != DEFAULT_SKILL_LEVEL:
        return f"{skill.name} ({skill.level})"
    return skill.name


# ============================================================
# 🧩 Section Builders
# ============================================================

def _header(cv: CVData) -> Header:
    info = cv.personal_info
    row1 = [Link(v) for v in (info.email, info.phone, info.location) if v]
    row2 = [Link(v, ensure_absolute_url(v)) for v in (info.linkedin, info.github, info.portfolio) if v]
    return Header(name=info.full_name or "Your Name", contact_rows=[r for r in (row1, row2) if r])


def _experience_item(exp: WorkExperience) -> Item:
    return Item(
        title=exp.position or "Position",
        subtitle=exp.company or "Company",
        date_range=date_range(exp.start_date, exp.end_date, exp.current),
        body=exp.description,
        bullets=visible_highlights(exp.highlights),
    )


def _project_item(project: Project) -> Item:
    label = (project.link or "").strip()
    href = ensure_absolute_url(label) if label else ""
    return Item(
        title=project.name or "Project",
        body=project.description if project.description.strip() else "",
        link=Link(label, href) if label and href else None,
    )


def _education_item(edu: Education) -> Item:
    return Item(
        title=f"{edu.degree or 'Degree'} in {edu.field or 'Field'}",
        subtitle=edu.institution or "Institution",
        date_range=date_range(edu.start_date, edu.end_date),
        note=f"Grade: {edu.grade}" if edu.grade else "",
    )


def render_document(cv: CVData) -> CVDocument:
    """Build the document description. Empty sections are omitted entirely."""
    sections: List[Section] = []

    if cv.personal_info.summary:
        sections.append(Section("summary", "Professional Summary", text=cv.personal_info.summary))

    if cv.work_experience:
        sections.append(Section("experience", "Work Experience",
                                items=[_experience_item(e) for e in cv.work_experience]))

    projects = cv.projects or []
    if projects:
        sections.append(Section("projects", "Projects", items=[_project_item(p) for p in projects]))

    if cv.education:
        sections.append(Section("education", "Education", items=[_education_item(e) for e in cv.education]))

    if cv.skills:
        sections.append(Section("skills", "Skills", badges=[skill_label(s) for s in cv.skills]))

    return CVDocument(
        header=_header(cv),
        sections=sections,
        font_size=cv.font_size or "medium",
        color_scheme=cv.color_scheme,
    )
