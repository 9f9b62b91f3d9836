"""
CVGenius • core/normalize.py
Pure reducers that keep CV form state consistent.

Every function returns a new list/record and never mutates its input.
Entries are re-validated on update, which is where legacy fields
(Education.gpa) are migrated, so callers never deal with them.
"""

from __future__ import annotations

import uuid
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, TypeVar, Union

from cvgenius.core.cv_model import (
    CVData,
    CVModel,
    DEFAULT_SKILL_LEVEL,
    Education,
    PersonalInfo,
    Project,
    Skill,
    WorkExperience,
)

M = TypeVar("M", bound=CVModel)
Entry = Union[CVModel, Mapping[str, Any]]


def new_id() -> str:
    return uuid.uuid4().hex


# ============================================================
# 🔧 Internals
# ============================================================

def _field_names(model: Type[CVModel], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase wire keys onto attribute names; unknown keys pass through."""
    by_alias = {(info.alias or name): name for name, info in model.model_fields.items()}
    return {by_alias.get(k, k): v for k, v in patch.items()}


def _coerce(model: Type[M], entry: Entry) -> M:
    if isinstance(entry, model):
        return entry
    if isinstance(entry, CVModel):
        return model.model_validate(entry.model_dump())
    return model.model_validate(dict(entry))


# ============================================================
# 📚 Generic List Reducers
# ============================================================

def add_entry(entries: Iterable[M], factory: Callable[[str], M]) -> List[M]:
    """Append a blank entry built by `factory(new_id())`."""
    return [*entries, factory(new_id())]


def update_entry(
    entries: Iterable[Entry],
    entry_id: str,
    updates: Mapping[str, Any],
    model: Type[M],
) -> List[M]:
    """
    Shallow-merge `updates` into the entry whose id matches.
    The id itself is immutable; order and sibling entries are preserved.
    """
    patch = {k: v for k, v in _field_names(model, updates or {}).items() if k != "id"}
    out: List[M] = []
    for raw in entries:
        entry = _coerce(model, raw)
        if entry.id == entry_id and patch:
            entry = model.model_validate({**entry.model_dump(), **patch})
        out.append(entry)
    return out


def remove_entry(entries: Iterable[Entry], entry_id: str) -> List[Any]:
    def _id(e: Entry) -> Optional[str]:
        return e.id if isinstance(e, CVModel) else e.get("id")  # type: ignore[union-attr]

    return [e for e in entries if _id(e) != entry_id]


# ============================================================
# 💼 Work Experience
# ============================================================

def add_work_experience(entries: Iterable[Entry]) -> List[WorkExperience]:
    return add_entry([_coerce(WorkExperience, e) for e in entries], lambda i: WorkExperience(id=i))


def update_work_experience(entries: Iterable[Entry], entry_id: str, updates: Mapping[str, Any]) -> List[WorkExperience]:
    """Marking a role as current also clears its end date."""
    patch = dict(updates or {})
    if patch.get("current") is True:
        patch = {k: v for k, v in patch.items() if k not in ("endDate", "end_date")}
        patch["end_date"] = ""
    return update_entry(entries, entry_id, patch, WorkExperience)


def add_highlight(entries: Iterable[Entry], exp_id: str) -> List[WorkExperience]:
    items = [_coerce(WorkExperience, e) for e in entries]
    for exp in items:
        if exp.id == exp_id:
            return update_work_experience(items, exp_id, {"highlights": [*exp.highlights, ""]})
    return items


def update_highlight(entries: Iterable[Entry], exp_id: str, index: int, value: str) -> List[WorkExperience]:
    items = [_coerce(WorkExperience, e) for e in entries]
    for exp in items:
        if exp.id == exp_id and 0 <= index < len(exp.highlights):
            highlights = list(exp.highlights)
            highlights[index] = value
            return update_work_experience(items, exp_id, {"highlights": highlights})
    return items


def remove_highlight(entries: Iterable[Entry], exp_id: str, index: int) -> List[WorkExperience]:
    items = [_coerce(WorkExperience, e) for e in entries]
    for exp in items:
        if exp.id == exp_id and 0 <= index < len(exp.highlights):
            highlights = [h for i, h in enumerate(exp.highlights) if i != index]
            return update_work_experience(items, exp_id, {"highlights": highlights})
    return items


def apply_suggestion(experience: Entry, description: str, highlights: Iterable[str]) -> WorkExperience:
    """
    Accept an AI rewrite: replace the description and append suggested
    highlights that are not already present (case-insensitive, trimmed).
    Existing highlights are never removed or reordered.
    """
    exp = _coerce(WorkExperience, experience)
    merged = list(exp.highlights)
    seen = {h.strip().lower() for h in merged}
    for highlight in highlights:
        trimmed = (highlight or "").strip()
        if not trimmed or trimmed.lower() in seen:
            continue
        merged.append(trimmed)
        seen.add(trimmed.lower())
    return exp.model_copy(update={"description": description, "highlights": merged})


# ============================================================
# 🎓 Education
# ============================================================

def add_education(entries: Iterable[Entry]) -> List[Education]:
    return add_entry(normalize_education(entries), lambda i: Education(id=i))


def update_education(entries: Iterable[Entry], entry_id: str, updates: Mapping[str, Any]) -> List[Education]:
    return update_entry(entries, entry_id, updates, Education)


def normalize_education(entries: Iterable[Entry]) -> List[Education]:
    """One migration pass over raw records (gpa -> grade)."""
    return [_coerce(Education, e) for e in entries]


# ============================================================
# 🛠️ Skills
# ============================================================

def add_skill(entries: Iterable[Entry], name: str, level: str = DEFAULT_SKILL_LEVEL) -> List[Skill]:
    """Blank names are ignored, mirroring the 'press enter on a non-empty input' flow."""
    items = [_coerce(Skill, e) for e in entries]
    trimmed = (name or "").strip()
    if not trimmed:
        return items
    return add_entry(items, lambda i: Skill(id=i, name=trimmed, level=level))


def update_skill(entries: Iterable[Entry], entry_id: str, updates: Mapping[str, Any]) -> List[Skill]:
    return update_entry(entries, entry_id, updates, Skill)


# ============================================================
# 🧪 Projects
# ============================================================

def add_project(entries: Iterable[Entry]) -> List[Project]:
    return add_entry([_coerce(Project, e) for e in entries], lambda i: Project(id=i))


def update_project(entries: Iterable[Entry], entry_id: str, updates: Mapping[str, Any]) -> List[Project]:
    return update_entry(entries, entry_id, updates, Project)


# ============================================================
# 👤 Personal Info / Whole Document
# ============================================================

def update_personal_info(info: Union[PersonalInfo, Mapping[str, Any]], values: Mapping[str, Any]) -> PersonalInfo:
    current = _coerce(PersonalInfo, info)
    patch = {k: ("" if v is None else v) for k, v in _field_names(PersonalInfo, values or {}).items()}
    return PersonalInfo.model_validate({**current.model_dump(), **patch})


def normalize_cv(raw: Union[CVData, Mapping[str, Any], None]) -> CVData:
    """Data-access boundary: defaults every field and migrates legacy keys."""
    if raw is None:
        return empty_cv()
    if isinstance(raw, CVData):
        return CVData.model_validate(raw.to_wire())
    return CVData.model_validate(dict(raw))


def empty_cv() -> CVData:
    return CVData()


def sample_cv() -> CVData:
    return CVData.model_validate({
        "personalInfo": {
            "fullName": "John Doe",
            "email": "john.doe@example.com",
            "phone": "+1 (555) 123-4567",
            "location": "San Francisco, CA",
            "linkedin": "linkedin.com/in/johndoe",
            "github": "github.com/johndoe",
            "portfolio": "johndoe.dev",
            "summary": (
                "Experienced full-stack developer with 5+ years building scalable web applications. "
                "Passionate about clean code, user experience, and emerging technologies."
            ),
        },
        "workExperience": [
            {
                "id": "1",
                "company": "Tech Corp",
                "position": "Senior Full-Stack Developer",
                "startDate": "2021-03",
                "endDate": "",
                "current": True,
                "description": "Lead developer for enterprise SaaS platform serving 10,000+ users.",
                "highlights": [
                    "Architected microservices reducing system latency by 40%",
                    "Mentored team of 5 junior developers",
                    "Implemented CI/CD pipeline improving deployment frequency by 3x",
                ],
            },
            {
                "id": "2",
                "company": "StartupXYZ",
                "position": "Full-Stack Developer",
                "startDate": "2019-06",
                "endDate": "2021-02",
                "current": False,
                "description": "Built core features for B2B marketplace platform.",
                "highlights": [
                    "Developed React component library used across 3 products",
                    "Optimized database queries improving page load times by 60%",
                    "Led migration from monolith to microservices architecture",
                ],
            },
        ],
        "education": [
            {
                "id": "1",
                "institution": "University of Hull",
                "degree": "Bachelor of Science",
                "field": "Computer Science",
                "startDate": "2023-09",
                "endDate": "2026-05",
                "grade": "3.8 / 4.0",
            }
        ],
        "skills": [
            {"id": "1", "name": "JavaScript", "level": "expert"},
            {"id": "2", "name": "TypeScript", "level": "advanced"},
            {"id": "3", "name": "React", "level": "expert"},
            {"id": "4", "name": "Node.js", "level": "advanced"},
            {"id": "5", "name": "Python", "level": "intermediate"},
            {"id": "6", "name": "PostgreSQL", "level": "advanced"},
            {"id": "7", "name": "AWS", "level": "intermediate"},
            {"id": "8", "name": "Docker", "level": "intermediate"},
        ],
    })
