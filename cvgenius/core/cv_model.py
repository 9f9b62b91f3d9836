"""
CVGenius • core/cv_model.py
Typed records for a résumé document.

Python attributes are snake_case; the wire format (API bodies and
persisted documents) is camelCase. Every string defaults to "", every
list to [], so consumers only ever check for empty strings.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


SKILL_LEVELS = ("beginner", "intermediate", "advanced", "expert")
DEFAULT_SKILL_LEVEL = "intermediate"
FONT_SIZES = ("small", "medium", "large")

SkillLevel = Literal["beginner", "intermediate", "advanced", "expert"]
FontSize = Literal["small", "medium", "large"]


class CVModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null on the wire means "use the default"
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================================
# 🧩 Section Records
# ============================================================

class PersonalInfo(CVModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""
    summary: str = ""


class WorkExperience(CVModel):
    id: str = ""
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""
    highlights: List[str] = Field(default_factory=list)

    @field_validator("highlights", mode="before")
    @classmethod
    def _highlights_as_strings(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return ["" if h is None else str(h) for h in v]


class Education(CVModel):
    id: str = ""
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    grade: str = ""

    @model_validator(mode="before")
    @classmethod
    def _migrate_gpa(cls, data: Any) -> Any:
        """Legacy records carry `gpa`; an existing non-empty `grade` always wins."""
        if not isinstance(data, dict) or "gpa" not in data:
            return data
        out = dict(data)
        gpa = out.pop("gpa")
        if not out.get("grade") and gpa:
            out["grade"] = gpa
        return out


class Skill(CVModel):
    id: str = ""
    name: str = ""
    level: SkillLevel = DEFAULT_SKILL_LEVEL

    @field_validator("level", mode="before")
    @classmethod
    def _known_level(cls, v: Any) -> Any:
        level = str(v or "").strip().lower()
        return level if level in SKILL_LEVELS else DEFAULT_SKILL_LEVEL


class Project(CVModel):
    id: str = ""
    name: str = ""
    description: str = ""
    link: str = ""


# ============================================================
# 📄 Aggregate Root
# ============================================================

class CVData(CVModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    work_experience: List[WorkExperience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    projects: Optional[List[Project]] = None
    template_id: Optional[str] = None
    color_scheme: Optional[str] = None
    font_size: Optional[FontSize] = None

    @field_validator("font_size", mode="before")
    @classmethod
    def _known_font_size(cls, v: Any) -> Any:
        return v if v in FONT_SIZES else None


# ============================================================
# ☁️ Persisted Snapshots
# ============================================================

class SavedCVSummary(CVModel):
    id: str
    name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class SavedCVDocument(SavedCVSummary):
    data: CVData = Field(default_factory=CVData)
