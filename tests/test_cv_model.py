"""
Unit tests for the CV data model: defaults, wire aliases and the
legacy gpa -> grade migration.
"""

import pytest

from cvgenius.core.cv_model import CVData, Education, PersonalInfo, Skill, WorkExperience


@pytest.mark.parametrize("gpa", ["3.8", "First Class", "4.0 / 4.0"])
def test_gpa_only_becomes_grade(gpa):
    edu = Education.model_validate({"id": "e1", "institution": "Hull", "gpa": gpa})
    assert edu.grade == gpa
    assert "gpa" not in edu.to_wire()


def test_existing_grade_wins_over_gpa():
    edu = Education.model_validate({"id": "e1", "grade": "A", "gpa": "3.1"})
    assert edu.grade == "A"


def test_empty_grade_is_filled_from_gpa():
    edu = Education.model_validate({"id": "e1", "grade": "", "gpa": "3.1"})
    assert edu.grade == "3.1"


def test_null_fields_fall_back_to_defaults():
    info = PersonalInfo.model_validate({"fullName": "Ada", "email": None, "summary": None})
    assert info.full_name == "Ada"
    assert info.email == ""
    assert info.summary == ""


def test_work_experience_defaults():
    exp = WorkExperience.model_validate({"id": "w1"})
    assert exp.company == ""
    assert exp.current is False
    assert exp.highlights == []


def test_highlights_keep_order_and_blanks():
    exp = WorkExperience.model_validate({"id": "w1", "highlights": ["b", "", "a", None]})
    assert exp.highlights == ["b", "", "a", ""]


def test_skill_level_defaults_to_intermediate():
    assert Skill.model_validate({"id": "s1", "name": "Go"}).level == "intermediate"
    assert Skill.model_validate({"id": "s1", "name": "Go", "level": None}).level == "intermediate"
    assert Skill.model_validate({"id": "s1", "name": "Go", "level": "guru"}).level == "intermediate"
    assert Skill.model_validate({"id": "s1", "name": "Go", "level": "Expert"}).level == "expert"


def test_unknown_font_size_is_dropped():
    cv = CVData.model_validate({"fontSize": "huge"})
    assert cv.font_size is None
    assert CVData.model_validate({"fontSize": "large"}).font_size == "large"


def test_wire_format_is_camel_case():
    cv = CVData.model_validate({
        "personalInfo": {"fullName": "Ada Lovelace"},
        "workExperience": [{"id": "w1", "startDate": "2020-01", "endDate": "2021-02"}],
    })
    wire = cv.to_wire()
    assert wire["personalInfo"]["fullName"] == "Ada Lovelace"
    assert wire["workExperience"][0]["startDate"] == "2020-01"
    assert "projects" not in wire


def test_wire_round_trip_is_identical():
    cv = CVData.model_validate({
        "personalInfo": {"fullName": "Ada", "summary": "Analyst"},
        "workExperience": [{"id": "w1", "company": "Engines", "current": True, "highlights": ["x", ""]}],
        "education": [{"id": "e1", "gpa": "3.9"}],
        "skills": [{"id": "s1", "name": "Maths", "level": "expert"}],
        "projects": [{"id": "p1", "name": "Notes", "link": "example.com"}],
        "templateId": "classic",
        "colorScheme": "blue",
    })
    assert CVData.model_validate(cv.to_wire()) == cv


def test_unknown_keys_are_ignored():
    cv = CVData.model_validate({"personalInfo": {"fullName": "Ada", "nickname": "A"}, "extra": 1})
    assert "nickname" not in cv.personal_info.to_wire()
