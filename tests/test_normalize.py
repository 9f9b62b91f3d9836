"""
Unit tests for the form-normalization reducers.
"""

from cvgenius.core import normalize
from cvgenius.core.cv_model import Education, Skill, WorkExperience


def _experiences():
    return [
        WorkExperience(id="a", company="Acme", highlights=["Shipped v1"]),
        WorkExperience(id="b", company="Globex"),
    ]


# ---------------------- add / update / remove ----------------------

def test_add_appends_blank_entry_with_unique_id():
    first = normalize.add_work_experience([])
    second = normalize.add_work_experience(first)
    assert len(second) == 2
    assert second[0] == first[0]
    assert second[1].id and second[1].id != second[0].id
    assert second[1].company == "" and second[1].highlights == []


def test_update_merges_only_the_target_entry():
    entries = _experiences()
    out = normalize.update_work_experience(entries, "b", {"position": "Engineer", "startDate": "2020-05"})
    assert [e.id for e in out] == ["a", "b"]
    assert out[0] == entries[0]
    assert out[1].position == "Engineer"
    assert out[1].start_date == "2020-05"
    assert out[1].company == "Globex"
    # input untouched
    assert entries[1].position == ""


def test_update_never_changes_id():
    out = normalize.update_work_experience(_experiences(), "a", {"id": "zzz", "company": "New"})
    assert out[0].id == "a"
    assert out[0].company == "New"


def test_update_unknown_id_is_a_no_op():
    entries = _experiences()
    assert normalize.update_work_experience(entries, "missing", {"company": "X"}) == entries


def test_remove_filters_by_id_only():
    entries = _experiences()
    out = normalize.remove_entry(entries, "a")
    assert [e.id for e in out] == ["b"]
    assert out[0] is entries[1]


def test_null_update_resets_field_to_empty_string():
    entries = [WorkExperience(id="a", end_date="2020-01")]
    out = normalize.update_work_experience(entries, "a", {"endDate": None})
    assert out[0].end_date == ""


def test_marking_current_clears_end_date():
    entries = [WorkExperience(id="a", start_date="2019-01", end_date="2020-01")]
    out = normalize.update_work_experience(entries, "a", {"current": True})
    assert out[0].current is True
    assert out[0].end_date == ""
    assert out[0].start_date == "2019-01"


def test_unmarking_current_keeps_end_date_editable():
    entries = [WorkExperience(id="a", current=True)]
    out = normalize.update_work_experience(entries, "a", {"current": False, "endDate": "2024-06"})
    assert out[0].current is False
    assert out[0].end_date == "2024-06"


# ---------------------- education migration ----------------------

def test_update_education_migrates_every_legacy_entry():
    raw = [
        {"id": "e1", "institution": "Hull", "gpa": "3.5"},
        {"id": "e2", "institution": "York", "grade": "A", "gpa": "2.0"},
    ]
    out = normalize.update_education(raw, "e2", {"degree": "MSc"})
    assert all(isinstance(e, Education) for e in out)
    assert out[0].grade == "3.5"
    assert out[1].grade == "A"
    assert out[1].degree == "MSc"
    assert all("gpa" not in e.to_wire() for e in out)


def test_update_education_with_legacy_gpa_key():
    out = normalize.update_education([Education(id="e1")], "e1", {"gpa": "3.9"})
    assert out[0].grade == "3.9"


def test_normalize_education_keeps_order():
    raw = [{"id": "x", "gpa": "1"}, {"id": "y"}, {"id": "z", "grade": "B"}]
    out = normalize.normalize_education(raw)
    assert [e.id for e in out] == ["x", "y", "z"]
    assert [e.grade for e in out] == ["1", "", "B"]


def test_add_education_normalizes_existing_entries():
    out = normalize.add_education([{"id": "e1", "gpa": "3.0"}])
    assert out[0].grade == "3.0"
    assert out[1].grade == ""


# ---------------------- highlights ----------------------

def test_highlight_editing():
    entries = _experiences()
    entries = normalize.add_highlight(entries, "a")
    assert entries[0].highlights == ["Shipped v1", ""]
    entries = normalize.update_highlight(entries, "a", 1, "Cut costs")
    assert entries[0].highlights == ["Shipped v1", "Cut costs"]
    entries = normalize.remove_highlight(entries, "a", 0)
    assert entries[0].highlights == ["Cut costs"]


def test_highlight_out_of_range_is_ignored():
    entries = _experiences()
    assert normalize.update_highlight(entries, "a", 5, "x") == entries
    assert normalize.remove_highlight(entries, "b", 0) == entries


# ---------------------- skills / projects / personal info ----------------------

def test_add_skill_trims_and_defaults_level():
    out = normalize.add_skill([], "  Python ")
    assert out[0].name == "Python"
    assert out[0].level == "intermediate"


def test_add_skill_ignores_blank_names():
    existing = [Skill(id="s1", name="Go")]
    assert normalize.add_skill(existing, "   ") == existing


def test_update_skill_level():
    out = normalize.update_skill([Skill(id="s1", name="Go")], "s1", {"level": "expert"})
    assert out[0].level == "expert"


def test_add_and_update_project():
    out = normalize.add_project([])
    out = normalize.update_project(out, out[0].id, {"name": "Site", "link": "example.com"})
    assert out[0].name == "Site"
    assert out[0].link == "example.com"


def test_update_personal_info_defaults_missing_values():
    info = normalize.update_personal_info({"fullName": "Ada", "email": "a@x.io"}, {"email": None, "phone": "123"})
    assert info.full_name == "Ada"
    assert info.email == ""
    assert info.phone == "123"


# ---------------------- accept suggestion ----------------------

def test_apply_suggestion_dedupes_case_insensitively():
    exp = WorkExperience(id="a", description="old", highlights=["Built API", "  ", "Led team"])
    out = normalize.apply_suggestion(exp, "new", ["built api", " Reduced latency ", "", "LED TEAM", "Reduced latency"])
    assert out.description == "new"
    assert out.highlights == ["Built API", "  ", "Led team", "Reduced latency"]
    assert exp.description == "old"


# ---------------------- whole document ----------------------

def test_normalize_cv_fills_defaults():
    cv = normalize.normalize_cv({"education": [{"id": "e1", "gpa": "3.2"}]})
    assert cv.personal_info.full_name == ""
    assert cv.work_experience == []
    assert cv.education[0].grade == "3.2"


def test_empty_and_sample_cv():
    assert normalize.empty_cv().to_wire()["personalInfo"]["fullName"] == ""
    sample = normalize.sample_cv()
    assert sample.personal_info.full_name == "John Doe"
    assert sample.work_experience[0].current is True
    assert len(sample.skills) == 8
