from __future__ import annotations

import pytest

from advisor_connect.errors import ValidationError
from advisor_connect.modules.opportunities.opportunity_fields import (
    validate_opportunity_fields,
    validate_opportunity_patch,
    validate_status,
)
from conftest import opportunity_fields


def test_fields_are_trimmed():
    out = validate_opportunity_fields(opportunity_fields(title="  Advisor Needed  ", compensation=" Equity "))
    assert out["title"] == "Advisor Needed"
    assert out["compensation"] == "Equity"


@pytest.mark.parametrize(
    "field,value,message",
    [
        ("title", "   ", "Title is required"),
        ("description", None, "Description is required"),
        ("requiredExpertise", [], "At least one area of required expertise is needed"),
        ("requiredExpertise", ["", "  "], "At least one area of required expertise is needed"),
        ("requiredExpertise", "Marketing", "At least one area of required expertise is needed"),
        ("timeCommitment", "", "Time commitment is required"),
        ("compensation", 100, "Compensation details are required"),
    ],
)
def test_invalid_field_is_reported(field, value, message):
    with pytest.raises(ValidationError) as ei:
        validate_opportunity_fields(opportunity_fields(**{field: value}))
    assert ei.value.message == message
    assert ei.value.field == field


def test_first_failing_field_wins():
    with pytest.raises(ValidationError) as ei:
        validate_opportunity_fields({"requiredExpertise": [], "compensation": ""})
    assert ei.value.message == "Title is required"


def test_required_expertise_is_deduplicated_case_insensitively():
    out = validate_opportunity_fields(opportunity_fields(requiredExpertise=["Marketing", " marketing ", "Sales", ""]))
    assert out["requiredExpertise"] == ["Marketing", "Sales"]


def test_unknown_create_fields_are_not_carried():
    out = validate_opportunity_fields(opportunity_fields(companyId=99, status="filled"))
    assert "companyId" not in out
    assert "status" not in out


def test_patch_accepts_status_only():
    assert validate_opportunity_patch({"status": "filled"}) == {"status": "filled"}


def test_patch_rejects_unknown_status():
    with pytest.raises(ValidationError) as ei:
        validate_opportunity_patch({"status": "archived"})
    assert ei.value.message == "Invalid status. Must be one of: open, closed, filled"


def test_patch_ignores_read_only_fields():
    out = validate_opportunity_patch({"companyId": 5, "applicantCount": 10, "viewCount": 3, "title": " New "})
    assert out == {"title": "New"}


def test_patch_rejects_unknown_keys():
    with pytest.raises(ValidationError) as ei:
        validate_opportunity_patch({"budget": "lots"})
    assert ei.value.field == "budget"


def test_patch_validates_present_fields():
    with pytest.raises(ValidationError) as ei:
        validate_opportunity_patch({"description": ""})
    assert ei.value.message == "Description is required"


def test_empty_patch_has_no_changes():
    assert validate_opportunity_patch({}) == {}
    assert validate_opportunity_patch(None) == {}


@pytest.mark.parametrize("value", ["FILLED", " closed", "Open", None, 1])
def test_status_must_match_exactly(value):
    with pytest.raises(ValidationError):
        validate_status(value)
