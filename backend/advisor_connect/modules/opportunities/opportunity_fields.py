"""
Field rules for Opportunity records.

`validate_opportunity_fields` is the full-replace rule shared by create and
update; `validate_opportunity_patch` applies the same per-field rules to a
partial body and additionally accepts `status`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from ...errors import ValidationError


class OpportunityStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"
    FILLED = "filled"


OPPORTUNITY_STATUSES = tuple(s.value for s in OpportunityStatus)

# Order matters: the first failing field is the one reported.
EDITABLE_FIELDS = ("title", "description", "requiredExpertise", "timeCommitment", "compensation")

# Present on every record but never writable through update/patch.
READ_ONLY_FIELDS = ("id", "companyId", "companyName", "viewCount", "applicantCount", "createdAt", "updatedAt")

_MESSAGES = {
    "title": "Title is required",
    "description": "Description is required",
    "requiredExpertise": "At least one area of required expertise is needed",
    "timeCommitment": "Time commitment is required",
    "compensation": "Compensation details are required",
}


def _clean_text(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message=_MESSAGES[name], field=name)
    return value.strip()


def _clean_expertise(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError(message=_MESSAGES["requiredExpertise"], field="requiredExpertise")
    out: list[str] = []
    seen: set[str] = set()
    for v in value:
        if not isinstance(v, str):
            raise ValidationError(
                message="Required expertise entries must be strings",
                field="requiredExpertise",
            )
        s = v.strip()
        if not s or s.lower() in seen:
            continue
        seen.add(s.lower())
        out.append(s)
    if not out:
        raise ValidationError(message=_MESSAGES["requiredExpertise"], field="requiredExpertise")
    return out


def _clean_field(name: str, value: Any) -> Any:
    if name == "requiredExpertise":
        return _clean_expertise(value)
    return _clean_text(name, value)


def validate_opportunity_fields(fields: dict[str, Any] | None) -> dict[str, Any]:
    body = fields or {}
    return {name: _clean_field(name, body.get(name)) for name in EDITABLE_FIELDS}


def validate_status(value: Any) -> str:
    if value not in OPPORTUNITY_STATUSES:
        raise ValidationError(
            message="Invalid status. Must be one of: " + ", ".join(OPPORTUNITY_STATUSES),
            field="status",
        )
    return value


def validate_opportunity_patch(partial: dict[str, Any] | None) -> dict[str, Any]:
    body = partial or {}
    unknown = [k for k in body if k not in EDITABLE_FIELDS and k not in READ_ONLY_FIELDS and k != "status"]
    if unknown:
        raise ValidationError(message=f"Unknown field: {sorted(unknown)[0]}", field=sorted(unknown)[0])

    changes: dict[str, Any] = {}
    for name in EDITABLE_FIELDS:
        if name in body:
            changes[name] = _clean_field(name, body[name])
    if "status" in body:
        changes["status"] = validate_status(body["status"])
    return changes
