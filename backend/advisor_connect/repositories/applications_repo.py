from __future__ import annotations

from typing import Any

from ..db.registry import APPLICATIONS, get_store


def get_application_by_id(application_id: int) -> dict[str, Any] | None:
    return get_store(APPLICATIONS).get(int(application_id))


def list_applications() -> list[dict[str, Any]]:
    return get_store(APPLICATIONS).list()


def list_applications_by_opportunity(opportunity_id: int) -> list[dict[str, Any]]:
    oid = int(opportunity_id)
    return [a for a in list_applications() if a.get("opportunityId") == oid]


def list_applications_by_lp(lp_id: int) -> list[dict[str, Any]]:
    lid = int(lp_id)
    return [a for a in list_applications() if a.get("lpId") == lid]


def count_applications_by_opportunity(applications: list[dict[str, Any]]) -> dict[int, int]:
    counts: dict[int, int] = {}
    for a in applications:
        oid = a.get("opportunityId")
        if isinstance(oid, int):
            counts[oid] = counts.get(oid, 0) + 1
    return counts


def has_applied(lp_id: int, opportunity_id: int) -> bool:
    lid, oid = int(lp_id), int(opportunity_id)
    return any(a.get("lpId") == lid and a.get("opportunityId") == oid for a in list_applications())


def create_application(data: dict[str, Any]) -> dict[str, Any]:
    return get_store(APPLICATIONS).create(data)


def update_application(application_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
    return get_store(APPLICATIONS).update(int(application_id), changes)
