from __future__ import annotations

from typing import Any

from ..db.registry import OPPORTUNITIES, get_store


def get_opportunity_by_id(opportunity_id: int) -> dict[str, Any] | None:
    return get_store(OPPORTUNITIES).get(int(opportunity_id))


def list_opportunities() -> list[dict[str, Any]]:
    return get_store(OPPORTUNITIES).list()


def list_opportunities_by_company(company_id: int) -> list[dict[str, Any]]:
    return [o for o in list_opportunities() if o.get("companyId") == int(company_id)]


def create_opportunity(data: dict[str, Any]) -> dict[str, Any]:
    return get_store(OPPORTUNITIES).create(data)


def update_opportunity(opportunity_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
    return get_store(OPPORTUNITIES).update(int(opportunity_id), changes)


def delete_opportunity(opportunity_id: int) -> bool:
    return get_store(OPPORTUNITIES).delete(int(opportunity_id))
