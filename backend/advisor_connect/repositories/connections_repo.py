from __future__ import annotations

from typing import Any

from ..db.registry import CONNECTIONS, get_store


def list_connections_by_lp(lp_id: int) -> list[dict[str, Any]]:
    lid = int(lp_id)
    return [c for c in get_store(CONNECTIONS).list() if c.get("lpId") == lid]


def list_connections_by_company(company_id: int) -> list[dict[str, Any]]:
    cid = int(company_id)
    return [c for c in get_store(CONNECTIONS).list() if c.get("companyId") == cid]
