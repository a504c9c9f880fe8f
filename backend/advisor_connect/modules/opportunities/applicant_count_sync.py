"""
Reconciles the cached `applicantCount` on opportunities with the application
records that reference them.

Three entry points:
  - `sync_applicant_count`: eager, one opportunity, after an application write.
  - `reconcile_applicant_counts`: lazy, a listing result set, before it is returned.
  - `reconcile_all_applicant_counts`: explicit, every opportunity, for admins.

The first two are best-effort: storage failures are logged and the stored
value is kept, so the surrounding read or apply still succeeds. The admin pass
lets storage failures propagate.
"""

from __future__ import annotations

from typing import Any

from ...errors import StorageError
from ...observability.logging import get_logger
from ...repositories import applications_repo, opportunities_repo

log = get_logger("applicant_count_sync")


def actual_applicant_count(opportunity_id: int) -> int:
    return len(applications_repo.list_applications_by_opportunity(opportunity_id))


def sync_applicant_count(opportunity_id: int) -> int | None:
    """Recompute and persist the count for one opportunity. None on failure."""
    oid = int(opportunity_id)
    try:
        actual = actual_applicant_count(oid)
        updated = opportunities_repo.update_opportunity(oid, {"applicantCount": actual})
    except StorageError as e:
        log.warning(
            "applicant_count_sync_failed",
            opportunity_id=oid,
            operation=e.operation,
            error=str(e.cause or e),
        )
        return None
    if updated is None:
        # Deleted between the application write and the sync.
        return None
    return actual


def reconcile_applicant_counts(opportunities: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Return the opportunities with `applicantCount` corrected where it drifted.
    Order is preserved. Records whose correction could not be persisted keep
    their stored value.
    """
    if not opportunities:
        return []

    try:
        counts = applications_repo.count_applications_by_opportunity(applications_repo.list_applications())
    except StorageError as e:
        log.warning("applicant_count_sync_failed", operation=e.operation, error=str(e.cause or e))
        return list(opportunities)

    out: list[dict[str, Any]] = []
    for opp in opportunities:
        oid = opp.get("id")
        actual = counts.get(oid, 0) if isinstance(oid, int) else None
        stored = opp.get("applicantCount")
        if actual is None or stored == actual:
            out.append(opp)
            continue

        try:
            updated = opportunities_repo.update_opportunity(oid, {"applicantCount": actual})
        except StorageError as e:
            log.warning(
                "applicant_count_sync_failed",
                opportunity_id=oid,
                operation=e.operation,
                error=str(e.cause or e),
            )
            out.append(opp)
            continue

        log.info("applicant_count_corrected", opportunity_id=oid, stored=stored, actual=actual)
        # Merge so caller annotations (matchScore, ...) survive.
        out.append({**opp, **(updated or {}), "applicantCount": actual})
    return out


def reconcile_all_applicant_counts() -> list[dict[str, Any]]:
    """
    Recount every opportunity and persist the ones that drifted.
    Returns one `{id, title, previousCount, actualCount}` row per opportunity.
    """
    counts = applications_repo.count_applications_by_opportunity(applications_repo.list_applications())
    results: list[dict[str, Any]] = []
    corrected = 0
    for opp in opportunities_repo.list_opportunities():
        oid = opp.get("id")
        if not isinstance(oid, int):
            continue
        previous = int(opp.get("applicantCount") or 0)
        actual = counts.get(oid, 0)
        if opp.get("applicantCount") != actual:
            opportunities_repo.update_opportunity(oid, {"applicantCount": actual})
            corrected += 1
        results.append({"id": oid, "title": opp.get("title"), "previousCount": previous, "actualCount": actual})
    log.info("applicant_counts_reconciled", opportunities=len(results), corrected=corrected)
    return results
