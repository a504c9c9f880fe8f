from __future__ import annotations

from typing import Any, Iterable

from .opportunity_filters import newest_first

RELEVANCE_THRESHOLD = 30
NO_REQUIREMENTS_SCORE = 50


def _matches(required: str, offered: str) -> bool:
    r, o = required.lower(), offered.lower()
    return r in o or o in r


def match_score(required: Iterable[Any], lp_expertise: Iterable[Any]) -> int:
    """
    Percentage of required expertise entries covered by the LP's expertise.
    A required entry is covered when it and any LP entry contain one another,
    ignoring case.
    """
    req = [str(x).strip() for x in required or [] if str(x or "").strip()]
    if not req:
        return NO_REQUIREMENTS_SCORE
    offered = [str(x).strip() for x in lp_expertise or [] if str(x or "").strip()]
    overlap = sum(1 for r in req if any(_matches(r, o) for o in offered))
    # Halves round up: 1 of 8 is 13, not 12.
    n = len(req)
    return (200 * overlap + n) // (2 * n)


def rank_by_match(opportunities: Iterable[dict[str, Any]], lp_expertise: list[str]) -> list[dict[str, Any]]:
    """Annotate with matchScore/isRelevant, best match first, newest first on ties."""
    scored = []
    for opp in opportunities:
        score = match_score(opp.get("requiredExpertise") or [], lp_expertise)
        scored.append({**opp, "matchScore": score, "isRelevant": score > RELEVANCE_THRESHOLD})
    # Stable sort: recency order survives within equal scores.
    return sorted(newest_first(scored), key=lambda o: o["matchScore"], reverse=True)
