#!/usr/bin/env python3
"""
Seed demo users, opportunities and connections into the configured store.

Uses whatever STORAGE_BACKEND / DATA_DIR / DDB_TABLE_NAME the environment
points at. Records are created through the stores, so ids and timestamps are
assigned exactly as at runtime.

Usage:
    python scripts/seed_demo_data.py [--dry-run] [--force]
"""

from __future__ import annotations

import argparse
from typing import Any

from advisor_connect.db.registry import CONNECTIONS, OPPORTUNITIES, USERS, get_store
from advisor_connect.observability.logging import configure_logging, get_logger

log = get_logger("seed_demo_data")

DEMO_USERS: list[dict[str, Any]] = [
    {
        "email": "admin@advisorconnect.dev",
        "firstName": "Ada",
        "lastName": "Admin",
        "role": "Admin",
        "status": "active",
    },
    {
        "email": "founder@brightloop.dev",
        "firstName": "Sam",
        "lastName": "Rivera",
        "role": "Company",
        "status": "active",
        "companyName": "BrightLoop",
        "industry": "Fintech",
        "stage": "Seed",
    },
    {
        "email": "advisor@advisorconnect.dev",
        "firstName": "Jordan",
        "lastName": "Lee",
        "role": "LP",
        "status": "active",
        "expertise": ["Marketing", "Go-to-Market", "Fundraising"],
        "availableHours": "5-10 hours/month",
    },
]

# companyIndex refers to DEMO_USERS.
DEMO_OPPORTUNITIES: list[dict[str, Any]] = [
    {
        "companyIndex": 1,
        "title": "Advisor Needed for Go-to-Market",
        "description": "Help us plan our first enterprise sales motion.",
        "requiredExpertise": ["Marketing", "Sales"],
        "timeCommitment": "5-10 hours/month",
        "compensation": "Equity",
        "status": "open",
    },
    {
        "companyIndex": 1,
        "title": "Series A Fundraising Coach",
        "description": "Prepare the pitch and investor pipeline for a Series A.",
        "requiredExpertise": ["Fundraising"],
        "timeCommitment": "2-4 hours/month",
        "compensation": "Equity + cash retainer",
        "status": "open",
    },
]


def _collection_empty(name: str) -> bool:
    return not get_store(name).list()


def seed(*, dry_run: bool = False, force: bool = False) -> dict[str, int]:
    if not force and not _collection_empty(USERS):
        log.info("seed_skipped", reason="users already present")
        return {"users": 0, "opportunities": 0, "connections": 0}

    if dry_run:
        return {
            "users": len(DEMO_USERS),
            "opportunities": len(DEMO_OPPORTUNITIES),
            "connections": 1,
        }

    users = [get_store(USERS).create(u) for u in DEMO_USERS]

    opportunities = []
    for demo in DEMO_OPPORTUNITIES:
        company = users[demo["companyIndex"]]
        fields = {k: v for k, v in demo.items() if k != "companyIndex"}
        opportunities.append(
            get_store(OPPORTUNITIES).create(
                {
                    **fields,
                    "companyId": company["id"],
                    "companyName": company.get("companyName"),
                    "viewCount": 0,
                    "applicantCount": 0,
                }
            )
        )

    get_store(CONNECTIONS).create(
        {
            "lpId": users[2]["id"],
            "companyId": users[1]["id"],
            "opportunityId": opportunities[0]["id"],
            "status": "active",
            "startDate": opportunities[0]["createdAt"],
            "nextMeeting": "TBD",
        }
    )

    counts = {"users": len(users), "opportunities": len(opportunities), "connections": 1}
    log.info("seed_completed", **counts)
    return counts


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed demo marketplace data")
    parser.add_argument("--dry-run", action="store_true", help="Report what would be written")
    parser.add_argument("--force", action="store_true", help="Seed even if users already exist")
    args = parser.parse_args()

    configure_logging(level="INFO")
    counts = seed(dry_run=args.dry_run, force=args.force)
    print(counts)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
