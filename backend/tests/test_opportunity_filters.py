from __future__ import annotations

import copy

from advisor_connect.modules.discovery.opportunity_filters import (
    OpportunityFilters,
    filter_opportunities,
    newest_first,
)
from advisor_connect.modules.identity.roles import Actor, Role

SNAPSHOT = [
    {
        "id": 1,
        "companyId": 10,
        "companyName": "BrightLoop",
        "title": "Go-to-market advisor",
        "description": "Enterprise sales motion",
        "requiredExpertise": ["Digital Marketing", "Sales"],
        "timeCommitment": "5-10 hours/month",
        "status": "open",
        "createdAt": "2024-03-01T10:00:00Z",
    },
    {
        "id": 2,
        "companyId": 11,
        "companyName": "Nimbus Health",
        "title": "Fundraising coach",
        "description": "Series A preparation",
        "requiredExpertise": ["Fundraising"],
        "timeCommitment": "2-4 hours/month",
        "status": "open",
        "createdAt": "2024-03-02T10:00:00Z",
    },
    {
        "id": 3,
        "companyId": 10,
        "companyName": "BrightLoop",
        "title": "Pricing review",
        "description": "One-off pricing workshop",
        "requiredExpertise": ["Pricing"],
        "timeCommitment": "1-2 hours/month",
        "status": "filled",
        "createdAt": "2024-03-03T10:00:00Z",
    },
]

LP = Actor(id=99, role=Role.LP)


def _ids(items):
    return [o["id"] for o in items]


def test_default_browse_shows_open_newest_first():
    assert _ids(filter_opportunities(SNAPSHOT, OpportunityFilters(), LP)) == [2, 1]


def test_status_all_disables_status_filter():
    assert _ids(filter_opportunities(SNAPSHOT, OpportunityFilters(status="all"), LP)) == [3, 2, 1]


def test_company_does_not_see_own_postings():
    company = Actor(id=10, role=Role.COMPANY)
    assert _ids(filter_opportunities(SNAPSHOT, OpportunityFilters(status="all"), company)) == [2]


def test_admin_sees_everything():
    admin = Actor(id=10, role=Role.ADMIN)
    assert _ids(filter_opportunities(SNAPSHOT, OpportunityFilters(status="all"), admin)) == [3, 2, 1]


def test_expertise_is_case_insensitive_substring():
    out = filter_opportunities(SNAPSHOT, OpportunityFilters(status="all", expertise="marketing"), LP)
    assert _ids(out) == [1]


def test_expertise_all_is_ignored():
    out = filter_opportunities(SNAPSHOT, OpportunityFilters(expertise="All"), LP)
    assert _ids(out) == [2, 1]


def test_time_commitment_substring():
    out = filter_opportunities(SNAPSHOT, OpportunityFilters(status="all", time_commitment="2-4"), LP)
    assert _ids(out) == [2]


def test_search_matches_title_description_or_company():
    assert _ids(filter_opportunities(SNAPSHOT, OpportunityFilters(search="FUNDRAISING"), LP)) == [2]
    assert _ids(filter_opportunities(SNAPSHOT, OpportunityFilters(search="enterprise"), LP)) == [1]
    assert _ids(filter_opportunities(SNAPSHOT, OpportunityFilters(status="all", search="brightloop"), LP)) == [3, 1]


def test_filtering_is_pure():
    before = copy.deepcopy(SNAPSHOT)
    filters = OpportunityFilters(status="all", search="a")
    first = filter_opportunities(SNAPSHOT, filters, LP)
    second = filter_opportunities(SNAPSHOT, filters, LP)
    assert first == second
    assert SNAPSHOT == before


def test_newest_first_breaks_ties_by_id():
    same = "2024-01-01T00:00:00Z"
    out = newest_first([{"id": 1, "createdAt": same}, {"id": 2, "createdAt": same}, {"id": 3}])
    assert _ids(out) == [2, 1, 3]
