from __future__ import annotations

import pytest

from advisor_connect.db.memory_store import MemoryEntityStore
from advisor_connect.db.registry import APPLICATIONS, OPPORTUNITIES, get_store, set_store
from advisor_connect.errors import StorageError
from advisor_connect.modules.opportunities.applicant_count_sync import (
    reconcile_all_applicant_counts,
    reconcile_applicant_counts,
    sync_applicant_count,
)


class FailingUpdateStore(MemoryEntityStore):
    def update(self, id, changes):
        raise StorageError(message="write failed", operation="write", collection=self.collection)


class FailingListStore(MemoryEntityStore):
    def list(self):
        raise StorageError(message="read failed", operation="read", collection=self.collection)


def _opp(store, count=0):
    return store.create({"title": "T", "status": "open", "applicantCount": count})


def test_sync_writes_actual_count():
    opp = _opp(get_store(OPPORTUNITIES), count=7)
    get_store(APPLICATIONS).create({"opportunityId": opp["id"], "lpId": 1})
    assert sync_applicant_count(opp["id"]) == 1
    assert get_store(OPPORTUNITIES).get(opp["id"])["applicantCount"] == 1


def test_sync_swallows_storage_errors():
    store = FailingUpdateStore(OPPORTUNITIES)
    set_store(OPPORTUNITIES, store)
    opp = _opp(store, count=3)
    assert sync_applicant_count(opp["id"]) is None
    assert store.get(opp["id"])["applicantCount"] == 3


def test_sync_of_deleted_opportunity_is_none():
    assert sync_applicant_count(123) is None


def test_reconcile_corrects_drifted_counts_only():
    opps = get_store(OPPORTUNITIES)
    drifted = _opp(opps, count=5)
    correct = _opp(opps, count=1)
    apps = get_store(APPLICATIONS)
    apps.create({"opportunityId": drifted["id"], "lpId": 1})
    apps.create({"opportunityId": correct["id"], "lpId": 1})
    apps.create({"opportunityId": drifted["id"], "lpId": 2})

    out = reconcile_applicant_counts([drifted, correct])
    assert [o["applicantCount"] for o in out] == [2, 1]
    assert opps.get(drifted["id"])["applicantCount"] == 2
    # Untouched record is not rewritten.
    assert opps.get(correct["id"])["updatedAt"] == correct["updatedAt"]


def test_reconcile_keeps_caller_annotations():
    opp = _opp(get_store(OPPORTUNITIES), count=4)
    out = reconcile_applicant_counts([{**opp, "matchScore": 80}])
    assert out[0]["matchScore"] == 80
    assert out[0]["applicantCount"] == 0


def test_reconcile_returns_stale_value_when_write_fails():
    store = FailingUpdateStore(OPPORTUNITIES)
    set_store(OPPORTUNITIES, store)
    opp = _opp(store, count=9)
    out = reconcile_applicant_counts([opp])
    assert out[0]["applicantCount"] == 9


def test_reconcile_returns_input_when_applications_unreadable():
    set_store(APPLICATIONS, FailingListStore(APPLICATIONS))
    opp = _opp(get_store(OPPORTUNITIES), count=2)
    assert reconcile_applicant_counts([opp]) == [opp]


def test_reconcile_empty():
    assert reconcile_applicant_counts([]) == []


def test_reconcile_all_reports_every_opportunity():
    opps = get_store(OPPORTUNITIES)
    drifted = _opp(opps, count=4)
    correct = _opp(opps, count=1)
    unset = opps.create({"title": "No count", "status": "closed"})
    apps = get_store(APPLICATIONS)
    apps.create({"opportunityId": correct["id"], "lpId": 1})
    apps.create({"opportunityId": unset["id"], "lpId": 1})

    results = reconcile_all_applicant_counts()
    assert sorted(results, key=lambda r: r["id"]) == [
        {"id": drifted["id"], "title": "T", "previousCount": 4, "actualCount": 0},
        {"id": correct["id"], "title": "T", "previousCount": 1, "actualCount": 1},
        {"id": unset["id"], "title": "No count", "previousCount": 0, "actualCount": 1},
    ]
    assert opps.get(drifted["id"])["applicantCount"] == 0
    assert opps.get(unset["id"])["applicantCount"] == 1
    assert opps.get(correct["id"])["updatedAt"] == correct["updatedAt"]


def test_reconcile_all_propagates_storage_errors():
    store = FailingUpdateStore(OPPORTUNITIES)
    set_store(OPPORTUNITIES, store)
    _opp(store, count=2)
    with pytest.raises(StorageError):
        reconcile_all_applicant_counts()
