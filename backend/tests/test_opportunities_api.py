from __future__ import annotations

from advisor_connect.db.registry import APPLICATIONS, OPPORTUNITIES, get_store
from conftest import opportunity_fields


def _post_opportunity(client, headers, **overrides):
    r = client.post("/api/opportunities", json=opportunity_fields(**overrides), headers=headers)
    assert r.status_code == 201, r.text
    return r.json()["opportunity"]


def test_marketplace_scenario(client, make_user, auth_headers):
    company_a = make_user("Company", companyName="Acme Ventures")
    lp_b = make_user("LP")
    company_d = make_user("Company")
    lp_c = make_user("LP")

    opp = _post_opportunity(client, auth_headers(company_a))
    assert opp["status"] == "open"
    assert opp["viewCount"] == 0
    assert opp["applicantCount"] == 0
    assert opp["companyId"] == company_a["id"]

    r = client.post(f"/api/opportunities/{opp['id']}/apply", headers=auth_headers(lp_b))
    assert r.status_code == 201
    assert r.json()["message"] == "Application submitted successfully"
    application_id = r.json()["applicationId"]
    assert get_store(APPLICATIONS).get(application_id)["status"] == "pending"

    listing = client.get("/api/opportunities", headers=auth_headers(lp_b)).json()
    assert listing[0]["id"] == opp["id"]
    assert listing[0]["applicantCount"] == 1
    assert listing[0]["hasApplied"] is True

    r = client.post(f"/api/opportunities/{opp['id']}/apply", headers=auth_headers(lp_b))
    assert r.status_code == 400
    assert r.json()["detail"] == "You have already applied to this opportunity"
    assert len(get_store(APPLICATIONS).list()) == 1
    assert client.get(f"/api/opportunities/{opp['id']}", headers=auth_headers(lp_b)).json()["applicantCount"] == 1

    r = client.patch(f"/api/opportunities/{opp['id']}", json={"status": "filled"}, headers=auth_headers(company_d))
    assert r.status_code == 403
    assert client.get(f"/api/opportunities/{opp['id']}", headers=auth_headers(lp_b)).json()["status"] == "open"

    r = client.patch(f"/api/opportunities/{opp['id']}", json={"status": "filled"}, headers=auth_headers(company_a))
    assert r.status_code == 200
    assert r.json()["opportunity"]["status"] == "filled"

    r = client.post(f"/api/opportunities/{opp['id']}/apply", headers=auth_headers(lp_c))
    assert r.status_code == 400
    assert r.json()["title"] == "Invalid State"
    assert r.json()["detail"] == "This opportunity is not open for applications"


def test_create_validation_error_is_problem_json(client, make_user, auth_headers):
    company = make_user("Company")
    r = client.post(
        "/api/opportunities",
        json=opportunity_fields(timeCommitment="  "),
        headers=auth_headers(company),
    )
    assert r.status_code == 400
    assert r.headers["content-type"].startswith("application/problem+json")
    body = r.json()
    assert body["detail"] == "Time commitment is required"
    assert body["extensions"] == {"field": "timeCommitment"}


def test_lp_cannot_create(client, make_user, auth_headers):
    r = client.post("/api/opportunities", json=opportunity_fields(), headers=auth_headers(make_user("LP")))
    assert r.status_code == 403
    assert r.json()["detail"] == "Access denied. Company role required."


def test_listing_filters_via_query(client, make_user, auth_headers):
    company = make_user("Company")
    lp = make_user("LP")
    h = auth_headers(company)
    _post_opportunity(client, h, title="Marketing lead", requiredExpertise=["Marketing"])
    legal = _post_opportunity(client, h, title="Legal counsel", requiredExpertise=["Legal"])
    filled = _post_opportunity(client, h, title="Done deal")
    client.patch(f"/api/opportunities/{filled['id']}", json={"status": "filled"}, headers=h)

    r = client.get("/api/opportunities", params={"expertise": "legal"}, headers=auth_headers(lp))
    assert [o["id"] for o in r.json()] == [legal["id"]]

    r = client.get("/api/opportunities", params={"status": "all"}, headers=auth_headers(lp))
    assert len(r.json()) == 3

    r = client.get("/api/opportunities", params={"search": "DEAL", "status": "filled"}, headers=auth_headers(lp))
    assert [o["id"] for o in r.json()] == [filled["id"]]


def test_track_view(client, make_user, auth_headers):
    company = make_user("Company")
    opp = _post_opportunity(client, auth_headers(company))
    viewer = auth_headers(make_user("LP"))
    for n in (1, 2, 3):
        r = client.post(f"/api/opportunities/{opp['id']}/view", headers=viewer)
        assert r.status_code == 200
        assert r.json() == {"message": "View tracked successfully", "viewCount": n, "opportunityId": opp["id"]}
    # Plain reads do not count as views.
    assert client.get(f"/api/opportunities/{opp['id']}", headers=viewer).json()["viewCount"] == 3


def test_put_and_delete(client, make_user, auth_headers):
    company = make_user("Company")
    h = auth_headers(company)
    opp = _post_opportunity(client, h)

    r = client.put(f"/api/opportunities/{opp['id']}", json=opportunity_fields(title="Updated"), headers=h)
    assert r.status_code == 200
    assert r.json()["opportunity"]["title"] == "Updated"

    r = client.delete(f"/api/opportunities/{opp['id']}", headers=h)
    assert r.status_code == 200
    assert r.json() == {"message": "Opportunity deleted successfully"}

    r = client.get(f"/api/opportunities/{opp['id']}", headers=h)
    assert r.status_code == 404
    assert r.json()["detail"] == "Opportunity not found"


def test_patch_unknown_field(client, make_user, auth_headers):
    company = make_user("Company")
    h = auth_headers(company)
    opp = _post_opportunity(client, h)
    r = client.patch(f"/api/opportunities/{opp['id']}", json={"budget": 10}, headers=h)
    assert r.status_code == 400


def test_applications_review_flow(client, make_user, auth_headers):
    company = make_user("Company")
    lp = make_user("LP")
    opp = _post_opportunity(client, auth_headers(company))
    application_id = client.post(f"/api/opportunities/{opp['id']}/apply", headers=auth_headers(lp)).json()[
        "applicationId"
    ]

    r = client.get(f"/api/opportunities/{opp['id']}/applications", headers=auth_headers(company))
    assert r.status_code == 200
    assert [a["id"] for a in r.json()] == [application_id]

    r = client.patch(f"/api/applications/{application_id}", json={"status": "reviewed"}, headers=auth_headers(company))
    assert r.status_code == 200
    assert r.json()["application"]["status"] == "reviewed"

    r = client.patch(
        f"/api/opportunities/applications/{application_id}",
        json={"status": "accepted"},
        headers=auth_headers(company),
    )
    assert r.status_code == 200
    assert r.json()["application"]["status"] == "accepted"

    r = client.patch(f"/api/applications/{application_id}", json={"status": "maybe"}, headers=auth_headers(company))
    assert r.status_code == 400

    r = client.get("/api/lp/applications", headers=auth_headers(lp))
    assert [a["status"] for a in r.json()] == ["accepted"]


def test_company_and_lp_views(client, make_user, auth_headers):
    company = make_user("Company")
    lp = make_user("LP", expertiseAreas=["Marketing"])
    _post_opportunity(client, auth_headers(company), requiredExpertise=["Marketing"])

    r = client.get("/api/company/opportunities", headers=auth_headers(company))
    assert r.status_code == 200
    assert len(r.json()) == 1

    r = client.get("/api/lp/opportunities", headers=auth_headers(lp))
    assert r.status_code == 200
    assert r.json()[0]["matchScore"] == 100

    assert client.get("/api/lp/opportunities", headers=auth_headers(company)).status_code == 403
    assert client.get("/api/company/opportunities", headers=auth_headers(lp)).status_code == 403


def test_non_integer_id_is_422(client, make_user, auth_headers):
    r = client.get("/api/opportunities/abc", headers=auth_headers(make_user("LP")))
    assert r.status_code == 422
    assert r.json()["title"] == "Validation Failed"


def test_admin_sync_applicant_counts(client, make_user, auth_headers):
    admin = make_user("Admin")
    company = make_user("Company")
    opp = _post_opportunity(client, auth_headers(company))
    get_store(OPPORTUNITIES).update(opp["id"], {"applicantCount": 9})

    r = client.post("/api/admin/sync-applicant-counts", headers=auth_headers(admin))
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Successfully synced applicant counts for all opportunities"
    assert body["results"] == [
        {"id": opp["id"], "title": "Advisor Needed", "previousCount": 9, "actualCount": 0},
    ]
    assert get_store(OPPORTUNITIES).get(opp["id"])["applicantCount"] == 0


def test_admin_sync_requires_admin(client, make_user, auth_headers):
    for role in ("Company", "LP"):
        r = client.post("/api/admin/sync-applicant-counts", headers=auth_headers(make_user(role)))
        assert r.status_code == 403
        assert r.json()["detail"] == "Access denied. Admin role required."
