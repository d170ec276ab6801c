import xml.etree.ElementTree as ET

from app.models.assignment import Assignment
from app.models.late_policy import LatePolicy


def form(policy_name="Standard", penalty_per_unit=5, penalty_unit="Day", max_penalty=50):
    return {
        "late_policy": {
            "policy_name": policy_name,
            "penalty_per_unit": penalty_per_unit,
            "penalty_unit": penalty_unit,
            "max_penalty": max_penalty,
        }
    }


def login(client, email: str, password: str = "password123") -> dict:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def test_listing_requires_authentication(client):
    r = client.get("/late_policies")
    assert r.status_code == 401


def test_student_is_denied_everywhere(client, auth_headers, users, make_policy):
    policy = make_policy(users["instructor"])
    headers = auth_headers["student"]

    assert client.get("/late_policies", headers=headers).status_code == 403
    assert client.get("/late_policies/new", headers=headers).status_code == 403
    assert client.get(f"/late_policies/{policy.id}", headers=headers).status_code == 403
    assert client.get(f"/late_policies/{policy.id}/edit", headers=headers).status_code == 403
    assert client.post("/late_policies", headers=headers, json=form("Other")).status_code == 403
    assert client.put(f"/late_policies/{policy.id}", headers=headers, json=form()).status_code == 403
    assert client.delete(f"/late_policies/{policy.id}", headers=headers).status_code == 403


def test_create_redirects_to_index_with_notice(client, db):
    headers = login(client, "instructor1@example.com")

    r = client.post("/late_policies", headers=headers, json=form("Standard"), follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"].endswith("/late_policies")

    page = client.get("/late_policies", headers=headers)
    assert page.status_code == 200
    body = page.json()
    assert body["flash"]["notice"] == "The late policy was successfully created."
    assert [p["policy_name"] for p in body["late_policies"]] == ["Standard"]

    # flash is shown once
    assert client.get("/late_policies", headers=headers).json()["flash"]["notice"] is None


def test_ta_creates_policy_for_their_instructor(client, auth_headers, users, db):
    r = client.post("/late_policies", headers=auth_headers["ta"], json=form("TA made"), follow_redirects=False)
    assert r.status_code == 303

    policy = db.query(LatePolicy).filter(LatePolicy.policy_name == "TA made").one()
    assert policy.instructor_id == users["instructor"]


def test_create_invalid_redirects_to_new_with_error(client, auth_headers, db):
    headers = auth_headers["instructor"]

    r = client.post("/late_policies", headers=headers, json=form(penalty_per_unit=5, max_penalty=3),
                    follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"].endswith("/late_policies/new")
    page = client.get("/late_policies/new", headers=headers).json()
    assert "must be between the penalty per unit and 100" in page["flash"]["error"]
    assert page["late_policy"]["id"] is None
    assert db.query(LatePolicy).count() == 0


def test_create_negative_penalty_per_unit(client, auth_headers):
    headers = auth_headers["instructor"]

    client.post("/late_policies", headers=headers, json=form(penalty_per_unit=-1, max_penalty=10), follow_redirects=False)

    page = client.get("/late_policies/new", headers=headers).json()
    assert page["flash"]["error"] == "Penalty per unit cannot be negative."


def test_create_duplicate_name(client, auth_headers, users, make_policy):
    make_policy(users["instructor"], policy_name="Standard")
    headers = auth_headers["instructor"]

    client.post("/late_policies", headers=headers, json=form("Standard"), follow_redirects=False)

    page = client.get("/late_policies/new", headers=headers).json()
    assert page["flash"]["error"] == "A policy with the same name Standard already exists."


def test_integer_like_strings_are_accepted(client, auth_headers, db):
    headers = auth_headers["instructor"]

    r = client.post("/late_policies", headers=headers, json=form("Lenient", penalty_per_unit="2", max_penalty=" 20 points"),
                    follow_redirects=False)

    assert r.headers["location"].endswith("/late_policies")
    policy = db.query(LatePolicy).filter(LatePolicy.policy_name == "Lenient").one()
    assert (policy.penalty_per_unit, policy.max_penalty) == (2, 20)


def test_index_lists_own_and_public_policies(client, auth_headers, users, make_policy):
    mine = make_policy(users["instructor"], policy_name="Mine")
    public = make_policy(users["other_instructor"], policy_name="Public", private=False)
    make_policy(users["other_instructor"], policy_name="Hidden")

    body = client.get("/late_policies", headers=auth_headers["instructor"]).json()

    assert [p["id"] for p in body["late_policies"]] == [mine.id, public.id]


def test_index_xml_export(client, auth_headers, users, make_policy):
    make_policy(users["instructor"], policy_name="Mine", penalty_per_unit=3, max_penalty=30)

    r = client.get("/late_policies", params={"format": "xml"}, headers=auth_headers["instructor"])

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/xml")
    root = ET.fromstring(r.content)
    assert root.tag == "late-policies"
    assert root.get("type") == "array"
    item = root.find("late-policy")
    assert item.findtext("policy-name") == "Mine"
    assert item.findtext("max-penalty") == "30"
    assert item.find("private").text == "true"


def test_show_returns_record_and_404s(client, auth_headers, users, make_policy):
    policy = make_policy(users["other_instructor"], policy_name="Theirs", private=False)

    r = client.get(f"/late_policies/{policy.id}", headers=auth_headers["ta"])
    assert r.status_code == 200
    assert r.json()["policy_name"] == "Theirs"

    xml = client.get(f"/late_policies/{policy.id}", params={"format": "xml"}, headers=auth_headers["ta"])
    assert ET.fromstring(xml.content).findtext("policy-name") == "Theirs"

    assert client.get("/late_policies/999999", headers=auth_headers["ta"]).status_code == 404


def test_edit_page_for_owner_only(client, auth_headers, users, make_policy):
    policy = make_policy(users["instructor"], policy_name="Mine")

    r = client.get(f"/late_policies/{policy.id}/edit", headers=auth_headers["ta"])
    assert r.status_code == 200
    assert r.json()["late_policy"]["policy_name"] == "Mine"

    assert client.get(f"/late_policies/{policy.id}/edit", headers=auth_headers["other_instructor"]).status_code == 403
    assert client.get("/late_policies/999999/edit", headers=auth_headers["instructor"]).status_code == 404


def test_update_changes_fields_but_not_owner(client, auth_headers, users, make_policy, db):
    policy = make_policy(users["instructor"], policy_name="Mine", max_penalty=40)
    headers = auth_headers["instructor"]

    r = client.patch(f"/late_policies/{policy.id}", headers=headers,
                     json=form("Renamed", penalty_per_unit=2, penalty_unit="Hour", max_penalty=60),
                     follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"].endswith("/late_policies")
    db.refresh(policy)
    assert (policy.policy_name, policy.penalty_per_unit, policy.penalty_unit, policy.max_penalty) == (
        "Renamed", 2, "Hour", 60
    )
    assert policy.instructor_id == users["instructor"]
    assert client.get("/late_policies", headers=headers).json()["flash"]["notice"] == (
        "The late policy was successfully updated."
    )


def test_update_invalid_redirects_to_edit(client, auth_headers, users, make_policy):
    make_policy(users["instructor"], policy_name="Taken")
    policy = make_policy(users["instructor"], policy_name="Mine")
    headers = auth_headers["instructor"]

    r = client.put(f"/late_policies/{policy.id}", headers=headers, json=form("Taken", max_penalty=101),
                   follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"].endswith(f"/late_policies/{policy.id}/edit")
    error = client.get(f"/late_policies/{policy.id}/edit", headers=headers).json()["flash"]["error"]
    assert error.split("\n") == [
        "Cannot edit the policy. A policy with the same name Taken already exists.",
        "Cannot edit the policy. The maximum penalty must be between the penalty per unit and 100.",
    ]


def test_update_missing_policy_is_404(client, auth_headers):
    r = client.put("/late_policies/999999", headers=auth_headers["instructor"], json=form())
    assert r.status_code == 404


def test_update_by_non_owner_is_denied(client, auth_headers, users, make_policy, db):
    policy = make_policy(users["instructor"], max_penalty=40)

    r = client.put(f"/late_policies/{policy.id}", headers=auth_headers["other_instructor"], json=form(max_penalty=90))

    assert r.status_code == 403
    db.refresh(policy)
    assert policy.max_penalty == 40


def test_destroy_unused_policy(client, auth_headers, users, make_policy, db):
    policy = make_policy(users["instructor"])

    r = client.delete(f"/late_policies/{policy.id}", headers=auth_headers["instructor"], follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"].endswith("/late_policies")
    assert db.query(LatePolicy).count() == 0
    assert client.get("/late_policies", headers=auth_headers["instructor"]).json()["flash"] == {
        "notice": None,
        "error": None,
    }


def test_destroy_policy_in_use(client, auth_headers, users, make_policy, db):
    policy = make_policy(users["instructor"])
    db.add(Assignment(instructor_id=users["instructor"], title="HW1", late_policy_id=policy.id))
    db.commit()
    headers = auth_headers["instructor"]

    r = client.delete(f"/late_policies/{policy.id}", headers=headers, follow_redirects=False)

    assert r.status_code == 303
    assert r.headers["location"].endswith("/late_policies")
    assert client.get("/late_policies", headers=headers).json()["flash"]["error"] == (
        "This policy is in use and hence cannot be deleted."
    )
    assert db.query(LatePolicy).count() == 1


def test_student_is_denied_for_missing_ids_too(client, auth_headers):
    headers = auth_headers["student"]

    assert client.get("/late_policies/999999", headers=headers).status_code == 403
    assert client.get("/late_policies/999999/edit", headers=headers).status_code == 403
    assert client.put("/late_policies/999999", headers=headers, json=form()).status_code == 403
    assert client.delete("/late_policies/999999", headers=headers).status_code == 403


def test_xml_export_drops_control_characters(client, auth_headers, users, make_policy):
    make_policy(users["instructor"], policy_name="Late\x01 work\x1f")

    r = client.get("/late_policies", params={"format": "xml"}, headers=auth_headers["instructor"])

    assert r.status_code == 200
    root = ET.fromstring(r.content)
    assert root.find("late-policy").findtext("policy-name") == "Late work"
