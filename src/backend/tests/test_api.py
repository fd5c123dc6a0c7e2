"""End-to-end tests through the HTTP API."""

from .conftest import TOKYO_STATION, auth


def register(client, user_id, latitude=TOKYO_STATION[0], longitude=TOKYO_STATION[1], **extra):
    payload = {"latitude": latitude, "longitude": longitude, "accuracy": 5.0, **extra}
    return client.post("/api/v1/medals", json=payload, headers=auth(user_id))


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to Medal Compass API!"}


def test_register_requires_user(client):
    response = client.post("/api/v1/medals", json={"latitude": 35.0, "longitude": 139.0})
    assert response.status_code == 401


def test_register_and_search(client):
    created = register(client, "alice")
    assert created.status_code == 201
    medal_no = created.json()["medal_no"]

    here = client.get("/api/v1/medals", params={"lat": TOKYO_STATION[0], "lon": TOKYO_STATION[1], "radius": 5})
    north = client.get("/api/v1/medals", params={"lat": 36.6812, "lon": 139.7671, "radius": 5})

    assert here.status_code == 200
    assert [m["medal_no"] for m in here.json()["medals"]] == [medal_no]
    assert here.json()["total"] == 1
    assert north.json() == {"total": 0, "medals": []}


def test_domain_error_body_is_detail_only(client):
    response = client.get("/api/v1/medals/9999", headers=auth("bob"))
    assert response.status_code == 404
    assert response.json() == {"detail": "メダルが見つかりません"}


def test_register_rejects_out_of_range_coordinates(client):
    response = register(client, "alice", latitude=91.0)
    assert response.status_code == 422


def test_low_accuracy_needs_confirmation(client):
    refused = register(client, "alice", accuracy=80.0)
    assert refused.status_code == 428
    body = refused.json()
    assert body["accuracy"] == 80.0
    assert body["threshold"] == 20.0
    assert "登録を続けますか" in body["detail"]

    accepted = register(client, "alice", accuracy=80.0, confirm_low_accuracy=True)
    assert accepted.status_code == 201


def test_medal_detail(client):
    medal_no = register(client, "alice").json()["medal_no"]
    client.post(f"/api/v1/medals/{medal_no}/reports", headers=auth("bob"))
    client.post(f"/api/v1/medals/{medal_no}/collection", headers=auth("bob"))

    detail = client.get(f"/api/v1/medals/{medal_no}", headers=auth("bob")).json()

    assert detail["medal"]["medal_no"] == medal_no
    assert detail["report_count"] == 1
    assert detail["has_reported"] is True
    assert detail["is_collected"] is True
    assert detail["is_own"] is False

    assert client.get("/api/v1/medals/9999", headers=auth("bob")).status_code == 404


def test_delete_is_owner_only(client):
    medal_no = register(client, "alice").json()["medal_no"]

    forbidden = client.delete(f"/api/v1/medals/{medal_no}", headers=auth("mallory"))
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"] == "自分のメダルのみ削除できます"

    assert client.delete(f"/api/v1/medals/{medal_no}", headers=auth("alice")).status_code == 204
    assert client.delete(f"/api/v1/medals/{medal_no}", headers=auth("alice")).status_code == 404


def test_report_flow_invalidates_after_five_reports(client):
    medal_no = register(client, "alice").json()["medal_no"]

    for i in range(4):
        response = client.post(f"/api/v1/medals/{medal_no}/reports", headers=auth(f"reporter-{i}"))
        assert response.status_code == 201
        assert response.json()["medal_invalidated"] is False

    duplicate = client.post(f"/api/v1/medals/{medal_no}/reports", headers=auth("reporter-0"))
    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "既に通報済みです"

    fifth = client.post(f"/api/v1/medals/{medal_no}/reports", headers=auth("reporter-4"))
    assert fifth.json() == {"report_count": 5, "medal_invalidated": True, "user_banned": False}

    search = client.get("/api/v1/medals", params={"lat": TOKYO_STATION[0], "lon": TOKYO_STATION[1]})
    assert search.json()["total"] == 0


def test_collection_endpoints(client):
    medal_no = register(client, "alice").json()["medal_no"]

    collected = client.post(f"/api/v1/medals/{medal_no}/collection", headers=auth("bob"))
    assert collected.status_code == 201
    assert collected.json()["medal_no"] == medal_no

    again = client.post(f"/api/v1/medals/{medal_no}/collection", headers=auth("bob"))
    assert again.status_code == 409
    assert again.json()["detail"] == "既に獲得済みです"

    mine = client.get("/api/v1/users/me/collections", headers=auth("bob")).json()
    assert mine["total"] == 1
    assert mine["collections"][0]["medal_no"] == medal_no

    status = client.get(f"/api/v1/medals/{medal_no}/collection", headers=auth("bob")).json()
    assert status == {"medal_no": medal_no, "is_collected": True}

    assert client.delete(f"/api/v1/medals/{medal_no}/collection", headers=auth("bob")).status_code == 204
    assert client.delete(f"/api/v1/medals/{medal_no}/collection", headers=auth("bob")).status_code == 204

    status = client.get(f"/api/v1/medals/{medal_no}/collection", headers=auth("bob")).json()
    assert status["is_collected"] is False


def test_my_medals_and_summary(client):
    first = register(client, "alice").json()["medal_no"]
    second = register(client, "alice").json()["medal_no"]
    other = register(client, "bob").json()["medal_no"]
    client.post(f"/api/v1/medals/{other}/collection", headers=auth("alice"))

    medals = client.get("/api/v1/users/me/medals", headers=auth("alice")).json()
    assert [m["medal_no"] for m in medals["medals"]] == [second, first]

    summary = client.get("/api/v1/users/me/summary", headers=auth("alice")).json()
    assert summary == {"registered_count": 2, "collected_count": 1}
