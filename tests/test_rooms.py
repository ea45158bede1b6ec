import asyncio
from datetime import datetime

from bson import ObjectId


ROOMS = "/api/v1/rooms"


def create_room(client, user, name="Daily Standup"):
    return client.post(ROOMS, json={"name": name}, headers=user["headers"])


def test_reviewer_creates_room_and_auto_joins(client, hr):
    response = create_room(client, hr)
    assert response.status_code == 201, response.text
    room = response.json()
    assert len(room["room_code"]) == 6
    assert room["room_code"] == room["room_code"].upper()
    assert room["created_by"] == hr["id"]

    mine = client.get(ROOMS, headers=hr["headers"]).json()
    assert [r["id"] for r in mine] == [room["id"]]


def test_employee_cannot_create_room(client, employee):
    assert create_room(client, employee).status_code == 403


def test_join_by_code_is_case_insensitive_and_idempotent(client, hr, employee):
    room = create_room(client, hr).json()
    assert client.get(ROOMS, headers=employee["headers"]).json() == []

    for _ in range(2):
        joined = client.post(f"{ROOMS}/join", json={"room_code": room["room_code"].lower()}, headers=employee["headers"])
        assert joined.status_code == 200
        assert joined.json()["id"] == room["id"]
    assert len(client.get(ROOMS, headers=employee["headers"]).json()) == 1


def test_unknown_code(client, employee):
    response = client.post(f"{ROOMS}/join", json={"room_code": "NOPE42"}, headers=employee["headers"])
    assert response.status_code == 404
    assert response.json() == {"detail": "Invalid room code"}


def test_work_logs_need_membership(client, hr, employee):
    room = create_room(client, hr).json()
    logs = f"{ROOMS}/{room['id']}/logs"
    assert client.get(logs, headers=employee["headers"]).status_code == 403
    assert client.post(logs, json={"log_date": "2024-03-01", "tasks": "x"}, headers=employee["headers"]).status_code == 403


def test_work_logs_ordered_by_log_date(client, hr, employee):
    room = create_room(client, hr).json()
    client.post(f"{ROOMS}/join", json={"room_code": room["room_code"]}, headers=employee["headers"])
    logs = f"{ROOMS}/{room['id']}/logs"

    first = client.post(logs, json={"log_date": "2024-03-01", "log_time": "09:30", "tasks": "Triage"}, headers=employee["headers"])
    assert first.status_code == 201, first.text
    assert first.json()["log_time"] == "09:30"
    client.post(logs, json={"log_date": "2024-03-04", "tasks": "Release"}, headers=hr["headers"])
    client.post(logs, json={"log_date": "2024-03-02", "tasks": "Review"}, headers=employee["headers"])

    data = client.get(logs, headers=employee["headers"]).json()
    assert [i["tasks"] for i in data["items"]] == ["Release", "Review", "Triage"]
    assert data["cursor"] in {i["created_at"] for i in data["items"]}


def test_polling_with_since_returns_only_new_logs(client, hr, db):
    room = create_room(client, hr).json()
    logs = f"{ROOMS}/{room['id']}/logs"
    asyncio.run(db["work_logs"].insert_one({
        "room_id": ObjectId(room["id"]),
        "user_id": ObjectId(hr["id"]),
        "log_date": datetime(2024, 3, 1),
        "log_time": None,
        "tasks": "Old",
        "created_at": datetime(2024, 3, 1, 18, 0),
    }))
    cursor = client.get(logs, headers=hr["headers"]).json()["cursor"]

    quiet = client.get(logs, params={"since": cursor}, headers=hr["headers"]).json()
    assert quiet["items"] == []
    assert quiet["cursor"] == cursor

    client.post(logs, json={"log_date": "2024-03-01", "tasks": "New"}, headers=hr["headers"])
    fresh = client.get(logs, params={"since": cursor}, headers=hr["headers"]).json()
    assert [i["tasks"] for i in fresh["items"]] == ["New"]
