import asyncio
from datetime import datetime, timedelta

from bson import ObjectId


NOTES = "/api/v1/notifications"


def seed(db, user_id, count, start=datetime(2024, 1, 1, 8, 0)):
    for i in range(count):
        asyncio.run(db["notifications"].insert_one({
            "user_id": ObjectId(user_id),
            "type": "announcement",
            "payload": {"n": i},
            "read": False,
            "created_at": start + timedelta(minutes=i),
        }))


def test_latest_first_with_unread_count(client, db, employee):
    seed(db, employee["id"], 12)
    data = client.get(NOTES, headers=employee["headers"]).json()
    assert len(data["items"]) == 10
    assert data["items"][0]["payload"] == {"n": 11}
    assert data["unread_count"] == 12


def test_mark_read(client, db, employee, other_employee):
    seed(db, employee["id"], 2)
    first = client.get(NOTES, headers=employee["headers"]).json()["items"][0]

    # Not yours
    assert client.patch(f"{NOTES}/{first['id']}/read", headers=other_employee["headers"]).status_code == 404

    response = client.patch(f"{NOTES}/{first['id']}/read", headers=employee["headers"])
    assert response.status_code == 200
    assert response.json()["read"] is True
    data = client.get(NOTES, headers=employee["headers"]).json()
    assert data["unread_count"] == 1
    unread = client.get(NOTES, params={"read": "false"}, headers=employee["headers"]).json()
    assert len(unread["items"]) == 1
    assert unread["items"][0]["id"] != first["id"]


def test_since_cursor(client, db, employee):
    seed(db, employee["id"], 3)
    cursor = client.get(NOTES, headers=employee["headers"]).json()["cursor"]
    assert client.get(NOTES, params={"since": cursor}, headers=employee["headers"]).json()["items"] == []

    seed(db, employee["id"], 1, start=datetime(2024, 1, 2, 8, 0))
    newer = client.get(NOTES, params={"since": cursor}, headers=employee["headers"]).json()
    assert len(newer["items"]) == 1


def test_since_cursor_delivers_every_new_item_in_pages(client, db, employee):
    seed(db, employee["id"], 3)
    cursor = client.get(NOTES, headers=employee["headers"]).json()["cursor"]
    seed(db, employee["id"], 15, start=datetime(2024, 1, 2, 8, 0))

    first = client.get(NOTES, params={"since": cursor}, headers=employee["headers"]).json()
    assert [n["payload"]["n"] for n in first["items"]] == list(range(9, -1, -1))

    second = client.get(NOTES, params={"since": first["cursor"]}, headers=employee["headers"]).json()
    assert [n["payload"]["n"] for n in second["items"]] == [14, 13, 12, 11, 10]

    done = client.get(NOTES, params={"since": second["cursor"]}, headers=employee["headers"]).json()
    assert done["items"] == []
    assert done["cursor"] == second["cursor"]
