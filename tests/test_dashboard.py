SUMMARY = "/api/v1/dashboard/summary"


def test_reviewer_summary(client, admin, hr, employee):
    client.post("/api/v1/leaves", json={"leave_type": "early-out", "start_date": "2024-06-01", "time": "15:00"}, headers=employee["headers"])
    client.post("/api/v1/rooms", json={"name": "Ops"}, headers=hr["headers"])
    client.post(
        "/api/v1/documents",
        data={"user_id": employee["id"]},
        files={"file": ("slip.pdf", b"%PDF", "application/pdf")},
        headers=admin["headers"],
    )

    data = client.get(SUMMARY, headers=hr["headers"]).json()
    assert data == {
        "role": "hr",
        "total_employees": 3,
        "pending_leaves": 1,
        "total_documents": 1,
        "chat_rooms": 1,
    }


def test_employee_summary_is_personal(client, admin, hr, employee, other_employee):
    client.post("/api/v1/leaves", json={"leave_type": "early-out", "start_date": "2024-06-01", "time": "15:00"}, headers=employee["headers"])
    client.post("/api/v1/leaves", json={"leave_type": "early-out", "start_date": "2024-06-01", "time": "15:00"}, headers=other_employee["headers"])
    room = client.post("/api/v1/rooms", json={"name": "Ops"}, headers=hr["headers"]).json()
    client.post("/api/v1/rooms/join", json={"room_code": room["room_code"]}, headers=employee["headers"])

    data = client.get(SUMMARY, headers=employee["headers"]).json()
    assert data == {"role": "employee", "my_documents": 0, "my_pending_leaves": 1, "my_rooms": 1}
