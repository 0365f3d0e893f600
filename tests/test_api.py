import pytest
from sqlalchemy import update

from coaching_api.models import User

PASSWORD = "secret123"


async def register(client, name, email, role="student", **extra):
    path = {
        "student": "/api/v1/auth/register",
        "teacher": "/api/v1/auth/register/teacher",
        "parent": "/api/v1/auth/register/parent",
    }[role]
    response = await client.post(path, json={"name": name, "email": email, "password": PASSWORD, **extra})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def classroom(client):
    """Teacher with a batch, one enrolled student and that student's parent"""
    teacher = await register(client, "Asha Rao", "asha@brightminds.edu", "teacher")
    student = await register(client, "Ravi Kumar", "ravi@brightminds.edu")
    parent = await register(
        client, "Sunil Kumar", "sunil@brightminds.edu", "parent", student_email="ravi@brightminds.edu"
    )

    response = await client.post(
        "/api/v1/batches",
        json={"batch_code": "jee-a1", "name": "JEE Morning", "class_name": "Class 11"},
        headers=bearer(teacher["token"]),
    )
    assert response.status_code == 201, response.text
    batch = response.json()["data"]

    response = await client.post(
        "/api/v1/batches/join", json={"batch_code": "jee-a1"}, headers=bearer(student["token"])
    )
    assert response.status_code == 200, response.text

    return {"teacher": teacher, "student": student, "parent": parent, "batch": batch}


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert "X-Request-ID" in response.headers


async def test_register_returns_token_in_envelope(client):
    data = await register(client, "Ravi Kumar", "Ravi@BrightMinds.edu")

    assert data["token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "ravi@brightminds.edu"
    assert data["user"]["role"] == "student"
    assert "password_hash" not in data["user"]


async def test_duplicate_registration_is_conflict(client):
    await register(client, "Ravi Kumar", "ravi@brightminds.edu")
    response = await client.post(
        "/api/v1/auth/register",
        json={"name": "Ravi Again", "email": "RAVI@brightminds.edu", "password": PASSWORD},
    )

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["error_code"] == "CONFLICT"
    assert body["status_code"] == 409


async def test_invalid_payload_is_400_with_field_details(client):
    response = await client.post(
        "/api/v1/auth/register", json={"name": "Ravi", "email": "not-an-email", "password": "123"}
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "VALIDATION_ERROR"
    assert set(body["details"]["fields"]) == {"email", "password"}


async def test_login_flows(client):
    await register(client, "Asha Rao", "asha@brightminds.edu", "teacher")

    response = await client.post("/api/v1/auth/login", json={"email": "asha@brightminds.edu", "password": "wrong"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "INVALID_CREDENTIALS"

    response = await client.post(
        "/api/v1/auth/login/student", json={"email": "asha@brightminds.edu", "password": PASSWORD}
    )
    assert response.status_code == 404

    response = await client.post(
        "/api/v1/auth/login/teacher", json={"email": "asha@brightminds.edu", "password": PASSWORD}
    )
    assert response.status_code == 200
    token = response.json()["data"]["token"]

    response = await client.get("/api/v1/auth/me", headers=bearer(token))
    assert response.status_code == 200
    assert response.json()["data"]["role"] == "teacher"


async def test_parent_login_lists_linked_students(client):
    await register(client, "Ravi Kumar", "ravi@brightminds.edu")
    await register(client, "Sunil Kumar", "sunil@brightminds.edu", "parent", student_email="ravi@brightminds.edu")

    response = await client.post(
        "/api/v1/auth/login/parent", json={"email": "sunil@brightminds.edu", "password": PASSWORD}
    )

    assert response.status_code == 200
    linked = response.json()["data"]["linked_students"]
    assert [s["email"] for s in linked] == ["ravi@brightminds.edu"]


async def test_protected_routes_need_a_valid_token(client):
    response = await client.get("/api/v1/batches")
    assert response.status_code == 401
    assert response.json()["error_code"] == "TOKEN_MISSING"

    response = await client.get("/api/v1/batches", headers=bearer("not.a.token"))
    assert response.status_code == 401
    assert response.json()["error_code"] == "TOKEN_MALFORMED"


async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/v1/nowhere")
    assert response.status_code == 404
    assert response.json()["success"] is False


async def test_batch_code_uppercased_and_student_joined(client, classroom):
    assert classroom["batch"]["batch_code"] == "JEE-A1"

    response = await client.get(
        f"/api/v1/batches/{classroom['batch']['id']}", headers=bearer(classroom["teacher"]["token"])
    )
    students = response.json()["data"]["students"]
    assert [s["email"] for s in students] == ["ravi@brightminds.edu"]

    response = await client.post(
        "/api/v1/batches/join", json={"batch_code": "JEE-A1"}, headers=bearer(classroom["student"]["token"])
    )
    assert response.status_code == 409


async def test_student_cannot_create_batch(client, classroom):
    response = await client.post(
        "/api/v1/batches",
        json={"batch_code": "x-1", "name": "Mine", "class_name": "Class 9"},
        headers=bearer(classroom["student"]["token"]),
    )
    assert response.status_code == 403
    assert response.json()["error_code"] == "PERMISSION_DENIED"


async def test_attendance_round_trip_with_parent_access(client, classroom):
    batch_id = classroom["batch"]["id"]
    student_id = classroom["student"]["user"]["id"]
    base = f"/api/v1/batches/{batch_id}/attendance"

    response = await client.post(
        base,
        json={"date": "2024-07-01", "records": [{"student_id": student_id, "status": "present"}]},
        headers=bearer(classroom["teacher"]["token"]),
    )
    assert response.status_code == 201, response.text
    record_id = response.json()["data"]["id"]

    response = await client.post(
        base,
        json={"date": "2024-07-01", "records": [{"student_id": student_id, "status": "absent"}]},
        headers=bearer(classroom["teacher"]["token"]),
    )
    assert response.status_code == 409

    response = await client.get(
        base, params={"student_id": student_id}, headers=bearer(classroom["parent"]["token"])
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["statistics"]["attendance_percentage"] == 100.0
    assert [r["id"] for r in data["student_records"]] == [record_id]

    # Ravi is already linked to Sunil
    response = await client.post(
        "/api/v1/auth/register/parent",
        json={
            "name": "Other Parent",
            "email": "other.parent@brightminds.edu",
            "password": PASSWORD,
            "student_email": "ravi@brightminds.edu",
        },
    )
    assert response.status_code == 409


async def test_parent_without_link_is_forbidden(client, classroom):
    await register(client, "Meena Iyer", "meena@brightminds.edu")
    other_parent = await register(
        client, "Lata Iyer", "lata@brightminds.edu", "parent", student_email="meena@brightminds.edu"
    )

    response = await client.get(
        f"/api/v1/batches/{classroom['batch']['id']}/fees/{classroom['student']['user']['id']}",
        headers=bearer(other_parent["token"]),
    )
    assert response.status_code == 403


async def test_timetable_endpoints(client, classroom):
    base = f"/api/v1/batches/{classroom['batch']['id']}/timetable"
    headers = bearer(classroom["teacher"]["token"])

    for subject in ("Physics", "Chemistry"):
        response = await client.put(f"{base}/Mon/3", json={"subject": subject}, headers=headers)
        assert response.status_code == 200, response.text

    response = await client.get(base, headers=bearer(classroom["student"]["token"]))
    days = response.json()["data"]["days"]
    assert set(days) == {"monday", "tuesday", "wednesday", "thursday", "friday", "saturday"}
    assert [(e["hour"], e["subject"]) for e in days["monday"]] == [(3, "Chemistry")]

    response = await client.put(f"{base}/funday", json={"entries": []}, headers=headers)
    assert response.status_code == 400


async def test_fee_upsert_endpoint(client, classroom):
    base = f"/api/v1/batches/{classroom['batch']['id']}/fees"
    headers = bearer(classroom["teacher"]["token"])
    student_id = classroom["student"]["user"]["id"]

    for amount, status in ((4500, "pending"), (5000, "paid")):
        response = await client.post(
            base,
            json={"student_id": student_id, "amount": amount, "payment_method": "online", "status": status},
            headers=headers,
        )
        assert response.status_code == 200, response.text

    response = await client.get(base, headers=headers)
    records = response.json()["data"]
    assert len(records) == 1
    assert records[0]["amount"] == 5000
    assert records[0]["status"] == "paid"


async def test_tests_and_marks_endpoints(client, classroom):
    base = f"/api/v1/batches/{classroom['batch']['id']}/tests"
    headers = bearer(classroom["teacher"]["token"])
    student_id = classroom["student"]["user"]["id"]

    response = await client.post(
        base, json={"exam_name": "Unit Test 1", "subject": "Physics", "maximum_marks": 50}, headers=headers
    )
    assert response.status_code == 201, response.text
    test_id = response.json()["data"]["id"]

    response = await client.post(
        f"{base}/{test_id}/marks",
        json={"student_marks": [{"student_id": student_id, "marks": 60}]},
        headers=headers,
    )
    assert response.status_code == 400

    response = await client.post(
        f"{base}/{test_id}/marks",
        json={"student_marks": [{"student_id": student_id, "marks": 42}]},
        headers=headers,
    )
    assert response.status_code == 200

    response = await client.get(base, headers=bearer(classroom["student"]["token"]))
    tests = response.json()["data"]
    assert tests[0]["student_marks"] == [{"student_id": student_id, "marks": 42.0, "remarks": None}]


async def test_announcements_newest_first(client, classroom):
    base = f"/api/v1/batches/{classroom['batch']['id']}/announcements"
    headers = bearer(classroom["teacher"]["token"])

    for title in ("Holiday on Friday", "Mock test on Monday"):
        response = await client.post(base, json={"title": title, "content": "Details inside"}, headers=headers)
        assert response.status_code == 201

    response = await client.get(base, headers=bearer(classroom["student"]["token"]))
    titles = [a["title"] for a in response.json()["data"]]
    assert titles == ["Mock test on Monday", "Holiday on Friday"]


async def test_delete_batch(client, classroom):
    batch_id = classroom["batch"]["id"]
    response = await client.delete(f"/api/v1/batches/{batch_id}", headers=bearer(classroom["teacher"]["token"]))
    assert response.status_code == 200

    response = await client.get(f"/api/v1/batches/{batch_id}", headers=bearer(classroom["teacher"]["token"]))
    assert response.status_code == 404


async def test_parent_students_endpoint(client, classroom):
    response = await client.get("/api/v1/parents/me/students", headers=bearer(classroom["parent"]["token"]))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data[0]["student"]["email"] == "ravi@brightminds.edu"
    assert [b["batch_code"] for b in data[0]["batches"]] == ["JEE-A1"]


async def test_disabled_account_loses_access_before_token_expiry(client, classroom, session_factory):
    async with session_factory() as session:
        await session.execute(
            update(User).where(User.id == classroom["teacher"]["user"]["id"]).values(is_active=False)
        )
        await session.commit()

    response = await client.post(
        f"/api/v1/batches/{classroom['batch']['id']}/announcements",
        json={"title": "Still here?", "content": "Checking access"},
        headers=bearer(classroom["teacher"]["token"]),
    )
    assert response.status_code == 401
    assert response.json()["error_code"] == "ACCOUNT_INACTIVE"


async def test_announcement_update_and_delete_routes(client, classroom):
    base = f"/api/v1/batches/{classroom['batch']['id']}/announcements"
    headers = bearer(classroom["teacher"]["token"])

    response = await client.post(base, json={"title": "Old", "content": "Kept"}, headers=headers)
    announcement_id = response.json()["data"]["id"]

    response = await client.put(f"{base}/{announcement_id}", json={"title": "New"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["content"] == "Kept"

    response = await client.delete(f"{base}/{announcement_id}", headers=headers)
    assert response.status_code == 200
    response = await client.get(base, headers=headers)
    assert response.json()["data"] == []
