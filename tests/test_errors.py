from sqlalchemy.exc import IntegrityError, OperationalError

from coaching_api.core.errors import ConflictError, get_error_message


def test_database_failure_keeps_driver_message():
    body = get_error_message(OperationalError("SELECT 1", {}, Exception("database is locked")))

    assert body["status_code"] == 500
    assert body["error_code"] == "DB_ERROR"
    assert "database is locked" in body["details"]["error"]
    assert body["details"]["error_type"] == "OperationalError"


def test_integrity_error_is_a_generic_conflict():
    body = get_error_message(IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: batches.batch_code")))

    assert body["status_code"] == 409
    assert body["error_code"] == "CONFLICT"
    assert "details" not in body


def test_api_error_details_are_passed_through():
    body = get_error_message(ConflictError("Email already exists", details={"field": "email"}))

    assert body == {
        "success": False,
        "error_code": "CONFLICT",
        "message": "Email already exists",
        "status_code": 409,
        "details": {"field": "email"},
    }


def test_unhandled_error_carries_its_message():
    body = get_error_message(RuntimeError("boom"))

    assert body["status_code"] == 500
    assert body["details"] == {"error": "boom", "error_type": "RuntimeError"}
