import pytest

from coaching_api.core.errors import NotFoundError, PermissionDenied, ValidationError
from coaching_api.schemas.enums import PaymentMethod, PaymentStatus
from coaching_api.services import FeeService

from .conftest import caller_for


@pytest.fixture
def fees(db):
    return FeeService(db)


async def test_fee_for_unenrolled_student_is_not_found(fees, batch, teacher, other_student):
    with pytest.raises(NotFoundError):
        await fees.upsert(caller_for(teacher), batch.id, other_student.id, 4500, PaymentMethod.ONLINE)


async def test_second_upsert_overwrites_single_record(fees, batch, teacher, student):
    caller = caller_for(teacher)
    first = await fees.upsert(caller, batch.id, student.id, 4500, PaymentMethod.ONLINE, PaymentStatus.PENDING)
    second = await fees.upsert(
        caller, batch.id, student.id, 5000, PaymentMethod.OFFLINE, PaymentStatus.PAID, remarks="Cash at desk"
    )

    assert first.id == second.id
    records = await fees.list(caller, batch.id)
    assert len(records) == 1
    assert records[0].amount == 5000
    assert records[0].payment_method == PaymentMethod.OFFLINE
    assert records[0].status == PaymentStatus.PAID
    assert records[0].remarks == "Cash at desk"


@pytest.mark.parametrize("amount", [0, -10])
async def test_amount_must_be_positive(fees, batch, teacher, student, amount):
    with pytest.raises(ValidationError):
        await fees.upsert(caller_for(teacher), batch.id, student.id, amount, PaymentMethod.ONLINE)


async def test_unknown_payment_method(fees, batch, teacher, student):
    with pytest.raises(ValidationError):
        await fees.upsert(caller_for(teacher), batch.id, student.id, 100, "cheque")


async def test_student_reads_own_fee_record(fees, batch, teacher, student):
    assert await fees.get(caller_for(student), batch.id, student.id) is None

    await fees.upsert(caller_for(teacher), batch.id, student.id, 4500, PaymentMethod.ONLINE)
    record = await fees.get(caller_for(student), batch.id, student.id)
    assert record.status == PaymentStatus.PENDING


async def test_student_cannot_read_classmate_fees(fees, batch_service, batch, teacher, student, other_student):
    await batch_service.add_students(caller_for(teacher), batch.id, [other_student.id])
    with pytest.raises(PermissionDenied):
        await fees.get(caller_for(student), batch.id, other_student.id)
    with pytest.raises(PermissionDenied):
        await fees.list(caller_for(student), batch.id)
