from datetime import date, datetime, timedelta

import pytest

from extensions import db
from models import House, Payment, Notification
from services import bookings, payments
from services.errors import NotFound, AlreadyFinalized, InvalidInput


@pytest.fixture
def booking_id(people, house_id, ctx):
    return bookings.create_booking(house_id, people["tenant"], date(2024, 1, 1), date(2024, 1, 2)).id


@pytest.mark.parametrize("method", ["card", "bank_transfer", "cash"])
def test_immediate_methods_complete(booking_id, method):
    payment = payments.record_payment_method(booking_id, method)

    assert payment.status == "completed"
    assert payment.method == method
    assert payment.paid_at is not None


def test_qr_code_stays_pending_until_confirmed(booking_id):
    payment = payments.record_payment_method(booking_id, "qr_code")
    assert payment.status == "pending"
    assert payment.paid_at is None
    assert Notification.query.filter_by(template="payment_completed").count() == 0

    confirmed = payments.confirm_pending(booking_id)
    assert confirmed.status == "completed"
    assert confirmed.method == "qr_code"
    assert confirmed.paid_at is not None


def test_paid_at_is_utc(booking_id):
    before = datetime.utcnow()
    payment = payments.record_payment_method(booking_id, "card")
    after = datetime.utcnow()

    assert before - timedelta(seconds=1) <= payment.paid_at <= after + timedelta(seconds=1)


def test_completion_notifies_tenant_and_owner(people, booking_id):
    payments.record_payment_method(booking_id, "card")

    notifs = Notification.query.filter_by(template="payment_completed").all()
    assert {n.recipient_email for n in notifs} == {people["tenant"], people["owner"]}
    assert notifs[0].data["booking_id"] == booking_id
    assert notifs[0].data["method"] == "card"


def test_confirming_completed_payment_is_refused(booking_id):
    payments.record_payment_method(booking_id, "cash")
    before = Payment.query.filter_by(booking_id=booking_id).one()
    paid_at = before.paid_at

    with pytest.raises(AlreadyFinalized):
        payments.confirm_pending(booking_id)

    after = Payment.query.filter_by(booking_id=booking_id).one()
    assert after.status == "completed"
    assert after.method == "cash"
    assert after.paid_at == paid_at


def test_changing_method_after_completion_is_refused(booking_id):
    payments.record_payment_method(booking_id, "card")
    with pytest.raises(AlreadyFinalized):
        payments.record_payment_method(booking_id, "cash")
    assert Payment.query.filter_by(booking_id=booking_id).one().method == "card"


def test_pending_method_can_be_switched(booking_id):
    payments.record_payment_method(booking_id, "qr_code")
    payment = payments.record_payment_method(booking_id, "card")
    assert payment.status == "completed"
    assert Payment.query.count() == 1


def test_unknown_method(booking_id):
    with pytest.raises(InvalidInput):
        payments.record_payment_method(booking_id, "bitcoin")


def test_missing_booking(ctx):
    with pytest.raises(NotFound):
        payments.record_payment_method(123, "card")


def test_confirm_without_payment(booking_id):
    db.session.delete(Payment.query.filter_by(booking_id=booking_id).one())
    db.session.commit()

    with pytest.raises(NotFound):
        payments.confirm_pending(booking_id)


def test_record_creates_payment_when_missing(booking_id):
    db.session.delete(Payment.query.filter_by(booking_id=booking_id).one())
    db.session.commit()

    payment = payments.record_payment_method(booking_id, "bank_transfer")
    assert payment.status == "completed"
    assert str(payment.amount) in ("200", "200.00")


def test_completion_recomputes_house_status(people, house_id, ctx):
    booking = bookings.create_booking(house_id, people["tenant"], date(2024, 1, 1), date(2024, 1, 5))
    house = db.session.get(House, house_id)

    # drifted out of sync, e.g. edited by hand
    house.availability = "available"
    db.session.commit()

    payments.record_payment_method(booking.id, "qr_code")
    assert house.availability == "available"

    payments.confirm_pending(booking.id)
    assert house.availability == "rented"
