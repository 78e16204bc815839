"""Payment state machine: pending -> completed.

Cancelling a booking removes its payment outright, there is no cancelled
state. ``failed`` and ``refunded`` exist in the schema but nothing here
moves a payment into them.
"""
from datetime import datetime

import structlog

from extensions import db
from models import Booking, Payment
from models.payment import PAYMENT_METHODS, DEFERRED_METHODS
from services import house_status
from services.errors import NotFound, AlreadyFinalized, InvalidInput
from services.notifications import notify, booking_data
from services.transaction import atomic, lock_row

logger = structlog.get_logger(__name__)


def _complete(payment):
    payment.status = "completed"
    payment.paid_at = datetime.utcnow()

    booking = payment.booking
    house_status.recompute(booking.house)

    data = booking_data(booking)
    data["method"] = payment.method
    notify(booking.tenant_email, "payment_completed", data)
    if booking.house.owner_email != booking.tenant_email:
        notify(booking.house.owner_email, "payment_completed", data)

    logger.info(
        "Payment completed",
        payment_id=payment.id,
        booking_id=booking.id,
        method=payment.method,
        amount=str(payment.amount),
    )


def record_payment_method(booking_id, method):
    if method not in PAYMENT_METHODS:
        raise InvalidInput(f"Unknown payment method: {method}")

    with atomic():
        booking = db.session.get(Booking, booking_id)
        if booking is None:
            raise NotFound("Booking not found.")

        payment = lock_row(Payment, Payment.booking_id == booking.id)
        if payment is None:
            payment = Payment(booking=booking, status="pending")
            db.session.add(payment)
        elif payment.status != "pending":
            raise AlreadyFinalized()

        payment.method = method
        payment.amount = booking.total_price
        db.session.flush()

        if method in DEFERRED_METHODS:
            logger.info("Payment awaiting confirmation", booking_id=booking.id, method=method)
        else:
            _complete(payment)

    return payment


def confirm_pending(booking_id):
    with atomic():
        payment = lock_row(Payment, Payment.booking_id == booking_id)
        if payment is None:
            raise NotFound("No payment found for this booking.")
        if payment.status != "pending":
            raise AlreadyFinalized()
        _complete(payment)

    return payment
