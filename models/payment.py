from extensions import db

PAYMENT_METHODS = ("card", "bank_transfer", "cash", "qr_code")
# Settled outside the app; wait for an explicit confirmation
DEFERRED_METHODS = ("qr_code",)


class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    booking_id = db.Column(
        db.Integer, db.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    method = db.Column(db.Enum(*PAYMENT_METHODS, name="payment_methods"))
    amount = db.Column(db.Numeric(12, 2), nullable=False)

    # failed / refunded are reserved
    status = db.Column(
        db.Enum("pending", "completed", "failed", "refunded", name="payment_status"),
        nullable=False,
        default="pending"
    )
    paid_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    booking = db.relationship("Booking", back_populates="payment")
