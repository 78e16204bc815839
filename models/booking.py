from extensions import db


class Booking(db.Model):
    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey("houses.id", ondelete="CASCADE"), nullable=False)
    tenant_email = db.Column(
        db.String(100), db.ForeignKey("users.email", ondelete="CASCADE"), nullable=False
    )

    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    total_price = db.Column(db.Numeric(12, 2), nullable=False)

    created_at = db.Column(db.DateTime, server_default=db.func.now())

    house = db.relationship("House", back_populates="bookings")
    tenant = db.relationship("User", back_populates="bookings")
    payment = db.relationship(
        "Payment", back_populates="booking", uselist=False, cascade="all, delete-orphan"
    )
