from extensions import db


class House(db.Model):
    __tablename__ = "houses"

    id = db.Column(db.Integer, primary_key=True)
    owner_email = db.Column(
        db.String(100), db.ForeignKey("users.email", ondelete="CASCADE"), nullable=False
    )

    room_name = db.Column(db.String(100), nullable=False)
    room_type = db.Column(db.String(50), nullable=False)
    address = db.Column(db.String(200), nullable=False)
    rooms = db.Column(db.Integer, default=1)
    bathrooms = db.Column(db.Integer, default=1)
    furnishing = db.Column(db.String(50))
    sqft = db.Column(db.Integer, default=0)
    other = db.Column(db.Text)
    image_url = db.Column(db.String(255))

    price = db.Column(db.Numeric(10, 2), nullable=False)  # per day

    # Rental window; both null means no windowed commitment
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)

    # Set by admins only
    moderation_status = db.Column(
        db.Enum("valid", "restricted", name="house_moderation_status"),
        nullable=False,
        default="valid"
    )
    # Derived from bookings only
    availability = db.Column(
        db.Enum("available", "rented", name="house_availability"),
        nullable=False,
        default="available"
    )

    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    owner = db.relationship("User", back_populates="houses")
    bookings = db.relationship("Booking", back_populates="house", cascade="all, delete-orphan")
    images = db.relationship("HouseImage", back_populates="house", cascade="all, delete-orphan")
    reviews = db.relationship("HouseReview", back_populates="house", cascade="all, delete-orphan")
    reports = db.relationship("Report", back_populates="target_house")

    @property
    def has_window(self):
        return (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date <= self.end_date
        )

    @property
    def status(self):
        """Display status: moderation outranks booking-derived availability."""
        if self.moderation_status == "restricted":
            return "restricted"
        return self.availability
