from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from extensions import db

ROLES = ("admin", "owner", "tenant")
PHOTO_ROLES = ("owner", "tenant")


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(100), nullable=False, unique=True)
    name = db.Column(db.String(100), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    birthday = db.Column(db.Date)

    role = db.Column(
        db.Enum(*ROLES, name="user_roles"),
        nullable=False,
        default="tenant"
    )
    # Only owners and tenants carry a photo
    photo_url = db.Column(db.String(255))

    status = db.Column(
        db.Enum("valid", "restricted", name="user_status"),
        default="valid"
    )
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    houses = db.relationship("House", back_populates="owner", cascade="all, delete-orphan")
    bookings = db.relationship("Booking", back_populates="tenant", cascade="all, delete-orphan")
    reviews = db.relationship("HouseReview", back_populates="user", cascade="all, delete-orphan")

    @property
    def has_photo(self):
        return self.role in PHOTO_ROLES

    @property
    def is_restricted(self):
        return self.status == "restricted"

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)
