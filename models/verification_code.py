from extensions import db
from datetime import datetime, timedelta

PURPOSES = ("register", "login", "reset")


class VerificationCode(db.Model):
    __tablename__ = "verification_codes"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(100), nullable=False, index=True)
    purpose = db.Column(db.Enum(*PURPOSES, name="verification_purpose"), nullable=False)
    code_hash = db.Column(db.String(128), nullable=False)   # SHA-256
    issued_at = db.Column(db.DateTime, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=False)
    used = db.Column(db.Boolean, default=False)
    attempts = db.Column(db.Integer, default=0)
    # Set once the code is verified; reset flow must finish before this
    verified_until = db.Column(db.DateTime)
    # Pending registration form, password already hashed
    payload = db.Column(db.JSON)

    @classmethod
    def new_for(cls, email, purpose, code_hash, ttl_minutes, payload=None):
        now = datetime.utcnow()
        return cls(
            email=email,
            purpose=purpose,
            code_hash=code_hash,
            issued_at=now,
            expires_at=now + timedelta(minutes=ttl_minutes),
            payload=payload,
        )

    def is_expired(self, now=None):
        return (now or datetime.utcnow()) > self.expires_at
