"""One-time verification codes for register / login / password reset.

Codes are stored hashed, keyed by (email, purpose), and expire. A verified
code opens a short window during which the follow-up step (setting a new
password) may run.
"""
import hashlib
import hmac
import secrets
from datetime import datetime, timedelta

import structlog
from flask import current_app
from flask_mail import Message

from extensions import db, mail
from models import VerificationCode
from services.errors import VerificationFailed

logger = structlog.get_logger(__name__)

SUBJECTS = {
    "register": "Confirm your registration",
    "login": "Your login verification code",
    "reset": "Password reset verification code",
}


def generate_code():
    return f"{secrets.randbelow(900000) + 100000}"


def hash_code(code):
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def send_code_email(email, code, purpose, name=None):
    ttl = current_app.config["VERIFICATION_CODE_TTL_MINUTES"]
    msg = Message(subject=SUBJECTS[purpose], recipients=[email])
    msg.body = (
        f"Dear {name or email},\n\n"
        f"Your verification code is: {code}\n"
        f"It expires in {ttl} minutes.\n\n"
        "From, Rental Management"
    )
    mail.send(msg)


def _latest(email, purpose):
    return (
        VerificationCode.query
        .filter_by(email=email, purpose=purpose, used=False)
        .order_by(VerificationCode.issued_at.desc(), VerificationCode.id.desc())
        .first()
    )


def issue_code(email, purpose, payload=None, name=None):
    # Older outstanding codes stop working once a new one is issued
    VerificationCode.query.filter_by(email=email, purpose=purpose, used=False).update({"used": True})

    code = generate_code()
    record = VerificationCode.new_for(
        email,
        purpose,
        hash_code(code),
        current_app.config["VERIFICATION_CODE_TTL_MINUTES"],
        payload=payload,
    )
    db.session.add(record)
    db.session.commit()

    send_code_email(email, code, purpose, name=name)
    logger.info("Verification code issued", email=email, purpose=purpose)
    return record


def resend_code(email, purpose):
    previous = _latest(email, purpose)
    if previous is None:
        raise VerificationFailed("Nothing to resend, please start again.")
    name = (previous.payload or {}).get("name")
    return issue_code(email, purpose, payload=previous.payload, name=name)


def verify_code(email, purpose, code):
    record = _latest(email, purpose)
    if record is None:
        raise VerificationFailed()

    now = datetime.utcnow()
    if record.is_expired(now):
        record.used = True
        db.session.commit()
        logger.warning("Verification code expired", email=email, purpose=purpose)
        raise VerificationFailed("Verification code has expired, please request a new one.")

    record.attempts = (record.attempts or 0) + 1
    if record.attempts > current_app.config["VERIFICATION_MAX_ATTEMPTS"]:
        record.used = True
        db.session.commit()
        logger.warning("Verification attempts exhausted", email=email, purpose=purpose)
        raise VerificationFailed("Too many attempts, please request a new code.")

    if not hmac.compare_digest(record.code_hash, hash_code((code or "").strip())):
        db.session.commit()
        logger.warning("Verification code mismatch", email=email, purpose=purpose, attempts=record.attempts)
        raise VerificationFailed()

    record.used = True
    record.verified_until = now + timedelta(minutes=current_app.config["VERIFICATION_PASS_TTL_MINUTES"])
    db.session.commit()
    logger.info("Verification code accepted", email=email, purpose=purpose)
    return record


def consume_verified(email, purpose):
    """Use up a still-open verified window, or fail."""
    record = (
        VerificationCode.query
        .filter(
            VerificationCode.email == email,
            VerificationCode.purpose == purpose,
            VerificationCode.verified_until.isnot(None),
            VerificationCode.verified_until >= datetime.utcnow(),
        )
        .order_by(VerificationCode.verified_until.desc())
        .first()
    )
    if record is None:
        raise VerificationFailed("Please verify your email first.")
    record.verified_until = None
    return record
