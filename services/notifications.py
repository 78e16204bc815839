import structlog

from extensions import db
from models import Notification

logger = structlog.get_logger(__name__)


def notify(recipient_email, template, data=None):
    """Queue a notification request; delivery is someone else's job."""
    notif = Notification(recipient_email=recipient_email, template=template, data=data or {})
    db.session.add(notif)
    logger.info("Notification queued", recipient=recipient_email, template=template)
    return notif


def booking_data(booking):
    return {
        "booking_id": booking.id,
        "house_id": booking.house_id,
        "room_name": booking.house.room_name if booking.house else None,
        "start_date": booking.start_date.isoformat(),
        "end_date": booking.end_date.isoformat(),
        "total_price": str(booking.total_price),
    }


def list_for(email):
    return (
        Notification.query
        .filter_by(recipient_email=email)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )


def mark_all_read(email):
    Notification.query.filter_by(recipient_email=email, is_read=False).update({"is_read": True})
    db.session.commit()
