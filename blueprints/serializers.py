def _iso(value):
    return value.isoformat() if value else None


def page_to_dict(pagination, serializer):
    return {
        "items": [serializer(item) for item in pagination.items],
        "page": pagination.page,
        "pages": pagination.pages,
        "total": pagination.total,
    }


def house_to_dict(house):
    return {
        "id": house.id,
        "owner_email": house.owner_email,
        "room_name": house.room_name,
        "room_type": house.room_type,
        "address": house.address,
        "rooms": house.rooms,
        "bathrooms": house.bathrooms,
        "furnishing": house.furnishing,
        "sqft": house.sqft,
        "other": house.other,
        "image_url": house.image_url,
        "price": str(house.price),
        "start_date": _iso(house.start_date),
        "end_date": _iso(house.end_date),
        "moderation_status": house.moderation_status,
        "availability": house.availability,
        "status": house.status,
    }


def payment_to_dict(payment):
    if payment is None:
        return None
    return {
        "id": payment.id,
        "booking_id": payment.booking_id,
        "method": payment.method,
        "amount": str(payment.amount),
        "status": payment.status,
        "paid_at": _iso(payment.paid_at),
    }


def booking_to_dict(booking):
    return {
        "id": booking.id,
        "house_id": booking.house_id,
        "room_name": booking.house.room_name if booking.house else None,
        "tenant_email": booking.tenant_email,
        "start_date": _iso(booking.start_date),
        "end_date": _iso(booking.end_date),
        "total_price": str(booking.total_price),
        "payment": payment_to_dict(booking.payment),
    }


def review_to_dict(review):
    return {
        "id": review.id,
        "user_email": review.user_email,
        "rating": review.rating,
        "comment": review.comment,
        "created_at": _iso(review.created_at),
    }


def user_to_dict(user):
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "birthday": _iso(user.birthday),
        "photo_url": user.photo_url if user.has_photo else None,
        "status": user.status,
    }


def report_to_dict(rep):
    return {
        "id": rep.id,
        "reporter_email": rep.reporter_email,
        "target_house_id": rep.target_house_id,
        "target_email": rep.target_email,
        "report_type": rep.report_type,
        "details": rep.details,
        "status": rep.status,
        "created_at": _iso(rep.created_at),
    }


def notification_to_dict(notif):
    return {
        "id": notif.id,
        "template": notif.template,
        "data": notif.data,
        "is_read": notif.is_read,
        "created_at": _iso(notif.created_at),
    }
