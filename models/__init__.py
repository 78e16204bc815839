from .user import User
from .house import House
from .house_image import HouseImage
from .house_review import HouseReview
from .booking import Booking
from .payment import Payment
from .report import Report
from .notification import Notification
from .verification_code import VerificationCode


__all__ = ["User", "House", "HouseImage", "HouseReview", "Booking", "Payment", "Report", "Notification", "VerificationCode"]
