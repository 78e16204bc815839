"""Errors raised by the service layer and recovered at the request boundary."""


class RentalError(Exception):
    status_code = 400
    default_message = "Request could not be completed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(RentalError):
    status_code = 404
    default_message = "Not found."


class InvalidRange(RentalError):
    status_code = 400
    default_message = "Invalid date range."


class DateConflict(RentalError):
    status_code = 409
    default_message = "The selected dates are already booked."


class AlreadyFinalized(RentalError):
    status_code = 409
    default_message = "This payment has already been completed."


class Forbidden(RentalError):
    status_code = 403
    default_message = "You are not allowed to do this."


class InvalidInput(RentalError):
    status_code = 400
    default_message = "Invalid input."


class VerificationFailed(RentalError):
    status_code = 400
    default_message = "Verification code is invalid or has expired."
