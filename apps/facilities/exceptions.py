"""
Errors raised by the facilities services.

They are raised inside a unit of work, so the surrounding transaction is
rolled back before the view turns them into an HTTP response.
"""


class FacilityError(Exception):
    """Base error with a stable code for API clients."""

    code = "FACILITY_ERROR"
    status_code = 400
    default_message = "Facility request failed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code}


class ResourceUnavailableError(FacilityError):
    """Resource is missing or under maintenance."""

    code = "RESOURCE_UNAVAILABLE"
    default_message = "Resource is not available or under maintenance."


class SlotTakenError(FacilityError):
    """A CONFIRMED or ACTIVE booking already holds the requested start time."""

    code = "SLOT_TAKEN"
    status_code = 409
    default_message = "This slot was just taken by someone else."

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["actionRequired"] = "JOIN_WAITLIST"
        return payload


class AlreadyWaitingError(FacilityError):
    code = "ALREADY_WAITING"
    default_message = "You are already on the waitlist."


class InvalidBookingStateError(FacilityError):
    """Only CONFIRMED bookings can be cancelled."""

    code = "INVALID_STATE"
    default_message = "Invalid booking"


class InvalidTimeRangeError(FacilityError):
    code = "INVALID_TIME_RANGE"
    default_message = "End time must be after start time."


class ResourceNotFoundError(FacilityError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found."


class BookingNotFoundError(FacilityError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Booking not found."
