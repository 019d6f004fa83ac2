"""Domain errors raised by the booking engine.

Route handlers translate these into HTTP responses; nothing below the route
layer raises ``HTTPException``.
"""


class BookingError(Exception):
    """Base class for booking domain errors."""


class ConfigurationError(BookingError):
    """Business hours or a settings payload are malformed."""


class DataUnavailableError(BookingError):
    """Exclusion data (blocked times, appointments, settings) could not be read."""


class SlotNoLongerAvailable(BookingError):
    """The requested date/time is already taken or is not offered."""

    def __init__(self, message: str = "This time is no longer available. Please choose another slot."):
        super().__init__(message)


class InvalidStatusTransition(BookingError):
    """The requested status change is not allowed from the current status."""
