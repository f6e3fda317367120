class AvailabilityUnavailable(Exception):
    """The slots API could not be reached, or kept failing after retries."""


class SlotValidationWarning(UserWarning):
    """Too many slots in one response failed validation."""
