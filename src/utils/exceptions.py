"""Custom exception classes."""


class DateParseError(ValueError):
    """Raised when a date string cannot be parsed in strict mode."""
    pass


class InvalidDateError(ValueError):
    """Raised when reading calendar fields of an invalid date."""
    pass
