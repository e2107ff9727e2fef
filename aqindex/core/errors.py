from __future__ import annotations


class AqiRangeError(ValueError):
    """Integer AQI outside the 0-500 scale."""

    def __init__(self, message: str = "Value is out of range for AQI") -> None:
        super().__init__(message)


class StandardPackError(ValueError):
    """Breakpoint pack that breaks the ordering or range rules of a table."""
