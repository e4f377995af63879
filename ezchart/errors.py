"""Error types raised by the summary and palette engines."""
from typing import Any, Optional


class EzChartError(Exception):
    """Base class for all ezchart errors."""
    pass


class ConfigError(EzChartError):
    """Configuration file is missing or fails validation."""
    pass


class DatasetError(EzChartError, ValueError):
    """Base class for problems with a supplied dataset."""
    pass


class MalformedDatasetError(DatasetError):
    """Input matches neither the single-series nor the multi-series shape."""
    pass


class EmptyDatasetError(DatasetError):
    """Dataset holds no data points, so extents are undefined."""
    pass


class NonNumericValueError(DatasetError):
    """A value or coordinate could not be coerced to a finite number.

    Carries enough context to locate the offending point in the caller's
    data: the series key, the point index inside that series and the field.
    """

    def __init__(self, series_key: str, index: int, field: str, raw: Any):
        self.series_key = series_key
        self.index = index
        self.field = field
        self.raw = raw
        super().__init__(
            f"Series '{series_key}' point {index}: field '{field}' "
            f"is not numeric ({raw!r})"
        )


class RotateAlignmentError(DatasetError):
    """Dataset cannot be transposed without losing or mixing points."""
    pass


class InvalidColorError(EzChartError, ValueError):
    """Hex color string has too few hex digits to parse."""

    def __init__(self, color: Any, detail: Optional[str] = None):
        self.color = color
        message = f"Invalid hex color: {color!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
