"""
Type coercion for feature property values.

Property values arrive as plain JSON scalars. Strings that look like dates
are bound as native timestamps so that the database receives a date value
instead of text; everything else is bound as-is.

The decision is a heuristic over the value alone. A text column holding a
date-like string will receive a timestamp too.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import Any, NamedTuple

# Timestamp with fractional seconds and offset, then date-only with offset.
# Earlier formats take priority.
DEFAULT_DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%d%z",
)


class BoundType(Enum):
    """How a property value is bound to its statement parameter"""

    DATE = "date"
    OBJECT = "object"


class CoercedValue(NamedTuple):
    """A property value ready for binding, with its bound type"""

    bound_type: BoundType
    value: Any


class PropertyCoercer:
    """
    Decides whether property values are dates.

    Each configured ``strptime`` format is tried in order against the value's
    textual form; the first one that parses wins. Parsed values without an
    offset are read as UTC and all results are normalised to UTC, so the same
    string always yields the same instant regardless of the host timezone.

    Example:
        >>> coercer = PropertyCoercer()
        >>> coercer.coerce("2016-01-05+01:00")
        CoercedValue(bound_type=<BoundType.DATE: 'date'>, value=datetime.datetime(2016, 1, 4, 23, 0, tzinfo=datetime.timezone.utc))
        >>> coercer.coerce(42)
        CoercedValue(bound_type=<BoundType.OBJECT: 'object'>, value=42)
    """

    def __init__(self, formats: Sequence[str] = DEFAULT_DATE_FORMATS):
        """
        Args:
            formats: Ordered ``strptime`` formats to attempt. An empty
                sequence disables date detection.
        """
        self.formats = tuple(formats)

    def parse_date(self, text: str) -> datetime | None:
        """Return the UTC instant for ``text``, or None if no format matches"""
        for fmt in self.formats:
            try:
                parsed = datetime.strptime(text, fmt)
            except ValueError:
                continue
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
        return None

    def coerce(self, value: Any) -> CoercedValue:
        """
        Coerce a single property value.

        Args:
            value: Raw property value from the GeoJSON document

        Returns:
            ``(BoundType.DATE, datetime)`` when the value's text matches a
            configured format, ``(BoundType.OBJECT, value)`` otherwise
        """
        if value is None or isinstance(value, datetime):
            return CoercedValue(BoundType.OBJECT, value)

        parsed = self.parse_date(str(value))
        if parsed is not None:
            return CoercedValue(BoundType.DATE, parsed)
        return CoercedValue(BoundType.OBJECT, value)
