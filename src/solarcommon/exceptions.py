"""Package-level exceptions.

Callers can catch ``SolarCommonError`` for anything raised by this package;
each subclass also derives from the builtin a plain Python caller would
expect (``LookupError``, ``ValueError``, ``TypeError``).
"""


class SolarCommonError(Exception):
    """Base class for errors raised by solarcommon."""


class OptionalServiceNotAvailableError(SolarCommonError, LookupError):
    """Raised when a required optional service cannot be resolved."""


class JsonMappingError(SolarCommonError, ValueError):
    """Raised when a value cannot be converted to or from JSON."""


class ImmutableSetError(SolarCommonError, TypeError):
    """Raised when mutating an immutable IntRangeSet."""
