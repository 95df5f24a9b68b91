class EphemSearchError(Exception):
    """Base error."""

class InvalidCalendarValue(EphemSearchError, ValueError):
    """Raised when calendar fields do not name a real UTC instant."""

class InvalidObserver(EphemSearchError, ValueError):
    """Raised when an observer's latitude, longitude or height is out of range."""

class UnknownBody(EphemSearchError, KeyError):
    """Raised for a body the provider cannot resolve (e.g. an undefined star slot)."""

class InvalidBody(EphemSearchError, ValueError):
    """Raised when a body is not valid for the requested operation."""

class SearchFailure(EphemSearchError, RuntimeError):
    """Raised when an event that must exist could not be located."""

class ProviderUnavailable(EphemSearchError, RuntimeError):
    """Raised when an optional provider (e.g. JPL kernels) is not installed."""
