class ValidationError(ValueError):
    """Bad caller input; rejected before it reaches storage."""


class InvalidAmount(ValidationError):
    """A currency conversion produced a non-finite or non-positive amount."""


class StoreUnavailable(RuntimeError):
    """The persistence backend failed. Safe to retry; no partial writes."""


class RateUnavailable(RuntimeError):
    """The exchange-rate source could not supply a usable rate."""
