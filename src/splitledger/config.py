"""Runtime configuration, read from SPLITLEDGER_* environment variables."""

import os
from decimal import Decimal, InvalidOperation

from .errors import InvalidInputError

# One cent in a decimal currency
DEFAULT_TOLERANCE = Decimal("0.01")
CENT = Decimal("0.01")
DEFAULT_CURRENCY = "USD"
DEFAULT_LOG_LEVEL = "WARNING"


def get_tolerance() -> Decimal:
    """Get the settlement tolerance, respecting SPLITLEDGER_TOLERANCE env var."""
    raw = os.environ.get("SPLITLEDGER_TOLERANCE")
    if not raw:
        return DEFAULT_TOLERANCE
    return parse_tolerance(raw)


def parse_tolerance(raw: str | Decimal) -> Decimal:
    """
    Parse a tolerance value.

    Raises:
        InvalidInputError: If the value is not a finite, non-negative number
    """
    try:
        value = raw if isinstance(raw, Decimal) else Decimal(raw.strip())
    except InvalidOperation as e:
        raise InvalidInputError(f"Invalid tolerance: {raw!r}") from e
    if not value.is_finite() or value < 0:
        raise InvalidInputError(f"Tolerance must be finite and non-negative, got {raw!r}")
    return value


def get_default_currency() -> str:
    """Get the default currency code, respecting SPLITLEDGER_CURRENCY env var."""
    return os.environ.get("SPLITLEDGER_CURRENCY", DEFAULT_CURRENCY).upper()


def get_log_level() -> str:
    """Get the log level name, respecting SPLITLEDGER_LOG_LEVEL env var."""
    return os.environ.get("SPLITLEDGER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
