"""Exceptions and warnings raised at the splitledger boundary."""


class SplitLedgerError(Exception):
    """Base class for splitledger errors."""

    pass


class InvalidInputError(SplitLedgerError, ValueError):
    """Input that the computation cannot accept (empty roster, negative total, ...)."""

    pass


class RoundingResidualError(SplitLedgerError, ValueError):
    """Shares do not add up to the expense total within tolerance."""

    pass


class SnapshotError(SplitLedgerError):
    """Error reading or writing a group snapshot file."""

    pass


class DataIntegrityWarning(UserWarning):
    """An expense references a member missing from the group roster."""

    pass
