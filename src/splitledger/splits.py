"""Split generation: turn an expense total into per-member shares. No I/O."""

import logging
from collections.abc import Mapping, Sequence
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

from .config import CENT, get_tolerance
from .errors import InvalidInputError, RoundingResidualError
from .models import MemberId, SplitShare, SplitType, to_decimal

logger = logging.getLogger(__name__)


def _amount(value: Any, what: str) -> Decimal:
    """Coerce to Decimal and require a finite value."""
    try:
        amount = to_decimal(value)
    except ValueError as e:
        raise InvalidInputError(f"{what} is not a number: {value!r}") from e
    if not amount.is_finite():
        raise InvalidInputError(f"{what} must be finite, got {value!r}")
    return amount


def _check_total(total: Any) -> Decimal:
    amount = _amount(total, "Total")
    if amount < 0:
        raise InvalidInputError(f"Total must not be negative, got {amount}")
    return amount


def equal_split(
    total: Decimal | int | float | str,
    members: Sequence[MemberId],
    quantum: Decimal = CENT,
) -> list[SplitShare]:
    """
    Split a total evenly among members.

    Every member gets the total divided by the member count, rounded down to
    ``quantum``. The first member also takes the remainder, so the shares sum
    to exactly ``total``.

    Args:
        total: Amount to split (finite, zero or positive)
        members: Members to split among, in order
        quantum: Smallest currency unit (default one cent)

    Returns:
        One SplitShare per member, in the order given

    Raises:
        InvalidInputError: If members is empty or has duplicates, or total is invalid
    """
    amount = _check_total(total)
    if not members:
        raise InvalidInputError("Cannot split among zero members")
    if len(set(members)) != len(members):
        raise InvalidInputError(f"Duplicate members in split: {list(members)}")

    n = len(members)
    try:
        base_share = (amount / n).quantize(quantum, rounding=ROUND_DOWN)
    except InvalidOperation as e:
        raise InvalidInputError(f"Total {amount} is too large to split to {quantum}") from e
    remainder = amount - base_share * n

    shares = [SplitShare(member_id=members[0], amount=base_share + remainder)]
    shares.extend(SplitShare(member_id=member, amount=base_share) for member in members[1:])

    logger.debug(
        "Equal split of %s among %d members: base %s, remainder %s",
        amount,
        n,
        base_share,
        remainder,
    )
    return shares


def percentage_split(
    total: Decimal | int | float | str,
    weights: Mapping[MemberId, Decimal | int | float | str],
) -> list[SplitShare]:
    """
    Split a total by percentage per member.

    Shares are ``total * percent / 100`` and are not rounded or forced to add
    up to the total. Callers accepting user-entered percentages should run
    validate_splits() on the result.
    """
    amount = _check_total(total)
    shares = []
    for member, percent in weights.items():
        pct = _amount(percent, f"Percentage for {member}")
        shares.append(SplitShare(member_id=member, amount=amount * pct / 100))
    return shares


def custom_split(
    amounts: Mapping[MemberId, Decimal | int | float | str | None],
) -> list[SplitShare]:
    """Turn explicit per-member amounts into shares. Missing amounts count as zero."""
    return [
        SplitShare(
            member_id=member,
            amount=Decimal("0") if value is None else _amount(value, f"Amount for {member}"),
        )
        for member, value in amounts.items()
    ]


def validate_splits(
    shares: Sequence[SplitShare],
    total: Decimal,
    tolerance: Decimal | None = None,
) -> None:
    """
    Validate that shares sum to the expense total.

    Args:
        shares: Shares to validate
        total: Expected total amount
        tolerance: Acceptable difference (default: configured tolerance, 0.01)

    Raises:
        RoundingResidualError: If shares don't sum to total within tolerance
    """
    if tolerance is None:
        tolerance = get_tolerance()
    shares_sum = sum((s.amount for s in shares), Decimal("0"))
    diff = abs(shares_sum - to_decimal(total))
    if diff > tolerance:
        raise RoundingResidualError(
            f"Splits sum to {shares_sum} but expense total is {total} "
            f"(difference: {diff}, tolerance: {tolerance})"
        )


def build_shares(
    split_type: SplitType,
    total: Decimal | int | float | str,
    members: Sequence[MemberId] | None = None,
    weights: Mapping[MemberId, Decimal | int | float | str] | None = None,
    amounts: Mapping[MemberId, Decimal | int | float | str | None] | None = None,
) -> list[SplitShare]:
    """
    Build shares for an expense the way the add-expense form does.

    Equal and percentage shares are returned as generated. Custom amounts are
    checked against the total before they are accepted.
    """
    if split_type == SplitType.EQUAL:
        return equal_split(total, members or [])

    if split_type == SplitType.PERCENTAGE:
        if not weights:
            raise InvalidInputError("Percentage split needs at least one member")
        return percentage_split(total, weights)

    if not amounts:
        raise InvalidInputError("Custom split needs at least one member")
    shares = custom_split(amounts)
    validate_splits(shares, _check_total(total))
    return shares
