"""Pure financial logic for group balances and debt simplification. No I/O, no side effects."""

import logging
import warnings
from collections.abc import Iterable, Sequence
from decimal import Decimal

from .config import get_tolerance
from .errors import DataIntegrityWarning, InvalidInputError
from .models import (
    Balance,
    Expense,
    Group,
    MemberId,
    Settlement,
    SettlementInstruction,
    SettlementStatus,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def is_settled(amount: Decimal, tolerance: Decimal | None = None) -> bool:
    """True if an amount is close enough to zero to count as settled."""
    if tolerance is None:
        tolerance = get_tolerance()
    return abs(amount) <= tolerance


def _check_single_currency(expenses: Sequence[Expense]) -> None:
    currencies = {expense.currency for expense in expenses}
    if len(currencies) > 1:
        raise InvalidInputError(
            f"Expenses must share one currency, got {', '.join(sorted(currencies))}"
        )


def calculate_balances(expenses: Sequence[Expense], members: Sequence[MemberId]) -> list[Balance]:
    """
    Compute the net balance of every member across a list of expenses.

    Positive balance = member is owed money (paid more than their share)
    Negative balance = member owes money (paid less than their share)

    Every roster member is included, even with no activity. Members that
    appear in an expense but not in the roster are still counted so no money
    is lost, and a DataIntegrityWarning is issued for each of them. The
    warning is also logged at WARNING level on every call; under the default
    warnings filter a repeated warning from the same call site is shown only
    once per process, so the log line is the signal to rely on.

    Mixed currency tags are rejected rather than trusted, since the fold has
    no way to convert between them.

    Args:
        expenses: Expenses to fold, all in one currency
        members: Group roster

    Returns:
        One Balance per member: roster order, then unknown members in first-seen order

    Raises:
        InvalidInputError: If the expenses use more than one currency
    """
    _check_single_currency(expenses)

    balances: dict[MemberId, Decimal] = {member: ZERO for member in members}
    unknown: list[MemberId] = []

    def account(member: MemberId, expense: Expense) -> MemberId:
        if member not in balances:
            unknown.append(member)
            balances[member] = ZERO
            logger.warning(
                "Expense %s references %s who is not in the group roster", expense.id, member
            )
        return member

    for expense in expenses:
        balances[account(expense.payer_id, expense)] += expense.amount
        for share in expense.shares:
            balances[account(share.member_id, expense)] -= share.amount
        logger.debug("Folded expense %s: %s paid %s", expense.id, expense.payer_id, expense.amount)

    for member in unknown:
        warnings.warn(
            f"Member {member!r} appears in expenses but is not in the group roster",
            DataIntegrityWarning,
            stacklevel=2,
        )

    return [Balance(member_id=member, amount=amount) for member, amount in balances.items()]


def check_expense_members(expense: Expense, members: Sequence[MemberId]) -> None:
    """
    Check that an expense only involves members of the group.

    Raises:
        InvalidInputError: If the payer or any share member is not in members
    """
    roster = set(members)
    involved = [expense.payer_id] + [s.member_id for s in expense.shares]
    missing = list(dict.fromkeys(m for m in involved if m not in roster))
    if missing:
        raise InvalidInputError(f"Not members of this group: {', '.join(missing)}")


def apply_settlements(
    balances: Sequence[Balance], settlements: Iterable[Settlement]
) -> list[Balance]:
    """
    Fold completed settlements onto balances.

    The payer's debt shrinks and the recipient's credit shrinks. Pending and
    cancelled settlements do not move money.

    Returns:
        Fresh balances; members only seen in settlements are appended
    """
    result: dict[MemberId, Decimal] = {b.member_id: b.amount for b in balances}
    for settlement in settlements:
        if settlement.status != SettlementStatus.COMPLETED:
            continue
        payer, payee = settlement.from_member, settlement.to_member
        result[payer] = result.get(payer, ZERO) + settlement.amount
        result[payee] = result.get(payee, ZERO) - settlement.amount
    return [Balance(member_id=member, amount=amount) for member, amount in result.items()]


def group_balances(group: Group) -> list[Balance]:
    """Balances for a group snapshot: its expenses, then its completed settlements."""
    balances = calculate_balances(group.expenses, group.members)
    return apply_settlements(balances, group.settlements)


def member_balance(
    member_id: MemberId,
    expenses: Iterable[Expense],
    settlements: Iterable[Settlement] = (),
) -> Decimal:
    """
    Net position of one member across any set of expenses and settlements.

    Only completed settlements count.
    """
    balance = ZERO
    for expense in expenses:
        if expense.payer_id == member_id:
            balance += expense.amount
        balance -= sum((s.amount for s in expense.shares if s.member_id == member_id), ZERO)

    for settlement in settlements:
        if settlement.status != SettlementStatus.COMPLETED:
            continue
        if settlement.from_member == member_id:
            balance += settlement.amount
        if settlement.to_member == member_id:
            balance -= settlement.amount
    return balance


def simplify_debts(
    balances: Sequence[Balance], tolerance: Decimal | None = None
) -> list[SettlementInstruction]:
    """
    Reduce net balances to a list of debtor → creditor payments.

    Greedy matching: creditors are sorted largest first and debtors most
    negative first, once, up front. The head debtor pays the head creditor the
    smaller of the two amounts, and whoever is left settled drops out. This
    is deterministic but not guaranteed to use the fewest possible payments.

    Args:
        balances: Net balances, typically from calculate_balances()
        tolerance: Amounts up to this are settled (default: configured tolerance, 0.01)

    Returns:
        Settlement instructions. Balances within tolerance are never paid, so
        their small residue can stay with the members they would have paid.
    """
    if tolerance is None:
        tolerance = get_tolerance()

    # Working copies as [member, amount]; the caller's balances are never touched
    open_balances = [b for b in balances if not is_settled(b.amount, tolerance)]
    creditors = [[b.member_id, b.amount] for b in open_balances if b.amount > 0]
    debtors = [[b.member_id, b.amount] for b in open_balances if b.amount < 0]

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1])

    instructions: list[SettlementInstruction] = []

    while debtors and creditors:
        debtor = debtors[0]
        creditor = creditors[0]

        transfer = min(abs(debtor[1]), creditor[1])
        instructions.append(
            SettlementInstruction(from_member=debtor[0], to_member=creditor[0], amount=transfer)
        )
        logger.debug("%s pays %s %s", debtor[0], creditor[0], transfer)

        debtor[1] += transfer
        creditor[1] -= transfer

        if is_settled(debtor[1], tolerance):
            debtors.pop(0)
        if is_settled(creditor[1], tolerance):
            creditors.pop(0)

    return instructions


def apply_instructions(
    balances: Sequence[Balance], instructions: Iterable[SettlementInstruction]
) -> list[Balance]:
    """
    Apply settlement instructions to balances and return the result.

    The payer moves up by the amount and the recipient moves down, so a
    complete plan brings every balance to (near) zero.
    """
    result: dict[MemberId, Decimal] = {b.member_id: b.amount for b in balances}
    for instruction in instructions:
        payer, payee = instruction.from_member, instruction.to_member
        result[payer] = result.get(payer, ZERO) + instruction.amount
        result[payee] = result.get(payee, ZERO) - instruction.amount
    return [Balance(member_id=member, amount=amount) for member, amount in result.items()]
