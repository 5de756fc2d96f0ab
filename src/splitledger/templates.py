"""Response message templates - all user-facing text lives here."""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from .ledger import is_settled
from .models import Balance, SettlementInstruction, SplitShare

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "ILS": "₪",
}


def format_currency(amount: Decimal, currency: str) -> str:
    """Format amount to two decimals with its currency symbol."""
    rounded = abs(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 and rounded != 0 else ""
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{sign}{rounded:,} {currency.upper()}"
    return f"{sign}{symbol}{rounded:,}"


def format_balance_line(
    balance: Balance, currency: str, tolerance: Decimal | None = None
) -> str:
    """One member's balance: settled, gets back, or owes."""
    if is_settled(balance.amount, tolerance):
        status = SETTLED_UP
    elif balance.amount > 0:
        status = GETS_BACK.format(amount=format_currency(balance.amount, currency))
    else:
        status = OWES.format(amount=format_currency(balance.amount, currency))
    return f"• {balance.member_id}: {status}"


def format_balances(
    balances: Sequence[Balance], currency: str, tolerance: Decimal | None = None
) -> str:
    """Format a list of balances for display."""
    return "\n".join(format_balance_line(b, currency, tolerance) for b in balances)


def format_instructions(instructions: Sequence[SettlementInstruction], currency: str) -> str:
    """Format a settlement plan for display."""
    if not instructions:
        return ALL_SETTLED

    lines = []
    for instruction in instructions:
        amount = format_currency(instruction.amount, currency)
        lines.append(f"• {instruction.from_member} → {instruction.to_member}: {amount}")
    return "\n".join(lines)


def format_shares(shares: Sequence[SplitShare], currency: str) -> str:
    """Format a list of shares for display."""
    return ", ".join(f"{s.member_id} {format_currency(s.amount, currency)}" for s in shares)


# === BALANCE LABELS ===

SETTLED_UP = "Settled up"

GETS_BACK = "Gets back {amount}"

OWES = "Owes {amount}"


# === COMMAND OUTPUT ===

BALANCES_HEADER = "📊 *{group_name}* Balances\n"

SETTLE_HEADER = "🔄 *{group_name}* Settle up\n"

EXPENSE_ADDED = "✅ *{description}* {amount_display} (paid by {paid_by})\n{shares_summary}"

ALL_SETTLED = "✨ All settled up!"


# === ERROR TEMPLATES ===

ERROR_VALIDATION = "⚠️ {message}"

WARNING_DATA_INTEGRITY = "⚠️ {message}"
