"""Click CLI entrypoint for splitledger."""

import logging
import sys
import warnings
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from decimal import Decimal

import click

from . import __version__, ledger, templates
from .config import get_default_currency, get_log_level, get_tolerance, parse_tolerance
from .errors import DataIntegrityWarning, SplitLedgerError
from .models import CATEGORIES, Expense, SplitType
from .snapshot import dump_group, load_group
from .splits import build_shares, equal_split, percentage_split, validate_splits


def _parse_pairs(value: tuple[str, ...]) -> dict[str, str]:
    """Parse MEMBER=VALUE option values into a dict, keeping their order."""
    pairs: dict[str, str] = {}
    for item in value:
        member, sep, amount = item.partition("=")
        if not sep or not member.strip() or not amount.strip():
            raise click.BadParameter(f"Expected MEMBER=VALUE, got {item!r}")
        pairs[member.strip()] = amount.strip()
    return pairs


def _tolerance(value: str | None) -> Decimal:
    return get_tolerance() if value is None else parse_tolerance(value)


@contextmanager
def _report_errors() -> Iterator[None]:
    """Echo data-integrity warnings to stderr and turn splitledger errors into exit code 1."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", DataIntegrityWarning)
        try:
            yield
        except SplitLedgerError as e:
            click.echo(templates.ERROR_VALIDATION.format(message=e), err=True)
            sys.exit(1)
        finally:
            for w in caught:
                if issubclass(w.category, DataIntegrityWarning):
                    click.echo(templates.WARNING_DATA_INTEGRITY.format(message=w.message), err=True)


def _snapshot_command(f: Callable[..., None]) -> Callable[..., None]:
    f = click.option(
        "--tolerance",
        default=None,
        help="Balances up to this are settled (default: SPLITLEDGER_TOLERANCE or 0.01)",
    )(f)
    return click.argument("snapshot", type=click.Path(dir_okay=False))(f)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level", default=None, help="Log level (default: SPLITLEDGER_LOG_LEVEL or WARNING)"
)
def cli(log_level: str | None) -> None:
    """Splitledger - group expense splitting and settle-up plans."""
    logging.basicConfig(
        level=(log_level or get_log_level()).upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@_snapshot_command
def balances(snapshot: str, tolerance: str | None) -> None:
    """Show every member's balance for the group in SNAPSHOT."""
    with _report_errors():
        group = load_group(snapshot)
        tol = _tolerance(tolerance)
        result = ledger.group_balances(group)

        click.echo(templates.BALANCES_HEADER.format(group_name=group.name))
        click.echo(templates.format_balances(result, group.currency, tol))


@cli.command()
@_snapshot_command
def settle(snapshot: str, tolerance: str | None) -> None:
    """Show the payments that settle the group in SNAPSHOT."""
    with _report_errors():
        group = load_group(snapshot)
        tol = _tolerance(tolerance)
        instructions = ledger.simplify_debts(ledger.group_balances(group), tol)

        click.echo(templates.SETTLE_HEADER.format(group_name=group.name))
        click.echo(templates.format_instructions(instructions, group.currency))


@cli.command()
@click.argument("total")
@click.argument("members", nargs=-1)
@click.option("--percent", "percent", multiple=True, help="MEMBER=PERCENT (repeatable)")
@click.option("--currency", default=None, help="Currency code for display (default: USD)")
def split(
    total: str, members: tuple[str, ...], percent: tuple[str, ...], currency: str | None
) -> None:
    """
    Split TOTAL among MEMBERS without recording anything.

    With --percent, each member's share is TOTAL * PERCENT / 100 and the
    result is checked against TOTAL.
    """
    weights = _parse_pairs(percent)
    with _report_errors():
        if weights:
            shares = percentage_split(total, weights)
            validate_splits(shares, Decimal(total))
        else:
            shares = equal_split(total, list(members))
        click.echo(templates.format_shares(shares, currency or get_default_currency()))


@cli.command()
@click.argument("snapshot", type=click.Path(dir_okay=False))
@click.argument("description")
@click.argument("total")
@click.option("--paid-by", required=True, help="Member who paid")
@click.option("--only", "only", multiple=True, help="Split equally among these members only")
@click.option("--custom", "custom", multiple=True, help="MEMBER=AMOUNT (repeatable)")
@click.option("--percent", "percent", multiple=True, help="MEMBER=PERCENT (repeatable)")
@click.option(
    "--category", type=click.Choice(CATEGORIES), default="General", help="Expense category"
)
def add(
    snapshot: str,
    description: str,
    total: str,
    paid_by: str,
    only: tuple[str, ...],
    custom: tuple[str, ...],
    percent: tuple[str, ...],
    category: str,
) -> None:
    """Add an expense to the group in SNAPSHOT."""
    amounts = _parse_pairs(custom)
    weights = _parse_pairs(percent)
    if amounts and weights:
        raise click.UsageError("Use either --custom or --percent, not both")

    with _report_errors():
        group = load_group(snapshot)

        if amounts:
            shares = build_shares(SplitType.CUSTOM, total, amounts=amounts)
        elif weights:
            shares = build_shares(SplitType.PERCENTAGE, total, weights=weights)
            validate_splits(shares, Decimal(total))
        else:
            shares = build_shares(SplitType.EQUAL, total, members=list(only) or group.members)

        expense = Expense(
            group_id=group.id,
            description=description,
            amount=total,
            currency=group.currency,
            payer_id=paid_by,
            shares=shares,
            category=category,
        )
        ledger.check_expense_members(expense, group.members)
        group.expenses.append(expense)
        dump_group(group, snapshot)

        click.echo(
            templates.EXPENSE_ADDED.format(
                description=description,
                amount_display=templates.format_currency(expense.amount, group.currency),
                paid_by=paid_by,
                shares_summary=templates.format_shares(shares, group.currency),
            )
        )


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
