"""Shared test fixtures for splitledger tests."""

from collections.abc import Callable
from decimal import Decimal
from pathlib import Path

import pytest

from splitledger.models import Expense, Group, SplitShare
from splitledger.snapshot import dump_group


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SPLITLEDGER_* settings from the outer environment out of tests."""
    for var in ("SPLITLEDGER_TOLERANCE", "SPLITLEDGER_CURRENCY", "SPLITLEDGER_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_expense() -> Callable[..., Expense]:
    """Factory for expenses: make_expense("A", "90", {"A": "30", "B": "60"})."""

    def _make(
        payer: str,
        amount: str,
        shares: dict[str, str],
        currency: str = "USD",
        description: str = "Expense",
    ) -> Expense:
        return Expense(
            description=description,
            amount=Decimal(amount),
            currency=currency,
            payer_id=payer,
            shares=[SplitShare(member_id=m, amount=Decimal(a)) for m, a in shares.items()],
        )

    return _make


@pytest.fixture
def dinner(make_expense: Callable[..., Expense]) -> Expense:
    """A paid 90 for dinner, split equally among A, B and C."""
    return make_expense("A", "90", {"A": "30", "B": "30", "C": "30"}, description="Dinner")


@pytest.fixture
def weekend_group(make_expense: Callable[..., Expense]) -> Group:
    """A group with two expenses across three members."""
    return Group(
        id="g1",
        name="Weekend",
        members=["Dan", "Sara", "Avi"],
        currency="USD",
        expenses=[
            # Dan paid 300 for dinner, split equally
            make_expense("Dan", "300", {"Dan": "100", "Sara": "100", "Avi": "100"}),
            # Sara paid 150 for gas, split equally
            make_expense("Sara", "150", {"Dan": "50", "Sara": "50", "Avi": "50"}),
        ],
    )


@pytest.fixture
def snapshot_file(tmp_path: Path, weekend_group: Group) -> Path:
    """The weekend group written to a snapshot file."""
    path = tmp_path / "weekend.json"
    dump_group(weekend_group, path)
    return path
