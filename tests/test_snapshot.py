"""Tests for group snapshot files."""

import json
from decimal import Decimal
from pathlib import Path

import pytest

from splitledger.errors import SnapshotError
from splitledger.models import Group
from splitledger.snapshot import dump_group, load_group


class TestLoadGroup:
    """Tests for load_group."""

    def test_roundtrip(self, snapshot_file: Path, weekend_group: Group) -> None:
        assert load_group(snapshot_file) == weekend_group

    def test_amounts_stored_as_strings(self, snapshot_file: Path) -> None:
        data = json.loads(snapshot_file.read_text(encoding="utf-8"))
        assert data["expenses"][0]["amount"] == "300"
        assert data["expenses"][0]["shares"][0] == {"member_id": "Dan", "amount": "100"}

    def test_minimal_snapshot(self, tmp_path: Path) -> None:
        path = tmp_path / "g.json"
        path.write_text(
            json.dumps(
                {
                    "name": "Flat",
                    "currency": "eur",
                    "members": ["a", "b"],
                    "expenses": [
                        {
                            "amount": 10.5,
                            "payer_id": "a",
                            "shares": [{"member_id": "b", "amount": 10.5}],
                        }
                    ],
                }
            )
        )
        group = load_group(path)
        assert group.currency == "EUR"
        assert group.expenses[0].amount == Decimal("10.5")
        assert group.settlements == []

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(SnapshotError, match="not found"):
            load_group(tmp_path / "nope.json")

    def test_bad_json(self, tmp_path: Path) -> None:
        path = tmp_path / "g.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError, match="not valid JSON"):
            load_group(path)

    def test_invalid_group(self, tmp_path: Path) -> None:
        path = tmp_path / "g.json"
        path.write_text(json.dumps({"name": "X", "expenses": [{"amount": "1", "payer_id": "a"}]}))
        with pytest.raises(SnapshotError, match="not a valid group"):
            load_group(path)


class TestDumpGroup:
    """Tests for dump_group."""

    def test_creates_parent_directory(self, tmp_path: Path, weekend_group: Group) -> None:
        path = tmp_path / "nested" / "dir" / "g.json"
        dump_group(weekend_group, path)
        assert path.exists()
        assert load_group(path).name == "Weekend"
