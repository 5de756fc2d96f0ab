"""Group snapshot files - load and save one group as JSON."""

import json
from pathlib import Path

from pydantic import ValidationError

from .errors import SnapshotError
from .models import Group


def load_group(path: str | Path) -> Group:
    """
    Load a group snapshot from a JSON file.

    Raises:
        SnapshotError: If the file is missing, not JSON, or not a valid group
    """
    path = Path(path)
    if not path.exists():
        raise SnapshotError(f"Snapshot file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return Group.model_validate(data)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {path} is not valid JSON: {e}") from e
    except ValidationError as e:
        raise SnapshotError(f"Snapshot {path} is not a valid group: {e}") from e


def dump_group(group: Group, path: str | Path) -> None:
    """Write a group snapshot to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(group.model_dump(mode="json"), f, indent=2, ensure_ascii=False)
