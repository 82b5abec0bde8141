"""Loading group snapshots exported by the bookkeeping layer."""

import logging
from pathlib import Path

from pydantic import ValidationError

from ..exceptions import SnapshotError
from ..models import GroupSnapshot

logger = logging.getLogger(__name__)


def parse_snapshot(data: str | bytes, source: str = "<input>") -> GroupSnapshot:
    """
    Parse a group snapshot from a JSON document.

    Args:
        data: JSON text
        source: Where the text came from, for error messages

    Returns:
        The validated snapshot

    Raises:
        SnapshotError: If the document is not a valid snapshot
    """
    try:
        snapshot = GroupSnapshot.model_validate_json(data)
    except ValidationError as e:
        raise SnapshotError(source, str(e)) from e

    logger.info(
        f"Loaded group {snapshot.group_id} from {source}: "
        f"{len(snapshot.members)} members, {len(snapshot.expenses)} expenses, "
        f"{len(snapshot.payments)} payments"
    )
    return snapshot


def load_snapshot(path: Path) -> GroupSnapshot:
    """Read and validate a group snapshot JSON file."""
    try:
        data = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(str(path), f"cannot read file ({e})") from e

    return parse_snapshot(data, source=str(path))
