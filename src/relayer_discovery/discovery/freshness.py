"""In-process record of when each relayer was last probed."""

from datetime import UTC, datetime


class FreshnessTracker:
    """Maps relayer identity to the time of its most recent probe.

    Best-effort observability data only: it is not persisted, so a restarted
    process reports no timestamp until it has probed a relayer itself.
    """

    def __init__(self) -> None:
        self._last_checked: dict[str, datetime] = {}

    def touch(self, relayer_id: str, when: datetime | None = None) -> datetime:
        checked_at = when or datetime.now(UTC)
        self._last_checked[relayer_id] = checked_at
        return checked_at

    def last_checked(self, relayer_id: str) -> datetime | None:
        return self._last_checked.get(relayer_id)

    def snapshot(self) -> dict[str, datetime]:
        return dict(self._last_checked)

    def __len__(self) -> int:
        return len(self._last_checked)

    def __contains__(self, relayer_id: object) -> bool:
        return relayer_id in self._last_checked
