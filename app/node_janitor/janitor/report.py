"""Summary report over a set of discovered folders."""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from node_janitor.janitor.filters import calculate_totals, filter_by_age
from node_janitor.janitor.models import FolderRecord, Totals

RECENT_MAX_DAYS = 29
OLD_MIN_DAYS = 90
TOP_N = 10
DEEP_CLEAN_HINT_BYTES = 1024**3


@dataclass(frozen=True, slots=True)
class AgeBucket:
    """Count and size of the folders in one age band."""

    count: int
    size_bytes: int

    @classmethod
    def of(cls, records: list[FolderRecord]) -> "AgeBucket":
        return cls(count=len(records), size_bytes=sum(r.size_bytes for r in records))


@dataclass(frozen=True, slots=True)
class Report:
    """Scan report.

    Attributes:
        timestamp: When the report was built.
        totals: Aggregate figures over all folders.
        recent: Folders younger than 30 days.
        medium: Folders aged 30 to 89 days.
        old: Folders aged 90 days or more.
        top_by_size: Largest folders, biggest first.
        top_by_age: Oldest folders, oldest first.
    """

    timestamp: datetime
    totals: Totals
    recent: AgeBucket
    medium: AgeBucket
    old: AgeBucket
    top_by_size: tuple[FolderRecord, ...]
    top_by_age: tuple[FolderRecord, ...]

    @property
    def suggest_older_than(self) -> bool:
        """Whether cleaning old folders would free anything."""
        return self.old.count > 0

    @property
    def suggest_deep_clean(self) -> bool:
        """Whether the total is large enough to recommend a deep clean."""
        return self.totals.total_size_bytes > DEEP_CLEAN_HINT_BYTES

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dictionary."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "count": self.totals.count,
            "total_size_bytes": self.totals.total_size_bytes,
            "oldest_age_days": self.totals.oldest_age_days,
            "newest_age_days": self.totals.newest_age_days,
            "breakdown": {
                name: {"count": bucket.count, "size_bytes": bucket.size_bytes}
                for name, bucket in (("recent", self.recent), ("medium", self.medium), ("old", self.old))
            },
            "top_by_size": [record.to_dict() for record in self.top_by_size],
            "top_by_age": [record.to_dict() for record in self.top_by_age],
        }


def build_report(records: list[FolderRecord]) -> Report:
    """Build a report from discovered records.

    Args:
        records: Records, typically sorted by size descending.

    Returns:
        Report with totals, age breakdown, and top lists.
    """
    by_size = sorted(records, key=lambda r: r.size_bytes, reverse=True)
    by_age = sorted(records, key=lambda r: r.age_days, reverse=True)

    return Report(
        timestamp=datetime.now(UTC),
        totals=calculate_totals(records),
        recent=AgeBucket.of(filter_by_age(records, max_days=RECENT_MAX_DAYS)),
        medium=AgeBucket.of(filter_by_age(records, min_days=RECENT_MAX_DAYS + 1, max_days=OLD_MIN_DAYS - 1)),
        old=AgeBucket.of(filter_by_age(records, min_days=OLD_MIN_DAYS)),
        top_by_size=tuple(by_size[:TOP_N]),
        top_by_age=tuple(by_age[:TOP_N]),
    )
