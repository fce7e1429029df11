"""Pure filters and aggregates over discovered records.

Every filter returns a new list and keeps the input order, so filters
compose by logical AND in any order.
"""

from node_janitor.janitor.models import FolderRecord, Totals


def filter_by_age(
    records: list[FolderRecord],
    min_days: int | None = None,
    max_days: int | None = None,
) -> list[FolderRecord]:
    """Keep records whose age lies within the inclusive bounds.

    Args:
        records: Records to filter.
        min_days: Minimum age in days, or None for no lower bound.
        max_days: Maximum age in days, or None for no upper bound.

    Returns:
        Records satisfying both bounds.
    """
    return [
        record
        for record in records
        if (min_days is None or record.age_days >= min_days)
        and (max_days is None or record.age_days <= max_days)
    ]


def filter_by_size(
    records: list[FolderRecord],
    min_bytes: int | None = None,
    max_bytes: int | None = None,
) -> list[FolderRecord]:
    """Keep records whose size lies within the inclusive bounds.

    Args:
        records: Records to filter.
        min_bytes: Minimum size in bytes, or None for no lower bound.
        max_bytes: Maximum size in bytes, or None for no upper bound.

    Returns:
        Records satisfying both bounds.
    """
    return [
        record
        for record in records
        if (min_bytes is None or record.size_bytes >= min_bytes)
        and (max_bytes is None or record.size_bytes <= max_bytes)
    ]


def filter_by_lockfile_presence(records: list[FolderRecord]) -> list[FolderRecord]:
    """Keep records whose project has at least one lockfile."""
    return [record for record in records if record.has_lockfile]


def filter_by_git_cleanliness(
    records: list[FolderRecord],
    skip_dirty: bool = False,
    only_in_git_repo: bool = False,
) -> list[FolderRecord]:
    """Filter records on the git state of their project.

    Records without collected git status count as "not a git repo".

    Args:
        records: Records to filter.
        skip_dirty: Drop records whose working tree has uncommitted changes.
        only_in_git_repo: Drop records that are not inside a git repository.

    Returns:
        Records passing both checks.
    """
    result: list[FolderRecord] = []
    for record in records:
        status = record.git_status
        in_repo = status is not None and status.is_git_repo
        if only_in_git_repo and not in_repo:
            continue
        if skip_dirty and status is not None and status.is_dirty:
            continue
        result.append(record)
    return result


def calculate_totals(records: list[FolderRecord]) -> Totals:
    """Aggregate count, size and age extremes.

    Args:
        records: Records to aggregate.

    Returns:
        Totals; all zeros for an empty list.
    """
    if not records:
        return Totals(count=0, total_size_bytes=0, oldest_age_days=0, newest_age_days=0)

    ages = [record.age_days for record in records]
    return Totals(
        count=len(records),
        total_size_bytes=sum(record.size_bytes for record in records),
        oldest_age_days=max(ages),
        newest_age_days=min(ages),
    )
