"""Unit tests for shared CLI display helpers."""

from node_janitor.cli.display import create_deletion_results_table
from node_janitor.janitor.models import DeletionFailure, DeletionOutcome


class TestCreateDeletionResultsTable:
    """Tests for create_deletion_results_table."""

    def test_rows_for_successes_and_failures(self) -> None:
        """Each deleted path and each failure gets a row."""
        outcome = DeletionOutcome(
            deleted_count=2,
            freed_bytes=10,
            deleted_paths=("/w/a/node_modules", "/w/b/node_modules"),
            errors=(DeletionFailure(path="/w/c/node_modules", error_message="busy"),),
        )

        table = create_deletion_results_table(outcome)

        assert table.title == "Results"
        assert table.row_count == 3
        assert [c.header for c in table.columns] == ["Status", "Path", "Message"]

    def test_empty_outcome(self) -> None:
        """An empty outcome gives an empty table."""
        assert create_deletion_results_table(DeletionOutcome()).row_count == 0
