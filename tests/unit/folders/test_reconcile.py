"""Unit tests for folders/reconcile.py — change counting and next cache."""

from pdf_admin.folders.models import FolderRecord
from pdf_admin.folders.reconcile import reconcile


def _rec(id: str, name: str = "", parent_id: str | None = None) -> FolderRecord:
    return FolderRecord(id=id, name=name or id, parent_id=parent_id)


class TestReconcile:
    def test_new_folder_counts_as_added(self) -> None:
        cached = [_rec("1", "Math")]
        remote = [_rec("1", "Math"), _rec("2", "CS")]

        result = reconcile(remote, cached)

        assert result.summary.to_dict() == {"added": 1, "updated": 0, "removed": 0, "total": 2}

    def test_identical_sets_are_unchanged(self) -> None:
        records = [_rec("1", "A"), _rec("2", "B", "1"), _rec("3", "C", "1")]

        result = reconcile(records, list(records))

        assert (result.added, result.updated, result.removed) == (0, 0, 0)
        assert result.total == 3
        assert result.unchanged == 3

    def test_rename_counts_as_updated(self) -> None:
        result = reconcile([_rec("1", "Maths")], [_rec("1", "Math")])
        assert result.updated == 1
        assert result.added == 0

    def test_parent_move_counts_as_updated(self) -> None:
        result = reconcile([_rec("1", "A", "p2")], [_rec("1", "A", "p1")])
        assert result.updated == 1

    def test_missing_remote_counts_as_removed(self) -> None:
        cached = [_rec("1"), _rec("2"), _rec("3")]
        remote = [_rec("2")]

        result = reconcile(remote, cached)

        assert result.removed == 2
        assert result.total == 1

    def test_counts_add_up_to_total(self) -> None:
        cached = [_rec("1", "A"), _rec("2", "B"), _rec("9", "Gone")]
        remote = [_rec("1", "A"), _rec("2", "B2"), _rec("3", "New"), _rec("4", "New2")]

        result = reconcile(remote, cached)

        assert result.added + result.updated + result.unchanged == result.total
        assert (result.added, result.updated, result.unchanged, result.removed) == (2, 1, 1, 1)

    def test_next_cache_is_remote_listing(self) -> None:
        remote = [_rec("2", "CS"), _rec("1", "Math")]

        result = reconcile(remote, [_rec("7", "Old")])

        assert result.next_cache == remote

    def test_empty_remote_removes_everything(self) -> None:
        result = reconcile([], [_rec("1"), _rec("2")])
        assert result.summary.to_dict() == {"added": 0, "updated": 0, "removed": 2, "total": 0}
        assert result.next_cache == []

    def test_first_run_adds_everything(self) -> None:
        result = reconcile([_rec("1"), _rec("2")], [])
        assert result.added == 2
        assert result.removed == 0

    def test_malformed_records_are_skipped(self) -> None:
        remote = [_rec("1"), {"id": "2"}, FolderRecord(id="", name="blank"), None]
        cached = ["junk", _rec("1")]

        result = reconcile(remote, cached)  # type: ignore[arg-type]

        assert result.total == 1
        assert result.added == 0
        assert result.removed == 0
        assert [r.id for r in result.next_cache] == ["1"]

    def test_summary_message(self) -> None:
        result = reconcile([_rec("1"), _rec("2")], [_rec("1")])
        assert result.summary.message() == "Synced 2 folder(s): 1 added, 0 updated, 0 removed"


class TestDuplicateIds:
    def test_each_remote_duplicate_is_counted(self) -> None:
        # Ids are assumed unique; duplicates are compared one record at a time.
        result = reconcile([_rec("1", "Math"), _rec("1", "Maths")], [])

        assert (result.added, result.updated, result.total) == (2, 0, 2)
        assert len(result.next_cache) == 2

    def test_duplicate_against_cache(self) -> None:
        result = reconcile([_rec("1", "Math"), _rec("1", "Maths")], [_rec("1", "Math")])

        assert (result.added, result.updated, result.removed, result.total) == (0, 1, 0, 2)
        assert result.unchanged == 1

    def test_cached_duplicates_removed_once(self) -> None:
        result = reconcile([], [_rec("1", "Math"), _rec("1", "Maths")])

        assert result.removed == 1
