"""Unit tests for folders/normalizer.py — provider objects to FolderRecords."""

import logging

import pytest

from pdf_admin.folders.models import FolderRecord
from pdf_admin.folders.normalizer import normalize_folder, normalize_folders


class TestNormalizeFolder:
    def test_backend_shape(self) -> None:
        record = normalize_folder({"id": "f1", "name": "Maths", "parent": "base"})
        assert record == FolderRecord(id="f1", name="Maths", parent_id="base")

    def test_mongo_id_and_parent_id(self) -> None:
        record = normalize_folder({"_id": "f1", "name": "CS", "parentId": "p1"})
        assert record == FolderRecord(id="f1", name="CS", parent_id="p1")

    def test_google_drive_parents_list(self) -> None:
        record = normalize_folder({"id": "g1", "name": "Notes", "parents": ["p9", "p10"]})
        assert record is not None
        assert record.parent_id == "p9"

    def test_graph_parent_reference(self) -> None:
        raw = {
            "id": "o1",
            "name": "Slides",
            "folder": {"childCount": 2},
            "parentReference": {"id": "p5", "path": "/drive/root:"},
        }
        record = normalize_folder(raw)
        assert record is not None
        assert record.parent_id == "p5"

    def test_populated_parent_object(self) -> None:
        record = normalize_folder({"_id": "f1", "name": "A", "parent": {"_id": "p1", "name": "P"}})
        assert record is not None
        assert record.parent_id == "p1"

    def test_missing_parent_is_none(self) -> None:
        record = normalize_folder({"id": "f1", "name": "Top"})
        assert record is not None
        assert record.parent_id is None

    def test_empty_parents_list_is_none(self) -> None:
        record = normalize_folder({"id": "f1", "name": "Top", "parents": []})
        assert record is not None
        assert record.parent_id is None

    def test_missing_name_becomes_empty(self) -> None:
        record = normalize_folder({"id": "f1"})
        assert record is not None
        assert record.name == ""

    def test_numeric_id_is_stringified(self) -> None:
        record = normalize_folder({"id": 42, "name": "n"})
        assert record is not None
        assert record.id == "42"

    @pytest.mark.parametrize(
        "raw",
        [
            {"name": "no id"},
            {"id": "", "name": "blank"},
            {"id": "   ", "name": "spaces"},
            {"id": None, "name": "null"},
            {"id": ["x"], "name": "list"},
            "not a mapping",
            None,
        ],
    )
    def test_unusable_id_returns_none(self, raw: object) -> None:
        assert normalize_folder(raw) is None


class TestNormalizeFolders:
    def test_keeps_input_order(self) -> None:
        raw = [{"id": "b", "name": "B"}, {"id": "a", "name": "A"}]
        assert [r.id for r in normalize_folders(raw, root_id="base")] == ["b", "a"]

    def test_drops_malformed_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        raw = [{"id": "ok", "name": "OK"}, {"name": "broken"}, 17]
        with caplog.at_level(logging.WARNING, logger="pdf_admin.folders.normalizer"):
            records = normalize_folders(raw, root_id=None)
        assert [r.id for r in records] == ["ok"]
        assert "dropped:2" in caplog.text

    def test_drops_base_folder_itself(self) -> None:
        raw = [{"id": "base", "name": "Root"}, {"id": "f1", "name": "Child", "parent": "base"}]
        records = normalize_folders(raw, root_id="base")
        assert [r.id for r in records] == ["f1"]

    def test_empty_input(self) -> None:
        assert normalize_folders([], root_id="base") == []
