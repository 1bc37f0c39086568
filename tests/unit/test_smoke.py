"""Smoke tests — validate the function app works end-to-end."""

import json
import threading
from unittest.mock import MagicMock, patch

import azure.functions as func
import pytest

from pdf_admin.drive.sources import DriveFetchError
from pdf_admin.folders.models import FolderRecord, FolderTreeNode, SyncSummary
from pdf_admin.orchestration.sync import SyncInProgressError, SyncReport


def _report() -> SyncReport:
    record = FolderRecord("a", "Maths", "root")
    return SyncReport(
        summary=SyncSummary(added=1, updated=0, removed=0, total=1),
        records=[record],
        tree=[FolderTreeNode(record)],
    )


def test_timer_trigger_completes() -> None:
    """Timer trigger executes through the full flow without error."""
    from pdf_admin.functions.timer_trigger import timer_trigger

    mock_timer = MagicMock(spec=func.TimerRequest)
    mock_timer.past_due = False

    mock_session = MagicMock()
    mock_session.__enter__.return_value = mock_session
    mock_session.sync_folders.return_value = _report()

    with (
        patch("pdf_admin.functions.timer_trigger.load_config"),
        patch(
            "pdf_admin.functions.timer_trigger.session_from_config",
            return_value=mock_session,
        ),
    ):
        timer_trigger(mock_timer)

    mock_session.sync_folders.assert_called_once()
    mock_session.__exit__.assert_called_once()


def test_health_check_returns_status() -> None:
    """Health endpoint returns ok status with version from the package."""
    from pdf_admin.functions.http_trigger import health_check

    response = health_check(MagicMock(spec=func.HttpRequest))

    assert response.status_code == 200
    body = json.loads(response.get_body())
    assert body["status"] == "ok"
    assert body["version"] == "0.1.0"


def _sync_request() -> func.HttpRequest:
    return func.HttpRequest(method="POST", url="https://fn.example.net/api/folders/sync", body=b"")


def test_sync_endpoint_returns_summary_and_tree() -> None:
    from pdf_admin.functions.http_trigger import sync_folders

    mock_session = MagicMock()
    mock_session.sync_folders.return_value = _report()

    with patch("pdf_admin.functions.http_trigger.get_session", return_value=mock_session):
        response = sync_folders(_sync_request())

    assert response.status_code == 200
    body = json.loads(response.get_body())
    assert body["message"] == "Synced 1 folder(s): 1 added, 0 updated, 0 removed"
    assert body["tree"] == [{"id": "a", "name": "Maths", "parentId": "root", "children": []}]


def test_sync_endpoint_rejects_concurrent_sync() -> None:
    from pdf_admin.functions.http_trigger import sync_folders

    mock_session = MagicMock()
    mock_session.sync_folders.side_effect = SyncInProgressError("sync running")

    with patch("pdf_admin.functions.http_trigger.get_session", return_value=mock_session):
        response = sync_folders(_sync_request())

    assert response.status_code == 409


def test_sync_endpoint_reports_fetch_failure() -> None:
    from pdf_admin.functions.http_trigger import sync_folders

    mock_session = MagicMock()
    mock_session.sync_folders.side_effect = DriveFetchError("Failed to load drive folders: down")

    with patch("pdf_admin.functions.http_trigger.get_session", return_value=mock_session):
        response = sync_folders(_sync_request())

    assert response.status_code == 502
    assert json.loads(response.get_body())["message"] == "Failed to load drive folders: down"


def test_users_endpoint_returns_page_window() -> None:
    from pdf_admin.functions.http_trigger import list_users

    mock_session = MagicMock()
    mock_session.page_size = 10
    mock_session.max_visible_pages = 5
    mock_session.users.list.return_value = {
        "users": [{"_id": "u1"}],
        "pagination": {"totalPages": 12},
    }
    req = func.HttpRequest(
        method="GET",
        url="https://fn.example.net/api/users",
        params={"page": "6", "role": "All"},
        body=b"",
    )

    with patch("pdf_admin.functions.http_trigger.get_session", return_value=mock_session):
        response = list_users(req)

    body = json.loads(response.get_body())
    assert body["users"] == [{"_id": "u1"}]
    assert body["pagination"]["pages"] == [1, "ellipsis", 4, 5, 6, 7, 8, "ellipsis", 12]


def test_get_session_builds_one_connected_session(monkeypatch: pytest.MonkeyPatch) -> None:
    from pdf_admin.functions import http_trigger

    monkeypatch.setattr(http_trigger, "_session", None)
    mock_session = MagicMock()

    with (
        patch("pdf_admin.functions.http_trigger.load_config"),
        patch(
            "pdf_admin.functions.http_trigger.session_from_config",
            return_value=mock_session,
        ) as mock_factory,
    ):
        first = http_trigger.get_session()
        second = http_trigger.get_session()

    assert first is second is mock_session
    mock_factory.assert_called_once()
    mock_session.connect.assert_called_once()


def test_get_session_not_cached_when_setup_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    from pdf_admin.functions import http_trigger

    monkeypatch.setattr(http_trigger, "_session", None)
    mock_session = MagicMock()
    mock_session.connect.side_effect = RuntimeError("bad socket url")

    with (
        patch("pdf_admin.functions.http_trigger.load_config"),
        patch(
            "pdf_admin.functions.http_trigger.session_from_config",
            return_value=mock_session,
        ),
        pytest.raises(RuntimeError),
    ):
        http_trigger.get_session()

    assert http_trigger._session is None


def test_get_session_concurrent_first_calls_share_one_session(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    from pdf_admin.functions import http_trigger

    monkeypatch.setattr(http_trigger, "_session", None)
    barrier = threading.Barrier(4)
    results: list[object] = []

    def build(config: object) -> MagicMock:
        return MagicMock()

    def worker() -> None:
        barrier.wait()
        results.append(http_trigger.get_session())

    with (
        patch("pdf_admin.functions.http_trigger.load_config"),
        patch(
            "pdf_admin.functions.http_trigger.session_from_config", side_effect=build
        ) as mock_factory,
    ):
        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert mock_factory.call_count == 1
    assert len({id(session) for session in results}) == 1
