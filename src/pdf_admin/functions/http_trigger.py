"""HTTP trigger blueprint — health, folder tree/sync and paged list endpoints."""

import json
import logging
import threading
from typing import Any

import azure.functions as func

from pdf_admin import __version__
from pdf_admin.api.client import AdminApiError, AdminAuthError
from pdf_admin.config import load_config
from pdf_admin.drive.sources import DriveFetchError
from pdf_admin.orchestration.session import AdminSession, session_from_config
from pdf_admin.orchestration.sync import SyncInProgressError
from pdf_admin.screens.listing import fetch_pdfs_page, fetch_users_page
from pdf_admin.security.headers import secure_pdf_response

logger = logging.getLogger(__name__)

bp = func.Blueprint()

# One session per worker process; the sync lock lives on its service.
_session: AdminSession | None = None
_session_lock = threading.Lock()


def get_session() -> AdminSession:
    """Return the worker's session, building and connecting it on first use."""
    global _session
    with _session_lock:
        if _session is None:
            session = session_from_config(load_config())
            session.connect()
            _session = session
        return _session


def _json(body: dict[str, Any], status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(json.dumps(body), status_code=status_code, mimetype="application/json")


def _error(message: str, status_code: int) -> func.HttpResponse:
    return _json({"status": "error", "message": message}, status_code)


def _int_param(req: func.HttpRequest, name: str, default: int) -> int:
    try:
        return int(req.params.get(name, default))
    except (TypeError, ValueError):
        return default


def _api_error(exc: AdminApiError) -> func.HttpResponse:
    if isinstance(exc, AdminAuthError):
        return _error("Admin session expired; log in again", 401)
    return _error(exc.message, 502)


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint. Returns service status and version."""
    logger.info("[health_check] health check requested")
    try:
        return _json({"status": "ok", "version": __version__})
    except Exception:
        logger.error("[health_check] health check failed", exc_info=True)
        return _error("Internal server error", 500)


@bp.route(route="folders/tree", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def folder_tree(req: func.HttpRequest) -> func.HttpResponse:
    """Folder tree built from the cached listing of the last successful sync."""
    logger.info("[folder_tree] folder tree requested")
    try:
        state = get_session().load_folders()
        return _json({"status": "ok", "tree": [node.to_dict() for node in state.tree]})
    except Exception:
        logger.error("[folder_tree] folder tree failed", exc_info=True)
        return _error("Internal server error", 500)


@bp.route(route="folders/sync", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def sync_folders(req: func.HttpRequest) -> func.HttpResponse:
    """Sync folders from the drive provider and return summary and tree together."""
    logger.info("[sync_folders] folder sync requested")
    try:
        report = get_session().sync_folders()
        return _json(
            {
                "status": "ok",
                "message": report.summary.message(),
                "summary": report.summary.to_dict(),
                "tree": [node.to_dict() for node in report.tree],
            }
        )
    except SyncInProgressError as exc:
        return _error(str(exc), 409)
    except DriveFetchError as exc:
        logger.error("[sync_folders] drive listing failed; error:%s", exc)
        return _error(str(exc), 502)
    except Exception:
        logger.error("[sync_folders] folder sync failed", exc_info=True)
        return _error("Internal server error", 500)


@bp.route(route="folders/{folder_id}/pdfs", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
@secure_pdf_response
def folder_pdfs(req: func.HttpRequest) -> func.HttpResponse:
    """PDFs stored in one drive folder."""
    folder_id = req.route_params.get("folder_id", "")
    logger.info("[folder_pdfs] folder pdfs requested; folder_id:%s", folder_id)
    try:
        pdfs = get_session().folders.pdfs_in_folder(folder_id)
        return _json({"status": "ok", "folderId": folder_id, "pdfs": pdfs})
    except AdminApiError as exc:
        return _api_error(exc)
    except Exception:
        logger.error("[folder_pdfs] folder pdfs failed", exc_info=True)
        return _error("Internal server error", 500)


@bp.route(route="users", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def list_users(req: func.HttpRequest) -> func.HttpResponse:
    """One page of the user list with its pagination window."""
    try:
        session = get_session()
        result = fetch_users_page(
            session.users,
            page=_int_param(req, "page", 1),
            search=req.params.get("search", ""),
            role=req.params.get("role"),
            limit=session.page_size,
            max_visible=session.max_visible_pages,
        )
        return _json({"status": "ok", **result.to_dict("users")})
    except AdminApiError as exc:
        return _api_error(exc)
    except Exception:
        logger.error("[list_users] user list failed", exc_info=True)
        return _error("Internal server error", 500)


@bp.route(route="pdfs", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
@secure_pdf_response
def list_pdfs(req: func.HttpRequest) -> func.HttpResponse:
    """One page of the PDF list with its pagination window."""
    try:
        session = get_session()
        result = fetch_pdfs_page(
            session.pdfs,
            page=_int_param(req, "page", 1),
            search=req.params.get("search", ""),
            department=req.params.get("department"),
            year=req.params.get("year"),
            limit=session.page_size,
            max_visible=session.max_visible_pages,
        )
        return _json({"status": "ok", **result.to_dict("pdfs")})
    except AdminApiError as exc:
        return _api_error(exc)
    except Exception:
        logger.error("[list_pdfs] pdf list failed", exc_info=True)
        return _error("Internal server error", 500)
