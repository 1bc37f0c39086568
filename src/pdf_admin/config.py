"""Application configuration loaded from environment variables."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

DRIVE_PROVIDERS = ("api", "google", "onedrive")


def get_base_folder_ids(env: Mapping[str, str]) -> tuple[str, ...]:
    """Collect every configured drive base folder ID.

    The primary variable accepts a comma-separated list; two further
    folders may be given in PA_DRIVE_BASE_FOLDER_ID_2 and _3. Blank entries
    are dropped and duplicates removed, keeping first-seen order.

    Args:
        env: Environment mapping (usually os.environ).

    Returns:
        Tuple of base folder IDs, primary first.
    """
    candidates = env.get("PA_DRIVE_BASE_FOLDER_ID", "").split(",")
    candidates.append(env.get("PA_DRIVE_BASE_FOLDER_ID_2", ""))
    candidates.append(env.get("PA_DRIVE_BASE_FOLDER_ID_3", ""))

    ids: list[str] = []
    for candidate in candidates:
        folder_id = candidate.strip()
        if folder_id and folder_id not in ids:
            ids.append(folder_id)
    return tuple(ids)


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Everything else
    has a default and can be overridden via environment variables.
    """

    # Required: no defaults, fail at startup if missing
    api_base_url: str
    storage_connection_string: str
    base_folder_ids: tuple[str, ...]

    # Optional: defaults provided, overridable via env
    api_token: str = ""
    drive_provider: str = "api"
    google_credentials_json: str = ""
    graph_client_id: str = ""
    graph_client_secret: str = ""
    graph_tenant_id: str = ""
    graph_drive_user: str = ""
    socket_url: str = ""
    cache_container: str = "pdf-admin-state"
    cache_blob: str = "folder-cache/current.json"
    page_size: int = 10
    max_visible_pages: int = 5

    @property
    def primary_base_folder_id(self) -> str | None:
        """Root of the displayed folder tree."""
        return self.base_folder_ids[0] if self.base_folder_ids else None


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        PA_API_BASE_URL: Base URL of the repository REST backend (e.g. https://host/api).
        AzureWebJobsStorage: Azure Storage account connection string.
        PA_DRIVE_BASE_FOLDER_ID: Drive base folder ID(s), comma-separated.

    Optional environment variables (with defaults):
        PA_API_TOKEN: Pre-issued admin bearer token.
        PA_DRIVE_PROVIDER: Folder listing provider: api, google or onedrive (default: api).
        PA_GDRIVE_CREDENTIALS: Google service-account credentials as JSON.
        PA_GRAPH_CLIENT_ID / PA_GRAPH_CLIENT_SECRET / PA_GRAPH_TENANT_ID: Azure AD app.
        PA_GRAPH_DRIVE_USER: UPN or object ID of the OneDrive owner.
        PA_SOCKET_URL: Socket.IO server for real-time notifications.
        PA_CACHE_CONTAINER: Blob container for the folder cache.
        PA_CACHE_BLOB: Blob path of the folder cache file.
        PA_PAGE_SIZE: Rows per list page (default: 10).
        PA_MAX_VISIBLE_PAGES: Page buttons shown by the pager (default: 5).

    Returns:
        Configured AppConfig instance.

    Raises:
        KeyError: If a required variable is missing.
        ValueError: If PA_DRIVE_PROVIDER names an unknown provider.
    """
    provider = os.environ.get("PA_DRIVE_PROVIDER", "api").strip().lower()
    if provider not in DRIVE_PROVIDERS:
        raise ValueError(f"Unknown drive provider: {provider}")

    base_folder_ids = get_base_folder_ids(os.environ)
    if not base_folder_ids:
        raise KeyError("PA_DRIVE_BASE_FOLDER_ID")

    return AppConfig(
        api_base_url=os.environ["PA_API_BASE_URL"].rstrip("/"),
        storage_connection_string=os.environ["AzureWebJobsStorage"],  # noqa: SIM112
        base_folder_ids=base_folder_ids,
        api_token=os.environ.get("PA_API_TOKEN", ""),
        drive_provider=provider,
        google_credentials_json=os.environ.get("PA_GDRIVE_CREDENTIALS", ""),
        graph_client_id=os.environ.get("PA_GRAPH_CLIENT_ID", ""),
        graph_client_secret=os.environ.get("PA_GRAPH_CLIENT_SECRET", ""),
        graph_tenant_id=os.environ.get("PA_GRAPH_TENANT_ID", ""),
        graph_drive_user=os.environ.get("PA_GRAPH_DRIVE_USER", ""),
        socket_url=os.environ.get("PA_SOCKET_URL", ""),
        cache_container=os.environ.get("PA_CACHE_CONTAINER", "pdf-admin-state"),
        cache_blob=os.environ.get("PA_CACHE_BLOB", "folder-cache/current.json"),
        page_size=int(os.environ.get("PA_PAGE_SIZE", "10")),
        max_visible_pages=int(os.environ.get("PA_MAX_VISIBLE_PAGES", "5")),
    )
