"""Real-time notification channels (Socket.IO and in-process)."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

logger = logging.getLogger(__name__)

FOLDER_UPDATED = "folder:updated"
FOLDER_SYNCED = "folder:synced"
ACCESS_TAG_UPDATED = "accessTag:updated"
PDF_UPDATED = "pdf:updated"
SUBSCRIBED_EVENTS = (FOLDER_UPDATED, ACCESS_TAG_UPDATED, PDF_UPDATED)

Handler = Callable[[dict[str, Any]], None]


class NotificationChannel(ABC):
    """Publish/subscribe channel with an explicit connect/disconnect lifecycle."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    @property
    @abstractmethod
    def connected(self) -> bool: ...

    @abstractmethod
    def connect(self) -> None: ...

    @abstractmethod
    def disconnect(self) -> None: ...

    @abstractmethod
    def emit(self, event: str, payload: dict[str, Any]) -> None: ...

    def on(self, event: str, handler: Handler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def off(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def _dispatch(self, event: str, payload: dict[str, Any]) -> None:
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(payload)
            except Exception:
                logger.error(
                    "[_dispatch] notification handler failed; event:%s", event, exc_info=True
                )


class LocalChannel(NotificationChannel):
    """In-process channel: emitted events go straight to local handlers."""

    def __init__(self) -> None:
        super().__init__()
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        self._connected = True

    def disconnect(self) -> None:
        self._connected = False

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        if not self._connected:
            logger.debug("[emit] local channel not connected; dropping event; event:%s", event)
            return
        self._dispatch(event, payload)


class SocketIOChannel(NotificationChannel):
    """Socket.IO client channel for the backend's real-time updates."""

    def __init__(self, url: str, token: str | None = None, client: Any = None) -> None:
        """Initialise the channel.

        Args:
            url: Server root URL (not the /api path).
            token: Admin bearer token sent with the connection.
            client: Pre-built ``socketio.Client``; one is created when omitted.
        """
        super().__init__()
        self._url = url.rstrip("/")
        self._token = token
        self._sio = client or socketio.Client(
            reconnection=True,
            reconnection_attempts=5,
            reconnection_delay=1,
            reconnection_delay_max=5,
        )
        self._sio.on("connect", self._on_connect)
        self._sio.on("disconnect", self._on_disconnect)
        self._sio.on("connect_error", self._on_connect_error)
        for event in SUBSCRIBED_EVENTS:
            self._sio.on(event, self._forwarder(event))

    def _forwarder(self, event: str) -> Callable[[Any], None]:
        def forward(data: Any = None) -> None:
            logger.info("[socketio] received event; event:%s", event)
            self._dispatch(event, data if isinstance(data, dict) else {"data": data})

        return forward

    def _on_connect(self) -> None:
        logger.info("[socketio] connected; url:%s", self._url)

    def _on_disconnect(self, *args: Any) -> None:
        logger.info("[socketio] disconnected; url:%s", self._url)

    def _on_connect_error(self, data: Any = None) -> None:
        logger.error("[socketio] unable to connect for real-time updates; url:%s", self._url)

    @property
    def connected(self) -> bool:
        return bool(self._sio.connected)

    def connect(self) -> None:
        if self.connected:
            return
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        try:
            self._sio.connect(self._url, headers=headers, socketio_path="/socket.io")
        except SocketConnectionError as exc:
            # Stays disconnected; emit() drops events until a later connect().
            logger.warning("[connect] socket connection failed; url:%s;error:%s", self._url, exc)

    def disconnect(self) -> None:
        if self.connected:
            self._sio.disconnect()

    def emit(self, event: str, payload: dict[str, Any]) -> None:
        if not self.connected:
            logger.warning("[emit] socket not connected; dropping event; event:%s", event)
            return
        self._sio.emit(event, payload)


def channel_from_url(url: str, token: str | None = None) -> NotificationChannel:
    """Socket.IO channel for ``url``, or a LocalChannel when no URL is configured."""
    if url:
        return SocketIOChannel(url, token=token)
    return LocalChannel()
