"""Adapter boundary between a device transport and the reconciler."""

from __future__ import annotations

import abc
import logging
from collections.abc import Callable, Mapping
from typing import Any, Protocol

from pyremootio.ingestion.decode import decode_incoming_message
from pyremootio.session import DeviceSession
from pyremootio.state.events import Lifecycle, LifecycleSignal, ProtocolEvent

_logger = logging.getLogger(__name__)

EventListener = Callable[[ProtocolEvent], None]


class DeviceAdapter(Protocol):
    """Structural interface of a device transport.

    All commands are fire-and-forget: results come back, if at all, as
    protocol events delivered to the registered listeners.
    """

    @property
    def is_connected(self) -> bool:
        ...

    @property
    def is_authenticated(self) -> bool:
        ...

    def connect(self, auto_reconnect: bool = True) -> None:
        ...

    def authenticate(self) -> None:
        ...

    def send_query(self) -> None:
        ...

    def send_open(self) -> None:
        ...

    def send_close(self) -> None:
        ...

    def add_listener(self, listener: EventListener) -> Callable[[], None]:
        ...


class SignalAdapter(abc.ABC):
    """Base for transports that report raw lifecycle signals.

    A concrete transport wraps a device client, forwards its
    ``connected``/``authenticated``/``disconnect``/``error``/
    ``incomingmessage`` callbacks to the matching ``on_*`` methods here,
    and implements the commands. This base keeps the :class:`DeviceSession`
    flags current and delivers one typed event per signal, in order, to
    every listener.
    """

    def __init__(self, session: DeviceSession) -> None:
        self._session = session
        self._listeners: list[EventListener] = []

    @property
    def session(self) -> DeviceSession:
        return self._session

    @property
    def is_connected(self) -> bool:
        return self._session.connected

    @property
    def is_authenticated(self) -> bool:
        return self._session.authenticated

    def add_listener(self, listener: EventListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # ------------------------------------------------------------------
    # Signals from the transport
    # ------------------------------------------------------------------

    def on_connected(self) -> None:
        self._session.connected = True
        self._emit(Lifecycle(signal=LifecycleSignal.CONNECTED))

    def on_authenticated(self) -> None:
        self._session.authenticated = True
        self._emit(Lifecycle(signal=LifecycleSignal.AUTHENTICATED))

    def on_disconnected(self, reason: str = "") -> None:
        self._session.connected = False
        self._session.authenticated = False
        self._emit(Lifecycle(signal=LifecycleSignal.DISCONNECTED, reason=reason or None))

    def on_error(self, error: object) -> None:
        self._emit(Lifecycle(signal=LifecycleSignal.ERROR, error=str(error)))

    def on_incoming_message(
        self,
        frame: Mapping[str, Any] | None,
        decrypted_payload: Mapping[str, Any] | None = None,
    ) -> None:
        for event in decode_incoming_message(frame, decrypted_payload):
            self._emit(event)

    def _emit(self, event: ProtocolEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                _logger.debug("Listener failed for %s event", event.kind, exc_info=True)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def connect(self, auto_reconnect: bool = True) -> None:
        ...

    @abc.abstractmethod
    def authenticate(self) -> None:
        ...

    @abc.abstractmethod
    def send_query(self) -> None:
        ...

    @abc.abstractmethod
    def send_open(self) -> None:
        ...

    @abc.abstractmethod
    def send_close(self) -> None:
        ...
