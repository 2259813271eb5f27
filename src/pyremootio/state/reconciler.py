"""Per-device door-state reconciler.

This is the only component allowed to mutate a device's current and
target door state.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, assert_never

from pydantic import BaseModel, ConfigDict

from pyremootio.exceptions import InvalidValueError, NoValueAvailableError, NotConnectedError
from pyremootio.models.door import DoorState
from pyremootio.state.events import (
    Lifecycle,
    LifecycleSignal,
    ProtocolEvent,
    QueryResponse,
    RelayTrigger,
    StateChange,
)
from pyremootio.state.policy import adopt_target, next_current_state, settles_target

if TYPE_CHECKING:
    from pyremootio.adapter import DeviceAdapter

_logger = logging.getLogger(__name__)

StateListener = Callable[[DoorState], None]


class ReconcilerState(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    current_state: DoorState = DoorState.UNKNOWN
    target_state: DoorState = DoorState.UNKNOWN


def _coerce_requested(value: Any) -> DoorState:
    if value is None:
        raise InvalidValueError("no value")
    if isinstance(value, str):
        state = DoorState.from_device(value)
    elif isinstance(value, bool) or not isinstance(value, (int, DoorState)):
        raise InvalidValueError(f"unsupported target value: {value!r}")
    else:
        state = DoorState(value)
    if not state.is_known:
        raise InvalidValueError(f"unsupported target value: {value!r}")
    return state


class StateReconciler:
    """Keeps one device's current/target door state consistent.

    Device observations arrive through :meth:`handle_event`; hub requests
    through the ``get_*``/``set_*`` methods. Both paths may run on
    different threads and are serialized on one lock per instance.

    Reads never block on the device: :meth:`get_current_state` returns the
    cached value and fires a query whose answer refreshes the cache later.
    """

    def __init__(
        self,
        adapter: DeviceAdapter,
        *,
        name: str = "Garage door",
        on_current_state: StateListener | None = None,
    ) -> None:
        self._adapter = adapter
        self._name = name
        self._on_current_state = on_current_state
        self._state = ReconcilerState()
        self._lock = threading.RLock()

    @property
    def current_state(self) -> DoorState:
        with self._lock:
            return self._state.current_state

    @property
    def target_state(self) -> DoorState:
        with self._lock:
            return self._state.target_state

    def snapshot(self) -> ReconcilerState:
        """Copy of the current/target pair."""
        with self._lock:
            return self._state.model_copy()

    # ------------------------------------------------------------------
    # Device path
    # ------------------------------------------------------------------

    def handle_event(self, event: ProtocolEvent) -> None:
        """Apply one decoded protocol event."""
        if isinstance(event, Lifecycle):
            self._handle_lifecycle(event)
        elif isinstance(event, (StateChange, RelayTrigger, QueryResponse)):
            self._handle_observation(event)
        else:
            assert_never(event)

    def _handle_observation(self, event: StateChange | RelayTrigger | QueryResponse) -> None:
        new_state = next_current_state(event)
        if new_state is None:
            _logger.debug("%s: %s carries no state update (%s)", self._name, event.kind, event.state.name)
            return

        with self._lock:
            self._state.current_state = new_state
            if settles_target(event):
                self._state.target_state = DoorState.CLOSED

        _logger.info("%s: setting current state to %s", self._name, new_state.name)
        self._push_current_state(new_state)

    def _handle_lifecycle(self, event: Lifecycle) -> None:
        # Cached state is kept across disconnects; reads return the last known value.
        if event.signal == LifecycleSignal.CONNECTED:
            _logger.info("%s connected", self._name)
            self._adapter.authenticate()
        elif event.signal == LifecycleSignal.AUTHENTICATED:
            _logger.info("%s authenticated", self._name)
        elif event.signal == LifecycleSignal.DISCONNECTED:
            _logger.info("%s disconnected: %s", self._name, event.reason or "no reason given")
        elif event.signal == LifecycleSignal.ERROR:
            _logger.error("%s: device error: %s", self._name, event.error)
        else:
            assert_never(event.signal)

    def _push_current_state(self, state: DoorState) -> None:
        if self._on_current_state is None:
            return
        try:
            self._on_current_state(state)
        except Exception:
            _logger.debug("on_current_state callback failed", exc_info=True)

    # ------------------------------------------------------------------
    # Hub path
    # ------------------------------------------------------------------

    def get_current_state(self) -> DoorState:
        """Return the cached current state and request a fresh one.

        A query is sent on every call, whether or not a value is returned.

        Raises
        ------
        NoValueAvailableError
            If no state has been observed yet.
        """
        current = self.current_state
        _logger.debug("%s: get current state -> %s", self._name, current.name)
        self._adapter.send_query()
        if not current.is_known:
            raise NoValueAvailableError("No value available")
        return current

    def get_target_state(self) -> DoorState:
        """Return the target state, adopting the current state if none was requested.

        Raises
        ------
        NoValueAvailableError
            If neither a target nor a current state is known.
        """
        with self._lock:
            target = adopt_target(self._state.current_state, self._state.target_state)
            if target is None:
                raise NoValueAvailableError("No value available")
            if target != self._state.target_state:
                _logger.info("%s: target state is uninitialized, using current state %s", self._name, target.name)
                self._state.target_state = target
        _logger.debug("%s: get target state -> %s", self._name, target.name)
        return target

    def set_target_state(self, requested: DoorState | int | str | None) -> None:
        """Request a new target state and actuate the door if needed.

        Repeating the current target is a successful no-op. Targets other
        than OPEN and CLOSED are stored but send no command.

        Raises
        ------
        InvalidValueError
            If *requested* is missing or not a door state.
        NotConnectedError
            If the device is not connected and authenticated. The target
            is left unchanged.
        """
        new_state = _coerce_requested(requested)
        with self._lock:
            old_state = self._state.target_state
            _logger.info("%s: set target state: new %s, old %s", self._name, new_state.name, old_state.name)
            if new_state == old_state:
                return
            if not (self._adapter.is_connected and self._adapter.is_authenticated):
                _logger.info("%s: device is not connected", self._name)
                raise NotConnectedError("Not connected")
            self._state.target_state = new_state
            if new_state == DoorState.OPEN:
                _logger.info("%s: sending open", self._name)
                self._adapter.send_open()
            elif new_state == DoorState.CLOSED:
                _logger.info("%s: sending close", self._name)
                self._adapter.send_close()
