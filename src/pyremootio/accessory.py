"""Garage door accessory exposed to the home-automation hub."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pyremootio._constants import MANUFACTURER, MODEL
from pyremootio._redact import redact_for_log
from pyremootio.adapter import DeviceAdapter
from pyremootio.config import RemootioConfig
from pyremootio.exceptions import RemootioConfigError
from pyremootio.models.door import DoorState
from pyremootio.state.reconciler import StateListener, StateReconciler

_logger = logging.getLogger(__name__)

AdapterFactory = Callable[[RemootioConfig], DeviceAdapter]


@dataclasses.dataclass(frozen=True)
class AccessoryInformation:
    name: str
    manufacturer: str = MANUFACTURER
    model: str = MODEL


class GarageDoorAccessory:
    """One garage door opener as seen by the hub.

    Usage::

        accessory = create_accessory(hub_config, MyTransport)
        if accessory is not None:
            state = accessory.get_current_state()
    """

    def __init__(
        self,
        config: RemootioConfig,
        adapter: DeviceAdapter,
        *,
        on_current_state: StateListener | None = None,
    ) -> None:
        self._config = config
        self._adapter = adapter
        self.information = AccessoryInformation(name=config.name)
        self._reconciler = StateReconciler(adapter, name=config.name, on_current_state=on_current_state)
        self._unsubscribe = adapter.add_listener(self._reconciler.handle_event)

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def adapter(self) -> DeviceAdapter:
        return self._adapter

    @property
    def reconciler(self) -> StateReconciler:
        return self._reconciler

    def start(self) -> None:
        """Ask the transport to connect (and keep reconnecting)."""
        self._adapter.connect(auto_reconnect=self._config.auto_reconnect)
        _logger.info("%s: garage door opener finished initializing", self.name)

    def close(self) -> None:
        """Stop receiving device events. Cached state stays readable."""
        self._unsubscribe()

    def get_current_state(self) -> DoorState:
        return self._reconciler.get_current_state()

    def get_target_state(self) -> DoorState:
        return self._reconciler.get_target_state()

    def set_target_state(self, requested: DoorState | int | str | None) -> None:
        self._reconciler.set_target_state(requested)

    def obstruction_detected(self) -> bool:
        # The device has no obstruction sensor.
        _logger.debug("%s: obstruction detected was requested", self.name)
        return False

    def identify(self) -> None:
        _logger.info("%s: identify", self.name)


def create_accessory(
    config: RemootioConfig | Mapping[str, Any],
    adapter_factory: AdapterFactory,
    *,
    on_current_state: StateListener | None = None,
    start: bool = True,
) -> GarageDoorAccessory | None:
    """Build, wire and (optionally) start an accessory.

    Returns ``None`` when configuration is missing or malformed; the
    problem is logged and nothing is connected.
    """
    try:
        if not isinstance(config, RemootioConfig):
            config = RemootioConfig.from_mapping(config)
        _logger.debug("Accessory config: %s", redact_for_log(dataclasses.asdict(config)))
        config.validate()
    except RemootioConfigError as exc:
        if exc.missing:
            _logger.warning("Missing required config parameters (%s), exiting", ", ".join(exc.missing))
        else:
            _logger.warning("Invalid config parameters (%s), exiting", ", ".join(exc.invalid))
        return None

    accessory = GarageDoorAccessory(config, adapter_factory(config), on_current_state=on_current_state)
    if start:
        accessory.start()
    return accessory
