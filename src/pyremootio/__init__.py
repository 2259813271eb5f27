"""pyremootio - Garage door state bridge for Remootio devices."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyremootio")
except PackageNotFoundError:
    __version__ = "0+local"
from pyremootio.accessory import AccessoryInformation, GarageDoorAccessory, create_accessory
from pyremootio.adapter import DeviceAdapter, SignalAdapter
from pyremootio.config import RemootioConfig
from pyremootio.exceptions import (
    InvalidValueError,
    NotConnectedError,
    NoValueAvailableError,
    RemootioConfigError,
    RemootioError,
    RemootioStateError,
)
from pyremootio.models import DoorState
from pyremootio.session import DeviceSession
from pyremootio.state.events import (
    Lifecycle,
    LifecycleSignal,
    ProtocolEvent,
    QueryResponse,
    RelayTrigger,
    StateChange,
)
from pyremootio.state.reconciler import ReconcilerState, StateReconciler

__all__ = [
    "__version__",
    "AccessoryInformation",
    "DeviceAdapter",
    "DeviceSession",
    "DoorState",
    "GarageDoorAccessory",
    "InvalidValueError",
    "Lifecycle",
    "LifecycleSignal",
    "NoValueAvailableError",
    "NotConnectedError",
    "ProtocolEvent",
    "QueryResponse",
    "ReconcilerState",
    "RelayTrigger",
    "RemootioConfig",
    "RemootioConfigError",
    "RemootioError",
    "RemootioStateError",
    "SignalAdapter",
    "StateChange",
    "StateReconciler",
    "create_accessory",
]
