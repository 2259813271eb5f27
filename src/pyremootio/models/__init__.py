"""Data models for device payloads and door state."""

from pyremootio.models._base import RemootioBaseModel, RemootioEnum
from pyremootio.models.door import DoorState
from pyremootio.models.payloads import (
    DecryptedPayload,
    DeviceEvent,
    DeviceFrame,
    DeviceResponse,
    EventData,
)

__all__ = [
    "DecryptedPayload",
    "DeviceEvent",
    "DeviceFrame",
    "DeviceResponse",
    "DoorState",
    "EventData",
    "RemootioBaseModel",
    "RemootioEnum",
]
