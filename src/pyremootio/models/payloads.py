"""Models for the device's websocket payloads.

Only the subset the integration consumes is modelled. Unencrypted frames
(``HELLO``, ``PING``, ``ERROR``, ``ENCRYPTED``) are represented by
:class:`DeviceFrame`; the decrypted contents of an ``ENCRYPTED`` frame
by :class:`DecryptedPayload`, which carries either an ``event`` or a
``response``.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pyremootio.models._base import RemootioBaseModel


class EventData(RemootioBaseModel):
    """Attribution attached to relay-trigger and left-open events."""

    key_nr: int | None = None
    key_type: str | None = None
    via: str | None = None
    time_open_100ms: int | None = Field(default=None, validation_alias="timeOpen100ms")


class DeviceEvent(RemootioBaseModel):
    """An unsolicited event pushed by the device."""

    cnt: int | None = None
    type: str
    state: str | None = None
    t100ms: int | None = Field(default=None, validation_alias="t100ms")
    data: EventData | None = None


class DeviceResponse(RemootioBaseModel):
    """The device's answer to an action (``QUERY``, ``OPEN``, ``CLOSE``, ...)."""

    type: str
    id: int | None = None
    success: bool | None = None
    state: str | None = None
    t100ms: int | None = Field(default=None, validation_alias="t100ms")
    relay_triggered: bool | None = None
    error_code: str | None = None


class DecryptedPayload(RemootioBaseModel):
    event: DeviceEvent | None = None
    response: DeviceResponse | None = None


class DeviceFrame(RemootioBaseModel):
    """An outer websocket frame.

    The authentication challenge arrives as a frame with a ``challenge``
    member and no meaningful ``type``.
    """

    type: str | None = None
    challenge: dict[str, Any] | None = None
    error_message: str | None = None

    @property
    def is_challenge(self) -> bool:
        return self.challenge is not None
