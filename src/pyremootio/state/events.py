"""Decoded protocol events.

The Adapter converts every lifecycle signal and decrypted device payload
into exactly one of these events. Only the reconciler consumes them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from pyremootio.models.door import DoorState


class LifecycleSignal(StrEnum):
    CONNECTED = "connected"
    AUTHENTICATED = "authenticated"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class _ProtocolEventBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class StateChange(_ProtocolEventBase):
    """The device reported a new door state on its own."""

    kind: Literal["state_change"] = "state_change"
    state: DoorState


class RelayTrigger(_ProtocolEventBase):
    """The device's relay fired while the door was in ``state``."""

    kind: Literal["relay_trigger"] = "relay_trigger"
    state: DoorState
    key_type: str | None = None


class QueryResponse(_ProtocolEventBase):
    """The device answered an explicit query."""

    kind: Literal["query_response"] = "query_response"
    state: DoorState


class Lifecycle(_ProtocolEventBase):
    """A connection lifecycle signal from the Adapter.

    ``reason`` is set for ``DISCONNECTED``, ``error`` for ``ERROR``.
    """

    kind: Literal["lifecycle"] = "lifecycle"
    signal: LifecycleSignal
    reason: str | None = None
    error: str | None = None


ProtocolEvent = Annotated[
    StateChange | RelayTrigger | QueryResponse | Lifecycle,
    Field(discriminator="kind"),
]
