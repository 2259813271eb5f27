"""Deterministic door-state reconciliation rules.

This module contains *no* payload parsing and no locking. The ingestion
boundary produces typed events; the reconciler owns state and applies
these rules under its lock.
"""

from __future__ import annotations

from pyremootio._constants import API_KEY_TYPE
from pyremootio.models.door import DoorState
from pyremootio.state.events import QueryResponse, RelayTrigger, StateChange

# Relay fired while the door rested in a terminal state: it is now moving
# towards the opposite one.
_RELAY_INFERENCE: dict[DoorState, DoorState] = {
    DoorState.OPEN: DoorState.CLOSING,
    DoorState.CLOSED: DoorState.OPENING,
}


def infer_from_relay_trigger(event: RelayTrigger) -> DoorState | None:
    """Implied current state after a relay trigger, or ``None`` to ignore it.

    Only triggers caused through the API key are considered; triggers
    from other keys (e.g. a physical remote) are left to the device's
    own ``StateChange`` events.
    """
    if event.key_type != API_KEY_TYPE:
        return None
    return _RELAY_INFERENCE.get(event.state)


def next_current_state(event: StateChange | RelayTrigger | QueryResponse) -> DoorState | None:
    """Current state implied by a device event.

    Returns ``None`` when the event carries nothing to apply.
    """
    if isinstance(event, RelayTrigger):
        return infer_from_relay_trigger(event)
    if not event.state.is_known:
        return None
    return event.state


def settles_target(event: StateChange | RelayTrigger | QueryResponse) -> bool:
    """Whether an observation is definite enough to overwrite the target.

    CLOSED is the only state backed by a hardware sensor, so a
    ``StateChange`` to CLOSED settles any pending target.
    """
    return isinstance(event, StateChange) and event.state == DoorState.CLOSED


def adopt_target(current: DoorState, target: DoorState) -> DoorState | None:
    """Target to report when none was requested yet.

    Without an explicit request the door is assumed to be where it is
    heading, i.e. the current state. ``None`` when nothing is known.
    """
    if target.is_known:
        return target
    if current.is_known:
        return current
    return None
