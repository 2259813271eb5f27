"""Garage door state."""

from __future__ import annotations

from typing import Any

from pyremootio.models._base import RemootioEnum


class DoorState(RemootioEnum):
    """Door state as exposed to the hub.

    Values follow the hub's door-state numbering. ``UNKNOWN`` is the
    sentinel held before anything has been observed; it is never pushed
    to the hub as a state.
    """

    UNKNOWN = -1
    OPEN = 0
    CLOSED = 1
    OPENING = 2
    CLOSING = 3
    STOPPED = 4

    @classmethod
    def from_device(cls, value: Any) -> DoorState:
        """Map a device state string (``"open"``, ``"closed"``, ...) to a member.

        Strings without a member (e.g. ``"no sensor"``) map to ``UNKNOWN``.
        """
        if isinstance(value, DoorState):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        member = cls.__members__.get(value.strip().upper())
        if member is None or member is cls.UNKNOWN:
            return cls.UNKNOWN
        return member

    @property
    def is_known(self) -> bool:
        return self is not DoorState.UNKNOWN
