"""Decoding of incoming device messages.

The transport hands over each message as an outer frame plus, for
encrypted frames, the decrypted payload. This module turns that pair
into zero or more :data:`~pyremootio.state.events.ProtocolEvent` objects.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from pyremootio._constants import EVENT_RELAY_TRIGGER, EVENT_STATE_CHANGE, RESPONSE_QUERY
from pyremootio._redact import redact_for_log
from pyremootio.models.door import DoorState
from pyremootio.models.payloads import DecryptedPayload, DeviceEvent, DeviceFrame, DeviceResponse
from pyremootio.state.events import ProtocolEvent, QueryResponse, RelayTrigger, StateChange

_logger = logging.getLogger(__name__)


def _decode_event(event: DeviceEvent) -> ProtocolEvent | None:
    if event.state is None:
        _logger.debug("Ignoring %s event without state", event.type)
        return None
    if event.type not in (EVENT_STATE_CHANGE, EVENT_RELAY_TRIGGER):
        _logger.debug("Ignoring %s event", event.type)
        return None

    state = DoorState.from_device(event.state)
    if not state.is_known:
        _logger.debug("Ignoring %s event with unmapped state %r", event.type, event.state)
        return None

    if event.type == EVENT_STATE_CHANGE:
        return StateChange(state=state)
    key_type = event.data.key_type if event.data is not None else None
    return RelayTrigger(state=state, key_type=key_type)


def _decode_response(response: DeviceResponse) -> ProtocolEvent | None:
    _logger.info("Received %s response", response.type)
    if response.type != RESPONSE_QUERY:
        return None
    state = DoorState.from_device(response.state)
    if not state.is_known:
        _logger.debug("Ignoring QUERY response with unmapped state %r", response.state)
        return None
    return QueryResponse(state=state)


def _log_frame(frame: Mapping[str, Any]) -> None:
    try:
        parsed = DeviceFrame.model_validate(dict(frame))
    except ValidationError:
        _logger.debug("Unparseable frame: %s", redact_for_log(frame))
        return
    if parsed.is_challenge:
        _logger.info("Challenge")
    elif parsed.type is not None:
        _logger.debug("Frame %s", parsed.type)


def decode_incoming_message(
    frame: Mapping[str, Any] | None,
    decrypted_payload: Mapping[str, Any] | None,
) -> list[ProtocolEvent]:
    """Convert one incoming message into protocol events.

    A decrypted payload may carry both an ``event`` and a ``response``;
    the event comes first. Plain frames (``PING``, ``HELLO``, ``ERROR``,
    the auth challenge), event types other than
    ``StateChange``/``RelayTrigger``, non-``QUERY`` responses and malformed
    payloads produce no events.
    """
    if decrypted_payload is None:
        if frame is not None:
            _log_frame(frame)
        return []

    _logger.debug("Decrypted payload: %s", redact_for_log(decrypted_payload))
    try:
        payload = DecryptedPayload.model_validate(dict(decrypted_payload))
    except ValidationError:
        _logger.debug("Malformed decrypted payload", exc_info=True)
        return []

    events: list[ProtocolEvent] = []
    if payload.event is not None:
        decoded = _decode_event(payload.event)
        if decoded is not None:
            events.append(decoded)
    if payload.response is not None and payload.response.state is not None:
        decoded = _decode_response(payload.response)
        if decoded is not None:
            events.append(decoded)
    return events
