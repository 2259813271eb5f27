"""Tests for StateReconciler event handling and hub requests."""

from __future__ import annotations

import logging
import threading

import pytest

from pyremootio.exceptions import InvalidValueError, NotConnectedError, NoValueAvailableError
from pyremootio.models.door import DoorState
from pyremootio.state.events import Lifecycle, LifecycleSignal, QueryResponse, RelayTrigger, StateChange
from pyremootio.state.reconciler import StateReconciler

# ------------------------------------------------------------------
# handle_event
# ------------------------------------------------------------------


class TestHandleEvent:
    @pytest.mark.parametrize(
        "state",
        [DoorState.OPEN, DoorState.CLOSED, DoorState.OPENING, DoorState.CLOSING, DoorState.STOPPED],
    )
    def test_state_change_sets_current_state(self, adapter, state: DoorState) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(StateChange(state=state))
        assert reconciler.get_current_state() == state

    def test_state_change_closed_overrides_target(self, online_adapter) -> None:
        reconciler = StateReconciler(online_adapter)
        reconciler.set_target_state(DoorState.OPEN)

        reconciler.handle_event(StateChange(state=DoorState.CLOSED))

        assert reconciler.target_state == DoorState.CLOSED
        assert reconciler.current_state == DoorState.CLOSED

    def test_state_change_open_leaves_target_alone(self, online_adapter) -> None:
        reconciler = StateReconciler(online_adapter)
        reconciler.set_target_state(DoorState.CLOSED)

        reconciler.handle_event(StateChange(state=DoorState.OPEN))

        assert reconciler.target_state == DoorState.CLOSED

    def test_relay_trigger_from_open_implies_closing(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(RelayTrigger(state=DoorState.OPEN, key_type="api key"))
        assert reconciler.current_state == DoorState.CLOSING

    def test_relay_trigger_from_closed_implies_opening(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(RelayTrigger(state=DoorState.CLOSED, key_type="api key"))
        assert reconciler.current_state == DoorState.OPENING

    @pytest.mark.parametrize("key_type", ["remote", "master key", None])
    def test_relay_trigger_from_other_keys_is_ignored(self, adapter, key_type: str | None) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(StateChange(state=DoorState.OPEN))

        reconciler.handle_event(RelayTrigger(state=DoorState.OPEN, key_type=key_type))

        assert reconciler.current_state == DoorState.OPEN

    def test_query_response_overrides_inferred_state(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(RelayTrigger(state=DoorState.OPEN, key_type="api key"))

        reconciler.handle_event(QueryResponse(state=DoorState.OPEN))

        assert reconciler.current_state == DoorState.OPEN

    def test_connected_triggers_authenticate(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(Lifecycle(signal=LifecycleSignal.CONNECTED))
        assert adapter.commands == ["authenticate"]

    @pytest.mark.parametrize(
        "event",
        [
            Lifecycle(signal=LifecycleSignal.AUTHENTICATED),
            Lifecycle(signal=LifecycleSignal.DISCONNECTED, reason="socket closed"),
            Lifecycle(signal=LifecycleSignal.ERROR, error="boom"),
        ],
    )
    def test_other_lifecycle_signals_keep_state(self, online_adapter, event: Lifecycle) -> None:
        reconciler = StateReconciler(online_adapter)
        reconciler.handle_event(StateChange(state=DoorState.OPEN))
        reconciler.set_target_state(DoorState.CLOSED)
        sent = list(online_adapter.commands)

        reconciler.handle_event(event)

        assert reconciler.current_state == DoorState.OPEN
        assert reconciler.target_state == DoorState.CLOSED
        assert online_adapter.commands == sent

    def test_error_signal_is_logged(self, adapter, caplog) -> None:
        reconciler = StateReconciler(adapter, name="Garage")
        with caplog.at_level(logging.ERROR):
            reconciler.handle_event(Lifecycle(signal=LifecycleSignal.ERROR, error="bad mac"))
        assert "bad mac" in caplog.text

    def test_current_state_pushed_to_listener(self, adapter) -> None:
        pushed: list[DoorState] = []
        reconciler = StateReconciler(adapter, on_current_state=pushed.append)

        reconciler.handle_event(StateChange(state=DoorState.OPEN))
        reconciler.handle_event(RelayTrigger(state=DoorState.OPEN, key_type="api key"))
        reconciler.handle_event(RelayTrigger(state=DoorState.OPEN, key_type="remote"))
        reconciler.handle_event(QueryResponse(state=DoorState.CLOSING))

        assert pushed == [DoorState.OPEN, DoorState.CLOSING, DoorState.CLOSING]

    def test_failing_listener_does_not_break_reconciliation(self, adapter) -> None:
        def _explode(_state: DoorState) -> None:
            raise RuntimeError("sink down")

        reconciler = StateReconciler(adapter, on_current_state=_explode)
        reconciler.handle_event(StateChange(state=DoorState.CLOSED))

        assert reconciler.current_state == DoorState.CLOSED


# ------------------------------------------------------------------
# get_current_state / get_target_state
# ------------------------------------------------------------------


class TestReads:
    def test_current_state_before_observation_raises_and_queries_once(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        with pytest.raises(NoValueAvailableError):
            reconciler.get_current_state()
        assert adapter.counts["query"] == 1

    def test_current_state_queries_on_every_read(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(StateChange(state=DoorState.OPEN))

        reconciler.get_current_state()
        reconciler.get_current_state()

        assert adapter.counts["query"] == 2

    def test_target_state_unknown_everywhere_raises(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        with pytest.raises(NoValueAvailableError):
            reconciler.get_target_state()

    def test_target_state_adopts_current_state(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(QueryResponse(state=DoorState.OPEN))

        assert reconciler.get_target_state() == DoorState.OPEN
        assert reconciler.target_state == DoorState.OPEN

    def test_target_state_after_closed_observation(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(StateChange(state=DoorState.CLOSED))
        assert reconciler.get_target_state() == DoorState.CLOSED

    def test_reads_return_stale_state_while_disconnected(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        adapter.go_online()
        reconciler.handle_event(StateChange(state=DoorState.OPEN))

        adapter.on_disconnected("socket closed")

        assert reconciler.get_current_state() == DoorState.OPEN
        assert reconciler.get_target_state() == DoorState.OPEN


# ------------------------------------------------------------------
# set_target_state
# ------------------------------------------------------------------


class TestSetTargetState:
    def test_open_sends_open(self, online_adapter) -> None:
        reconciler = StateReconciler(online_adapter)
        reconciler.set_target_state(DoorState.OPEN)
        assert online_adapter.commands == ["open"]
        assert reconciler.target_state == DoorState.OPEN

    def test_closed_sends_close(self, online_adapter) -> None:
        reconciler = StateReconciler(online_adapter)
        reconciler.set_target_state(DoorState.CLOSED)
        assert online_adapter.commands == ["close"]

    def test_repeated_request_is_idempotent(self, online_adapter) -> None:
        reconciler = StateReconciler(online_adapter)
        reconciler.set_target_state(DoorState.OPEN)
        reconciler.set_target_state(DoorState.OPEN)
        reconciler.set_target_state(0)
        assert online_adapter.counts["open"] == 1

    def test_same_target_succeeds_while_disconnected(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        reconciler.handle_event(StateChange(state=DoorState.CLOSED))

        reconciler.set_target_state(DoorState.CLOSED)

        assert adapter.commands == []

    def test_not_connected_rejects_and_keeps_target(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        with pytest.raises(NotConnectedError):
            reconciler.set_target_state(DoorState.OPEN)
        assert reconciler.target_state == DoorState.UNKNOWN
        assert adapter.commands == []

    def test_connected_but_not_authenticated_rejects(self, adapter) -> None:
        reconciler = StateReconciler(adapter)
        adapter.on_connected()
        with pytest.raises(NotConnectedError):
            reconciler.set_target_state(DoorState.CLOSED)
        assert "close" not in adapter.commands

    @pytest.mark.parametrize("value", [None, 99, -1, "sideways", 1.5, True])
    def test_invalid_values_rejected(self, online_adapter, value: object) -> None:
        reconciler = StateReconciler(online_adapter)
        with pytest.raises(InvalidValueError):
            reconciler.set_target_state(value)  # type: ignore[arg-type]
        assert online_adapter.commands == []

    def test_invalid_value_is_a_value_error(self, online_adapter) -> None:
        reconciler = StateReconciler(online_adapter)
        with pytest.raises(ValueError):
            reconciler.set_target_state(None)

    def test_stopped_is_stored_without_command(self, online_adapter) -> None:
        reconciler = StateReconciler(online_adapter)
        reconciler.set_target_state(DoorState.STOPPED)
        assert reconciler.target_state == DoorState.STOPPED
        assert online_adapter.commands == []

    def test_accepts_hub_integers_and_device_strings(self, online_adapter) -> None:
        reconciler = StateReconciler(online_adapter)
        reconciler.set_target_state(1)
        reconciler.set_target_state("open")
        assert online_adapter.commands == ["close", "open"]


def test_end_to_end_scenario(adapter) -> None:
    reconciler = StateReconciler(adapter)

    with pytest.raises(NoValueAvailableError):
        reconciler.get_current_state()
    assert adapter.counts["query"] == 1

    reconciler.handle_event(QueryResponse(state=DoorState.OPEN))
    assert reconciler.get_current_state() == DoorState.OPEN

    adapter.go_online()
    reconciler.set_target_state(DoorState.CLOSED)
    assert adapter.counts["close"] == 1
    assert reconciler.target_state == DoorState.CLOSED

    reconciler.handle_event(StateChange(state=DoorState.CLOSING))
    assert reconciler.current_state == DoorState.CLOSING

    reconciler.handle_event(StateChange(state=DoorState.CLOSED))
    assert reconciler.current_state == DoorState.CLOSED
    assert reconciler.target_state == DoorState.CLOSED
    assert adapter.counts["close"] == 1


# ------------------------------------------------------------------
# Serialization of hub and device paths
# ------------------------------------------------------------------


def test_device_event_waits_for_in_flight_set(online_adapter) -> None:
    reconciler = StateReconciler(online_adapter)
    device_thread = threading.Thread(target=reconciler.handle_event, args=(StateChange(state=DoorState.CLOSED),))
    blocked_during_set: list[bool] = []
    send_open = online_adapter.send_open

    def _send_open_with_concurrent_event() -> None:
        device_thread.start()
        device_thread.join(timeout=0.2)
        blocked_during_set.append(device_thread.is_alive())
        send_open()

    online_adapter.send_open = _send_open_with_concurrent_event
    reconciler.set_target_state(DoorState.OPEN)
    device_thread.join(timeout=5)

    assert blocked_during_set == [True]
    assert not device_thread.is_alive()
    assert reconciler.current_state == DoorState.CLOSED
    assert reconciler.target_state == DoorState.CLOSED
    assert online_adapter.commands == ["open"]


def test_concurrent_hub_and_device_paths_stay_consistent(online_adapter) -> None:
    pushed: list[DoorState] = []
    reconciler = StateReconciler(online_adapter, on_current_state=pushed.append)
    device_states = [DoorState.OPENING, DoorState.OPEN, DoorState.CLOSING, DoorState.CLOSED] * 200
    requests = [DoorState.OPEN, DoorState.CLOSED] * 200

    def _device() -> None:
        for state in device_states:
            reconciler.handle_event(StateChange(state=state))

    def _hub() -> None:
        for requested in requests:
            reconciler.set_target_state(requested)
            reconciler.get_target_state()

    threads = [threading.Thread(target=_device), threading.Thread(target=_hub)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    snapshot = reconciler.snapshot()
    assert snapshot.current_state == DoorState.CLOSED
    assert snapshot.target_state in (DoorState.CLOSED, requests[-1])
    assert pushed == device_states
    assert len(online_adapter.commands) <= len(requests)
    assert set(online_adapter.commands) <= {"open", "close", "query"}
