#!/usr/bin/env python3
"""Replay a captured device session through the reconciler.

Each line of the capture is a JSON object, either a lifecycle signal or
an incoming message::

    {"signal": "connected"}
    {"signal": "disconnected", "reason": "socket closed"}
    {"frame": {"type": "ENCRYPTED"}, "payload": {"event": {"type": "StateChange", "state": "open"}}}
    {"set_target": "closed"}

Usage
-----
    python scripts/replay_capture.py capture.jsonl
    python scripts/replay_capture.py --verbose capture.jsonl
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from pyremootio.adapter import SignalAdapter
from pyremootio.exceptions import RemootioStateError
from pyremootio.session import DeviceSession
from pyremootio.state.reconciler import StateReconciler


class _ReplayAdapter(SignalAdapter):
    """Adapter that records commands instead of sending them."""

    def __init__(self) -> None:
        super().__init__(DeviceSession(address="replay", api_secret_key="-", api_auth_key="-"))
        self.commands: list[str] = []

    def connect(self, auto_reconnect: bool = True) -> None:
        self.commands.append("connect")

    def authenticate(self) -> None:
        self.commands.append("authenticate")

    def send_query(self) -> None:
        self.commands.append("query")

    def send_open(self) -> None:
        self.commands.append("open")

    def send_close(self) -> None:
        self.commands.append("close")


def _apply_line(adapter: _ReplayAdapter, reconciler: StateReconciler, record: dict[str, Any]) -> str:
    signal = record.get("signal")
    if signal == "connected":
        adapter.on_connected()
    elif signal == "authenticated":
        adapter.on_authenticated()
    elif signal == "disconnected":
        adapter.on_disconnected(str(record.get("reason") or ""))
    elif signal == "error":
        adapter.on_error(record.get("error"))
    elif "set_target" in record:
        try:
            reconciler.set_target_state(record["set_target"])
        except RemootioStateError as exc:
            return f"set_target {record['set_target']} -> {type(exc).__name__}"
        return f"set_target {record['set_target']}"
    else:
        adapter.on_incoming_message(record.get("frame"), record.get("payload"))
        return "message"
    return str(signal)


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay a captured device session.")
    parser.add_argument("capture", help="JSON-lines capture file")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    adapter = _ReplayAdapter()
    reconciler = StateReconciler(adapter, name="replay")
    adapter.add_listener(reconciler.handle_event)

    lines = Path(args.capture).read_text(encoding="utf-8").splitlines()
    print(f"{'#':>4}  {'Input':<32}  {'Current':<8}  {'Target':<8}  Commands")
    print("─" * 72)
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        sent_before = len(adapter.commands)
        label = _apply_line(adapter, reconciler, json.loads(line))
        snapshot = reconciler.snapshot()
        sent = ",".join(adapter.commands[sent_before:]) or "-"
        print(
            f"{lineno:>4}  {label[:32]:<32}  {snapshot.current_state.name:<8}  "
            f"{snapshot.target_state.name:<8}  {sent}"
        )


if __name__ == "__main__":
    main()
