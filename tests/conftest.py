from __future__ import annotations

from collections import Counter

import pytest

from pyremootio.adapter import SignalAdapter
from pyremootio.session import DeviceSession


class RecordingAdapter(SignalAdapter):
    """SignalAdapter that records commands instead of talking to a device."""

    def __init__(self) -> None:
        super().__init__(DeviceSession(address="192.168.1.50", api_secret_key="SECRET", api_auth_key="AUTH"))
        self.commands: list[str] = []
        self.auto_reconnect: bool | None = None

    @property
    def counts(self) -> Counter[str]:
        return Counter(self.commands)

    def connect(self, auto_reconnect: bool = True) -> None:
        self.auto_reconnect = auto_reconnect
        self.commands.append("connect")

    def authenticate(self) -> None:
        self.commands.append("authenticate")

    def send_query(self) -> None:
        self.commands.append("query")

    def send_open(self) -> None:
        self.commands.append("open")

    def send_close(self) -> None:
        self.commands.append("close")

    def go_online(self) -> None:
        self.on_connected()
        self.on_authenticated()


@pytest.fixture
def adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture
def online_adapter() -> RecordingAdapter:
    recording = RecordingAdapter()
    recording.session.connected = True
    recording.session.authenticated = True
    return recording
