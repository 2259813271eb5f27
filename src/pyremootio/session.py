"""Connectivity state of one device connection."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pyremootio._constants import DEFAULT_PORT
from pyremootio.config import RemootioConfig


class DeviceSession(BaseModel):
    """Address, credentials and connection flags of one device.

    Owned by the Adapter, which flips ``connected`` and ``authenticated``
    as lifecycle signals arrive. Everything else only reads the flags.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    address: str
    port: int = DEFAULT_PORT
    api_secret_key: str = Field(repr=False)
    api_auth_key: str = Field(repr=False)
    connected: bool = False
    authenticated: bool = False

    @classmethod
    def from_config(cls, config: RemootioConfig) -> DeviceSession:
        return cls(
            address=config.ip_address,
            port=config.port,
            api_secret_key=config.api_secret_key,
            api_auth_key=config.api_auth_key,
        )

    @property
    def url(self) -> str:
        """Websocket URL of the device API."""
        return f"ws://{self.address}:{self.port}/"
