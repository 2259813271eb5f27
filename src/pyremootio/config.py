"""Accessory configuration for pyremootio."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Mapping
from typing import Any

from pyremootio._constants import DEFAULT_PING_INTERVAL, DEFAULT_PORT
from pyremootio.exceptions import RemootioConfigError

_REQUIRED_FIELDS: tuple[str, ...] = ("name", "ip_address", "api_secret_key", "api_auth_key")


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _coerce(field_name: str, value: Any, cast: Callable[[Any], Any]) -> Any:
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise RemootioConfigError(f"Invalid value for {field_name}: {value!r}", invalid=(field_name,)) from exc


@dataclasses.dataclass(frozen=True)
class RemootioConfig:
    """Configuration of one garage-door accessory.

    Parameters
    ----------
    name : str
        Display name of the accessory on the hub.
    ip_address : str
        Network address of the device.
    api_secret_key : str
        API secret key shown in the device's app settings.
    api_auth_key : str
        API auth key shown in the device's app settings.
    port : int
        Websocket port of the device API.
    ping_interval : float
        Keepalive interval in seconds used by the transport.
    auto_reconnect : bool
        Ask the transport to reconnect by itself after a drop.

    The fields are typed as required, but loaders keep missing values
    as ``None`` so :meth:`validate` can report all of them at once.
    """

    name: str
    ip_address: str
    api_secret_key: str = dataclasses.field(repr=False)
    api_auth_key: str = dataclasses.field(repr=False)
    port: int = DEFAULT_PORT
    ping_interval: float = DEFAULT_PING_INTERVAL
    auto_reconnect: bool = True

    def missing_fields(self) -> tuple[str, ...]:
        """Names of required fields that are unset or blank."""
        missing: list[str] = []
        for field_name in _REQUIRED_FIELDS:
            value = getattr(self, field_name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(field_name)
        return tuple(missing)

    def validate(self) -> RemootioConfig:
        """Return ``self`` or raise :class:`RemootioConfigError` listing missing fields."""
        missing = self.missing_fields()
        if missing:
            raise RemootioConfigError(
                f"Missing required config parameters: {', '.join(missing)}",
                missing=missing,
            )
        return self

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> RemootioConfig:
        """Build a configuration from a hub accessory-config dict.

        Accepts the hub's camelCase keys (``ipAddress``, ``apiSecretKey``,
        ``apiAuthKey``, ``pingInterval``, ``autoReconnect``) as well as the
        snake_case field names. Required keys that are absent are kept as
        ``None``; call :meth:`validate` to reject them.
        """
        _KEY_ALIASES = {
            "ipAddress": "ip_address",
            "apiSecretKey": "api_secret_key",
            "apiAuthKey": "api_auth_key",
            "pingInterval": "ping_interval",
            "autoReconnect": "auto_reconnect",
        }
        kwargs: dict[str, Any] = dict.fromkeys(_REQUIRED_FIELDS)
        field_names = {f.name for f in dataclasses.fields(cls)}
        for key, value in mapping.items():
            field_name = _KEY_ALIASES.get(key, key)
            if field_name in field_names:
                kwargs[field_name] = value

        if kwargs.get("port") is not None:
            kwargs["port"] = _coerce("port", kwargs["port"], int)
        if kwargs.get("ping_interval") is not None:
            kwargs["ping_interval"] = _coerce("ping_interval", kwargs["ping_interval"], float)
        # Optional fields left unset fall back to the dataclass defaults.
        kwargs = {k: v for k, v in kwargs.items() if v is not None or k in _REQUIRED_FIELDS}
        return cls(**kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> RemootioConfig:
        """Create configuration from ``REMOOTIO_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "REMOOTIO_NAME": "name",
            "REMOOTIO_IP_ADDRESS": "ip_address",
            "REMOOTIO_API_SECRET_KEY": "api_secret_key",
            "REMOOTIO_API_AUTH_KEY": "api_auth_key",
        }
        config_kwargs: dict[str, Any] = dict.fromkeys(_REQUIRED_FIELDS)
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        port_env = env.get("REMOOTIO_PORT")
        if port_env is not None and "port" not in overrides:
            config_kwargs["port"] = _coerce("port", port_env, int)

        ping_env = env.get("REMOOTIO_PING_INTERVAL")
        if ping_env is not None and "ping_interval" not in overrides:
            config_kwargs["ping_interval"] = _coerce("ping_interval", ping_env, float)

        if "auto_reconnect" not in overrides:
            config_kwargs["auto_reconnect"] = _env_bool(env.get("REMOOTIO_AUTO_RECONNECT"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
