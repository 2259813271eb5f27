"""Base model and enum for device payloads.

Every payload model inherits from :class:`RemootioBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase payload keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None`` values so
  the field default is used.
* A ``raw`` dict that captures the original payload.

State enums inherit from :class:`RemootioEnum` which requires an
``UNKNOWN`` member at ``-1`` and returns it for any unmapped value.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class RemootioEnum(enum.IntEnum):
    """Base for device state enums.

    Every subclass **must** define ``UNKNOWN = -1``.
    """

    @classmethod
    def _missing_(cls, value: object) -> RemootioEnum:
        # pylint: disable=no-member
        if hasattr(cls, "UNKNOWN"):
            unknown: RemootioEnum = cls.UNKNOWN  # type: ignore[attr-defined]
            return unknown
        return next(iter(cls))


class RemootioBaseModel(BaseModel):
    """Base for decoded device payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original payload dict."""

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, values: Any) -> Any:
        """Drop ``None`` values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None}
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
