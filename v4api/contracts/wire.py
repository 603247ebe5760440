"""Wire-model base: optional-field omission, internal fields, unknown-key policy.

Every contract record derives from WireModel. Four rules shape the wire form:

  - Fields declared with omit_empty() disappear from the encoded mapping when
    their value is empty ("", 0, False, None, [] or {}), or only when None for
    schema-less values. All other fields are always present.
  - A null list or map in the input decodes to the empty default.
  - Fields declared with Field(exclude=True) are internal: they are never
    encoded, and decoding wire input (WIRE_CONTEXT set) drops them.
  - When FORBID_UNKNOWN is set in the validation context, keys that match no
    field name or wire key are rejected at every nesting level.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    ValidationInfo,
    model_serializer,
    model_validator,
)

OMIT_EMPTY_KEY = "x-omitempty"

# Validation context keys
WIRE_CONTEXT = "wire"
FORBID_UNKNOWN = "forbid_unknown"

# omit_empty rule for schema-less values: drop only when None
OMIT_NONE = "none"


def omit_empty(
    default: Any = "",
    *,
    default_factory: Callable[[], Any] | None = None,
    only_none: bool = False,
    **kwargs: Any,
) -> Any:
    """Declare a field that is left out of the wire form when empty.

    With only_none, the field is dropped only when it is None, so schema-less
    values such as {} or 0 survive encoding.
    """
    extra = {OMIT_EMPTY_KEY: OMIT_NONE if only_none else True}
    if default_factory is not None:
        return Field(default_factory=default_factory, json_schema_extra=extra, **kwargs)
    return Field(default=default, json_schema_extra=extra, **kwargs)


def is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0
    return False


def _omit_rule(extra: Any) -> Any:
    if not isinstance(extra, dict):
        return None
    return extra.get(OMIT_EMPTY_KEY)


class WireModel(BaseModel):
    """Immutable record exchanged between the aggregator, its pools and clients."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _apply_wire_policy(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        # null lists and maps decode to their empty default
        nulls: dict[str, Any] = {}
        for name, f in cls.model_fields.items():
            if f.default_factory is None:
                continue
            for key in (name, f.alias):
                if key and key in data and data[key] is None:
                    nulls[key] = f.default_factory()
        if nulls:
            data = {**data, **nulls}
        context = info.context or {}
        if context.get(WIRE_CONTEXT):
            internal = [name for name, f in cls.model_fields.items() if f.exclude]
            if any(name in data for name in internal):
                data = {k: v for k, v in data.items() if k not in internal}
        if context.get(FORBID_UNKNOWN):
            known: set[str] = set()
            for name, f in cls.model_fields.items():
                known.add(name)
                if f.alias:
                    known.add(f.alias)
            unknown = sorted(str(k) for k in data if k not in known)
            if unknown:
                raise ValueError(f"unknown keys for {cls.__name__}: {', '.join(unknown)}")
        return data

    @model_serializer(mode="wrap")
    def _omit_empty_fields(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> dict[str, Any]:
        data = handler(self)
        for name, f in type(self).model_fields.items():
            rule = _omit_rule(f.json_schema_extra)
            if not rule:
                continue
            key = (f.serialization_alias or f.alias or name) if info.by_alias else name
            if key not in data:
                continue
            value = data[key]
            if (value is None) if rule == OMIT_NONE else is_empty(value):
                del data[key]
        return data
