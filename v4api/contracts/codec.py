"""Wire codec: encode contract records to JSON-compatible data and decode them back."""

from __future__ import annotations

import json
from typing import Any, TypeVar

from pydantic import ValidationError

from v4api.contracts.search_v4 import (
    PoolFacets,
    PoolIdentity,
    PoolProviders,
    PoolResult,
    QueryFilterResponse,
    SearchRequest,
    SearchResponse,
)
from v4api.contracts.wire import FORBID_UNKNOWN, WIRE_CONTEXT, WireModel
from v4api.core.config import config
from v4api.core.logger import logger

M = TypeVar("M", bound=WireModel)

# Top-level messages exchanged between services
WIRE_KINDS: dict[str, type[WireModel]] = {
    "search_request": SearchRequest,
    "search_response": SearchResponse,
    "pool_identity": PoolIdentity,
    "pool_result": PoolResult,
    "pool_facets": PoolFacets,
    "pool_providers": PoolProviders,
    "query_filter_response": QueryFilterResponse,
}


class ContractError(ValueError):
    """Wire payload does not satisfy the contract."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


def kind_for(name: str) -> type[WireModel]:
    model_cls = WIRE_KINDS.get(name)
    if model_cls is None:
        raise ContractError(
            f"unknown kind '{name}' (expected one of: {', '.join(WIRE_KINDS)})"
        )
    return model_cls


def _kind_name(model_cls: type[WireModel]) -> str:
    for name, cls in WIRE_KINDS.items():
        if cls is model_cls:
            return name
    return model_cls.__name__


def _format_error(err: dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
    return f"{loc}: {err.get('msg', 'invalid value')}"


def encode(model: WireModel) -> dict[str, Any]:
    """Wire form: wire keys, empty optional fields omitted, internal fields dropped."""
    return model.model_dump(mode="json", by_alias=True)


def dumps(model: WireModel, indent: int | None = None) -> str:
    return json.dumps(encode(model), indent=indent, ensure_ascii=False)


def decode(
    model_cls: type[M],
    data: Any,
    *,
    forbid_unknown: bool | None = None,
) -> M:
    """Validate a wire mapping into a contract record.

    Internal-only keys in the input are ignored. Unknown keys are rejected when
    forbid_unknown is true; None defers to V4API_FORBID_UNKNOWN_KEYS.
    """
    if forbid_unknown is None:
        forbid_unknown = config.forbid_unknown_keys
    kind = _kind_name(model_cls)
    try:
        model = model_cls.model_validate(
            data,
            context={WIRE_CONTEXT: True, FORBID_UNKNOWN: forbid_unknown},
        )
    except ValidationError as exc:
        errors = [_format_error(e) for e in exc.errors()]
        logger.wire_rejected(kind, errors)
        raise ContractError(f"invalid {kind}: {len(errors)} error(s)", errors) from exc
    logger.wire_decoded(kind, len(data) if isinstance(data, dict) else 0)
    return model


def loads(
    model_cls: type[M],
    text: str | bytes,
    *,
    forbid_unknown: bool | None = None,
) -> M:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        kind = _kind_name(model_cls)
        error = f"<root>: malformed JSON ({exc.msg} at line {exc.lineno} column {exc.colno})"
        logger.wire_rejected(kind, [error])
        raise ContractError(f"invalid {kind}: malformed JSON", [error]) from exc
    return decode(model_cls, data, forbid_unknown=forbid_unknown)
