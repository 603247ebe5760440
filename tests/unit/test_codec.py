import json
import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from v4api.contracts.codec import (
    WIRE_KINDS,
    ContractError,
    decode,
    dumps,
    encode,
    kind_for,
    loads,
)
from v4api.contracts.search_v4 import (
    Pagination,
    PoolIdentity,
    PoolResult,
    QueryFilterResponse,
    SearchRequest,
    SearchResponse,
)


def test_negative_pagination_is_rejected():
    with pytest.raises(ValidationError):
        Pagination(start=-1)
    with pytest.raises(ContractError) as exc_info:
        decode(SearchRequest, {"query": "x", "pagination": {"start": 0, "rows": -5}})
    assert any(err.startswith("pagination.rows") for err in exc_info.value.errors)


def test_duplicate_pool_ids_are_rejected():
    with pytest.raises(ValidationError):
        SearchResponse(pools=[PoolIdentity(id="catalog"), PoolIdentity(id="catalog")])


def test_records_are_immutable(sample_request):
    with pytest.raises(ValidationError):
        sample_request.query = "dogs"


def test_failed_pool_result_is_data(sample_response):
    failed = sample_response.failed_results()
    assert len(failed) == 1
    assert failed[0].pool_name == "articles"
    assert failed[0].groups == []
    assert failed[0].is_success is False
    assert sample_response.results[0].is_success is True

    wire = encode(failed[0])
    assert wire["status_code"] == 503
    assert wire["status_msg"] == "pool unavailable"
    assert "group_list" not in wire


def test_failed_requires_non_success_status():
    with pytest.raises(ValueError):
        PoolResult.failed(200, "fine")


def test_failed_drops_supplied_groups():
    result = PoolResult.failed(404, "no such pool", group_list=[{"value": "g"}])
    assert result.groups == []


def test_unknown_keys_are_ignored_by_default():
    request = decode(SearchRequest, {"query": "x", "page": 2}, forbid_unknown=False)
    assert request.query == "x"


def test_unknown_keys_are_rejected_at_any_depth_when_forbidden():
    with pytest.raises(ContractError) as exc_info:
        decode(
            SearchRequest,
            {"query": "x", "pagination": {"start": 0, "rows": 1, "page": 2}},
            forbid_unknown=True,
        )
    assert any("page" in err for err in exc_info.value.errors)


def test_forbidden_unknown_keys_still_accept_wire_aliases_and_internal_keys():
    result = decode(
        PoolResult,
        {"pool_id": "catalog", "status_code": 200, "status_msg": "", "content_language": "en"},
        forbid_unknown=True,
    )
    assert result.pool_name == "catalog"
    assert result.content_language == ""


@patch("v4api.contracts.codec.config")
def test_decode_defaults_to_configured_unknown_key_policy(mock_config):
    mock_config.forbid_unknown_keys = True
    with pytest.raises(ContractError):
        decode(SearchRequest, {"query": "x", "page": 2})

    mock_config.forbid_unknown_keys = False
    assert decode(SearchRequest, {"query": "x", "page": 2}).query == "x"


def test_loads_wraps_malformed_json():
    with pytest.raises(ContractError) as exc_info:
        loads(SearchRequest, "{not json")
    assert "malformed JSON" in exc_info.value.errors[0]
    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)


def test_decode_error_keeps_validation_error_as_cause():
    with pytest.raises(ContractError) as exc_info:
        decode(PoolResult, {"status_code": "not a number"})
    assert isinstance(exc_info.value.__cause__, ValidationError)
    assert str(exc_info.value).startswith("invalid pool_result")


def test_rejection_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="v4api"):
        with pytest.raises(ContractError):
            decode(QueryFilterResponse, {"sources": "catalog"})
    assert "Rejected query_filter_response" in caplog.text


def test_dumps_matches_encode(sample_response):
    assert json.loads(dumps(sample_response, indent=2)) == encode(sample_response)


def test_loads_round_trips_query_filter_catalog():
    text = json.dumps(
        {
            "sources": ["catalog", "articles"],
            "filters": [
                {
                    "id": "FilterLibrary",
                    "label": "Library",
                    "values": [{"value": "Alderman", "count": 10}],
                }
            ],
        }
    )
    catalog = loads(QueryFilterResponse, text)
    assert catalog.filters[0].values[0].count == 10
    assert json.loads(dumps(catalog)) == json.loads(text)


def test_kind_registry():
    assert kind_for("pool_result") is PoolResult
    assert set(WIRE_KINDS) == {
        "search_request",
        "search_response",
        "pool_identity",
        "pool_result",
        "pool_facets",
        "pool_providers",
        "query_filter_response",
    }
    with pytest.raises(ContractError):
        kind_for("pool_results")
