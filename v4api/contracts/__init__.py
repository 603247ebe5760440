"""Search contract v4: shared types for search requests, pool payloads, and aggregated responses."""

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
    Confidence,
    Facet,
    FacetBucket,
    Filter,
    FilterFacet,
    Group,
    Pagination,
    PoolAttribute,
    PoolFacets,
    PoolIdentity,
    PoolProviders,
    PoolResult,
    Provider,
    QueryFilter,
    QueryFilterResponse,
    QueryFilterValue,
    Record,
    RecordField,
    RelatedRecord,
    SearchPreferences,
    SearchRequest,
    SearchResponse,
    SortOption,
    SortOptionEnum,
    SortOrder,
    Suggestion,
    confidence_index,
)

__all__ = [
    "WIRE_KINDS",
    "Confidence",
    "ContractError",
    "Facet",
    "FacetBucket",
    "Filter",
    "FilterFacet",
    "Group",
    "Pagination",
    "PoolAttribute",
    "PoolFacets",
    "PoolIdentity",
    "PoolProviders",
    "PoolResult",
    "Provider",
    "QueryFilter",
    "QueryFilterResponse",
    "QueryFilterValue",
    "Record",
    "RecordField",
    "RelatedRecord",
    "SearchPreferences",
    "SearchRequest",
    "SearchResponse",
    "SortOption",
    "SortOptionEnum",
    "SortOrder",
    "Suggestion",
    "confidence_index",
    "decode",
    "dumps",
    "encode",
    "kind_for",
    "loads",
]
