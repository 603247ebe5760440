"""Search Contract v4.

Defines the canonical types exchanged between the search aggregator, its
pools and clients:
  - Search request (SearchRequest, Pagination, SortOrder, Filter, SearchPreferences)
  - Pool metadata (PoolIdentity, PoolAttribute, SortOption, PoolProviders)
  - Pool payloads (PoolResult, PoolFacets, Group, Record, RecordField, Facet)
  - Aggregated response (SearchResponse, Suggestion)
  - Pre-search filter catalog (QueryFilterResponse)

The historical v4 shapes are merged: PoolIdentity keeps `source`, RecordField
carries both citation fields and `ris_code`, RelatedRecord carries the IIIF
base URL alongside the manifest and image URLs.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Any

from pydantic import Field, JsonValue, model_validator

from v4api.contracts.wire import WireModel, omit_empty

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Confidence(StrEnum):
    """Pool-reported match quality, weakest first."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXACT = "exact"


_CONFIDENCE_RANK: dict[str, int] = {c.value: idx for idx, c in enumerate(Confidence)}


def confidence_index(value: str) -> int:
    """Rank a confidence string: low=0 ... exact=3. Anything else ranks lowest."""
    return _CONFIDENCE_RANK.get(value, 0)


class SortOptionEnum(IntEnum):
    """Sort modes understood by catalog pools."""

    RELEVANCE = 0
    DATE = 1
    TITLE = 2
    AUTHOR = 3

    @property
    def label(self) -> str:
        return SORT_LABELS[self]

    def __str__(self) -> str:
        return self.label


SORT_LABELS: dict[SortOptionEnum, str] = {
    SortOptionEnum.RELEVANCE: "SortRelevance",
    SortOptionEnum.DATE: "SortDatePublished",
    SortOptionEnum.TITLE: "SortTitle",
    SortOptionEnum.AUTHOR: "SortAuthor",
}


class FieldVisibility(StrEnum):
    BASIC = "basic"
    DETAILED = "detailed"


DEFAULT_FIELD_TYPE = "text"
OPTIONAL_DISPLAY = "optional"

# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class Pagination(WireModel):
    start: int = Field(default=0, ge=0)
    rows: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class SortOrder(WireModel):
    """Sort selected for one search; sort_id should name a pool's SortOption."""

    sort_id: str = ""
    order: str = ""


class FilterFacet(WireModel):
    facet_id: str = ""
    value: str = ""


class Filter(WireModel):
    """Facet constraints the client applies to one pool."""

    pool_id: str = ""
    facets: list[FilterFacet] = Field(default_factory=list)

    def includes(self, facet_id: str, value: str) -> bool:
        return any(f.facet_id == facet_id and f.value == value for f in self.facets)


class SearchPreferences(WireModel):
    target_pool: str = ""
    exclude_pools: list[str] = Field(default_factory=list, alias="exclude_pool")

    def is_excluded(self, url: str) -> bool:
        """Exact, case-sensitive match against exclude_pools. Empty URLs are never excluded."""
        if not url:
            return False
        return url in self.exclude_pools


class SearchRequest(WireModel):
    """Everything a client sends for one search."""

    query: str = ""
    pagination: Pagination = Field(default_factory=Pagination)
    sort: SortOrder = Field(default_factory=SortOrder)
    filters: list[Filter] = omit_empty(default_factory=list)
    preferences: SearchPreferences = Field(default_factory=SearchPreferences)

    def filter_for(self, pool_id: str) -> Filter | None:
        return next((f for f in self.filters if f.pool_id == pool_id), None)


# ---------------------------------------------------------------------------
# Pool metadata
# ---------------------------------------------------------------------------


class PoolAttribute(WireModel):
    """One capability flag of a pool, e.g. facets or sorting."""

    name: str = ""
    supported: bool = False
    value: str = omit_empty()


class SortOption(WireModel):
    id: str = ""
    label: str = ""
    asc: str = ""
    desc: str = ""


class PoolIdentity(WireModel):
    """Complete description of a pool and its abilities."""

    id: str = ""
    name: str = ""
    description: str = ""
    mode: str = ""
    source: str = ""
    url: str = ""
    attributes: list[PoolAttribute] = omit_empty(default_factory=list)
    sort_options: list[SortOption] = omit_empty(default_factory=list)

    def attribute(self, name: str) -> PoolAttribute | None:
        return next((a for a in self.attributes if a.name == name), None)

    def supports(self, name: str) -> bool:
        attr = self.attribute(name)
        return attr is not None and attr.supported

    def sort_option(self, sort_id: str) -> SortOption | None:
        return next((o for o in self.sort_options if o.id == sort_id), None)


class Provider(WireModel):
    provider: str = ""
    label: str = omit_empty()
    homepage_url: str = omit_empty()
    logo_url: str = omit_empty()


class PoolProviders(WireModel):
    """Content providers a pool may surface in its records."""

    providers: list[Provider] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class RecordField(WireModel):
    """One named attribute of a hit. List position is display position."""

    name: str = ""
    type: str = omit_empty()  # empty implies "text"
    label: str = omit_empty()
    value: str = ""
    separator: str = omit_empty()  # literal string, or e.g. "paragraph"
    visibility: str = omit_empty()  # "basic" or "detailed"; empty implies "basic"
    display: str = omit_empty()  # "optional"; empty implies always shown
    provider: str = omit_empty()  # for URLs, e.g. "hathitrust"
    item: str = omit_empty()
    icon: str = omit_empty()
    citation_part: str = omit_empty()
    ris_code: str = omit_empty()
    structured_value: JsonValue = omit_empty(None, only_none=True)

    @property
    def effective_type(self) -> str:
        return self.type or DEFAULT_FIELD_TYPE

    @property
    def effective_visibility(self) -> str:
        return self.visibility or FieldVisibility.BASIC.value

    @property
    def is_optional(self) -> bool:
        return self.display == OPTIONAL_DISPLAY


class RelatedRecord(WireModel):
    """Sibling record sharing a group value (image pools only)."""

    id: str = omit_empty()
    iiif_manifest_url: str = omit_empty()
    iiif_image_url: str = omit_empty()
    iiif_base_url: str = omit_empty()


class Record(WireModel):
    """Summary of one search hit."""

    fields: list[RecordField] = Field(default_factory=list)
    related: list[RelatedRecord] = omit_empty(default_factory=list)
    debug: dict[str, JsonValue] = omit_empty(default_factory=dict)
    # used by grouping pools; never on the wire
    group_value: str = Field(default="", exclude=True)

    def get_field(self, name: str) -> RecordField | None:
        return next((f for f in self.fields if f.name == name), None)


class Group(WireModel):
    """Records sharing one group value."""

    value: str = ""
    count: int = 0
    records: list[Record] = omit_empty(default_factory=list, alias="record_list")


# ---------------------------------------------------------------------------
# Facets
# ---------------------------------------------------------------------------


class FacetBucket(WireModel):
    value: str = ""
    count: int = 0
    selected: bool = False


class Facet(WireModel):
    id: str = ""
    name: str = ""
    type: str = ""
    buckets: list[FacetBucket] = omit_empty(default_factory=list)

    def with_selection(self, applied: Filter | None) -> Facet:
        """Copy with each bucket's selected flag matching the applied filter."""
        buckets = [
            b.model_copy(
                update={"selected": applied is not None and applied.includes(self.id, b.value)}
            )
            for b in self.buckets
        ]
        return self.model_copy(update={"buckets": buckets})


# ---------------------------------------------------------------------------
# Pool payloads
# ---------------------------------------------------------------------------


class PoolResult(WireModel):
    """One pool's answer to a search. Failures are carried in status_code/status_message."""

    service_url: str = omit_empty()
    pool_name: str = omit_empty(alias="pool_id")
    pagination: Pagination = Field(default_factory=Pagination)
    sort: SortOrder = Field(default_factory=SortOrder)
    groups: list[Group] = omit_empty(default_factory=list, alias="group_list")
    facet_list: list[Facet] = omit_empty(default_factory=list)
    confidence: str = omit_empty()
    elapsed_ms: int = omit_empty(0)
    debug: dict[str, JsonValue] = omit_empty(default_factory=dict)
    warnings: list[str] = omit_empty(default_factory=list)
    status_code: int = 0
    status_message: str = omit_empty(alias="status_msg")
    content_language: str = Field(default="", exclude=True)

    @classmethod
    def failed(cls, status_code: int, message: str, **fields: Any) -> PoolResult:
        """Failure entry with no groups, for partial aggregation."""
        if 200 <= status_code < 300:
            raise ValueError(f"status {status_code} is not a failure")
        fields.pop("group_list", None)
        fields.update(groups=[], status_code=status_code, status_message=message)
        return cls(**fields)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def confidence_index(self) -> int:
        return confidence_index(self.confidence)


class PoolFacets(WireModel):
    """Facets computed by a pool for a search, without records."""

    facet_list: list[Facet] = omit_empty(default_factory=list)
    elapsed_ms: int = omit_empty(0)
    debug: dict[str, JsonValue] = omit_empty(default_factory=dict)
    warnings: list[str] = omit_empty(default_factory=list)
    status_code: int = 0
    status_message: str = omit_empty(alias="status_msg")


# ---------------------------------------------------------------------------
# Aggregated response
# ---------------------------------------------------------------------------


class Suggestion(WireModel):
    type: str = ""
    value: str = ""


class SearchResponse(WireModel):
    """Aggregated, caller-ordered answer from all pools."""

    request: SearchRequest | None = None
    pools: list[PoolIdentity] = Field(default_factory=list)
    total_time_ms: int = 0
    total_hits: int = 0
    results: list[PoolResult] = Field(default_factory=list, alias="pool_results")
    warnings: list[str] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_pool_ids(self) -> SearchResponse:
        seen: set[str] = set()
        for pool in self.pools:
            if pool.id in seen:
                raise ValueError(f"duplicate pool id: {pool.id}")
            seen.add(pool.id)
        return self

    def failed_results(self) -> list[PoolResult]:
        return [r for r in self.results if not r.is_success]


# ---------------------------------------------------------------------------
# Pre-search filter catalog
# ---------------------------------------------------------------------------


class QueryFilterValue(WireModel):
    value: str = ""
    count: int = 0


class QueryFilter(WireModel):
    id: str = ""
    label: str = ""
    values: list[QueryFilterValue] = Field(default_factory=list)


class QueryFilterResponse(WireModel):
    """Filter catalog returned before a search is issued."""

    sources: list[str] = Field(default_factory=list)
    filters: list[QueryFilter] = Field(default_factory=list)
