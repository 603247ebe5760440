import pytest

from v4api.contracts.search_v4 import (
    Facet,
    FacetBucket,
    Filter,
    FilterFacet,
    Group,
    Pagination,
    PoolAttribute,
    PoolIdentity,
    PoolResult,
    Record,
    RecordField,
    RelatedRecord,
    SearchPreferences,
    SearchRequest,
    SearchResponse,
    SortOption,
    SortOrder,
    Suggestion,
)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "property: property-based deterministic tests")


@pytest.fixture
def sample_request() -> SearchRequest:
    return SearchRequest(
        query="cats",
        pagination=Pagination(start=0, rows=10),
        sort=SortOrder(sort_id="SortDatePublished", order="desc"),
        filters=[
            Filter(
                pool_id="catalog",
                facets=[FilterFacet(facet_id="format", value="Book")],
            )
        ],
        preferences=SearchPreferences(
            target_pool="catalog",
            exclude_pools=["https://images.example.org"],
        ),
    )


@pytest.fixture
def sample_response(sample_request: SearchRequest) -> SearchResponse:
    catalog = PoolIdentity(
        id="catalog",
        name="Library Catalog",
        description="Books, journals and media",
        mode="record",
        source="solr",
        url="https://catalog.example.org",
        attributes=[
            PoolAttribute(name="facets", supported=True),
            PoolAttribute(name="logo_url", supported=True, value="/logo.png"),
        ],
        sort_options=[
            SortOption(id="SortRelevance", label="Relevance"),
            SortOption(id="SortDatePublished", label="Date", asc="oldest", desc="newest"),
        ],
    )
    images = PoolIdentity(
        id="images",
        name="Images",
        mode="image",
        url="https://images.example.org",
    )
    record = Record(
        fields=[
            RecordField(name="id", type="identifier", value="u123", display="optional"),
            RecordField(name="title", label="Title", value="Cats of the World"),
            RecordField(
                name="author",
                label="Author",
                value="Doe, Jane",
                visibility="detailed",
                ris_code="AU",
            ),
            RecordField(
                name="access_url",
                type="url",
                value="https://hdl.example.org/2027/abc",
                provider="hathitrust",
                item="abc",
                structured_value={"volumes": 2, "labels": ["v.1", "v.2"]},
            ),
        ],
        related=[
            RelatedRecord(
                id="u124",
                iiif_manifest_url="https://iiif.example.org/u124/manifest",
                iiif_base_url="https://iiif.example.org/u124",
            )
        ],
        debug={"score": 12.5},
    )
    ok = PoolResult(
        service_url="https://catalog.example.org",
        pool_name="catalog",
        pagination=Pagination(start=0, rows=10, total=1),
        sort=SortOrder(sort_id="SortDatePublished", order="desc"),
        groups=[Group(value="u123", count=1, records=[record])],
        facet_list=[
            Facet(
                id="format",
                name="Format",
                type="checkbox",
                buckets=[FacetBucket(value="Book", count=1, selected=True)],
            )
        ],
        confidence="high",
        elapsed_ms=42,
        status_code=200,
    )
    failed = PoolResult.failed(
        503,
        "pool unavailable",
        service_url="https://articles.example.org",
        pool_name="articles",
    )
    return SearchResponse(
        request=sample_request,
        pools=[catalog, images],
        total_time_ms=57,
        total_hits=1,
        results=[ok, failed],
        warnings=["articles pool timed out"],
        suggestions=[Suggestion(type="author", value="Jane Doe")],
    )
