"""Search entry point: free-text query to ranked, arbitrated process records."""

from __future__ import annotations

from typing import Any, Mapping

from lca_impact_engine.catalogue.service import CatalogueService
from lca_impact_engine.core.config import Settings, get_settings
from lca_impact_engine.core.constants import MAX_SEARCH_RESULTS, SEARCH_CACHE_KIND
from lca_impact_engine.core.exceptions import InputValidationError
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import ProcessRecord, SearchRequest, SearchResponse
from lca_impact_engine.storage.cache import LookupCache, normalize_term

from .arbitrator import ArbitrationResult, CrossDatabaseArbitrator

LOGGER = get_logger(__name__)


class SearchService:
    """Validates, caches, ranks and arbitrates process searches."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        catalogue: CatalogueService | None = None,
        arbitrator: CrossDatabaseArbitrator | None = None,
        cache: LookupCache | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._catalogue = catalogue or CatalogueService(self._settings)
        self._arbitrator = arbitrator or CrossDatabaseArbitrator()
        self._cache = cache

    @property
    def catalogue(self) -> CatalogueService:
        return self._catalogue

    def search(self, request: SearchRequest) -> SearchResponse:
        query = (request.query or "").strip()
        if len(query) < self._settings.min_query_length:
            raise InputValidationError(
                f"Search query must be at least {self._settings.min_query_length} characters"
            )
        term = normalize_term(query)

        if self._cache is not None:
            payload = self._cache.get(term, SEARCH_CACHE_KIND)
            if payload is not None:
                LOGGER.info("search.cache_hit", term=term, organization=request.organization_id)
                return _response_from_payload(payload, cached=True)

        if not self._catalogue.is_configured():
            LOGGER.warning("search.mock_results", term=term)
            return SearchResponse(results=mock_results(query), mock=True)

        LOGGER.info("search.lookup", term=term, sources=list(self._catalogue.configured_sources))
        arbitration = self._arbitrator.arbitrate(
            query,
            self._catalogue.processes("ecoinvent"),
            self._catalogue.processes("agribalyse"),
        )
        response = _response_from_arbitration(arbitration)
        LOGGER.info(
            "search.response",
            term=term,
            preferred=response.preferred_database,
            count=len(response.results),
        )
        if self._cache is not None:
            self._cache.put(term, SEARCH_CACHE_KIND, _response_payload(response))
        return response

    def close(self) -> None:
        self._catalogue.close()


def mock_results(query: str) -> list[ProcessRecord]:
    """Placeholder records returned when no inventory server is configured."""
    slug = query.lower()
    return [
        ProcessRecord(
            id=f"mock-{slug}-1",
            name=f"{query} - Organic Production",
            category="Food/Agriculture",
            unit="kg",
            location="GB",
            process_type="UNIT_PROCESS",
        ),
        ProcessRecord(
            id=f"mock-{slug}-2",
            name=f"{query} - Conventional Production",
            category="Food/Agriculture",
            unit="kg",
            location="EU",
            process_type="UNIT_PROCESS",
        ),
        ProcessRecord(
            id=f"mock-{slug}-3",
            name=f"{query} - Processing",
            category="Food/Manufacturing",
            unit="kg",
            location="GB",
            process_type="UNIT_PROCESS",
        ),
    ]


def _response_from_arbitration(result: ArbitrationResult) -> SearchResponse:
    return SearchResponse(
        results=result.preferred[:MAX_SEARCH_RESULTS],
        preferred_database=result.preferred_database,
        secondary=result.secondary[:MAX_SEARCH_RESULTS],
    )


def _response_payload(response: SearchResponse) -> dict[str, Any]:
    return {
        "results": [record.as_dict() for record in response.results],
        "preferred_database": response.preferred_database,
        "secondary": [record.as_dict() for record in response.secondary],
    }


def _response_from_payload(payload: Mapping[str, Any], *, cached: bool) -> SearchResponse:
    return SearchResponse(
        results=[ProcessRecord.from_payload(item) for item in payload.get("results") or []],
        cached=cached,
        preferred_database=payload.get("preferred_database"),
        secondary=[ProcessRecord.from_payload(item) for item in payload.get("secondary") or []],
    )
