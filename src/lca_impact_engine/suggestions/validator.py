"""Checks AI-suggested proxies against the live resolution pipeline."""

from __future__ import annotations

import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import replace
from typing import Protocol, Sequence

from lca_impact_engine.core.config import Settings, get_settings
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import ProxySuggestion, SearchRequest, SearchResponse

LOGGER = get_logger(__name__)


class SearchBackend(Protocol):
    def search(self, request: SearchRequest) -> SearchResponse:  # pragma: no cover - protocol
        ...


def retain_validated(suggestions: Sequence[ProxySuggestion]) -> list[ProxySuggestion]:
    """Validated suggestions when any exist, otherwise every suggestion unchanged in order."""
    validated = [item for item in suggestions if item.validated]
    return validated if validated else list(suggestions)


class SuggestionValidator:
    """Re-issues each suggestion's search query concurrently with its own timeout.

    Every suggestion gets its own worker and one attempt. A timeout, an error,
    an empty result or placeholder results from an unconfigured catalogue mark
    the suggestion ``validated=False`` without affecting the others.
    """

    def __init__(
        self,
        search: SearchBackend,
        settings: Settings | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._search = search
        self._timeout = timeout if timeout is not None else self._settings.suggestion_validation_timeout

    def annotate(
        self,
        suggestions: Sequence[ProxySuggestion],
        *,
        organization_id: str | None = None,
    ) -> list[ProxySuggestion]:
        """Return every suggestion annotated with its validation outcome, input order kept."""
        if not suggestions:
            return []
        executor = ThreadPoolExecutor(
            max_workers=len(suggestions),
            thread_name_prefix="suggestion-validate",
        )
        try:
            futures: list[tuple[float, Future[SearchResponse]]] = [
                (
                    time.monotonic() + self._timeout,
                    executor.submit(
                        self._search.search,
                        SearchRequest(query=item.search_query, organization_id=organization_id),
                    ),
                )
                for item in suggestions
            ]
            return [
                self._settle(item, future, deadline)
                for item, (deadline, future) in zip(suggestions, futures)
            ]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def validate(
        self,
        suggestions: Sequence[ProxySuggestion],
        *,
        organization_id: str | None = None,
    ) -> list[ProxySuggestion]:
        annotated = self.annotate(suggestions, organization_id=organization_id)
        retained = retain_validated(annotated)
        LOGGER.info(
            "suggestion_validator.completed",
            total=len(annotated),
            validated=sum(1 for item in annotated if item.validated),
            retained=len(retained),
        )
        return retained

    def _settle(
        self,
        suggestion: ProxySuggestion,
        future: Future[SearchResponse],
        deadline: float,
    ) -> ProxySuggestion:
        try:
            response = future.result(timeout=max(0.0, deadline - time.monotonic()))
        except FutureTimeout:
            future.cancel()
            LOGGER.warning("suggestion_validator.timeout", query=suggestion.search_query, timeout=self._timeout)
            return replace(suggestion, validated=False)
        except Exception as exc:  # pylint: disable=broad-except
            LOGGER.warning("suggestion_validator.failed", query=suggestion.search_query, error=str(exc))
            return replace(suggestion, validated=False)
        if response.mock or not response.results:
            return replace(suggestion, validated=False)
        return replace(
            suggestion,
            validated=True,
            result_count=len(response.results),
            top_match_name=response.results[0].name,
        )
