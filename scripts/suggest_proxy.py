#!/usr/bin/env python
"""Suggest validated proxy materials for an ingredient with no direct inventory match."""

from __future__ import annotations

import argparse
from pathlib import Path

from _common import dump_json, open_session_factory

from lca_impact_engine.core.config import get_settings
from lca_impact_engine.core.exceptions import ImpactEngineError
from lca_impact_engine.core.logging import configure_logging
from lca_impact_engine.core.models import ProxySuggestionRequest
from lca_impact_engine.resolution import SearchService
from lca_impact_engine.storage import LookupCache
from lca_impact_engine.suggestions import ProxySuggestionService


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("ingredient", help="Ingredient or packaging name, e.g. 'orris root'.")
    parser.add_argument(
        "--type",
        dest="ingredient_type",
        choices=("ingredient", "packaging"),
        default="ingredient",
        help="Whether the item is an ingredient or a packaging material.",
    )
    parser.add_argument("--context", help="Optional product context, e.g. 'London dry gin'.")
    parser.add_argument("--organization-id", help="Identity used for rate limiting.")
    parser.add_argument("--database-url", help="Override the configured database URL.")
    parser.add_argument("--output", type=Path, help="Write the JSON result here instead of stdout.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings=settings)

    cache = LookupCache(open_session_factory(settings, args.database_url), ttl_hours=settings.lookup_cache_ttl_hours)
    search = SearchService(settings, cache=cache)
    service = ProxySuggestionService(search, settings)
    request = ProxySuggestionRequest(
        ingredient_name=args.ingredient,
        ingredient_type=args.ingredient_type,
        product_context=args.context,
        organization_id=args.organization_id,
    )
    try:
        response = service.suggest(request)
    except ImpactEngineError as exc:
        raise SystemExit(f"suggest_proxy: {exc}") from exc
    finally:
        search.close()
    dump_json(response.as_dict(), args.output)


if __name__ == "__main__":
    main()
