#!/usr/bin/env python
"""Resolve a free-text ingredient or packaging term to inventory processes."""

from __future__ import annotations

import argparse
from pathlib import Path

from _common import dump_json, open_session_factory

from lca_impact_engine.core.config import get_settings
from lca_impact_engine.core.exceptions import ImpactEngineError
from lca_impact_engine.core.logging import configure_logging
from lca_impact_engine.core.models import SearchRequest
from lca_impact_engine.impacts import FactorLookupService
from lca_impact_engine.resolution import SearchService
from lca_impact_engine.storage import LookupCache


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("query", help="Search term, e.g. 'aluminium can' or 'barley'.")
    parser.add_argument("--organization-id", help="Organization issuing the search.")
    parser.add_argument(
        "--factor",
        action="store_true",
        help="Also calculate the impact factor of the top preferred process.",
    )
    parser.add_argument("--no-cache", action="store_true", help="Bypass the lookup cache.")
    parser.add_argument("--database-url", help="Override the configured database URL.")
    parser.add_argument("--output", type=Path, help="Write the JSON result here instead of stdout.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings=settings)

    cache = None
    if not args.no_cache:
        cache = LookupCache(open_session_factory(settings, args.database_url), ttl_hours=settings.lookup_cache_ttl_hours)
    service = SearchService(settings, cache=cache)
    try:
        response = service.search(SearchRequest(query=args.query, organization_id=args.organization_id))
        payload = response.as_dict()
        if args.factor:
            lookup = FactorLookupService(service, settings, cache=cache).lookup(
                args.query,
                organization_id=args.organization_id,
            )
            payload["factor"] = None
            if lookup.factor is not None:
                payload["factor"] = {
                    "climate": lookup.factor.climate,
                    "water": lookup.factor.water,
                    "land": lookup.factor.land,
                    "waste": lookup.factor.waste,
                    "data_quality": lookup.factor.data_quality,
                    "source_reference": lookup.factor.source_reference,
                    "cached": lookup.cached,
                    "mock": lookup.mock,
                }
    except ImpactEngineError as exc:
        raise SystemExit(f"search_processes: {exc}") from exc
    finally:
        service.close()
    dump_json(payload, args.output)


if __name__ == "__main__":
    main()
