#!/usr/bin/env python
"""Create, update and summarize PRN obligations for an organization and year."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from _common import dump_json, open_session_factory

from lca_impact_engine.core.config import get_settings
from lca_impact_engine.core.exceptions import ImpactEngineError
from lca_impact_engine.core.logging import configure_logging
from lca_impact_engine.core.models import PRNTarget
from lca_impact_engine.epr import PRNObligationRepository, remaining_obligation


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise SystemExit(f"File not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON in {path}: {exc}") from exc


def _read_targets(path: Path) -> list[PRNTarget]:
    payload = _read_json(path)
    if not isinstance(payload, list):
        raise SystemExit(f"Targets file must contain a JSON list: {path}")
    targets: list[PRNTarget] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise SystemExit(f"Target #{index} must be an object: {path}")
        targets.append(
            PRNTarget(
                obligation_year=int(item["obligation_year"]),
                material_code=str(item["material_code"]),
                recycling_target_pct=float(item["recycling_target_pct"]),
                material_name=str(item.get("material_name") or ""),
            )
        )
    return targets


def _read_tonnage(path: Path) -> dict[str, float]:
    payload = _read_json(path)
    if not isinstance(payload, dict):
        raise SystemExit(f"Tonnage file must map material codes to tonnes: {path}")
    return {str(code): float(value or 0.0) for code, value in payload.items()}


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--organization-id", required=True, help="Obligated organization.")
    parser.add_argument("--year", type=int, required=True, help="Obligation year.")
    parser.add_argument("--database-url", help="Override the configured database URL.")
    parser.add_argument(
        "--targets",
        type=Path,
        help="JSON list of {obligation_year, material_code, material_name, recycling_target_pct} to store.",
    )
    parser.add_argument(
        "--tonnage",
        type=Path,
        help="JSON object mapping material code to tonnes placed on market; creates the year's obligations.",
    )
    parser.add_argument("--material", help="Material code for --purchased/--cost-per-tonne.")
    parser.add_argument("--purchased", type=float, help="PRN tonnage purchased (replaces the stored value).")
    parser.add_argument("--cost-per-tonne", type=float, default=0.0, help="Price paid per tonne of PRN.")
    parser.add_argument("--output", type=Path, help="Write the JSON result here instead of stdout.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings=settings)
    repository = PRNObligationRepository(open_session_factory(settings, args.database_url))

    try:
        if args.targets:
            repository.upsert_targets(_read_targets(args.targets))
        if args.tonnage:
            repository.create_for_year(args.organization_id, args.year, _read_tonnage(args.tonnage))
        if args.purchased is not None:
            if not args.material:
                raise SystemExit("--material is required with --purchased")
            repository.record_purchase(
                args.organization_id,
                args.year,
                args.material,
                args.purchased,
                args.cost_per_tonne,
            )
        obligations = repository.list_for_year(args.organization_id, args.year)
        summary = repository.summary(args.organization_id, args.year)
    except ImpactEngineError as exc:
        raise SystemExit(f"prn_obligations: {exc}") from exc

    rows = []
    for obligation in obligations:
        row = obligation.as_dict()
        row["remaining_obligation"] = remaining_obligation(
            obligation.obligation_tonnage,
            obligation.prns_purchased_tonnage,
        )
        rows.append(row)
    dump_json({"obligations": rows, "summary": summary}, args.output)


if __name__ == "__main__":
    main()
