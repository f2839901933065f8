"""Helpers shared by the operator scripts."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from sqlalchemy.orm import Session, sessionmaker

from lca_impact_engine.core.config import Settings
from lca_impact_engine.storage import create_db_engine, create_session_factory, init_db


def open_session_factory(settings: Settings, database_url: str | None = None) -> sessionmaker[Session]:
    engine = create_db_engine(database_url, settings=settings)
    init_db(engine)
    return create_session_factory(engine)


def dump_json(payload: Any, path: Path | None = None) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if path is None:
        print(text)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text + "\n", encoding="utf-8")
