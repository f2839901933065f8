"""Time-bounded cache for external lookups, keyed by normalized search term."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from lca_impact_engine.core.constants import LOOKUP_CACHE_TTL_HOURS
from lca_impact_engine.core.logging import get_logger

from .models import LookupCacheEntry, utcnow

LOGGER = get_logger(__name__)


def normalize_term(term: str) -> str:
    return term.lower().strip()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were written as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class LookupCache:
    """Read-through cache rows with a fixed time-to-live.

    A write that loses an insert race against another writer for the same key
    is retried as an update, so the later write wins.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        ttl_hours: float = LOOKUP_CACHE_TTL_HOURS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._session_factory = session_factory
        self._ttl = timedelta(hours=ttl_hours)
        self._clock = clock

    def get(self, term: str, kind: str) -> Any | None:
        key = normalize_term(term)
        cutoff = self._clock() - self._ttl
        with self._session_factory() as session:
            entry = self._find(session, key, kind)
            if entry is None:
                return None
            if _as_utc(entry.created_at) <= cutoff:
                LOGGER.debug("lookup_cache.expired", term=key, kind=kind)
                return None
            return entry.payload

    def put(self, term: str, kind: str, payload: Any) -> None:
        key = normalize_term(term)
        try:
            self._write(key, kind, payload)
        except IntegrityError:
            # Another writer inserted the row first; store over it.
            LOGGER.info("lookup_cache.write_conflict", term=key, kind=kind)
            self._write(key, kind, payload)
        LOGGER.debug("lookup_cache.stored", term=key, kind=kind)

    def _write(self, key: str, kind: str, payload: Any) -> None:
        with self._session_factory.begin() as session:
            entry = self._find(session, key, kind)
            if entry is None:
                session.add(LookupCacheEntry(search_term=key, kind=kind, payload=payload, created_at=self._clock()))
            else:
                entry.payload = payload
                entry.created_at = self._clock()

    @staticmethod
    def _find(session: Session, key: str, kind: str) -> LookupCacheEntry | None:
        return session.scalars(
            select(LookupCacheEntry).where(
                LookupCacheEntry.search_term == key,
                LookupCacheEntry.kind == kind,
            )
        ).first()

    def purge_expired(self) -> int:
        cutoff = self._clock() - self._ttl
        removed = 0
        with self._session_factory.begin() as session:
            for entry in session.scalars(select(LookupCacheEntry)).all():
                if _as_utc(entry.created_at) <= cutoff:
                    session.delete(entry)
                    removed += 1
        if removed:
            LOGGER.info("lookup_cache.purged", removed=removed)
        return removed
