"""Loads and scope-filters the process catalogue of each inventory."""

from __future__ import annotations

import threading
from typing import Mapping, Protocol

from lca_impact_engine.core.config import Settings, get_settings
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import InventorySource, ProcessRecord

from .classifier import CategoryClassifier, NamePatternClassifier, ProcessClassifier
from .client import OpenLCAClient

LOGGER = get_logger(__name__)

INVENTORY_SOURCES: tuple[InventorySource, ...] = ("ecoinvent", "agribalyse")


class CatalogueClient(Protocol):
    def list_processes(self) -> list[ProcessRecord]:  # pragma: no cover - protocol
        ...

    def close(self) -> None:  # pragma: no cover - protocol
        ...


def default_classifiers() -> dict[InventorySource, ProcessClassifier]:
    return {"ecoinvent": CategoryClassifier(), "agribalyse": NamePatternClassifier()}


class CatalogueService:
    """Holds the filtered process list of every configured inventory.

    Each catalogue is fetched and classified once per service lifetime; the
    filtered list is immutable afterwards and safe to share across threads.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        clients: Mapping[InventorySource, CatalogueClient] | None = None,
        classifiers: Mapping[InventorySource, ProcessClassifier] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        if clients is None:
            built: dict[InventorySource, CatalogueClient] = {}
            for source in INVENTORY_SOURCES:
                client = OpenLCAClient.from_settings(source, self._settings)
                if client is not None:
                    built[source] = client
            clients = built
        self._clients = dict(clients)
        self._classifiers = dict(classifiers or default_classifiers())
        self._catalogues: dict[InventorySource, tuple[ProcessRecord, ...]] = {}
        self._lock = threading.Lock()

    @property
    def configured_sources(self) -> tuple[InventorySource, ...]:
        return tuple(source for source in INVENTORY_SOURCES if source in self._clients)

    def is_configured(self, source: InventorySource | None = None) -> bool:
        if source is None:
            return bool(self._clients)
        return source in self._clients

    def processes(self, source: InventorySource) -> tuple[ProcessRecord, ...]:
        """Return the classifier-filtered catalogue for ``source`` (empty when not configured)."""
        cached = self._catalogues.get(source)
        if cached is not None:
            return cached
        client = self._clients.get(source)
        if client is None:
            return ()
        with self._lock:
            cached = self._catalogues.get(source)
            if cached is not None:
                return cached
            raw = client.list_processes()
            classifier = self._classifiers.get(source)
            filtered = tuple(classifier.filter(raw) if classifier else raw)
            LOGGER.info(
                "catalogue.loaded",
                source=source,
                total=len(raw),
                relevant=len(filtered),
            )
            self._catalogues[source] = filtered
            return filtered

    def invalidate(self, source: InventorySource | None = None) -> None:
        with self._lock:
            if source is None:
                self._catalogues.clear()
            else:
                self._catalogues.pop(source, None)

    def client(self, source: InventorySource) -> CatalogueClient | None:
        return self._clients.get(source)

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
