"""JSON-RPC client for an openLCA IPC server."""

from __future__ import annotations

import itertools
import time
from typing import Any, Mapping

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from lca_impact_engine.core.config import Settings, get_settings
from lca_impact_engine.core.exceptions import CatalogueError
from lca_impact_engine.core.logging import get_logger
from lca_impact_engine.core.models import InventorySource, ProcessRecord

LOGGER = get_logger(__name__)

TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.TransportError, TimeoutError)
RESULT_POLL_INTERVAL = 1.0
RESULT_TIMEOUT = 60.0


class OpenLCAClient:
    """Thin wrapper around the openLCA 2.x ``/data`` JSON-RPC endpoint.

    One instance talks to one inventory database. Transport failures are
    retried with exponential backoff; protocol errors (``error`` member in the
    JSON-RPC reply) are raised immediately as ``CatalogueError``.
    """

    def __init__(
        self,
        base_url: str,
        settings: Settings | None = None,
        *,
        source: InventorySource = "ecoinvent",
        http_client: httpx.Client | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._source = source
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._client = http_client or httpx.Client(
            base_url=self._base_url,
            timeout=self._settings.request_timeout,
            headers={"Content-Type": "application/json"},
        )
        self._owns_client = http_client is None
        self._max_attempts = max(1, self._settings.max_retries)
        self._request_ids = itertools.count(1)

    @classmethod
    def from_settings(cls, source: InventorySource, settings: Settings | None = None) -> "OpenLCAClient | None":
        """Build a client for ``source`` or return None when the server is not configured."""
        settings = settings or get_settings()
        url = settings.openlca_server(source)
        if not url:
            return None
        return cls(url, settings, source=source)

    @property
    def source(self) -> InventorySource:
        return self._source

    # Search and descriptors --------------------------------------------------
    def search_processes(self, query: str, page_size: int | None = None) -> list[ProcessRecord]:
        size = page_size or self._settings.openlca_page_size
        LOGGER.info("openlca.search", source=self._source, query=query, page_size=size)
        raw = self.request("search/processes", {"query": query, "pageSize": size})
        records = _to_records(raw)
        LOGGER.info("openlca.search_response", source=self._source, count=len(records))
        return records

    def list_processes(self) -> list[ProcessRecord]:
        """Return every process descriptor in the database (large)."""
        raw = self.request("data/get/descriptors", {"@type": "Process"})
        return _to_records(raw)

    def list_impact_methods(self) -> list[dict[str, Any]]:
        raw = self.request("data/get/descriptors", {"@type": "ImpactMethod"})
        return [item for item in raw or [] if isinstance(item, dict)]

    def find_impact_method(self, name: str) -> dict[str, Any] | None:
        """Exact name first, then a midpoint variant, then any containing match."""
        methods = self.list_impact_methods()
        needle = name.lower()
        for method in methods:
            if method.get("name") == name:
                return method
        for method in methods:
            label = str(method.get("name") or "").lower()
            if needle in label and "midpoint" in label:
                return method
        for method in methods:
            if needle in str(method.get("name") or "").lower():
                return method
        return None

    # Calculation -------------------------------------------------------------
    def calculate_process(self, process_id: str, method_name: str, amount: float = 1.0) -> list[dict[str, Any]]:
        """Calculate total impacts for one process and always dispose the result."""
        method = self.find_impact_method(method_name)
        if method is None:
            raise CatalogueError(f"Impact method not found: {method_name}")
        setup = {
            "target": {"@type": "Process", "@id": process_id},
            "impactMethod": {"@type": "ImpactMethod", "@id": method.get("@id")},
            "amount": amount,
        }
        result = self.request("result/calculate", setup)
        result_id = (result or {}).get("@id") if isinstance(result, dict) else None
        if not result_id:
            raise CatalogueError("openLCA calculation returned no result reference")
        try:
            self._wait_for_result(result_id)
            impacts = self.request("result/total-impacts", {"@id": result_id})
            return [item for item in impacts or [] if isinstance(item, dict)]
        finally:
            self._dispose(result_id)

    def _wait_for_result(self, result_id: str, timeout: float = RESULT_TIMEOUT) -> None:
        started = time.monotonic()
        while time.monotonic() - started < timeout:
            state = self.request("result/state", {"@id": result_id}) or {}
            if state.get("error"):
                raise CatalogueError(f"openLCA calculation failed: {state['error']}")
            if state.get("isReady"):
                return
            LOGGER.debug("openlca.result_pending", result_id=result_id, elapsed=time.monotonic() - started)
            time.sleep(RESULT_POLL_INTERVAL)
        raise CatalogueError(f"openLCA calculation timed out after {timeout:.0f}s")

    def _dispose(self, result_id: str) -> None:
        try:
            self.request("result/dispose", {"@id": result_id})
        except CatalogueError as exc:
            LOGGER.warning("openlca.dispose_failed", result_id=result_id, error=str(exc))

    def health_check(self) -> bool:
        try:
            self.list_impact_methods()
        except CatalogueError as exc:
            LOGGER.warning("openlca.health_check_failed", source=self._source, error=str(exc))
            return False
        return True

    # Transport ---------------------------------------------------------------
    def request(self, method: str, params: Mapping[str, Any] | None = None) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": dict(params or {}),
        }
        retryer = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(
                multiplier=max(self._settings.retry_backoff, 0.1),
                min=0.5,
                max=8,
            ),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        )
        try:
            for attempt in retryer:
                with attempt:
                    response = self._client.post("data", json=payload)
        except TRANSIENT_ERRORS as exc:  # type: ignore[misc]
            attempts = retryer.statistics.get("attempt_number") or self._max_attempts
            LOGGER.error("openlca.transport_failed", source=self._source, method=method, attempts=attempts)
            raise CatalogueError(f"openLCA request '{method}' failed after {attempts} attempts") from exc

        if response.status_code >= 400:
            raise CatalogueError(f"openLCA server error: {response.status_code} {response.reason_phrase}")
        try:
            body = response.json()
        except ValueError as exc:
            raise CatalogueError("openLCA returned malformed JSON") from exc
        if not isinstance(body, dict):
            raise CatalogueError("openLCA returned an unexpected payload")
        error = body.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise CatalogueError(f"openLCA error: {message}")
        if "result" not in body:
            raise CatalogueError("openLCA returned no result")
        return body["result"]

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "OpenLCAClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _to_records(raw: Any) -> list[ProcessRecord]:
    if not isinstance(raw, list):
        LOGGER.warning("openlca.unexpected_payload", payload_type=type(raw).__name__)
        return []
    records: list[ProcessRecord] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        record = ProcessRecord.from_payload(item)
        if record.id and record.name:
            records.append(record)
    return records
