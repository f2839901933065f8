from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from lca_impact_engine.catalogue.client import OpenLCAClient
from lca_impact_engine.core.config import Settings
from lca_impact_engine.core.exceptions import CatalogueError

BASE_URL = "http://openlca.test/"


def _client(handler: Callable[[httpx.Request], httpx.Response], *, max_retries: int = 1) -> OpenLCAClient:
    http_client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    settings = Settings(max_retries=max_retries, retry_backoff=0.1, openlca_page_size=10)
    return OpenLCAClient(BASE_URL, settings, http_client=http_client)


def _reply(request: httpx.Request, result: Any) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": result})


def test_search_processes_maps_descriptors() -> None:
    seen: list[dict[str, Any]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        seen.append(body)
        return _reply(
            request,
            [
                {"@id": "p-1", "name": "market for barley grain", "category": "A:Agriculture", "refUnit": "kg", "location": "GLO"},
                {"@id": "", "name": "nameless id"},
                "not a descriptor",
            ],
        )

    client = _client(handler)
    try:
        records = client.search_processes("barley")
    finally:
        client.close()

    assert seen[0]["jsonrpc"] == "2.0"
    assert seen[0]["method"] == "search/processes"
    assert seen[0]["params"] == {"query": "barley", "pageSize": 10}
    assert len(records) == 1
    assert records[0].id == "p-1"
    assert records[0].unit == "kg"
    assert records[0].location == "GLO"


def test_error_member_raises_catalogue_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32601, "message": "no such method"}})

    client = _client(handler)
    with pytest.raises(CatalogueError, match="no such method"):
        client.request("search/processes", {"query": "x"})


def test_http_errors_raise_catalogue_error() -> None:
    client = _client(lambda request: httpx.Response(503, text="busy"))

    with pytest.raises(CatalogueError, match="503"):
        client.list_processes()


def test_transport_errors_are_retried_then_raised() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler, max_retries=2)
    with pytest.raises(CatalogueError, match="after 2 attempts"):
        client.list_processes()
    assert calls["count"] == 2


def test_transient_failure_recovers() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            raise httpx.ReadTimeout("slow", request=request)
        return _reply(request, [{"@id": "p-1", "name": "beer production"}])

    client = _client(handler, max_retries=2)
    records = client.list_processes()

    assert [record.name for record in records] == ["beer production"]


def _calculation_handler(methods: list[str], *, fail_impacts: bool = False) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method = body["method"]
        methods.append(method)
        if method == "data/get/descriptors":
            return _reply(
                request,
                [
                    {"@id": "m-end", "name": "ReCiPe 2016 Endpoint (H)"},
                    {"@id": "m-mid", "name": "ReCiPe 2016 Midpoint (H)"},
                ],
            )
        if method == "result/calculate":
            assert body["params"]["impactMethod"]["@id"] == "m-mid"
            assert body["params"]["target"] == {"@type": "Process", "@id": "p-1"}
            return _reply(request, {"@id": "r-1"})
        if method == "result/state":
            return _reply(request, {"@id": "r-1", "isReady": True})
        if method == "result/total-impacts":
            if fail_impacts:
                return httpx.Response(500, text="boom")
            return _reply(request, [{"impactCategory": {"name": "Climate change"}, "amount": 1.2}])
        if method == "result/dispose":
            return _reply(request, None)
        raise AssertionError(f"unexpected method {method}")

    return handler


def test_calculate_process_runs_full_cycle() -> None:
    methods: list[str] = []
    client = _client(_calculation_handler(methods))

    impacts = client.calculate_process("p-1", "ReCiPe 2016")

    assert impacts == [{"impactCategory": {"name": "Climate change"}, "amount": 1.2}]
    assert methods == [
        "data/get/descriptors",
        "result/calculate",
        "result/state",
        "result/total-impacts",
        "result/dispose",
    ]


def test_calculation_result_is_disposed_on_failure() -> None:
    methods: list[str] = []
    client = _client(_calculation_handler(methods, fail_impacts=True))

    with pytest.raises(CatalogueError):
        client.calculate_process("p-1", "ReCiPe 2016")
    assert methods[-1] == "result/dispose"


def test_missing_impact_method_raises() -> None:
    client = _client(lambda request: _reply(request, [{"@id": "m", "name": "EF 3.1"}]))

    with pytest.raises(CatalogueError, match="Impact method not found"):
        client.calculate_process("p-1", "ReCiPe 2016")


def test_from_settings_requires_enabled_server() -> None:
    disabled = Settings(ecoinvent_server_url="http://openlca.test:8080", ecoinvent_server_enabled=False)
    enabled = Settings(agribalyse_server_url="http://openlca.test:8081", agribalyse_server_enabled=True)

    assert OpenLCAClient.from_settings("ecoinvent", disabled) is None
    client = OpenLCAClient.from_settings("agribalyse", enabled)
    try:
        assert client is not None
        assert client.source == "agribalyse"
        assert enabled.provider_configured is True
    finally:
        if client is not None:
            client.close()
