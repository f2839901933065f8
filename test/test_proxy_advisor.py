from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import pytest

from lca_impact_engine.core.config import Settings
from lca_impact_engine.core.models import ProxySuggestionRequest
from lca_impact_engine.suggestions import OpenAIChatModel, ProxyAdvisor, normalize_suggestion, static_suggestions


class FakeLLM:
    def __init__(self, response: Any) -> None:
        self.response = response
        self.calls: list[dict[str, Any]] = []

    def invoke(self, input_data: dict[str, Any]) -> Any:
        self.calls.append(input_data)
        return self.response


class FailingLLM:
    def invoke(self, input_data: dict[str, Any]) -> Any:
        raise RuntimeError("model unavailable")


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {"openai_api_key": None, "advisor_max_suggestions": 5, "advisor_cache_ttl_seconds": 1800}
    values.update(overrides)
    return Settings(**values)


def _model_reply(count: int) -> str:
    suggestions = [
        {
            "proxy_name": f"Proxy {index}",
            "search_query": f"proxy {index}",
            "category": "Botanicals/spices",
            "reasoning": "Similar agricultural profile.",
            "confidence_note": "certain" if index == 0 else "medium",
            "uncertainty_impact": "±30%",
        }
        for index in range(count)
    ]
    return "```json\n" + json.dumps({"suggestions": suggestions}) + "\n```"


def test_model_suggestions_are_capped_and_normalized() -> None:
    llm = FakeLLM(_model_reply(6))
    advisor = ProxyAdvisor(_settings(), llm=llm)

    result = advisor.advise(ProxySuggestionRequest("orris root", "ingredient", product_context="London dry gin"))

    assert result.from_fallback is False
    assert result.cached is False
    assert len(result.suggestions) == 5
    assert result.suggestions[0].confidence == "low"
    assert result.suggestions[1].confidence == "medium"
    assert result.suggestions[0].search_query == "proxy 0"
    assert "London dry gin" in llm.calls[0]["context"]
    assert llm.calls[0]["response_format"] == {"type": "json_object"}


def test_missing_api_key_uses_keyword_fallback() -> None:
    result = ProxyAdvisor(_settings()).advise(ProxySuggestionRequest("orris root"))

    assert result.from_fallback is True
    assert [item.proxy_name for item in result.suggestions] == [
        "Dried herb (generic)",
        "Spice (generic)",
        "Natural flavouring (generic)",
    ]


@pytest.mark.parametrize("llm", [FailingLLM(), FakeLLM(""), FakeLLM('{"suggestions": []}'), FakeLLM("no json here")])
def test_model_failures_fall_back(llm: Any) -> None:
    result = ProxyAdvisor(_settings(), llm=llm).advise(ProxySuggestionRequest("citric acid"))

    assert result.from_fallback is True
    assert [item.proxy_name for item in result.suggestions] == ["Citric acid", "Malic acid"]


def test_results_are_cached_until_ttl() -> None:
    clock = FakeClock()
    llm = FakeLLM(_model_reply(2))
    advisor = ProxyAdvisor(_settings(), llm=llm, clock=clock)
    request = ProxySuggestionRequest("Orris Root ")

    advisor.advise(request)
    clock.now += 1799
    cached = advisor.advise(ProxySuggestionRequest("orris root"))
    clock.now += 2
    refreshed = advisor.advise(request)

    assert cached.cached is True
    assert refreshed.cached is False
    assert len(llm.calls) == 2


def test_cache_is_keyed_by_type() -> None:
    llm = FakeLLM(_model_reply(1))
    advisor = ProxyAdvisor(_settings(), llm=llm)

    advisor.advise(ProxySuggestionRequest("cork", "ingredient"))
    advisor.advise(ProxySuggestionRequest("cork", "packaging"))

    assert ProxyAdvisor.cache_key(ProxySuggestionRequest(" Cork ", "packaging")) == "cork:packaging"
    assert len(llm.calls) == 2


@pytest.mark.parametrize(
    ("name", "kind", "expected"),
    [
        ("orris root", "ingredient", ["Dried herb (generic)", "Spice (generic)", "Natural flavouring (generic)"]),
        ("ascorbic acid", "ingredient", ["Citric acid", "Malic acid"]),
        ("xanthan gum", "ingredient", ["Starch (generic)", "Dried herb (generic)"]),
        ("vanilla extract", "ingredient", ["Natural flavouring (generic)", "Dried herb (generic)"]),
        ("glucose syrup", "ingredient", ["Sugar (cane)"]),
        ("mystery", "ingredient", ["Natural flavouring (generic)", "Dried herb (generic)"]),
        ("root beer label", "packaging", ["Generic packaging material"]),
    ],
)
def test_static_suggestions(name: str, kind: str, expected: list[str]) -> None:
    assert [item.proxy_name for item in static_suggestions(name, kind)] == expected


def test_static_fallback_confidence_varies_by_rule() -> None:
    gum = static_suggestions("xanthan gum", "ingredient")
    extract = static_suggestions("vanilla extract", "ingredient")

    assert gum[1].confidence == "low"
    assert extract[0].confidence == "medium"
    assert static_suggestions("glucose syrup", "ingredient")[0].search_query == "cane sugar"


class FakeCompletions:
    def __init__(self, content: str) -> None:
        self.content = content
        self.kwargs: dict[str, Any] = {}

    def create(self, **kwargs: Any) -> Any:
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def test_openai_chat_model_builds_messages() -> None:
    completions = FakeCompletions('  {"suggestions": []}\n')
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    model = OpenAIChatModel("sk-test", "gpt-4o-mini", max_tokens=256, client=client)  # type: ignore[arg-type]

    text = model.invoke({"prompt": "system", "context": "user", "response_format": {"type": "json_object"}})

    assert text == '{"suggestions": []}'
    assert completions.kwargs["model"] == "gpt-4o-mini"
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "user"},
    ]
    assert completions.kwargs["max_completion_tokens"] == 256
    assert completions.kwargs["response_format"] == {"type": "json_object"}


def test_normalize_suggestion_defaults() -> None:
    suggestion = normalize_suggestion({"name": "Dried herb"})

    assert suggestion.proxy_name == "Dried herb"
    assert suggestion.search_query == ""
    assert suggestion.category == "Unknown"
    assert suggestion.confidence == "low"
    assert suggestion.uncertainty_impact is None


def test_expired_cache_entries_are_dropped_on_store() -> None:
    clock = FakeClock()
    advisor = ProxyAdvisor(_settings(), llm=FakeLLM(_model_reply(1)), clock=clock)
    advisor.advise(ProxySuggestionRequest("orris root"))
    advisor.advise(ProxySuggestionRequest("angelica root"))

    clock.now += 1801
    advisor.advise(ProxySuggestionRequest("cork", "packaging"))

    assert list(advisor._cache) == ["cork:packaging"]
