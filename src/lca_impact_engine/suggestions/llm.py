"""Language model adapters used by the proxy advisor."""

from __future__ import annotations

import json
from typing import Any, Protocol

from openai import OpenAI


class LanguageModelProtocol(Protocol):
    """Minimal protocol for language models used for proxy suggestions."""

    def invoke(self, input_data: dict[str, Any]) -> Any: ...


class OpenAIChatModel:
    """Thin wrapper around OpenAI chat completions returning the message text."""

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        timeout: float = 30.0,
        max_tokens: int = 1024,
        client: OpenAI | None = None,
    ) -> None:
        self._client = client or OpenAI(api_key=api_key, timeout=timeout)
        self._model = model
        self._max_tokens = max_tokens

    def invoke(self, input_data: dict[str, Any]) -> str:
        prompt = input_data.get("prompt") or ""
        context = input_data.get("context")
        if isinstance(context, (dict, list)):
            user_content = json.dumps(context, ensure_ascii=False)
        else:
            user_content = str(context) if context is not None else ""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": str(prompt)},
                {"role": "user", "content": user_content},
            ],
            "temperature": 0.2,
            "max_completion_tokens": self._max_tokens,
        }
        response_format = input_data.get("response_format")
        if response_format:
            kwargs["response_format"] = response_format
        response = self._client.chat.completions.create(**kwargs)
        content = response.choices[0].message.content if response.choices else None
        return (content or "").strip()
