"""Application configuration primitives."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import InventorySource

DEFAULT_SECRETS_PATH = Path(".secrets/secrets.toml")


class Settings(BaseSettings):
    """Central configuration for the impact resolution engine."""

    ecoinvent_server_url: HttpUrl | None = None
    ecoinvent_server_enabled: bool = False
    agribalyse_server_url: HttpUrl | None = None
    agribalyse_server_enabled: bool = False
    openlca_page_size: int = 20
    openlca_impact_method: str = "ReCiPe 2016"

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    advisor_cache_ttl_seconds: float = 30 * 60
    advisor_max_suggestions: int = 5

    request_timeout: float = 30.0
    max_retries: int = 3
    retry_backoff: float = 0.5

    suggestion_validation_timeout: float = 4.0
    suggestion_rate_limit: int = 20
    suggestion_rate_window_seconds: float = 60 * 60

    lookup_cache_ttl_hours: float = 24.0
    min_query_length: int = 2

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    artifacts_dir: Path = Path("artifacts")
    database_url: str = "sqlite:///artifacts/impact_engine.db"

    model_config = SettingsConfigDict(env_prefix="LCA_", env_file=(), extra="ignore")

    def openlca_server(self, source: InventorySource) -> str | None:
        """Return the JSON-RPC base URL for an inventory, or None when disabled."""
        if source == "agribalyse":
            url, enabled = self.agribalyse_server_url, self.agribalyse_server_enabled
        else:
            url, enabled = self.ecoinvent_server_url, self.ecoinvent_server_enabled
        if not enabled or url is None:
            return None
        return str(url)

    @property
    def provider_configured(self) -> bool:
        return any(self.openlca_server(source) for source in ("ecoinvent", "agribalyse"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""
    overrides = _load_settings_overrides()
    settings = Settings(**overrides)
    settings.artifacts_dir.mkdir(parents=True, exist_ok=True)
    return settings


def _load_settings_overrides(secrets_path: Path = DEFAULT_SECRETS_PATH) -> dict[str, Any]:
    """Load configuration overrides from the secrets TOML file."""
    if not secrets_path.exists():
        return {}
    data = _read_toml(secrets_path)
    overrides: dict[str, Any] = {}

    for source, candidates in (
        ("ecoinvent", ("ecoinvent", "openlca")),
        ("agribalyse", ("agribalyse", "openlca_agribalyse")),
    ):
        section = _extract_section(data, *candidates)
        if not section:
            continue
        url = section.get("url") or section.get("server_url")
        if url:
            overrides[f"{source}_server_url"] = url
            overrides[f"{source}_server_enabled"] = bool(section.get("enabled", True))

    openai_cfg = _extract_section(data, "openai", "OPENAI")
    if openai_cfg:
        api_key = _sanitize_api_key(openai_cfg.get("api_key") or openai_cfg.get("API_KEY"))
        if api_key is not None:
            overrides["openai_api_key"] = api_key
        model = openai_cfg.get("model") or openai_cfg.get("MODEL")
        if model:
            overrides["openai_model"] = model

    general_cfg = data.get("lca") or {}
    overrides.update(
        {key: value for key, value in general_cfg.items() if key in Settings.model_fields}
    )
    return {key: value for key, value in overrides.items() if value is not None}


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _extract_section(data: dict[str, Any], *candidates: str) -> dict[str, Any] | None:
    for key in candidates:
        section = data.get(key)
        if isinstance(section, dict):
            return section
    return None


def _sanitize_api_key(value: str | None) -> str | None:
    if not value:
        return None
    token = value.strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()
    return token or None
