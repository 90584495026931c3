"""Configuration loading and management."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv

from browserlens.errors import ConfigurationError

DEFAULT_CLOUD_URL = "https://api.openai.com/v1"
DEFAULT_CLOUD_MODEL = "gpt-4"
DEFAULT_LOCAL_URL = "http://localhost:11434"
DEFAULT_LOCAL_MODEL = "mistral:latest"
DEFAULT_REPORT_DIR = "./monitoring-reports"

# Searched in the working directory when no explicit path is given
CONFIG_FILE_NAMES = ("browserlens.yaml", "browserlens.yml", "browserlens.json")


class ProviderKind(StrEnum):
    """Closed set of supported language-model backends."""

    CLOUD = "cloud"
    LOCAL = "local"

    @classmethod
    def parse(cls, value: str | ProviderKind) -> ProviderKind:
        """Resolve a provider name, accepting backend aliases.

        Raises:
            ConfigurationError: For any name outside the supported set.
        """
        if isinstance(value, ProviderKind):
            return value
        name = str(value).strip().lower()
        name = _PROVIDER_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            supported = ", ".join(sorted({*(k.value for k in cls), *_PROVIDER_ALIASES}))
            raise ConfigurationError(
                f"Unsupported LLM provider: {value!r}. Supported providers: {supported}"
            ) from None


_PROVIDER_ALIASES: dict[str, str] = {
    "openai": "cloud",
    "ollama": "local",
}


@dataclass(slots=True)
class MonitorConfig:
    """Merged monitoring configuration.

    Priority: overrides > env vars > config file > defaults.
    ``provider`` is kept as given; it is validated when the provider is built.
    """

    monitoring_enabled: bool = True
    provider: str = ProviderKind.LOCAL.value

    # Cloud backend
    api_key: str | None = None
    base_url: str = DEFAULT_CLOUD_URL
    model: str = DEFAULT_CLOUD_MODEL

    # Local backend
    local_base_url: str = DEFAULT_LOCAL_URL
    local_model: str = DEFAULT_LOCAL_MODEL

    # Client behaviour
    timeout: float = 60.0
    max_retries: int = 3
    retry_base_delay: float = 1.0

    # Analysis scheduling
    realtime_suggestions_enabled: bool = True
    analysis_interval: float = 30.0
    batch_size: int = 10
    max_concurrent_analyses: int = 2
    shutdown_timeout: float = 10.0

    # Reporting
    report_dir: str = DEFAULT_REPORT_DIR

    @property
    def provider_kind(self) -> ProviderKind:
        return ProviderKind.parse(self.provider)


def find_config_file(start: Path | None = None) -> Path | None:
    """Return the first known config file in *start* (default: cwd)."""
    directory = start or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a YAML or JSON config file, returning empty dict if not found."""
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    # Allow a top-level "browserlens:" section
    section = data.get("browserlens")
    return section if isinstance(section, dict) else data


def load_config(
    path: str | Path | None = None,
    *,
    overrides: dict[str, Any] | None = None,
    use_env: bool = True,
) -> MonitorConfig:
    """Load configuration from all sources with proper priority."""
    config = MonitorConfig()

    # 1. Config file
    config_path = Path(path) if path else find_config_file()
    if config_path is not None:
        if path and not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        _apply_dict(config, load_config_file(config_path))

    # 2. Environment variables
    if use_env:
        load_dotenv(find_dotenv(usecwd=True))
        _apply_dict(config, _env_values())

    # 3. Explicit overrides (highest priority)
    _apply_dict(config, overrides or {})

    return config


# Environment variable -> config field
ENV_VARS: dict[str, str] = {
    "BROWSERLENS_ENABLED": "monitoring_enabled",
    "BROWSERLENS_PROVIDER": "provider",
    "OPENAI_API_KEY": "api_key",
    "BROWSERLENS_BASE_URL": "base_url",
    "BROWSERLENS_MODEL": "model",
    "BROWSERLENS_OLLAMA_URL": "local_base_url",
    "BROWSERLENS_OLLAMA_MODEL": "local_model",
    "BROWSERLENS_TIMEOUT": "timeout",
    "BROWSERLENS_MAX_RETRIES": "max_retries",
    "BROWSERLENS_REALTIME": "realtime_suggestions_enabled",
    "BROWSERLENS_ANALYSIS_INTERVAL": "analysis_interval",
    "BROWSERLENS_BATCH_SIZE": "batch_size",
    "BROWSERLENS_REPORT_DIR": "report_dir",
}


def _env_values() -> dict[str, Any]:
    return {attr: os.environ[var] for var, attr in ENV_VARS.items() if os.environ.get(var)}


_FIELD_ALIASES: dict[str, str] = {
    "monitoringEnabled": "monitoring_enabled",
    "apiKey": "api_key",
    "baseUrl": "base_url",
    "localBaseUrl": "local_base_url",
    "localModel": "local_model",
    "ollamaBaseUrl": "local_base_url",
    "ollamaModel": "local_model",
    "maxRetries": "max_retries",
    "retryBaseDelay": "retry_base_delay",
    "realtimeSuggestionsEnabled": "realtime_suggestions_enabled",
    "analysisInterval": "analysis_interval",
    "batchSize": "batch_size",
    "maxConcurrentAnalyses": "max_concurrent_analyses",
    "shutdownTimeout": "shutdown_timeout",
    "reportDir": "report_dir",
}

_BOOL_FIELDS = {"monitoring_enabled", "realtime_suggestions_enabled"}
_INT_FIELDS = {"max_retries", "batch_size", "max_concurrent_analyses"}
_FLOAT_FIELDS = {"timeout", "retry_base_delay", "analysis_interval", "shutdown_timeout"}


def _apply_dict(config: MonitorConfig, data: dict[str, Any]) -> None:
    """Apply dictionary values to config, only for known fields."""
    known = set(MonitorConfig.__dataclass_fields__)
    for key, value in data.items():
        attr = _FIELD_ALIASES.get(key, key)
        if attr not in known or value is None:
            continue
        setattr(config, attr, _coerce(attr, value))


def _coerce(attr: str, value: Any) -> Any:
    try:
        if attr in _BOOL_FIELDS:
            return _parse_bool(value)
        if attr in _INT_FIELDS:
            return int(value)
        if attr in _FLOAT_FIELDS:
            return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {attr}: {value!r}") from e
    return value if attr == "api_key" else str(value)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ValueError(value)
