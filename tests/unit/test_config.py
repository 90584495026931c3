"""Tests for configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from browserlens.config import (
    DEFAULT_LOCAL_MODEL,
    DEFAULT_LOCAL_URL,
    MonitorConfig,
    ProviderKind,
    find_config_file,
    load_config,
    load_config_file,
)
from browserlens.errors import ConfigurationError


class TestMonitorConfigDefaults:
    def test_defaults(self) -> None:
        config = MonitorConfig()
        assert config.monitoring_enabled
        assert config.provider == "local"
        assert config.local_base_url == DEFAULT_LOCAL_URL
        assert config.local_model == DEFAULT_LOCAL_MODEL
        assert config.model == "gpt-4"
        assert config.timeout == 60.0
        assert config.max_retries == 3
        assert config.realtime_suggestions_enabled
        assert config.analysis_interval == 30.0
        assert config.batch_size == 10
        assert config.max_concurrent_analyses == 2

    def test_provider_kind(self) -> None:
        assert MonitorConfig(provider="cloud").provider_kind is ProviderKind.CLOUD


class TestProviderKind:
    @pytest.mark.parametrize(
        ("name", "kind"),
        [
            ("cloud", ProviderKind.CLOUD),
            ("local", ProviderKind.LOCAL),
            ("openai", ProviderKind.CLOUD),
            ("OLLAMA", ProviderKind.LOCAL),
        ],
    )
    def test_parse(self, name: str, kind: ProviderKind) -> None:
        assert ProviderKind.parse(name) is kind

    def test_unknown_provider(self) -> None:
        with pytest.raises(ConfigurationError, match="Unsupported LLM provider"):
            ProviderKind.parse("azure")


class TestConfigFiles:
    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "browserlens.yaml"
        path.write_text("provider: cloud\napiKey: sk-test\nbatchSize: 5\n", encoding="utf-8")
        config = load_config(path, use_env=False)
        assert config.provider == "cloud"
        assert config.api_key == "sk-test"
        assert config.batch_size == 5

    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "browserlens.json"
        path.write_text(json.dumps({"analysisInterval": "12.5", "realtimeSuggestionsEnabled": "false"}))
        config = load_config(path, use_env=False)
        assert config.analysis_interval == 12.5
        assert not config.realtime_suggestions_enabled

    def test_nested_section(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("browserlens:\n  localModel: llama3:8b\n", encoding="utf-8")
        assert load_config_file(path) == {"localModel": "llama3:8b"}

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "browserlens.yaml"
        path.write_text("colour: blue\nmaxRetries: 4\n", encoding="utf-8")
        config = load_config(path, use_env=False)
        assert config.max_retries == 4

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "browserlens.yaml"
        path.write_text("provider: [unterminated\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_config(path, use_env=False)

    def test_missing_explicit_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(tmp_path / "nope.yaml", use_env=False)

    def test_invalid_number(self, tmp_path: Path) -> None:
        path = tmp_path / "browserlens.yaml"
        path.write_text("batchSize: lots\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="batch_size"):
            load_config(path, use_env=False)

    def test_discovers_file_in_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "browserlens.yml").write_text("provider: ollama\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        assert find_config_file() == tmp_path / "browserlens.yml"
        assert load_config(use_env=False).provider == "ollama"


class TestPriority:
    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "browserlens.yaml"
        path.write_text("batchSize: 5\nprovider: local\n", encoding="utf-8")
        monkeypatch.setenv("BROWSERLENS_BATCH_SIZE", "7")
        monkeypatch.setenv("BROWSERLENS_ENABLED", "no")
        config = load_config(path)
        assert config.batch_size == 7
        assert not config.monitoring_enabled
        assert config.provider == "local"

    def test_overrides_win(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("BROWSERLENS_MAX_RETRIES", "9")
        config = load_config(overrides={"maxRetries": 1})
        assert config.max_retries == 1

    def test_dotenv_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("BROWSERLENS_OLLAMA_MODEL", raising=False)
        (tmp_path / ".env").write_text("BROWSERLENS_OLLAMA_MODEL=phi3:mini\n", encoding="utf-8")
        try:
            config = load_config()
        finally:
            monkeypatch.delenv("BROWSERLENS_OLLAMA_MODEL", raising=False)
        assert config.local_model == "phi3:mini"
