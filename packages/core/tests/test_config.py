"""Tests for configuration loading."""

import os

import pytest

from reviewpack_core.config import DEFAULT_CONFIG, ReviewPackConfig, load_config
from reviewpack_core.errors import ConfigurationError

_ENV_VARS = (
    "GEMINI_API_KEY",
    "ANTHROPIC_API_KEY",
    "OPENAI_API_KEY",
    "GITHUB_TOKEN",
    "JIRA_URL",
    "JIRA_EMAIL",
    "JIRA_API_TOKEN",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_when_no_config_file(tmp_path):
    config = load_config(str(tmp_path / "missing.yml"))
    assert config.provider == "gemini"
    assert config.max_prompt_tokens == 1_800_000
    assert config.max_attempts == 3
    assert config.retry_base_delay == 0
    assert config.request_timeout == 600
    assert config.store == "file"
    assert set(config.repos) == {"frontend", "backend"}
    assert config.allowed_paths == [os.getcwd()]
    assert config.gemini_api_key is None


def test_yaml_overrides_defaults(tmp_path):
    path = tmp_path / ".reviewpack.yml"
    path.write_text(
        "provider: openai\n"
        "max_attempts: 5\n"
        "repos:\n"
        "  api:\n"
        "    owner: acme\n"
        "    name: api\n"
        "    local_path: ../api\n"
        "references:\n"
        "  - id: schema\n"
        "    type: schema\n"
        "    name: Database Schema\n"
        "    path: docs/schema.sql\n"
        "exclude:\n"
        "  - node_modules/\n"
        "log_level: debug\n"
    )
    config = load_config(str(path))
    assert config.provider == "openai"
    assert config.max_attempts == 5
    assert list(config.repos) == ["api"]
    assert config.repos["api"].slug == "acme/api"
    assert config.repos["api"].description == "api"
    assert config.reference_catalog()["schema"].path == "docs/schema.sql"
    assert config.exclude == ["node_modules/"]
    assert config.log_level == "DEBUG"


def test_cli_overrides_win_and_none_is_ignored(tmp_path):
    path = tmp_path / ".reviewpack.yml"
    path.write_text("provider: openai\n")
    config = load_config(str(path), cli_overrides={"provider": "anthropic", "store": None})
    assert config.provider == "anthropic"
    assert config.store == "file"


def test_credentials_come_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("JIRA_URL", "https://acme.atlassian.net")
    monkeypatch.setenv("JIRA_API_TOKEN", "j-token")
    config = load_config(str(tmp_path / "missing.yml"))
    assert config.gemini_api_key == "g-key"
    assert config.api_key_for() == "g-key"
    assert config.jira_url == "https://acme.atlassian.net"
    assert config.jira_api_token == "j-token"


def test_unknown_provider_rejected(tmp_path):
    path = tmp_path / ".reviewpack.yml"
    path.write_text("provider: llama\n")
    with pytest.raises(ConfigurationError, match="llama"):
        load_config(str(path))


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / ".reviewpack.yml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigurationError, match="YAML mapping"):
        load_config(str(path))


def test_defaults_are_not_mutated_between_loads(tmp_path):
    path = tmp_path / ".reviewpack.yml"
    path.write_text("exclude:\n  - dist\n")
    load_config(str(path))
    assert DEFAULT_CONFIG["exclude"] == []


def test_api_key_env_names():
    assert ReviewPackConfig.api_key_env("anthropic") == "ANTHROPIC_API_KEY"
    with pytest.raises(ConfigurationError):
        ReviewPackConfig().api_key_for("llama")
