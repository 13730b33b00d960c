import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from reviewpack_core.errors import ConfigurationError

DEFAULT_CONFIG: dict = {
    "provider": "gemini",
    "gemini_model": "gemini-2.5-pro-exp-03-25",
    "gemini_api_url": "https://generativelanguage.googleapis.com/v1beta/models",
    "anthropic_model": "claude-sonnet-4-20250514",
    "openai_model": "gpt-4o",
    "request_timeout": 600,  # seconds; generation routinely takes minutes
    "max_prompt_tokens": 1_800_000,
    "max_attempts": 3,
    "retry_base_delay": 0,  # 0 = immediate retries
    "repos": {
        "frontend": {"owner": "", "name": "", "local_path": "", "description": "Frontend"},
        "backend": {"owner": "", "name": "", "local_path": "", "description": "Backend"},
    },
    "references": [],  # catalog entries: {id, type, name, path}
    "allowed_paths": None,  # None = current working directory only
    "exclude": [],  # fnmatch patterns or directory names to skip when expanding directories
    "store": "file",
    "store_path": None,
    "log_level": "WARNING",
}

PROVIDERS = ("gemini", "anthropic", "openai")

_API_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


@dataclass(frozen=True)
class RepoConfig:
    owner: str
    name: str
    local_path: str = ""
    description: str = ""

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class ReferenceEntry:
    id: str
    type: str
    name: str
    path: str


@dataclass
class ReviewPackConfig:
    """Configuration resolved once at startup and injected into every component."""

    provider: str = DEFAULT_CONFIG["provider"]
    gemini_model: str = DEFAULT_CONFIG["gemini_model"]
    gemini_api_url: str = DEFAULT_CONFIG["gemini_api_url"]
    anthropic_model: str = DEFAULT_CONFIG["anthropic_model"]
    openai_model: str = DEFAULT_CONFIG["openai_model"]
    request_timeout: float = DEFAULT_CONFIG["request_timeout"]
    max_prompt_tokens: int = DEFAULT_CONFIG["max_prompt_tokens"]
    max_attempts: int = DEFAULT_CONFIG["max_attempts"]
    retry_base_delay: float = DEFAULT_CONFIG["retry_base_delay"]
    repos: dict[str, RepoConfig] = field(default_factory=dict)
    references: list[ReferenceEntry] = field(default_factory=list)
    allowed_paths: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)
    store: str = DEFAULT_CONFIG["store"]
    store_path: str | None = None
    log_level: str = DEFAULT_CONFIG["log_level"]

    # Credentials, resolved from the environment.
    gemini_api_key: str | None = None
    anthropic_api_key: str | None = None
    openai_api_key: str | None = None
    github_token: str | None = None
    jira_url: str | None = None
    jira_email: str | None = None
    jira_api_token: str | None = None

    def api_key_for(self, provider: str | None = None) -> str | None:
        provider = provider or self.provider
        if provider not in _API_KEY_ENV:
            raise ConfigurationError(f"Unknown provider: {provider!r}. Choose one of: {', '.join(PROVIDERS)}.")
        return getattr(self, f"{provider}_api_key")

    @staticmethod
    def api_key_env(provider: str) -> str:
        return _API_KEY_ENV[provider]

    def reference_catalog(self) -> dict[str, ReferenceEntry]:
        return {entry.id: entry for entry in self.references}


def load_config(config_path: str = ".reviewpack.yml", cli_overrides: Optional[dict] = None) -> ReviewPackConfig:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .reviewpack.yml in the current directory
      3. CLI argument overrides
    Credentials always come from environment variables.
    """
    raw = {**DEFAULT_CONFIG, "repos": dict(DEFAULT_CONFIG["repos"]), "exclude": list(DEFAULT_CONFIG["exclude"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_path} must contain a YAML mapping.")
        raw.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                raw[key] = value

    if raw["provider"] not in PROVIDERS:
        raise ConfigurationError(f"Unknown provider: {raw['provider']!r}. Choose one of: {', '.join(PROVIDERS)}.")

    repos = {
        key: RepoConfig(
            owner=str(value.get("owner") or ""),
            name=str(value.get("name") or ""),
            local_path=str(value.get("local_path") or ""),
            description=str(value.get("description") or key),
        )
        for key, value in (raw.get("repos") or {}).items()
    }
    references = [
        ReferenceEntry(
            id=str(entry["id"]),
            type=str(entry.get("type", "unknown")),
            name=str(entry.get("name", entry["id"])),
            path=str(entry["path"]),
        )
        for entry in raw.get("references") or []
    ]
    allowed_paths = raw.get("allowed_paths") or [os.getcwd()]

    return ReviewPackConfig(
        provider=raw["provider"],
        gemini_model=raw["gemini_model"],
        gemini_api_url=raw["gemini_api_url"],
        anthropic_model=raw["anthropic_model"],
        openai_model=raw["openai_model"],
        request_timeout=float(raw["request_timeout"]),
        max_prompt_tokens=int(raw["max_prompt_tokens"]),
        max_attempts=int(raw["max_attempts"]),
        retry_base_delay=float(raw["retry_base_delay"]),
        repos=repos,
        references=references,
        allowed_paths=[str(p) for p in allowed_paths],
        exclude=list(raw.get("exclude") or []),
        store=raw["store"],
        store_path=raw.get("store_path"),
        log_level=str(raw["log_level"]).upper(),
        gemini_api_key=os.environ.get("GEMINI_API_KEY"),
        anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY"),
        openai_api_key=os.environ.get("OPENAI_API_KEY"),
        github_token=os.environ.get("GITHUB_TOKEN"),
        jira_url=os.environ.get("JIRA_URL"),
        jira_email=os.environ.get("JIRA_EMAIL"),
        jira_api_token=os.environ.get("JIRA_API_TOKEN"),
    )
