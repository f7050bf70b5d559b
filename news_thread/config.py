"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- SourceConfig: Source page fetching settings
- ProviderConfig: Gemini provider settings
- ExtractConfig: Structured extraction settings
- StageConfig: Artifact staging settings
- PublishConfig: Thread composition and failure policy
- TwitterConfig: X/Twitter credential lookup
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

import yaml

from .errors import ConfigError

FAILURE_POLICIES = ("continue", "abort")


@dataclass
class SourceConfig:
    """Configuration for fetching the source page.

    Attributes:
        url: Aggregator homepage to fetch
        display_name_prefix: Prefix for the uploaded artifact's display name
        timeout_seconds: HTTP request timeout
        trust_env: Whether to respect system proxy settings
        user_agent: Browser-like User-Agent header string
    """

    url: str = "https://techmeme.com"
    display_name_prefix: str = "techmeme-latest"
    timeout_seconds: float = 20.0
    trust_env: bool = True
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/91.0.4472.124 Safari/537.36"
    )


@dataclass
class ProviderConfig:
    """Configuration for the generative-language provider.

    Attributes:
        name: Provider name ("gemini" currently supported)
        model: Model identifier
        google_api_key_env: Environment variable name containing the API key
        base_url: Base URL for the provider API
        api_key: Optional inline API key (overrides env var)
        trust_env: Whether to respect system proxy settings for API requests
        timeout_seconds: Timeout for generate/upload requests
        temperature: Sampling temperature for the extraction call
    """

    name: str = "gemini"
    model: str = "gemini-2.5-pro"
    google_api_key_env: str = "GEMINI_API_KEY"
    base_url: str = "https://generativelanguage.googleapis.com"
    api_key: str | None = None
    trust_env: bool = True
    timeout_seconds: float = 120.0
    temperature: float = 0.4


@dataclass
class ExtractConfig:
    """Configuration for the structured news extraction.

    Attributes:
        limit: Number of news items to keep (top-N)
        category: Topic description handed to the model
        excluded_hashtags: Hashtags the model must not return
        title_max_chars: Soft limit for item titles
        description_max_chars: Soft limit for item descriptions
        max_hashtags: Upper bound of hashtags per item
    """

    limit: int = 3
    category: str = (
        "Artificial Intelligence (AI), Machine Learning (ML), Large Language Models (LLMs), "
        "Generative AI, or significant AI company news (like OpenAI, Anthropic, Google AI, Meta AI)"
    )
    excluded_hashtags: list[str] = field(
        default_factory=lambda: ["#AI", "#ArtificialIntelligence"]
    )
    title_max_chars: int = 60
    description_max_chars: int = 150
    max_hashtags: int = 3


@dataclass
class StageConfig:
    """Configuration for staging the fetched document.

    Attributes:
        mime_type: Content type declared on upload
        temp_dir: Directory for the temporary local copy (system temp dir if None)
    """

    mime_type: str = "text/html"
    temp_dir: str | None = None


@dataclass
class PublishConfig:
    """Configuration for thread composition and publishing.

    Attributes:
        failure_policy: "continue" to keep posting after a failed post, "abort" to stop
        post_delay_seconds: Pause between consecutive posts
        max_post_chars: Platform per-post limit (warned about, not enforced)
        intro_hashtags: Hashtag block appended to the intro post
        outro_attribution: Fixed trailer appended to the outro post
        numbering: Append an "(i/total)" position suffix to item posts
        include_link: Append the item link to item posts
    """

    failure_policy: str = "continue"
    post_delay_seconds: float = 5.0
    max_post_chars: int = 280
    intro_hashtags: list[str] = field(
        default_factory=lambda: [
            "#AI",
            "#ArtificialIntelligence",
            "#MachineLearning",
            "#LLM",
            "#GenerativeAI",
            "#OpenAI",
            "#Anthropic",
            "#GoogleAI",
            "#MetaAI",
            "#Gemini",
            "#Techmeme",
        ]
    )
    outro_attribution: str = "Source: techmeme.com"
    numbering: bool = False
    include_link: bool = False


@dataclass
class TwitterConfig:
    """Configuration for X/Twitter OAuth 1.0a user credentials.

    Each credential is read from the inline value when set, otherwise from
    the named environment variable.
    """

    api_key_env: str = "TWITTER_API_KEY"
    api_secret_env: str = "TWITTER_API_SECRET"
    access_token_env: str = "TWITTER_ACCESS_TOKEN"
    access_token_secret_env: str = "TWITTER_ACCESS_TOKEN_SECRET"
    api_key: str | None = None
    api_secret: str | None = None
    access_token: str | None = None
    access_token_secret: str | None = None


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Optional log file path
        format: Log file format ("jsonl" or "plain")
    """

    level: str = "INFO"
    console: bool = True
    file: str | None = None
    format: str = "jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    source: SourceConfig = field(default_factory=SourceConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    stage: StageConfig = field(default_factory=StageConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)
    twitter: TwitterConfig = field(default_factory=TwitterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


@dataclass
class TwitterCredentials:
    api_key: str | None
    api_secret: str | None
    access_token: str | None
    access_token_secret: str | None

    def missing(self) -> list[str]:
        return [name for name, value in vars(self).items() if not value]


_SECTIONS = {
    "source": SourceConfig,
    "provider": ProviderConfig,
    "extract": ExtractConfig,
    "stage": StageConfig,
    "publish": PublishConfig,
    "twitter": TwitterConfig,
    "logging": LoggingConfig,
}


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict):
            known = {k: v for k, v in value.items() if k in data[key]}
            data[key].update(known)
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {name: dict(vars(getattr(cfg, name))) for name in _SECTIONS}


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(**{name: cls(**data[name]) for name, cls in _SECTIONS.items()})


def get_api_key(cfg: ProviderConfig) -> str | None:
    """Get API key from inline config or environment variable."""
    if cfg.api_key:
        return cfg.api_key
    return os.getenv(cfg.google_api_key_env)


def get_twitter_credentials(cfg: TwitterConfig) -> TwitterCredentials:
    """Resolve Twitter credentials from inline config or environment variables."""
    return TwitterCredentials(
        api_key=cfg.api_key or os.getenv(cfg.api_key_env),
        api_secret=cfg.api_secret or os.getenv(cfg.api_secret_env),
        access_token=cfg.access_token or os.getenv(cfg.access_token_env),
        access_token_secret=cfg.access_token_secret or os.getenv(cfg.access_token_secret_env),
    )


def validate_config(cfg: AppConfig, dry_run: bool = False) -> None:
    """Fail fast on missing credentials or unsupported settings.

    Raises:
        ConfigError: Naming every missing credential or invalid value
    """
    problems: list[str] = []
    if not get_api_key(cfg.provider):
        problems.append(f"{cfg.provider.google_api_key_env} is not set")
    if not dry_run:
        creds = get_twitter_credentials(cfg.twitter)
        for name in creds.missing():
            env_name = getattr(cfg.twitter, f"{name}_env")
            problems.append(f"{env_name} is not set")
    if cfg.publish.failure_policy not in FAILURE_POLICIES:
        problems.append(
            f"Unsupported failure_policy {cfg.publish.failure_policy!r}. "
            f"Use one of: {', '.join(FAILURE_POLICIES)}"
        )
    if cfg.extract.limit < 1:
        problems.append("extract.limit must be at least 1")
    if problems:
        raise ConfigError("; ".join(problems))
