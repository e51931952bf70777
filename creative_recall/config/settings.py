"""
RecallConfig - Configuration Management

Sensible defaults with full override capability.

Example:
    >>> # Use defaults (reads from environment)
    >>> recall = CreativeRecall("./recall_data")

    >>> # Explicit configuration
    >>> config = RecallConfig(
    ...     embedding_model="text-embedding-3-large",
    ...     embedding_window_size=3,
    ... )
    >>> recall = CreativeRecall("./recall_data", config=config)

    >>> # From config file
    >>> config = RecallConfig.from_file("./recall.toml")

Environment Variables:
    CREATIVE_RECALL_LLM_PROVIDER - LLM provider name
    CREATIVE_RECALL_LLM_MODEL - Model for text generation
    CREATIVE_RECALL_EMBEDDING_PROVIDER - Embedding provider ("openai" or "http")
    CREATIVE_RECALL_EMBEDDING_MODEL - Embedding model name
    CREATIVE_RECALL_EMBEDDING_ENDPOINT_URL - Embed endpoint (http provider)
    CREATIVE_RECALL_SEARCH_ENDPOINT_URL - Semantic-search endpoint
    CREATIVE_RECALL_ENDPOINT_API_KEY - Bearer token for the HTTP endpoints
    CREATIVE_RECALL_REQUEST_TIMEOUT - Timeout (seconds) for every remote call
    CREATIVE_RECALL_EMBEDDING_WINDOW - Concurrent embedding calls per batch window
    OPENAI_API_KEY - OpenAI API key (standard name)
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, cast


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return cast(dict[str, Any], tomllib.load(f))


class RecallConfig:
    """Configuration for CreativeRecall."""

    # === LLM Configuration ===

    llm_provider: str = "openai"
    """LLM provider: "openai" """

    llm_model: str = "gpt-4o-mini"
    """Model for text generation (memory extraction, assistants)"""

    # === Embedding Configuration ===

    embedding_provider: str = "openai"
    """Embedding provider: "openai" or "http" (generic embed endpoint)"""

    embedding_model: str = "text-embedding-3-small"
    """Embedding model name"""

    embedding_dimensions: int = 1536
    """Embedding vector dimensions (provider-dependent)"""

    embedding_endpoint_url: str | None = None
    """Embed endpoint URL for the "http" embedding provider"""

    # === Search Configuration ===

    search_endpoint_url: str | None = None
    """Semantic-search endpoint URL"""

    search_default_limit: int = 10
    """Results returned when the caller gives no limit"""

    search_max_limit: int = 50
    """Hard cap on requested results"""

    search_default_threshold: float = 0.3
    """Minimum similarity when the caller gives no threshold"""

    # === API Keys ===

    openai_api_key: str | None = None
    endpoint_api_key: str | None = None

    # === Remote Call Policy ===

    request_timeout_seconds: float = 30.0
    """Timeout for every remote call. Calls are never retried."""

    # === Processing Configuration ===

    embedding_window_size: int = 5
    """Max concurrent embedding calls per batch window"""

    chat_temperature: float = 0.3
    """Default sampling temperature for text generation"""

    chat_max_output_tokens: int = 500
    """Default output token limit for text generation"""

    session_description_max_chars: int = 200
    """Description length kept in session event content"""

    # === Usage Reporting ===

    usage_report_days: int = 7
    """Default lookback window for usage reports"""

    usage_report_max_days: int = 90
    """Maximum lookback window for usage reports"""

    usage_report_row_limit: int = 5000
    """Maximum rows scanned per usage report"""

    # === Storage Configuration ===

    parquet_compression: str = "zstd"
    """Parquet compression: "zstd", "snappy", "gzip", "none" """

    def __init__(self, **kwargs: Any) -> None:
        """
        Initialize configuration.

        Args:
            **kwargs: Override any configuration option

        Raises:
            ValueError: If an option is unknown
        """
        # Load from environment first
        self._load_from_env()

        # Apply explicit overrides
        self._apply(kwargs)

    def _apply(self, values: dict[str, Any]) -> None:
        """Set known options, rejecting anything that is not a setting."""
        for key, value in values.items():
            if (
                hasattr(self, key)
                and not key.startswith("_")
                and not callable(getattr(type(self), key, None))
            ):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration option: {key}")

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        import os

        # API keys (standard names)
        if key := os.getenv("OPENAI_API_KEY"):
            self.openai_api_key = key
        if key := os.getenv("CREATIVE_RECALL_ENDPOINT_API_KEY"):
            self.endpoint_api_key = key

        # CREATIVE_RECALL_* prefixed settings
        if provider := os.getenv("CREATIVE_RECALL_LLM_PROVIDER"):
            self.llm_provider = provider
        if model := os.getenv("CREATIVE_RECALL_LLM_MODEL"):
            self.llm_model = model
        if provider := os.getenv("CREATIVE_RECALL_EMBEDDING_PROVIDER"):
            self.embedding_provider = provider
        if model := os.getenv("CREATIVE_RECALL_EMBEDDING_MODEL"):
            self.embedding_model = model
        if url := os.getenv("CREATIVE_RECALL_EMBEDDING_ENDPOINT_URL"):
            self.embedding_endpoint_url = url
        if url := os.getenv("CREATIVE_RECALL_SEARCH_ENDPOINT_URL"):
            self.search_endpoint_url = url
        if timeout := os.getenv("CREATIVE_RECALL_REQUEST_TIMEOUT"):
            self.request_timeout_seconds = float(timeout)
        if window := os.getenv("CREATIVE_RECALL_EMBEDDING_WINDOW"):
            self.embedding_window_size = int(window)

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: Any) -> "RecallConfig":
        """
        Load configuration from TOML file.

        Nested sections are flattened with their prefix. Environment
        variables still win over file values, and ``kwargs`` win over both.

        Example TOML:
            [llm]
            provider = "openai"
            model = "gpt-4o-mini"

            [embedding]
            model = "text-embedding-3-small"
            window_size = 5

            [search]
            endpoint_url = "https://example.test/functions/v1/semantic-search"
            max_limit = 50

        Args:
            path: Path to TOML configuration file
            **kwargs: Override any configuration option

        Returns:
            RecallConfig instance with values from file

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If an option is unknown
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        data = _load_toml(path)

        flat_config: dict[str, Any] = {}

        # Map section names to config key prefixes
        section_mapping = {
            "llm": "llm_",
            "embedding": "embedding_",
            "search": "search_",
            "chat": "chat_",
            "usage_report": "usage_report_",
            "api_keys": "",  # api_keys.openai -> openai_api_key
            "processing": "",
            "storage": "",
        }

        for section, prefix in section_mapping.items():
            if section in data:
                for key, value in data[section].items():
                    if section == "api_keys":
                        flat_config[f"{key}_api_key"] = value
                    else:
                        flat_config[f"{prefix}{key}"] = value

        # Also support flat top-level keys
        for key, value in data.items():
            if key not in section_mapping and not isinstance(value, dict):
                flat_config[key] = value

        config = cls.__new__(cls)
        config._apply(flat_config)
        config._load_from_env()
        config._apply(kwargs)
        return config

    @classmethod
    def from_env(cls) -> "RecallConfig":
        """Load configuration from environment variables only."""
        return cls()

    def to_file(self, path: str | Path) -> None:
        """
        Save configuration to TOML file.

        API keys are never written.

        Args:
            path: Path to write TOML configuration file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        sections: dict[str, dict[str, str | int | float | bool | None]] = {
            "llm": {
                "provider": self.llm_provider,
                "model": self.llm_model,
            },
            "embedding": {
                "provider": self.embedding_provider,
                "model": self.embedding_model,
                "dimensions": self.embedding_dimensions,
                "endpoint_url": self.embedding_endpoint_url,
                "window_size": self.embedding_window_size,
            },
            "search": {
                "endpoint_url": self.search_endpoint_url,
                "default_limit": self.search_default_limit,
                "max_limit": self.search_max_limit,
                "default_threshold": self.search_default_threshold,
            },
            "chat": {
                "temperature": self.chat_temperature,
                "max_output_tokens": self.chat_max_output_tokens,
            },
            "usage_report": {
                "days": self.usage_report_days,
                "max_days": self.usage_report_max_days,
                "row_limit": self.usage_report_row_limit,
            },
            "processing": {
                "request_timeout_seconds": self.request_timeout_seconds,
                "session_description_max_chars": self.session_description_max_chars,
            },
            "storage": {
                "parquet_compression": self.parquet_compression,
            },
        }

        # Build TOML string manually (avoids extra dependency)
        lines = ["# CreativeRecall Configuration", ""]

        for section_name, section_values in sections.items():
            lines.append(f"[{section_name}]")
            for key, value in section_values.items():
                if isinstance(value, str):
                    lines.append(f'{key} = "{value}"')
                elif isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                elif isinstance(value, (int, float)):
                    lines.append(f"{key} = {value}")
            lines.append("")

        lines.extend([
            "# API keys should be set via environment variables:",
            "# OPENAI_API_KEY, CREATIVE_RECALL_ENDPOINT_API_KEY",
            "",
        ])

        path.write_text("\n".join(lines))

    def with_overrides(self, **kwargs: Any) -> "RecallConfig":
        """Return new config with specified overrides."""
        new_config = RecallConfig.__new__(RecallConfig)
        for key in dir(self):
            if not key.startswith("_") and not callable(getattr(self, key)):
                setattr(new_config, key, getattr(self, key))
        for key, value in kwargs.items():
            setattr(new_config, key, value)
        return new_config
