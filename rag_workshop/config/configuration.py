"""Configuration module for the workshop services.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml
- APP_ENV=test → config_test.yaml
- Default      → config.yaml

API keys are loaded from .env file.
Fails fast with clear error messages if required configuration is missing.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml
from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


SUPPORTED_PROVIDERS = ("openai", "azure")


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from rag_workshop/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable.

    Returns:
        Config filename:
        - APP_ENV=dev  → config_dev.yaml
        - APP_ENV=test → config_test.yaml
        - Default      → config.yaml
    """
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_required_env(key: str) -> str:
    """Get required environment variable or raise ConfigurationError."""
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please add it to your .env file."
        )
    return value


def _get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get optional environment variable with default."""
    return os.environ.get(key, default)


@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI / Azure OpenAI configuration."""
    provider: str
    api_key: str
    model: str
    embedding_model: str
    embedding_dimensions: int
    azure_endpoint: Optional[str]
    api_version: Optional[str]
    timeout: Optional[float]


@dataclass(frozen=True)
class IngestionConfig:
    """Document ingestion configuration."""
    chunk_size: int
    chunk_overlap: int
    upload_dir: str
    allowed_extensions: Tuple[str, ...]


@dataclass(frozen=True)
class RetrievalConfig:
    """Retrieval configuration."""
    max_results: int


@dataclass(frozen=True)
class GroupChatConfig:
    """Group chat configuration."""
    max_turns: int


@dataclass(frozen=True)
class A2AConfig:
    """Remote agent (A2A) client configuration."""
    server_url: str
    timeout: float


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    openai: OpenAIConfig
    ingestion: IngestionConfig
    retrieval: RetrievalConfig
    group_chat: GroupChatConfig
    a2a: A2AConfig
    logging: LoggingConfig


def _build_openai_config(openai_section: dict) -> OpenAIConfig:
    """Build the provider config, reading the secrets that match the provider."""
    provider = str(openai_section.get("provider", "openai")).lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            f"Unsupported openai.provider '{provider}'. "
            f"Expected one of: {', '.join(SUPPORTED_PROVIDERS)}."
        )

    embedding_section = openai_section.get("embedding_model", {})
    timeout = openai_section.get("timeout")

    if provider == "azure":
        api_key = _get_required_env("AZURE_OPENAI_API_KEY")
        azure_endpoint = openai_section.get("azure_endpoint") or _get_required_env("AZURE_OPENAI_ENDPOINT")
        api_version = openai_section.get("api_version", "2024-10-21")
        # Azure addresses models by deployment name
        model = _get_optional_env("AZURE_OPENAI_DEPLOYMENT", openai_section.get("model", "gpt-4o-mini"))
        embedding_model = _get_optional_env(
            "AZURE_OPENAI_EMBEDDING_DEPLOYMENT",
            embedding_section.get("name", "text-embedding-ada-002"),
        )
    else:
        api_key = _get_required_env("OPENAI_API_KEY")
        azure_endpoint = None
        api_version = None
        model = openai_section.get("model", "gpt-4o-mini")
        embedding_model = embedding_section.get("name", "text-embedding-3-small")

    return OpenAIConfig(
        provider=provider,
        api_key=api_key,
        model=model,
        embedding_model=embedding_model,
        embedding_dimensions=int(embedding_section.get("dimensions", 1536)),
        azure_endpoint=azure_endpoint,
        api_version=api_version,
        timeout=float(timeout) if timeout is not None else None,
    )


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from config.yaml for non-sensitive settings and .env for API keys.
    Fails fast if required configuration is missing.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    # Load environment variables from .env file
    load_dotenv()

    # Load YAML configuration
    yaml_config = _load_yaml_config()

    openai_config = _build_openai_config(yaml_config.get("openai", {}))

    # Build Ingestion config
    ingestion_section = yaml_config.get("ingestion", {})
    chunk_size = int(ingestion_section.get("chunk_size", 500))
    chunk_overlap = int(ingestion_section.get("chunk_overlap", 50))
    if chunk_size < 1 or not 0 <= chunk_overlap < chunk_size:
        raise ConfigurationError(
            f"Invalid chunking settings: chunk_size={chunk_size}, chunk_overlap={chunk_overlap}. "
            f"Overlap must be non-negative and smaller than the chunk size."
        )

    ingestion_config = IngestionConfig(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        upload_dir=ingestion_section.get("upload_dir", "uploads"),
        allowed_extensions=tuple(
            ext.lower() for ext in ingestion_section.get("allowed_extensions", [".txt", ".md"])
        ),
    )

    # Build Retrieval config
    retrieval_section = yaml_config.get("retrieval", {})

    max_results = int(retrieval_section.get("max_results", 5))
    if max_results < 1:
        raise ConfigurationError(f"retrieval.max_results must be at least 1, got {max_results}.")

    retrieval_config = RetrievalConfig(max_results=max_results)

    # Build GroupChat config
    group_chat_section = yaml_config.get("group_chat", {})

    max_turns = int(group_chat_section.get("max_turns", 6))
    if max_turns < 1:
        raise ConfigurationError(f"group_chat.max_turns must be at least 1, got {max_turns}.")

    group_chat_config = GroupChatConfig(max_turns=max_turns)

    # Build A2A client config
    a2a_section = yaml_config.get("a2a", {})

    a2a_config = A2AConfig(
        server_url=_get_optional_env("A2A_SERVER_URL", a2a_section.get("server_url", "http://localhost:8000")),
        timeout=float(a2a_section.get("timeout", 120)),
    )

    # Build Logging config
    logging_section = yaml_config.get("logging", {})

    logging_config = LoggingConfig(
        level=logging_section.get("level", "INFO"),
    )

    return AppConfig(
        openai=openai_config,
        ingestion=ingestion_config,
        retrieval=retrieval_config,
        group_chat=group_chat_config,
        a2a=a2a_config,
        logging=logging_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name.

    Returns:
        'dev', 'test', or 'default' based on APP_ENV.
    """
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
