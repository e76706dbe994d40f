"""Configuration module."""

from rag_workshop.config.configuration import (
    A2AConfig,
    AppConfig,
    ConfigurationError,
    GroupChatConfig,
    IngestionConfig,
    LoggingConfig,
    OpenAIConfig,
    RetrievalConfig,
    get_config,
    get_environment,
    load_config,
    reset_config,
)

__all__ = [
    "A2AConfig",
    "AppConfig",
    "ConfigurationError",
    "GroupChatConfig",
    "IngestionConfig",
    "LoggingConfig",
    "OpenAIConfig",
    "RetrievalConfig",
    "get_config",
    "get_environment",
    "load_config",
    "reset_config",
]
