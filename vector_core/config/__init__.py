from .config_manager import (
    AppConfig,
    ConfigManager,
    get_config,
    init_config,
    ConfigValidationError,
    EmbeddingProviderType,
    Environment,
    LoggingConfig,
    LogLevel,
)

__all__ = [
    "AppConfig",
    "ConfigManager",
    "get_config",
    "init_config",
    "ConfigValidationError",
    "EmbeddingProviderType",
    "Environment",
    "LoggingConfig",
    "LogLevel",
]
