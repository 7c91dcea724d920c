"""
Centralized Configuration Management System

This module provides the configuration used to build databases, embedding
providers and logging:
- Centralizes all configuration settings
- Supports environment-specific overrides
- Validates configuration on load
- Provides type-safe access to configuration values
"""

import os
import json
import yaml
import logging
from typing import Any, Dict, Optional, Union
from pathlib import Path
from dataclasses import dataclass, field
from enum import Enum


class Environment(Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EmbeddingProviderType(Enum):
    NONE = "none"
    HASHING = "hashing"
    SENTENCE_TRANSFORMERS = "sentence_transformers"
    OLLAMA = "ollama"


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


@dataclass
class StorageConfig:
    """Persistence configuration. An empty root means an in-memory database."""

    root: Optional[str] = None
    compress: bool = False
    pretty_print: bool = False


@dataclass
class CollectionConfig:
    """Defaults applied to collection operations"""

    concurrency: int = 4


@dataclass
class HashingEmbeddingConfig:
    """Feature-hashing embedding provider configuration"""

    dimension: int = 256
    seed: str = ""


@dataclass
class SentenceTransformersEmbeddingConfig:
    """Sentence Transformers embedding provider configuration"""

    model_name: str = "all-MiniLM-L6-v2"
    device: str = "cpu"
    max_batch_size: int = 64
    trust_remote_code: bool = False
    normalize_embeddings: bool = True
    cache_folder: Optional[str] = None


@dataclass
class OllamaEmbeddingConfig:
    """Ollama embedding provider configuration"""

    model_name: str = "nomic-embed-text"
    base_url: str = "http://localhost:11434"
    timeout: int = 60
    keep_alive: str = "5m"


@dataclass
class EmbeddingsConfig:
    """Embedding provider selection and per-provider settings"""

    provider: EmbeddingProviderType = EmbeddingProviderType.NONE
    hashing: HashingEmbeddingConfig = field(default_factory=HashingEmbeddingConfig)
    sentence_transformers: SentenceTransformersEmbeddingConfig = field(
        default_factory=SentenceTransformersEmbeddingConfig
    )
    ollama: OllamaEmbeddingConfig = field(default_factory=OllamaEmbeddingConfig)


@dataclass
class LoggingConfig:
    """Logging configuration"""

    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    json_format: bool = False
    enable_console: bool = True


@dataclass
class AppConfig:
    """Main application configuration"""

    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    storage: StorageConfig = field(default_factory=StorageConfig)
    collection: CollectionConfig = field(default_factory=CollectionConfig)
    embeddings: EmbeddingsConfig = field(default_factory=EmbeddingsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""

    pass


class ConfigManager:
    """
    Configuration manager with support for:
    - Environment-specific configurations
    - Configuration validation
    - Dot-path access and updates
    """

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path.cwd() / "config"

        self.config: AppConfig = AppConfig()
        self.logger = logging.getLogger(__name__)

        self._load_configuration()

    def _load_configuration(self):
        """Load configuration from multiple sources in priority order"""
        # 1. Defaults
        self.config = AppConfig()

        # 2. Base configuration file
        self._load_from_file("config.yaml")
        self._load_from_file("config.json")

        # 3. Environment-specific configuration
        env = os.getenv("ENVIRONMENT", "development").lower()
        self._load_from_file(f"environments/config.{env}.yaml")
        self._load_from_file(f"environments/config.{env}.json")

        # 4. Environment variables (highest priority)
        self._load_from_environment()

        self._validate_configuration()

    def _load_from_file(self, filename: str):
        """Load configuration from YAML/JSON file"""
        file_path = self.config_dir / filename
        if not file_path.exists():
            return

        try:
            with open(file_path, "r") as f:
                if filename.endswith(".yaml") or filename.endswith(".yml"):
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigValidationError(f"Failed to load configuration from {filename}: {e}") from e

        if data:
            self._update_config_from_dict(data)
            self.logger.info(f"Loaded configuration from {filename}")

    def _load_from_environment(self):
        """Load configuration from environment variables"""
        env_mappings = {
            # Environment
            "ENVIRONMENT": ("environment", lambda x: Environment(x.lower())),
            "DEBUG": ("debug", _parse_bool),
            # Storage
            "VECTOR_CORE_STORAGE_ROOT": ("storage.root", str),
            "VECTOR_CORE_COMPRESS": ("storage.compress", _parse_bool),
            "VECTOR_CORE_PRETTY_PRINT": ("storage.pretty_print", _parse_bool),
            # Collections
            "VECTOR_CORE_CONCURRENCY": ("collection.concurrency", int),
            # Embeddings
            "EMBEDDING_PROVIDER": (
                "embeddings.provider",
                lambda x: EmbeddingProviderType(x.lower()),
            ),
            "EMBEDDING_DIMENSION": ("embeddings.hashing.dimension", int),
            "SENTENCE_TRANSFORMERS_MODEL": ("embeddings.sentence_transformers.model_name", str),
            "OLLAMA_BASE_URL": ("embeddings.ollama.base_url", str),
            "OLLAMA_MODEL": ("embeddings.ollama.model_name", str),
            # Logging
            "LOG_LEVEL": ("logging.level", lambda x: LogLevel(x.upper())),
            "LOG_FORMAT": ("logging.format", str),
            "LOG_FILE": ("logging.file_path", str),
            "LOG_JSON": ("logging.json_format", _parse_bool),
        }

        for env_var, (config_path, converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                try:
                    self._set_nested_attr(self.config, config_path, converter(value))
                except (ValueError, TypeError) as e:
                    self.logger.warning(f"Invalid value for {env_var}: {value}, error: {e}")

    def _update_config_from_dict(self, data: Dict[str, Any], prefix: str = ""):
        """Update configuration from dictionary recursively"""
        for key, value in data.items():
            config_path = f"{prefix}.{key}" if prefix else key

            if isinstance(value, dict):
                self._update_config_from_dict(value, config_path)
            else:
                try:
                    # Enum conversions for file-based config
                    if config_path == "environment" and isinstance(value, str):
                        value = Environment(value.lower())
                    elif config_path == "logging.level" and isinstance(value, str):
                        value = LogLevel(value.upper())
                    elif config_path == "embeddings.provider" and isinstance(value, str):
                        value = EmbeddingProviderType(value.lower())

                    self._set_nested_attr(self.config, config_path, value)

                except AttributeError:
                    self.logger.warning(f"Unknown configuration key: {config_path}")
                except ValueError as e:
                    self.logger.warning(f"Invalid value for {config_path}: {value}, error: {e}")

    def _set_nested_attr(self, obj: Any, path: str, value: Any):
        """Set nested attribute using dot notation"""
        parts = path.split(".")
        for part in parts[:-1]:
            obj = getattr(obj, part)
        if not hasattr(obj, parts[-1]):
            raise AttributeError(path)
        setattr(obj, parts[-1], value)

    def _validate_configuration(self):
        """Validate configuration settings"""
        errors = []

        if not isinstance(self.config.collection.concurrency, int) or self.config.collection.concurrency < 1:
            errors.append("Collection concurrency must be a positive integer")

        if self.config.embeddings.sentence_transformers.max_batch_size < 1:
            errors.append("Sentence Transformers batch size must be positive")

        if self.config.storage.root is not None and not str(self.config.storage.root).strip():
            errors.append("Storage root must not be blank")

        if self.config.embeddings.hashing.dimension < 1:
            errors.append("Hashing embedding dimension must be positive")

        if self.config.embeddings.ollama.timeout <= 0:
            errors.append("Ollama timeout must be positive")

        if self.config.logging.backup_count < 0:
            errors.append("Log backup count must not be negative")

        if errors:
            raise ConfigValidationError(f"Configuration validation failed: {'; '.join(errors)}")

        self.logger.debug("Configuration validation passed")

    def reload_configuration(self):
        """Reload configuration from all sources"""
        self._load_configuration()
        self.logger.info("Configuration reloaded successfully")

    def get(self, path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        try:
            obj = self.config
            for part in path.split("."):
                obj = getattr(obj, part)
            return obj
        except AttributeError:
            return default

    def set(self, path: str, value: Any):
        """Set configuration value using dot notation"""
        self._set_nested_attr(self.config, path, value)
        self._validate_configuration()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""

        def _asdict_recursive(obj):
            if hasattr(obj, "__dict__"):
                result = {}
                for key, value in obj.__dict__.items():
                    if isinstance(value, Enum):
                        result[key] = value.value
                    elif hasattr(value, "__dict__"):
                        result[key] = _asdict_recursive(value)
                    else:
                        result[key] = value
                return result
            return obj

        return _asdict_recursive(self.config)

    def save_to_file(self, filename: str, format: str = "yaml"):
        """Save current configuration to file"""
        file_path = self.config_dir / filename
        file_path.parent.mkdir(parents=True, exist_ok=True)
        config_dict = self.to_dict()

        with open(file_path, "w") as f:
            if format.lower() == "yaml":
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
            else:
                json.dump(config_dict, f, indent=2)

        self.logger.info(f"Configuration saved to {filename}")

    def get_embedding_config(self) -> Dict[str, Any]:
        """
        Get embedding configuration for the provider factory.

        Returns:
            Dictionary with provider and provider_config keys
        """
        embeddings_config = self.config.embeddings
        provider_type = embeddings_config.provider.value

        provider_config = {}
        if provider_type == "hashing":
            hashing_config = embeddings_config.hashing
            provider_config = {
                "dimension": hashing_config.dimension,
                "seed": hashing_config.seed,
            }
        elif provider_type == "sentence_transformers":
            st_config = embeddings_config.sentence_transformers
            provider_config = {
                "model_name": st_config.model_name,
                "device": st_config.device,
                "max_batch_size": st_config.max_batch_size,
                "trust_remote_code": st_config.trust_remote_code,
                "normalize_embeddings": st_config.normalize_embeddings,
                "cache_folder": st_config.cache_folder,
            }
        elif provider_type == "ollama":
            ollama_config = embeddings_config.ollama
            provider_config = {
                "model_name": ollama_config.model_name,
                "base_url": ollama_config.base_url,
                "timeout": ollama_config.timeout,
                "keep_alive": ollama_config.keep_alive,
            }

        return {"provider": provider_type, "provider_config": provider_config}


# Global configuration instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global configuration manager instance"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def init_config(config_dir: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize the global configuration manager"""
    global _config_manager
    _config_manager = ConfigManager(config_dir)
    return _config_manager
