"""
Factory for building a Database and its embedding provider from configuration.
"""

import logging
from typing import Optional

from vector_core.config import ConfigManager, get_config
from vector_core.embeddings.interfaces import EmbeddingProviderInterface
from vector_core.embeddings.providers import create_embedding_provider
from vector_core.store.database import Database

logger = logging.getLogger(__name__)


def create_database(config: Optional[ConfigManager] = None) -> Database:
    """
    Create a Database using the storage settings of the configuration.

    Args:
        config: Configuration manager; the global one when omitted

    Returns:
        A persistent database when ``storage.root`` is set, else an in-memory one;
        either way its collections default to ``collection.concurrency``
    """
    config = config or get_config()
    storage = config.config.storage
    concurrency = config.config.collection.concurrency

    if storage.root:
        logger.info(f"Opening persistent database at {storage.root} (compress={storage.compress})")
        return Database(
            storage_root=storage.root,
            compress=storage.compress,
            pretty_print=storage.pretty_print,
            concurrency=concurrency,
        )

    logger.info("Creating in-memory database")
    return Database(concurrency=concurrency)


def create_configured_provider(config: Optional[ConfigManager] = None) -> EmbeddingProviderInterface:
    """Create the embedding provider selected in the configuration."""
    config = config or get_config()
    embedding_config = config.get_embedding_config()
    return create_embedding_provider(
        embedding_config["provider"], embedding_config["provider_config"]
    )
