"""
Document store for a single named collection.

A Collection keeps every document in memory, guarded by a reader/writer lock.
Embeddings missing from incoming documents are computed by the collection's
embedding provider before the write lock is taken, so slow providers never
block queries. When a storage backend is attached, each committed batch is
written to disk before it becomes visible in memory.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Mapping, Optional

import numpy as np

from vector_core.core.exceptions import (
    CollectionNotFoundError,
    ContextCanceledError,
    DimensionMismatchError,
    EmbeddingProviderError,
    EmptyQueryEmbeddingError,
)
from vector_core.embeddings.interfaces import EmbeddingProviderInterface, NullEmbeddingProvider
from vector_core.model.document import Document, EmbeddingLike, QueryResult, to_embedding
from vector_core.monitoring.structured_logger import OperationLogger, get_logger
from vector_core.query.filter_engine import (
    matches_content,
    matches_metadata,
    validate_content_filter,
    validate_metadata_filter,
)
from vector_core.query.result_ranker import top_k
from vector_core.query.vector_math import cosine_similarity
from vector_core.storage.interfaces.collection_storage_interface import CollectionStorageInterface
from vector_core.store.rwlock import ReadWriteLock


def _needs_embedding(document: Document) -> bool:
    return document.embedding is None or document.embedding.size == 0


class Collection:
    """
    A named set of documents searchable by cosine similarity.

    Collections are created through a Database; constructing one directly gives
    an unregistered in-memory collection.
    """

    def __init__(
        self,
        name: str,
        metadata: Optional[Mapping[str, str]] = None,
        embedding_provider: Optional[EmbeddingProviderInterface] = None,
        storage: Optional[CollectionStorageInterface] = None,
        dimension: Optional[int] = None,
        concurrency: int = 1,
    ):
        """
        Initialize a collection.

        Args:
            name: Collection name, unique within its database
            metadata: Descriptive key/value pairs for the collection itself
            embedding_provider: Provider used for documents without embeddings
            storage: Backend that persists committed batches, if any
            dimension: Known embedding dimension; when omitted, the provider's
                declared dimension is used, else the first document fixes it
            concurrency: Provider calls in flight when add_documents is not told otherwise
        """
        self._name = name
        self._metadata: Dict[str, str] = dict(metadata or {})
        self._provider = embedding_provider or NullEmbeddingProvider()
        self._storage = storage
        self._dimension = dimension if dimension is not None else self._provider.dimension
        self._concurrency = max(1, int(concurrency))
        self._documents: Dict[str, Document] = {}
        self._lock = ReadWriteLock()
        self._closed = False

        self.logger = logging.getLogger(__name__)
        self._structured_logger = get_logger(__name__, component="collection").with_context(
            collection=name
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def metadata(self) -> Dict[str, str]:
        return dict(self._metadata)

    @property
    def dimension(self) -> Optional[int]:
        """Embedding length shared by every document, or None while unset."""
        with self._lock.read_lock():
            return self._dimension

    @property
    def concurrency(self) -> int:
        """Default number of provider calls in flight for add_documents."""
        return self._concurrency

    @property
    def embedding_provider(self) -> EmbeddingProviderInterface:
        return self._provider

    def set_embedding_provider(self, provider: EmbeddingProviderInterface) -> None:
        """Replace the provider used for future writes and text queries."""
        self._provider = provider

    @property
    def closed(self) -> bool:
        return self._closed

    # Writes
    async def add_documents(
        self,
        documents: Iterable[Document],
        concurrency: Optional[int] = None,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Add or overwrite a batch of documents.

        Documents without an embedding are embedded first, with at most
        ``concurrency`` provider calls in flight. The batch is then validated
        and committed as a whole: either every document becomes visible or
        none does. The commit itself runs on the default executor, since it
        waits for the write lock and may write to disk.

        Args:
            documents: Documents to store; a later duplicate ID replaces an earlier one
            concurrency: Maximum simultaneous provider calls (values below 1 mean 1);
                defaults to the collection's configured concurrency
            timeout: Seconds to wait for embeddings before giving up
            cancel_event: Setting this event aborts the batch while embedding

        Raises:
            ValueError: If a document has a blank ID
            EmbeddingProviderError: If the provider fails for any document
            DimensionMismatchError: If an embedding has the wrong length
            ContextCanceledError: If the timeout expires or cancel_event is set
            PersistenceIOError: If the batch cannot be written to disk
            CollectionNotFoundError: If the collection has been deleted
        """
        self._ensure_open()
        documents = list(documents)
        if not documents:
            return

        for document in documents:
            if not isinstance(document, Document):
                raise TypeError(f"Expected Document, got {type(document).__name__}")
            if not document.id.strip():
                raise ValueError("Document ID must not be empty")

        concurrency = self._concurrency if concurrency is None else max(1, int(concurrency))

        operation = OperationLogger(self._structured_logger, "add_documents")
        operation.start(batch_size=len(documents), concurrency=concurrency)
        with operation:
            embedded = await self._embed_missing(documents, concurrency, timeout, cancel_event)
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._commit, embedded)

    async def add_document(self, document: Document) -> None:
        """Add or overwrite a single document."""
        await self.add_documents([document], concurrency=1)

    def delete(self, document_id: str) -> bool:
        """
        Remove a document by ID, including its persisted record.

        Returns:
            True if the document existed
        """
        with self._lock.write_lock():
            self._ensure_open()
            if self._storage is not None:
                self._storage.delete_document(self._name, document_id)
            removed = self._documents.pop(document_id, None) is not None

        if removed:
            self.logger.debug(f"Deleted document {document_id!r} from collection '{self._name}'")
        return removed

    # Reads
    def query_embedding(
        self,
        query_embedding: EmbeddingLike,
        n_results: int,
        where: Optional[Mapping[str, str]] = None,
        where_document: Optional[Mapping[str, str]] = None,
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[QueryResult]:
        """
        Return the documents most similar to an embedding.

        Args:
            query_embedding: Vector with the collection's dimension
            n_results: Maximum number of results (at least 1)
            where: Metadata equality filter; every key must match
            where_document: Content filter, ``{"$contains": "text"}``
            cancel_event: Checked once before scanning

        Returns:
            Up to ``n_results`` results by similarity descending, ties broken by ID

        Raises:
            ValueError: If n_results is below 1 or the query holds NaN or infinity
            EmptyQueryEmbeddingError: If the query embedding is empty
            InvalidFilterError: If a filter is malformed
            DimensionMismatchError: If the query length differs from the collection dimension
            ContextCanceledError: If cancel_event is already set
        """
        self._ensure_open()
        if cancel_event is not None and cancel_event.is_set():
            raise ContextCanceledError("Query cancelled before scanning")

        if isinstance(n_results, bool) or not isinstance(n_results, int) or n_results < 1:
            raise ValueError(f"n_results must be a positive integer, got {n_results!r}")

        if query_embedding is None:
            raise EmptyQueryEmbeddingError()
        query = to_embedding(query_embedding)
        if query.size == 0:
            raise EmptyQueryEmbeddingError()

        validate_metadata_filter(where)
        validate_content_filter(where_document)

        with self._lock.read_lock():
            self._ensure_open()
            if not self._documents:
                return []
            if query.shape[0] != self._dimension:
                raise DimensionMismatchError(self._dimension, int(query.shape[0]))

            candidates = (
                QueryResult(
                    id=document.id,
                    content=document.content,
                    metadata=dict(document.metadata),
                    similarity=cosine_similarity(query, document.embedding),
                )
                for document in self._documents.values()
                if matches_metadata(document, where) and matches_content(document, where_document)
            )
            return top_k(candidates, n_results)

    async def query(
        self,
        query_text: str,
        n_results: int,
        where: Optional[Mapping[str, str]] = None,
        where_document: Optional[Mapping[str, str]] = None,
        *,
        timeout: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> List[QueryResult]:
        """
        Embed ``query_text`` with the collection's provider and run a similarity query.

        Raises:
            EmbeddingProviderError: If the provider fails
            ContextCanceledError: If the timeout expires or cancel_event is set
        """
        self._ensure_open()
        validate_metadata_filter(where)
        validate_content_filter(where_document)

        future = asyncio.ensure_future(self._embed_text(query_text))
        try:
            embedding = await self._wait_cancellable(future, timeout, cancel_event)
        finally:
            if not future.done():
                future.cancel()
                await asyncio.gather(future, return_exceptions=True)

        return self.query_embedding(
            embedding, n_results, where, where_document, cancel_event=cancel_event
        )

    def get_by_id(self, document_id: str) -> Optional[Document]:
        """Return the stored document with this ID, or None."""
        with self._lock.read_lock():
            self._ensure_open()
            return self._documents.get(document_id)

    def count(self) -> int:
        """Number of stored documents."""
        with self._lock.read_lock():
            self._ensure_open()
            return len(self._documents)

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f"Collection(name={self._name!r}, dimension={self._dimension}, closed={self._closed})"

    # Lifecycle used by Database
    def _restore(self, documents: Iterable[Document]) -> None:
        """Load previously persisted documents without writing them back."""
        with self._lock.write_lock():
            for document in documents:
                self._documents[document.id] = document

    def close(self) -> None:
        """Detach the collection; every later operation raises CollectionNotFoundError."""
        with self._lock.write_lock():
            self._closed = True
            self._documents.clear()

    # Private helper methods
    def _ensure_open(self) -> None:
        if self._closed:
            raise CollectionNotFoundError(self._name)

    async def _embed_text(self, text: str, document_id: Optional[str] = None) -> np.ndarray:
        """Call the provider and normalise its failures into EmbeddingProviderError."""
        details = {"collection": self._name}
        if document_id is not None:
            details["document_id"] = document_id

        try:
            vector = await self._provider.generate_embedding(text)
        except EmbeddingProviderError:
            raise
        except Exception as e:
            raise EmbeddingProviderError(
                f"Embedding provider failed: {e}",
                provider=self._provider.provider_name,
                details=details,
            ) from e

        try:
            embedding = to_embedding(vector)
        except (TypeError, ValueError) as e:
            raise EmbeddingProviderError(
                f"Embedding provider returned an invalid vector: {e}",
                provider=self._provider.provider_name,
                details=details,
            ) from e

        if embedding.size == 0:
            raise EmbeddingProviderError(
                "Embedding provider returned an empty vector",
                provider=self._provider.provider_name,
                details=details,
            )
        return embedding

    async def _embed_missing(
        self,
        documents: List[Document],
        concurrency: int,
        timeout: Optional[float],
        cancel_event: Optional[asyncio.Event],
    ) -> List[Document]:
        """Return the batch with every missing embedding filled in."""
        pending = [(index, doc) for index, doc in enumerate(documents) if _needs_embedding(doc)]
        if not pending:
            return documents
        if cancel_event is not None and cancel_event.is_set():
            raise ContextCanceledError("Batch cancelled before embedding")

        results = list(documents)
        queue: asyncio.Queue = asyncio.Queue()
        for item in pending:
            queue.put_nowait(item)

        async def worker():
            while True:
                try:
                    index, document = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return
                embedding = await self._embed_text(document.content, document.id)
                results[index] = document.with_embedding(embedding)

        workers = [asyncio.ensure_future(worker()) for _ in range(min(concurrency, len(pending)))]
        gathered = asyncio.gather(*workers)
        try:
            await self._wait_cancellable(gathered, timeout, cancel_event)
        finally:
            for task in workers:
                task.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            if gathered.done() and not gathered.cancelled():
                gathered.exception()

        self.logger.debug(
            f"Embedded {len(pending)} documents for collection '{self._name}' "
            f"with {len(workers)} workers"
        )
        return results

    async def _wait_cancellable(
        self,
        future: asyncio.Future,
        timeout: Optional[float],
        cancel_event: Optional[asyncio.Event],
    ):
        """Wait for ``future`` unless the timeout expires or cancel_event is set first."""
        waiters = {future}
        cancel_waiter = None
        if cancel_event is not None:
            cancel_waiter = asyncio.ensure_future(cancel_event.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            if cancel_waiter is not None and not cancel_waiter.done():
                cancel_waiter.cancel()
                await asyncio.gather(cancel_waiter, return_exceptions=True)

        if future not in done:
            if cancel_waiter is not None and cancel_waiter in done:
                raise ContextCanceledError("Operation cancelled")
            raise ContextCanceledError(f"Operation timed out after {timeout} seconds")
        return future.result()

    def _commit(self, documents: List[Document]) -> None:
        """Validate dimensions, persist, then publish the batch under the write lock."""
        with self._lock.write_lock():
            self._ensure_open()

            dimension = self._dimension
            batch: Dict[str, Document] = {}
            for document in documents:
                if dimension is None:
                    dimension = document.dimension
                elif document.dimension != dimension:
                    raise DimensionMismatchError(dimension, document.dimension, document.id)
                batch[document.id] = document

            if self._storage is not None:
                descriptor = self._metadata if dimension != self._dimension else None
                self._storage.write_documents(
                    self._name, batch.values(), metadata=descriptor, dimension=dimension
                )

            self._documents.update(batch)
            self._dimension = dimension
