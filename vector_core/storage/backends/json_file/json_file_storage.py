"""
JSON file storage implementation for persistent collections.

This module provides a simple file-based implementation of the
CollectionStorageInterface. Each collection lives in its own directory under
the storage root; the descriptor is kept in ``collection.json`` and every
document in a separate record named after the SHA-256 of its ID.
"""
import base64
import binascii
import gzip
import hashlib
import json
import logging
import os
import shutil
import tempfile
import zlib
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from vector_core.core.exceptions import PersistenceIOError
from vector_core.model.document import Document
from vector_core.storage.interfaces.collection_storage_interface import (
    CollectionStorageInterface,
    PersistedCollection,
)

FORMAT_VERSION = 1
DESCRIPTOR_FILE = "collection.json"
TEMP_PREFIX = ".tmp-"
RECORD_SUFFIX = ".json"
COMPRESSED_SUFFIX = ".json.gz"


def encode_embedding(embedding: np.ndarray) -> str:
    """Encode an embedding as base64 of its little-endian float32 bytes."""
    raw = np.asarray(embedding, dtype="<f4").tobytes()
    return base64.b64encode(raw).decode("ascii")


def decode_embedding(encoded: str) -> np.ndarray:
    """
    Decode an embedding written by encode_embedding.

    Raises:
        ValueError: If the text is not valid base64 or not a whole number of floats
    """
    try:
        raw = base64.b64decode(encoded.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"invalid base64 embedding: {e}") from e
    if not raw or len(raw) % 4:
        raise ValueError(f"embedding payload of {len(raw)} bytes is not a float32 vector")
    return np.frombuffer(raw, dtype="<f4").astype(np.float32)


def record_name(document_id: str) -> str:
    """File stem for a document record."""
    return hashlib.sha256(document_id.encode("utf-8")).hexdigest()


class JsonFileStorage(CollectionStorageInterface):
    """
    JSON file-based implementation of the CollectionStorageInterface.

    Every file is written to a temporary file in the target directory,
    fsynced, then moved over the target. A batch of records is staged in full
    before any of them is moved, so a failed batch leaves the previous records
    in place.
    """

    def __init__(self, directory: str = "./data/vectors", compress: bool = False,
                 pretty_print: bool = False):
        """
        Initialize JsonFileStorage with directory and formatting options.

        Args:
            directory: Root directory holding one sub-directory per collection
            compress: Whether new document records are gzip-compressed
            pretty_print: Whether to indent JSON files for readability
        """
        self.directory = Path(directory)
        self.compress = compress
        self.pretty_print = pretty_print
        self.logger = logging.getLogger(__name__)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceIOError(
                f"Cannot create storage directory: {e}", path=str(self.directory)
            ) from e

    def collection_path(self, name: str) -> Path:
        """Directory holding the given collection."""
        return self.directory / name

    # Loading
    def load_collections(self) -> List[PersistedCollection]:
        """Read every collection directory under the root."""
        collections = []
        try:
            entries = sorted(self.directory.iterdir())
        except OSError as e:
            raise PersistenceIOError(
                f"Cannot list storage directory: {e}", path=str(self.directory)
            ) from e

        for entry in entries:
            if not entry.is_dir() or not (entry / DESCRIPTOR_FILE).is_file():
                continue
            collections.append(self._load_collection(entry))

        self.logger.info(f"Loaded {len(collections)} collections from {self.directory}")
        return collections

    def _load_collection(self, path: Path) -> PersistedCollection:
        descriptor_path = path / DESCRIPTOR_FILE
        descriptor = self._read_json(descriptor_path)

        name = descriptor.get("name")
        metadata = descriptor.get("metadata") or {}
        dimension = descriptor.get("dimension")
        if name != path.name:
            raise PersistenceIOError(
                f"Collection descriptor names {name!r} but lives in {path.name!r}",
                path=str(descriptor_path),
            )
        if not isinstance(metadata, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in metadata.items()
        ):
            raise PersistenceIOError("Collection metadata must map strings to strings",
                                     path=str(descriptor_path))
        if dimension is not None and (not isinstance(dimension, int) or dimension < 1):
            raise PersistenceIOError(f"Invalid collection dimension: {dimension!r}",
                                     path=str(descriptor_path))

        documents: Dict[str, Document] = {}
        for record_path in sorted(path.iterdir()):
            file_name = record_path.name
            if file_name == DESCRIPTOR_FILE or file_name.startswith(TEMP_PREFIX):
                continue
            if not (file_name.endswith(RECORD_SUFFIX) or file_name.endswith(COMPRESSED_SUFFIX)):
                continue

            document = self._load_document(record_path)
            if dimension is None:
                dimension = document.dimension
            elif document.dimension != dimension:
                raise PersistenceIOError(
                    f"Document {document.id!r} has dimension {document.dimension}, "
                    f"collection has {dimension}",
                    path=str(record_path),
                )
            documents[document.id] = document

        self.logger.debug(f"Loaded collection '{name}' with {len(documents)} documents")
        return PersistedCollection(
            name=name,
            metadata=dict(metadata),
            dimension=dimension,
            documents=list(documents.values()),
        )

    def _load_document(self, path: Path) -> Document:
        record = self._read_json(path)
        try:
            embedding = decode_embedding(record["embedding"])
            return Document(
                id=record["id"],
                content=record.get("content", ""),
                embedding=embedding,
                metadata=record.get("metadata") or {},
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PersistenceIOError(f"Corrupt document record: {e}", path=str(path)) from e

    def _read_json(self, path: Path) -> Dict[str, Any]:
        try:
            if path.name.endswith(COMPRESSED_SUFFIX):
                with gzip.open(path, "rt", encoding="utf-8") as f:
                    data = json.load(f)
            else:
                with open(path, "r", encoding="utf-8") as f:
                    data = json.load(f)
        except (OSError, EOFError, zlib.error, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceIOError(f"Cannot read {path.name}: {e}", path=str(path)) from e

        if not isinstance(data, dict):
            raise PersistenceIOError(f"Expected a JSON object in {path.name}", path=str(path))
        return data

    # Writing
    def save_collection(self, name: str, metadata: Dict[str, str],
                        dimension: Optional[int]) -> None:
        """Write the collection descriptor, creating the directory if needed."""
        path = self.collection_path(name)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceIOError(f"Cannot create collection directory: {e}",
                                     path=str(path)) from e

        self._write_atomic(path / DESCRIPTOR_FILE, self._descriptor(name, metadata, dimension))

    def write_documents(self, collection_name: str, documents: Iterable[Document],
                        metadata: Optional[Dict[str, str]] = None,
                        dimension: Optional[int] = None) -> None:
        """
        Write one record per document as a single batch.

        Every file of the batch is first staged as a fsynced temporary file.
        Only once all of them are staged are they moved into place; if a move
        fails, the files already replaced get their previous contents back.
        """
        path = self.collection_path(collection_name)
        suffix, stale_suffix = (
            (COMPRESSED_SUFFIX, RECORD_SUFFIX) if self.compress else (RECORD_SUFFIX, COMPRESSED_SUFFIX)
        )

        changes: List[Tuple[Path, bytes, Optional[Path]]] = []
        for document in documents:
            record = {
                "id": document.id,
                "content": document.content,
                "metadata": dict(document.metadata),
                "embedding": encode_embedding(document.embedding),
            }
            data = self._dump(record)
            if self.compress:
                data = gzip.compress(data)

            stem = record_name(document.id)
            changes.append((path / (stem + suffix), data, path / (stem + stale_suffix)))

        if metadata is not None:
            changes.append(
                (path / DESCRIPTOR_FILE, self._descriptor(collection_name, metadata, dimension), None)
            )

        staged: List[Tuple[str, Path, Optional[Path]]] = []
        try:
            for target, data, stale in changes:
                staged.append((self._stage(target, data), target, stale))
        except PersistenceIOError:
            self._discard(tmp_name for tmp_name, _, _ in staged)
            raise

        undo: List[Tuple[Path, Optional[bytes]]] = []
        installed = 0
        try:
            for tmp_name, target, stale in staged:
                undo.append((target, self._snapshot(target)))
                self._install(tmp_name, target)
                installed += 1
                if stale is not None and stale.exists():
                    undo.append((stale, self._snapshot(stale)))
                    self._remove(stale)
        except PersistenceIOError:
            self._discard(tmp_name for tmp_name, _, _ in staged[installed:])
            self._rollback(undo)
            raise

        self.logger.debug(f"Wrote {len(changes)} files to collection '{collection_name}'")

    def delete_document(self, collection_name: str, document_id: str) -> bool:
        path = self.collection_path(collection_name)
        stem = record_name(document_id)
        removed = self._remove(path / (stem + RECORD_SUFFIX))
        removed = self._remove(path / (stem + COMPRESSED_SUFFIX)) or removed
        return removed

    def delete_collection(self, name: str) -> bool:
        path = self.collection_path(name)
        if not path.exists():
            return False
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise PersistenceIOError(f"Cannot delete collection directory: {e}",
                                     path=str(path)) from e
        self.logger.info(f"Deleted collection directory {path}")
        return True

    # Private helper methods
    def _dump(self, data: Dict[str, Any]) -> bytes:
        if self.pretty_print:
            return json.dumps(data, indent=2).encode("utf-8")
        return json.dumps(data).encode("utf-8")

    def _descriptor(self, name: str, metadata: Dict[str, str], dimension: Optional[int]) -> bytes:
        return self._dump({
            "name": name,
            "metadata": dict(metadata),
            "dimension": dimension,
            "format_version": FORMAT_VERSION,
        })

    def _stage(self, target: Path, data: bytes) -> str:
        """Write data to a fsynced temporary file beside target and return its path."""
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=str(target.parent))
        except OSError as e:
            raise PersistenceIOError(f"Cannot write {target.name}: {e}", path=str(target)) from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            self._discard([tmp_name])
            raise PersistenceIOError(f"Cannot write {target.name}: {e}", path=str(target)) from e
        return tmp_name

    def _install(self, tmp_name: str, target: Path) -> None:
        """Move a staged file over target."""
        try:
            os.replace(tmp_name, target)
        except OSError as e:
            raise PersistenceIOError(f"Cannot write {target.name}: {e}", path=str(target)) from e

    def _write_atomic(self, target: Path, data: bytes) -> None:
        """Write data to target through a fsynced temporary file and os.replace."""
        tmp_name = self._stage(target, data)
        try:
            self._install(tmp_name, target)
        except PersistenceIOError:
            self._discard([tmp_name])
            raise

    def _snapshot(self, path: Path) -> Optional[bytes]:
        """Current contents of path, or None when it does not exist."""
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceIOError(f"Cannot read {path.name}: {e}", path=str(path)) from e

    def _rollback(self, undo: List[Tuple[Path, Optional[bytes]]]) -> None:
        """Put back the files changed by an aborted batch, newest change first."""
        for path, previous in reversed(undo):
            try:
                if previous is None:
                    self._remove(path)
                else:
                    self._write_atomic(path, previous)
            except PersistenceIOError as e:
                self.logger.error(f"Failed to restore {path.name} after an aborted batch: {e}")

    def _discard(self, tmp_names: Iterable[str]) -> None:
        for tmp_name in tmp_names:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            except OSError as e:
                self.logger.warning(f"Cannot remove temporary file {tmp_name}: {e}")

    def _remove(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceIOError(f"Cannot remove {path.name}: {e}", path=str(path)) from e
