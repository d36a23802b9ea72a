"""Storage - document store, blob store and typed collections."""

from .blobs import BlobStore, LocalBlobStore
from .documents import AgentFSDocumentStore, DocumentStore, MemoryDocumentStore
from .learning_store import LearningStore

__all__ = [
    "DocumentStore",
    "MemoryDocumentStore",
    "AgentFSDocumentStore",
    "BlobStore",
    "LocalBlobStore",
    "LearningStore",
]
