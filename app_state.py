"""Core module - shared application state.

Singletons are created lazily on first use and released by ``cleanup()``
on shutdown.
"""

from __future__ import annotations

from typing import Optional

from classroom.core import StoreBackend, get_config, get_logger
from classroom.engine import (
    AssignmentService,
    CodingLabService,
    ContentGenerator,
    QuizAttemptRegistry,
    QuizAuthoringService,
    QuizScoringEngine,
)
from classroom.llm import GenerationClientFactory
from classroom.storage import (
    AgentFSDocumentStore,
    BlobStore,
    DocumentStore,
    LearningStore,
    LocalBlobStore,
    MemoryDocumentStore,
)

logger = get_logger("app_state")

# =============================================================================
# GLOBAL INSTANCES
# =============================================================================

documents: Optional[DocumentStore] = None
store: Optional[LearningStore] = None
blobs: Optional[BlobStore] = None
registry: Optional[QuizAttemptRegistry] = None
generator: Optional[ContentGenerator] = None
assignments: Optional[AssignmentService] = None
authoring: Optional[QuizAuthoringService] = None
coding_lab: Optional[CodingLabService] = None


# =============================================================================
# ACCESSORS
# =============================================================================


async def get_store() -> LearningStore:
    """Get the learning store, opening the configured backend on first use."""
    global documents, store
    if store is None:
        config = get_config()
        if config.store_backend == StoreBackend.AGENTFS:
            documents = await AgentFSDocumentStore.open(config.agentfs_id)
        else:
            documents = MemoryDocumentStore()
        store = LearningStore(documents)
        logger.info("Store ready", backend=config.store_backend.value)
    return store


def get_blobs() -> BlobStore:
    global blobs
    if blobs is None:
        blobs = LocalBlobStore(get_config().blob_dir)
    return blobs


async def get_registry() -> QuizAttemptRegistry:
    global registry
    if registry is None:
        config = get_config()
        registry = QuizAttemptRegistry(
            await get_store(),
            QuizScoringEngine(pass_mark=config.pass_mark),
            allow_late_start=config.allow_late_start,
            tick_interval=config.tick_interval,
            session_ttl=config.session_ttl,
        )
    return registry


def get_generator() -> ContentGenerator:
    global generator
    if generator is None:
        generator = ContentGenerator(GenerationClientFactory.create(get_config()))
    return generator


async def get_assignments() -> AssignmentService:
    global assignments
    if assignments is None:
        assignments = AssignmentService(await get_store(), get_blobs())
    return assignments


async def get_authoring() -> QuizAuthoringService:
    global authoring
    if authoring is None:
        authoring = QuizAuthoringService(
            await get_store(), required_questions=get_config().quiz_question_count
        )
    return authoring


async def get_coding_lab() -> CodingLabService:
    global coding_lab
    if coding_lab is None:
        coding_lab = CodingLabService(await get_store())
    return coding_lab


# =============================================================================
# LIFECYCLE
# =============================================================================


async def cleanup():
    """Cancel live countdowns and close the store."""
    global documents, store, blobs, registry, generator, assignments, authoring, coding_lab
    if registry is not None:
        registry.close()
    if documents is not None:
        try:
            await documents.close()
        except Exception as e:
            logger.warning("Error closing store", error=str(e))
    documents = store = blobs = registry = generator = assignments = None
    authoring = coding_lab = None
