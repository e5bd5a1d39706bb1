"""
===============================================================================
TARJETA CRC — grounded_rag/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (índice, registro, chunker, adapters, use cases).
  - Mantener singletons de proceso con lru_cache (índice y registro incluidos).
  - Elegir fakes vs Google según Settings.
  - Sembrar el corpus demo una sola vez por proceso.
  - Resetear el estado compartido (shutdown / tests).

Colaboradores:
  - crosscutting.config.get_settings
  - infrastructure.* (implementaciones)
  - application.usecases.* (casos de uso)

Notas:
  - Sin lógica de negocio y sin dependencia de FastAPI.
  - Los use cases se construyen por request (son livianos); lo costoso y lo
    compartido (índice, clientes del provider) se cachea.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache
from threading import Lock

from .application.dev_seed import seed_default_documents
from .application.usecases import (
    AnswerQueryUseCase,
    EvidenceRetriever,
    IngestTextUseCase,
    ListDocumentsUseCase,
)
from .crosscutting.config import get_settings
from .domain.services import EmbeddingService, GenerationService, TextChunkerService
from .infrastructure.repositories import InMemoryDocumentRegistry, InMemoryVectorStore
from .infrastructure.services import (
    FakeEmbeddingService,
    FakeGenerationService,
    GoogleEmbeddingService,
    GoogleGenerationService,
)
from .infrastructure.text import ParagraphTextChunker

_seed_lock = Lock()
_seeded = False


# =============================================================================
# Estado compartido (singletons de proceso)
# =============================================================================


@lru_cache(maxsize=1)
def get_vector_store() -> InMemoryVectorStore:
    """Índice único del proceso."""
    settings = get_settings()
    return InMemoryVectorStore(
        strict_dimensions=settings.vector_store_strict_dimensions
    )


@lru_cache(maxsize=1)
def get_document_registry() -> InMemoryDocumentRegistry:
    return InMemoryDocumentRegistry()


# =============================================================================
# Servicios
# =============================================================================


@lru_cache(maxsize=1)
def get_text_chunker() -> TextChunkerService:
    settings = get_settings()
    return ParagraphTextChunker(
        max_tokens_per_chunk=settings.chunk_max_tokens,
        prefer_paragraph_boundaries=settings.chunk_prefer_paragraph_boundaries,
    )


@lru_cache(maxsize=1)
def get_embedding_service() -> EmbeddingService:
    """Fake determinista en CI/dev; Google GenAI en el resto."""
    settings = get_settings()
    if settings.fake_embeddings:
        return FakeEmbeddingService()
    return GoogleEmbeddingService(
        api_key=settings.google_api_key,
        model_id=settings.embedding_model_id,
        base_url=settings.google_base_url or None,
    )


@lru_cache(maxsize=1)
def get_generation_service() -> GenerationService:
    settings = get_settings()
    if settings.fake_llm:
        return FakeGenerationService()
    return GoogleGenerationService(
        api_key=settings.google_api_key,
        model_id=settings.generation_model_id,
        base_url=settings.google_base_url or None,
    )


# =============================================================================
# Use cases (por request)
# =============================================================================


def get_evidence_retriever() -> EvidenceRetriever:
    settings = get_settings()
    return EvidenceRetriever(
        embedding_service=get_embedding_service(),
        vector_store=get_vector_store(),
        min_relevance_score=settings.rag_min_relevance_score,
    )


def get_answer_query_use_case() -> AnswerQueryUseCase:
    settings = get_settings()
    return AnswerQueryUseCase(
        retriever=get_evidence_retriever(),
        generation_service=get_generation_service(),
        low_confidence_threshold=settings.rag_low_confidence_threshold,
        max_excerpt_chars=settings.rag_max_excerpt_chars,
        max_generation_attempts=settings.rag_max_generation_attempts,
        max_query_chars=settings.max_query_chars,
        max_top_k=settings.max_top_k,
    )


def get_ingest_text_use_case() -> IngestTextUseCase:
    return IngestTextUseCase(
        chunker=get_text_chunker(),
        embedding_service=get_embedding_service(),
        vector_store=get_vector_store(),
        document_registry=get_document_registry(),
    )


def get_list_documents_use_case() -> ListDocumentsUseCase:
    return ListDocumentsUseCase(document_registry=get_document_registry())


# =============================================================================
# Ciclo de vida
# =============================================================================


def seed_default_documents_once() -> bool:
    """
    Siembra el corpus demo si todavía no se hizo en este proceso.

    Returns:
        True si sembró en esta llamada.
    """
    global _seeded
    with _seed_lock:
        if _seeded:
            return False
        _seeded = True
    seed_default_documents(get_ingest_text_use_case())
    return True


def reset_container() -> None:
    """Vacía el estado compartido y limpia los singletons cacheados."""
    global _seeded
    if get_vector_store.cache_info().currsize:
        get_vector_store().clear()
    if get_document_registry.cache_info().currsize:
        get_document_registry().clear()

    for factory in (
        get_vector_store,
        get_document_registry,
        get_text_chunker,
        get_embedding_service,
        get_generation_service,
    ):
        factory.cache_clear()

    with _seed_lock:
        _seeded = False
