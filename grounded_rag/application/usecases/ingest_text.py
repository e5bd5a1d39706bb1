"""
===============================================================================
USE CASE: Ingest Text (chunking + embeddings secuenciales + indexado)
===============================================================================

Business Goal:
    Incorporar un documento de texto al índice de similitud para que pueda
    ser recuperado como evidencia.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    IngestTextUseCase

Responsibilities:
    - Validar el nombre del documento (no vacío tras strip).
    - Normalizar el texto; vacío → 0 chunks sin llamadas externas.
    - Partir en chunks (TextChunkerService).
    - Embeber cada chunk EN ORDEN, uno por uno (EmbeddingService).
    - Etiquetar: "<section_label> (chunk i)" o "chunk i" (1-indexed).
    - Entregar el batch al índice en una sola llamada (VectorStore).
    - Registrar el texto crudo para preview (DocumentRegistry, opcional).

Collaborators:
    - TextChunkerService, EmbeddingService, VectorStore, DocumentRegistry
    - StageTimings

Notas:
    - Si un embedding falla, la excepción (EmbeddingError) se propaga y no se
      inserta nada del documento.
    - Re-ingestar el mismo documento duplica chunks en el índice (no hay dedupe).
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, List, Optional

from ...crosscutting.exceptions import EmbeddingError, ValidationError
from ...crosscutting.logger import logger
from ...crosscutting.timing import StageTimings
from ...domain.entities import DocumentChunk, VectorMetadata
from ...domain.services import (
    DocumentRegistry,
    EmbeddingService,
    TextChunkerService,
    VectorStore,
)

_STAGE_CHUNK: Final[str] = "chunk"
_STAGE_EMBED: Final[str] = "embed"
_STAGE_INDEX: Final[str] = "index"


@dataclass(frozen=True)
class IngestTextInput:
    """
    DTO de entrada.

    Attributes:
        document_name: Nombre del documento (se guarda trimmeado)
        text: Texto crudo
        section_label: Prefijo opcional para el localizador de cada chunk
    """

    document_name: str
    text: str
    section_label: Optional[str] = None


@dataclass(frozen=True)
class IngestTextResult:
    chunks_added: int


def chunk_label(index: int, section_label: Optional[str] = None) -> str:
    """Localizador legible de un chunk (index 1-based)."""
    label = (section_label or "").strip()
    if label:
        return f"{label} (chunk {index})"
    return f"chunk {index}"


class IngestTextUseCase:
    """Orquesta chunking → embeddings → índice (→ registro)."""

    def __init__(
        self,
        chunker: TextChunkerService,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        document_registry: Optional[DocumentRegistry] = None,
    ) -> None:
        self._chunker = chunker
        self._embeddings = embedding_service
        self._store = vector_store
        self._registry = document_registry

    def execute(self, input_data: IngestTextInput) -> IngestTextResult:
        document_name = (input_data.document_name or "").strip()
        if not document_name:
            raise ValidationError("document_name must not be empty")

        timings = StageTimings()

        with timings.measure(_STAGE_CHUNK):
            pieces = self._chunker.chunk(input_data.text or "")

        chunks_added = 0
        if pieces:
            chunks = self._embed_chunks(
                document_name, pieces, input_data.section_label, timings
            )
            with timings.measure(_STAGE_INDEX):
                chunks_added = self._store.add_documents(chunks)

        if self._registry is not None:
            self._registry.upsert(document_name, input_data.text or "")

        logger.info(
            "Document ingested",
            extra={
                "document_name": document_name,
                "chunks_produced": len(pieces),
                "chunks_added": chunks_added,
                "timings": timings.to_dict(),
            },
        )
        return IngestTextResult(chunks_added=chunks_added)

    def _embed_chunks(
        self,
        document_name: str,
        pieces: List[str],
        section_label: Optional[str],
        timings: StageTimings,
    ) -> List[DocumentChunk]:
        chunks: List[DocumentChunk] = []
        for index, piece in enumerate(pieces, start=1):
            with timings.measure(_STAGE_EMBED):
                try:
                    embedding = self._embeddings.embed(piece)
                except EmbeddingError:
                    raise
                except Exception as exc:
                    raise EmbeddingError(
                        f"Failed to embed chunk {index} of '{document_name}'",
                        original_error=exc,
                    ) from exc

            chunks.append(
                DocumentChunk(
                    embedding=embedding,
                    metadata=VectorMetadata(
                        name=document_name,
                        page_or_section=chunk_label(index, section_label),
                        text=piece,
                    ),
                )
            )
        return chunks
