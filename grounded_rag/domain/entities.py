"""
===============================================================================
TARJETA CRC — domain/entities.py
===============================================================================

Módulo:
    Entidades del Dominio (VectorMetadata, DocumentChunk, ScoredResult, StoredDocument)

Responsabilidades:
    - Definir estructuras centrales del núcleo RAG (sin infraestructura).
    - Garantizar inmutabilidad de los chunks una vez creados.
    - Mantener tipos claros para casos de uso y adapters.

Colaboradores:
    - domain.services: puertos que producen/consumen estas entidades.
    - application/usecases: construyen/consumen estas entidades.
    - infrastructure/repositories/in_memory: almacenan estas entidades.

Principios:
    - Sin dependencias a FastAPI / SDKs / numpy.
    - Dataclasses frozen: un chunk insertado no se modifica.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

# Vector de embedding: secuencia ordenada de floats (dimensión fija por modelo).
EmbeddingVector = Sequence[float]


def utcnow() -> datetime:
    """Fecha/hora UTC (fuente única de tiempo)."""
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Chunk
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VectorMetadata:
    """
    Metadata de un chunk indexado.

    - name: nombre del documento de origen
    - page_or_section: localizador legible sintetizado en la ingesta ("chunk 3")
    - text: contenido verbatim del chunk (base de las citas exactas)
    """

    name: str
    page_or_section: str
    text: str


@dataclass(frozen=True)
class DocumentChunk:
    """Fragmento embebido listo para el índice."""

    embedding: EmbeddingVector
    metadata: VectorMetadata


@dataclass(frozen=True)
class ScoredResult:
    """
    Proyección de solo lectura de un resultado de búsqueda.

    Nota:
      - score es cosine similarity en [-1, 1] (en la práctica [0, 1]).
    """

    score: float
    metadata: VectorMetadata


# ---------------------------------------------------------------------------
# Registro de documentos (preview)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StoredDocument:
    """Documento crudo registrado para preview humano (no participa del retrieval)."""

    name: str
    text: str
    ingested_at: datetime
