"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos y Stores (Protocols)

Responsabilidades:
    - Definir contratos angostos para los colaboradores externos:
        * embed(text) -> vector
        * generate(system_prompt, user_prompt) -> text
    - Definir contratos del índice vectorial y del registro de documentos.
    - Mantener el dominio independiente de SDKs.

Colaboradores:
    - infrastructure/services/*: implementaciones concretas (Google / fakes).
    - infrastructure/repositories/in_memory/*: índice y registro.
    - application/usecases: consumen estos puertos.

Reglas:
    - SOLO interfaces: nada de implementación.
    - Firmas estables y provider-agnostic.
===============================================================================
"""

from __future__ import annotations

from typing import Protocol, Sequence

from .entities import DocumentChunk, EmbeddingVector, ScoredResult, StoredDocument


class EmbeddingService(Protocol):
    """Contrato para generar embeddings (falla con EmbeddingError)."""

    def embed(self, text: str) -> list[float]: ...


class GenerationService(Protocol):
    """
    Contrato para generación con modelo de lenguaje.

    Nota:
      - El modelo y la temperatura los fija el adapter (config por proceso).
      - Falla con GenerationError si el provider no responde o no hay completion.
    """

    def generate(self, system_prompt: str, user_prompt: str) -> str: ...


class TextChunkerService(Protocol):
    """Contrato para partir texto en chunks de forma determinística."""

    def chunk(self, text: str) -> list[str]: ...


class VectorStore(Protocol):
    """Índice de similitud sobre chunks embebidos."""

    def add_documents(self, chunks: Sequence[DocumentChunk]) -> int: ...

    def similarity_search(
        self, query_embedding: EmbeddingVector, top_k: int = 5
    ) -> list[ScoredResult]: ...


class DocumentRegistry(Protocol):
    """Registro de textos crudos para preview (canal lateral de la ingesta)."""

    def upsert(self, name: str, text: str) -> StoredDocument: ...

    def list_documents(self) -> list[StoredDocument]: ...
