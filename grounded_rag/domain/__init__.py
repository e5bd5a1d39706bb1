"""
===============================================================================
TARJETA CRC — domain/__init__.py
===============================================================================

Módulo:
    Exportaciones de la Capa de Dominio (API pública del dominio)

Responsabilidades:
    - Centralizar exports para imports limpios en application/interfaces.
    - Evitar imports profundos y acoplamientos innecesarios.

Reglas:
    - Solo re-exporta contratos/entidades del dominio.
    - No importar infraestructura aquí.
===============================================================================
"""

from .entities import (
    DocumentChunk,
    EmbeddingVector,
    ScoredResult,
    StoredDocument,
    VectorMetadata,
)
from .services import (
    DocumentRegistry,
    EmbeddingService,
    GenerationService,
    TextChunkerService,
    VectorStore,
)

__all__ = [
    # Entities
    "EmbeddingVector",
    "VectorMetadata",
    "DocumentChunk",
    "ScoredResult",
    "StoredDocument",
    # Ports
    "EmbeddingService",
    "GenerationService",
    "TextChunkerService",
    "VectorStore",
    "DocumentRegistry",
]
