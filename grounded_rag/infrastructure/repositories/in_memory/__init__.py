"""Implementaciones in-memory (índice vectorial + registro de documentos)."""

from .document_registry import InMemoryDocumentRegistry
from .vector_store import InMemoryVectorStore

__all__ = ["InMemoryVectorStore", "InMemoryDocumentRegistry"]
