"""Repositorios (adapters de almacenamiento)."""

from .in_memory import InMemoryDocumentRegistry, InMemoryVectorStore

__all__ = ["InMemoryVectorStore", "InMemoryDocumentRegistry"]
