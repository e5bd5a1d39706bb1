"""
Application Use Cases

Casos de uso del núcleo RAG (ingesta, consulta, listado).
"""

from .answer_query import AnswerQueryInput, AnswerQueryUseCase
from .ingest_text import IngestTextInput, IngestTextResult, IngestTextUseCase
from .list_documents import ListDocumentsUseCase
from .retrieve_evidence import EvidenceRetriever

__all__ = [
    "AnswerQueryInput",
    "AnswerQueryUseCase",
    "EvidenceRetriever",
    "IngestTextInput",
    "IngestTextResult",
    "IngestTextUseCase",
    "ListDocumentsUseCase",
]
