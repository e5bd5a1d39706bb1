"""
USE CASE: List Documents

Devuelve los documentos registrados (preview), ordenados por nombre.
No consulta el índice vectorial.
"""

from __future__ import annotations

from typing import List

from ...domain.entities import StoredDocument
from ...domain.services import DocumentRegistry


class ListDocumentsUseCase:
    def __init__(self, document_registry: DocumentRegistry) -> None:
        self._registry = document_registry

    def execute(self) -> List[StoredDocument]:
        return self._registry.list_documents()
