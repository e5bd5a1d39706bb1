"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/document_registry.py
============================================================
Class: InMemoryDocumentRegistry

Responsibilities:
  - Guardar el texto crudo de cada documento ingerido (preview humano).
  - Reemplazar la entrada existente cuando se re-ingiere el mismo nombre.
  - Listar documentos ordenados por nombre.

Collaborators:
  - domain.entities.StoredDocument
  - application.usecases.ingest_text (upsert post-indexado)
  - application.usecases.list_documents

Constraints / Notes:
  - NO participa del retrieval (canal lateral).
  - Thread-safe (Lock); vida del proceso.
============================================================
"""

from __future__ import annotations

from threading import Lock
from typing import Callable, Dict, List

from ....crosscutting.exceptions import ValidationError
from ....domain.entities import StoredDocument, utcnow
from ....domain.services import DocumentRegistry


class InMemoryDocumentRegistry(DocumentRegistry):
    """Registro nombre → StoredDocument."""

    def __init__(self, *, clock: Callable = utcnow) -> None:
        self._lock = Lock()
        self._documents: Dict[str, StoredDocument] = {}
        self._clock = clock

    def upsert(self, name: str, text: str) -> StoredDocument:
        clean_name = (name or "").strip()
        if not clean_name:
            raise ValidationError("Document name must not be empty")

        document = StoredDocument(
            name=clean_name, text=text or "", ingested_at=self._clock()
        )
        with self._lock:
            self._documents[clean_name] = document
        return document

    def list_documents(self) -> List[StoredDocument]:
        with self._lock:
            documents = list(self._documents.values())
        return sorted(documents, key=lambda d: (d.name.casefold(), d.name))

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()
