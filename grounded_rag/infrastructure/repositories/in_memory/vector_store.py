"""
============================================================
TARJETA CRC — infrastructure/repositories/in_memory/vector_store.py
============================================================
Class: InMemoryVectorStore

Responsibilities:
  - Almacenar chunks embebidos en memoria (vida del proceso).
  - Responder búsquedas top-k por cosine similarity.
  - Descartar (sin error) chunks con embedding vacío o inválido.
  - Custodiar la dimensionalidad del índice (modo estricto).

Collaborators:
  - domain.entities.DocumentChunk / ScoredResult
  - domain.services.VectorStore (contrato a implementar)
  - numpy (normalización L2 + producto punto)

Constraints / Notes:
  - Thread-safe: la mutación (append) ocurre bajo Lock; la búsqueda
    puntúa un snapshot tomado bajo el mismo Lock.
  - La normalización se recalcula en cada búsqueda (no al insertar).
  - Vectores de norma cero no se puntúan.
  - Empates de score: se preserva el orden de inserción (clave secundaria).
  - strict_dimensions=False reproduce el modo legacy: compara solo el
    prefijo común min(len(a), len(b)) sin avisar.
============================================================
"""

from __future__ import annotations

import math
import numbers
from threading import Lock
from typing import List, Optional, Sequence

import numpy as np

from ....crosscutting.exceptions import EmbeddingDimensionError
from ....crosscutting.logger import logger
from ....domain.entities import (
    DocumentChunk,
    EmbeddingVector,
    ScoredResult,
    VectorMetadata,
)
from ....domain.services import VectorStore

DEFAULT_TOP_K = 5


def _coerce_embedding(embedding: object) -> Optional[tuple[float, ...]]:
    """
    R: Convierte un embedding a tupla inmutable de floats.

    Devuelve None si no es una secuencia numérica no vacía.
    """
    if embedding is None or isinstance(embedding, (str, bytes)):
        return None
    try:
        values = list(embedding)  # type: ignore[call-overload]
    except TypeError:
        return None
    if not values:
        return None
    for value in values:
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return None
    return tuple(float(v) for v in values)


def _unit(vector: Sequence[float]) -> Optional[np.ndarray]:
    """R: Normaliza a largo L2 unitario; None si la norma es cero o no finita."""
    arr = np.asarray(vector, dtype=float)
    norm = float(np.linalg.norm(arr))
    if norm == 0.0 or not math.isfinite(norm):
        return None
    return arr / norm


def _sort_key(entry: tuple[float, int, VectorMetadata]) -> tuple[bool, float, int]:
    """R: Score DESC (no finitos al final), luego orden de inserción ASC."""
    score, position, _ = entry
    finite = math.isfinite(score)
    return (not finite, -score if finite else 0.0, position)


class InMemoryVectorStore(VectorStore):
    """
    Índice vectorial in-memory, thread-safe.

    Modelo mental:
    - _items es la "tabla" en memoria (orden = orden de inserción).
    - _dimension queda fijada por el primer vector aceptado (modo estricto).
    """

    def __init__(self, *, strict_dimensions: bool = True) -> None:
        self._lock = Lock()
        self._items: List[DocumentChunk] = []
        self._strict_dimensions = strict_dimensions
        self._dimension: Optional[int] = None

    # =========================================================
    # Introspección
    # =========================================================
    @property
    def strict_dimensions(self) -> bool:
        return self._strict_dimensions

    @property
    def dimension(self) -> Optional[int]:
        """Dimensionalidad fijada (None si el índice está vacío o en modo legacy)."""
        with self._lock:
            return self._dimension

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    # =========================================================
    # Escritura
    # =========================================================
    def add_documents(self, chunks: Sequence[DocumentChunk]) -> int:
        """
        Agrega chunks pre-embebidos. Cada chunk se evalúa por separado.

        Returns:
            Cantidad de chunks efectivamente insertados.
        """
        if not chunks:
            return 0

        inserted = 0
        discarded_invalid = 0
        discarded_dimension = 0

        with self._lock:
            for chunk in chunks:
                vector = _coerce_embedding(getattr(chunk, "embedding", None))
                if vector is None:
                    discarded_invalid += 1
                    continue

                if self._strict_dimensions:
                    if self._dimension is None:
                        self._dimension = len(vector)
                    elif len(vector) != self._dimension:
                        discarded_dimension += 1
                        continue

                self._items.append(
                    DocumentChunk(embedding=vector, metadata=chunk.metadata)
                )
                inserted += 1

            total = len(self._items)

        if discarded_invalid or discarded_dimension:
            logger.warning(
                "InMemoryVectorStore: chunks discarded",
                extra={
                    "discarded_invalid_embedding": discarded_invalid,
                    "discarded_dimension_mismatch": discarded_dimension,
                    "inserted": inserted,
                },
            )

        logger.debug(
            "InMemoryVectorStore: chunks added",
            extra={"inserted": inserted, "total_chunks": total},
        )
        return inserted

    def clear(self) -> None:
        """Vacía el índice (shutdown / tests)."""
        with self._lock:
            self._items.clear()
            self._dimension = None

    # =========================================================
    # Lectura
    # =========================================================
    def similarity_search(
        self, query_embedding: EmbeddingVector, top_k: int = DEFAULT_TOP_K
    ) -> List[ScoredResult]:
        """
        Búsqueda por cosine similarity sobre un snapshot del índice.

        Reglas:
          - query vacía / no numérica / de norma cero → []
          - top_k <= 0 o top_k >= resultados → todos los resultados
          - modo estricto: query de otra dimensión → EmbeddingDimensionError
        """
        query = _coerce_embedding(query_embedding)
        if query is None:
            return []

        with self._lock:
            snapshot = list(self._items)
            dimension = self._dimension

        if (
            self._strict_dimensions
            and dimension is not None
            and len(query) != dimension
        ):
            raise EmbeddingDimensionError(
                f"Query embedding has {len(query)} dimensions; index expects {dimension}"
            )

        query_unit = _unit(query)
        if query_unit is None or not snapshot:
            return []

        scored: list[tuple[float, int, VectorMetadata]] = []
        for position, item in enumerate(snapshot):
            item_unit = _unit(item.embedding)
            if item_unit is None:
                continue
            overlap = min(len(query_unit), len(item_unit))
            score = float(np.dot(query_unit[:overlap], item_unit[:overlap]))
            scored.append((score, position, item.metadata))

        scored.sort(key=_sort_key)

        if 0 < top_k < len(scored):
            scored = scored[:top_k]

        return [ScoredResult(score=score, metadata=meta) for score, _, meta in scored]
