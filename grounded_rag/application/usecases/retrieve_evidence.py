"""
===============================================================================
USE CASE: Retrieve Evidence (embed + similarity search + relevance floor)
===============================================================================

Business Goal:
    Obtener los chunks relevantes para una pregunta, descartando ruido.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    EvidenceRetriever

Responsibilities:
    - Embeber la pregunta (EmbeddingService).
    - Buscar top-k en el índice (VectorStore).
    - Filtrar scores no finitos o por debajo del piso de relevancia.

Collaborators:
    - EmbeddingService.embed(text)
    - VectorStore.similarity_search(vector, top_k)
    - StageTimings (opcional): etapas "embed" y "retrieve"

Notas:
    - Lista vacía = "sin evidencia" (caso normal, no es error).
    - Fallas del colaborador de embeddings se propagan como EmbeddingError.
===============================================================================
"""

from __future__ import annotations

import math
from contextlib import nullcontext
from typing import Final, List, Optional

from ...crosscutting.exceptions import EmbeddingError
from ...crosscutting.logger import logger
from ...crosscutting.timing import StageTimings
from ...domain.entities import ScoredResult
from ...domain.services import EmbeddingService, VectorStore

DEFAULT_MIN_RELEVANCE_SCORE: Final[float] = 0.2

_STAGE_EMBED: Final[str] = "embed"
_STAGE_RETRIEVE: Final[str] = "retrieve"


class EvidenceRetriever:
    """Recupera evidencia relevante para una pregunta."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        min_relevance_score: float = DEFAULT_MIN_RELEVANCE_SCORE,
    ) -> None:
        self._embeddings = embedding_service
        self._store = vector_store
        self._min_relevance_score = min_relevance_score

    @property
    def min_relevance_score(self) -> float:
        return self._min_relevance_score

    def retrieve(
        self,
        question: str,
        top_k: int,
        *,
        timings: Optional[StageTimings] = None,
    ) -> List[ScoredResult]:
        with timings.measure(_STAGE_EMBED) if timings else nullcontext():
            try:
                query_embedding = self._embeddings.embed(question)
            except EmbeddingError:
                raise
            except Exception as exc:
                raise EmbeddingError(
                    "Failed to embed question", original_error=exc
                ) from exc

        with timings.measure(_STAGE_RETRIEVE) if timings else nullcontext():
            candidates = self._store.similarity_search(query_embedding, top_k)

        evidence = [
            result
            for result in candidates
            if math.isfinite(result.score)
            and result.score >= self._min_relevance_score
        ]

        logger.debug(
            "Evidence retrieved",
            extra={
                "candidates": len(candidates),
                "evidence": len(evidence),
                "min_relevance_score": self._min_relevance_score,
            },
        )
        return evidence
