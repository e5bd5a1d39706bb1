"""
===============================================================================
USE CASE: Answer Query (retrieval + generación con grounding estricto)
===============================================================================

Business Goal:
    Responder una pregunta usando SOLO la evidencia del corpus indexado:
      0) Validar input (sin llamadas externas si es inválido)
      1) Embed + retrieval con piso de relevancia
      2) Prompt con pregunta literal + excerpts JSON sanitizados
      3) Generación determinista (temperatura 0, fijada por el adapter)
      4) Parse + validación estricta del contrato de respuesta
      5) Reparación acotada por presupuesto de intentos

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    AnswerQueryUseCase

Responsibilities:
    - Validar pregunta (1..max_query_chars tras strip) y top_k (1..max_top_k).
    - Cortar en "información insuficiente" si no hay evidencia (sin LLM).
    - Gatear por confianza (< umbral → respuesta canónica).
    - Reintentar SOLO por salida mal formada, nunca por transporte.
    - Registrar citas que no son substrings verbatim de la evidencia.
    - Medir timings por etapa (embed / retrieve / llm).

Collaborators:
    - EvidenceRetriever.retrieve(question, top_k)
    - GenerationService.generate(system_prompt, user_prompt)
    - prompts: RAG_SYSTEM_PROMPT, build_user_prompt, build_repair_prompt
    - response_contract: parse_rag_response, insufficient_information_response
    - StageTimings

-------------------------------------------------------------------------------
Error Mapping
-------------------------------------------------------------------------------
    - ValidationError: input inválido (antes de cualquier llamada externa)
    - EmbeddingError: falla del colaborador de embeddings
    - GenerationError: falla de transporte del LLM, o salida inválida tras
      agotar el presupuesto de intentos (encadenada a la última SchemaViolation)
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, List, Optional, Sequence

from ...crosscutting.exceptions import (
    GenerationError,
    SchemaViolation,
    ValidationError,
)
from ...crosscutting.logger import logger
from ...crosscutting.timing import StageTimings
from ...domain.entities import ScoredResult
from ...domain.services import GenerationService
from ..prompts import (
    DEFAULT_MAX_EXCERPT_CHARS,
    RAG_SYSTEM_PROMPT,
    PromptExcerpt,
    build_repair_prompt,
    build_user_prompt,
    sanitize_excerpt,
)
from ..response_contract import (
    RagResponse,
    insufficient_information_response,
    parse_rag_response,
)
from .retrieve_evidence import EvidenceRetriever

DEFAULT_TOP_K: Final[int] = 5
DEFAULT_MAX_TOP_K: Final[int] = 20
DEFAULT_MAX_QUERY_CHARS: Final[int] = 4000
DEFAULT_LOW_CONFIDENCE_THRESHOLD: Final[float] = 0.3
DEFAULT_MAX_GENERATION_ATTEMPTS: Final[int] = 2

_STAGE_LLM: Final[str] = "llm"


@dataclass(frozen=True)
class AnswerQueryInput:
    """
    DTO de entrada.

    Attributes:
        question: Pregunta en lenguaje natural
        top_k: Cantidad de chunks a recuperar (default: 5)
    """

    question: str
    top_k: int = DEFAULT_TOP_K


class AnswerQueryUseCase:
    """Orquesta retrieval + generación + validación de la respuesta."""

    def __init__(
        self,
        retriever: EvidenceRetriever,
        generation_service: GenerationService,
        *,
        low_confidence_threshold: float = DEFAULT_LOW_CONFIDENCE_THRESHOLD,
        max_excerpt_chars: int = DEFAULT_MAX_EXCERPT_CHARS,
        max_generation_attempts: int = DEFAULT_MAX_GENERATION_ATTEMPTS,
        max_query_chars: int = DEFAULT_MAX_QUERY_CHARS,
        max_top_k: int = DEFAULT_MAX_TOP_K,
    ) -> None:
        if max_generation_attempts < 1:
            raise ValueError("max_generation_attempts must be >= 1")
        self._retriever = retriever
        self._generation = generation_service
        self._low_confidence_threshold = low_confidence_threshold
        self._max_excerpt_chars = max_excerpt_chars
        self._max_generation_attempts = max_generation_attempts
        self._max_query_chars = max_query_chars
        self._max_top_k = max_top_k

    def execute(self, input_data: AnswerQueryInput) -> RagResponse:
        question, top_k = self._validate(input_data)
        timings = StageTimings()

        evidence = self._retriever.retrieve(question, top_k, timings=timings)
        if not evidence:
            logger.info(
                "No relevant evidence; answering with insufficient information",
                extra={"top_k": top_k, "timings": timings.to_dict()},
            )
            return insufficient_information_response()

        excerpts = self._build_excerpts(evidence)
        user_prompt = build_user_prompt(question, excerpts)

        response = self._generate_validated(user_prompt, timings)

        if response.confidence_score < self._low_confidence_threshold:
            logger.info(
                "Low confidence answer replaced with insufficient information",
                extra={
                    "confidence_score": response.confidence_score,
                    "threshold": self._low_confidence_threshold,
                    "timings": timings.to_dict(),
                },
            )
            return insufficient_information_response()

        self._check_citations(response, excerpts)

        logger.info(
            "Query answered",
            extra={
                "top_k": top_k,
                "evidence_count": len(evidence),
                "sources_cited": len(response.source_documents),
                "confidence_score": response.confidence_score,
                "timings": timings.to_dict(),
            },
        )
        return response

    # =========================================================
    # Helpers
    # =========================================================
    def _validate(self, input_data: AnswerQueryInput) -> tuple[str, int]:
        raw_question = input_data.question
        if not isinstance(raw_question, str):
            raise ValidationError("question must be a string")

        question = raw_question.strip()
        if not question:
            raise ValidationError("question must not be empty")
        if len(question) > self._max_query_chars:
            raise ValidationError(
                f"question must be at most {self._max_query_chars} characters"
            )

        top_k = input_data.top_k
        if isinstance(top_k, bool) or not isinstance(top_k, int):
            raise ValidationError("top_k must be an integer")
        if not 1 <= top_k <= self._max_top_k:
            raise ValidationError(f"top_k must be between 1 and {self._max_top_k}")

        return question, top_k

    def _build_excerpts(self, evidence: Sequence[ScoredResult]) -> List[PromptExcerpt]:
        return [
            PromptExcerpt(
                name=result.metadata.name,
                pageOrSection=result.metadata.page_or_section,
                excerpt=sanitize_excerpt(
                    result.metadata.text, self._max_excerpt_chars
                ),
            )
            for result in evidence
        ]

    def _call_model(self, prompt: str, timings: StageTimings) -> str:
        with timings.measure(_STAGE_LLM):
            try:
                return self._generation.generate(RAG_SYSTEM_PROMPT, prompt)
            except GenerationError:
                raise
            except Exception as exc:
                raise GenerationError(
                    "Failed to call generation provider", original_error=exc
                ) from exc

    def _generate_validated(
        self, user_prompt: str, timings: StageTimings
    ) -> RagResponse:
        """
        Intento inicial + reparaciones hasta agotar el presupuesto.

        Cada reparación reenvía el user prompt ORIGINAL más la instrucción
        de reparación con la salida inválida más reciente.
        """
        prompt = user_prompt
        last_error: Optional[SchemaViolation] = None

        for attempt in range(1, self._max_generation_attempts + 1):
            raw_output = self._call_model(prompt, timings)
            try:
                return parse_rag_response(raw_output)
            except SchemaViolation as exc:
                last_error = exc
                logger.warning(
                    "Model output rejected",
                    extra={
                        "attempt": attempt,
                        "max_attempts": self._max_generation_attempts,
                        "error_code": exc.error_code,
                        "error_id": exc.error_id,
                        "raw_output": raw_output,
                    },
                )
                prompt = build_repair_prompt(user_prompt, raw_output)

        raise GenerationError(
            "Model output did not satisfy the response schema after "
            f"{self._max_generation_attempts} attempts",
            original_error=last_error,
        ) from last_error

    def _check_citations(
        self, response: RagResponse, excerpts: Sequence[PromptExcerpt]
    ) -> None:
        """Loguea citas que no son substring verbatim de ningún excerpt enviado."""
        unverified = [
            source
            for source in response.source_documents
            if not any(source.excerpt in e["excerpt"] for e in excerpts)
        ]
        if unverified:
            logger.warning(
                "Cited excerpts not found verbatim in retrieved evidence",
                extra={
                    "unverified_citations": len(unverified),
                    "documents": sorted({s.name for s in unverified}),
                },
            )
