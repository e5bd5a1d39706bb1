"""
===============================================================================
MÓDULO: Contrato de respuesta RAG (schema + parser tolerante)
===============================================================================

Responsabilidades:
  - Definir RagResponse / SourceDocument (pydantic, aliases camelCase).
  - Extraer el objeto JSON de la salida del modelo en dos etapas:
      1) parse estricto si el texto (trim) es exactamente un objeto
      2) si no, el span más externo `{ ... }` (tolera preámbulos)
  - Validar estrictamente: claves exactas, tipos, confidenceScore en [0, 1].
  - Proveer la respuesta canónica de "información insuficiente".

Colaboradores:
  - application/usecases/answer_query.py
  - interfaces/api/http/routers/query.py (response_model)

Errores:
  - ResponseParseError: no hay objeto JSON parseable
  - SchemaViolation: JSON parseable pero fuera de contrato
===============================================================================
"""

from __future__ import annotations

import json
from typing import Any, Final, List

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..crosscutting.exceptions import ResponseParseError, SchemaViolation

INSUFFICIENT_INFORMATION_ANSWER: Final[str] = (
    "Insufficient information based on the provided documents."
)
INSUFFICIENT_INFORMATION_RECOMMENDATION: Final[str] = (
    "Provide or ingest additional documents that explicitly cover this question "
    "(policy, contract, spec, or relevant section)."
)


class SourceDocument(BaseModel):
    """Cita: documento, localizador y excerpt verbatim."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: StrictStr
    page_or_section: StrictStr = Field(alias="pageOrSection")
    excerpt: StrictStr


class RagResponse(BaseModel):
    """
    Respuesta estructurada final de una consulta.

    Wire format (by_alias=True):
      {answer, sourceDocuments, confidenceScore, recommendation}
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    answer: StrictStr
    source_documents: List[SourceDocument] = Field(alias="sourceDocuments")
    confidence_score: float = Field(
        alias="confidenceScore", ge=0, le=1, allow_inf_nan=False
    )
    recommendation: StrictStr

    @field_validator("confidence_score", mode="before")
    @classmethod
    def confidence_must_be_number(cls, v: Any) -> Any:
        # bool es subclase de int; "0.5" tampoco es un número JSON.
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("confidenceScore must be a number")
        return v

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def insufficient_information_response() -> RagResponse:
    """Respuesta canónica (sin evidencia o baja confianza). Nunca llama al modelo."""
    return RagResponse.model_validate(
        {
            "answer": INSUFFICIENT_INFORMATION_ANSWER,
            "sourceDocuments": [],
            "confidenceScore": 0,
            "recommendation": INSUFFICIENT_INFORMATION_RECOMMENDATION,
        }
    )


def _loads(candidate: str) -> Any:
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ResponseParseError(
            f"Model output is not valid JSON: {exc.msg}", original_error=exc
        ) from exc
    except RecursionError as exc:
        raise ResponseParseError(
            "Model output JSON is nested too deeply", original_error=exc
        ) from exc


def extract_json_object(text: str) -> Any:
    """
    Extrae el valor JSON de la salida del modelo.

    Etapa 1: texto (trim) que empieza con "{" y termina con "}" → parse directo.
    Etapa 2: span desde el primer "{" hasta el último "}".
    """
    trimmed = (text or "").strip()
    if trimmed.startswith("{") and trimmed.endswith("}"):
        return _loads(trimmed)

    start = trimmed.find("{")
    end = trimmed.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ResponseParseError("Model output did not contain a JSON object")

    return _loads(trimmed[start : end + 1])


def parse_rag_response(text: str) -> RagResponse:
    """Extrae + valida la salida del modelo contra el contrato."""
    payload = extract_json_object(text)
    if not isinstance(payload, dict):
        raise SchemaViolation("Model output JSON is not an object")

    try:
        return RagResponse.model_validate(payload)
    except PydanticValidationError as exc:
        fields = sorted(
            {".".join(str(p) for p in err["loc"]) for err in exc.errors()}
        )
        raise SchemaViolation(
            f"Model output violates response schema: {', '.join(fields)}",
            original_error=exc,
        ) from exc
