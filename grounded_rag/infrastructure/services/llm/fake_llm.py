"""
Name: Fake Generation Service (Deterministic Test Double)

Qué es
------
Implementación determinista de `domain.services.GenerationService` para
tests/CI/dev. No realiza IO.

Comportamiento
--------------
- Lee el array JSON de excerpts que el prompt builder embebe en el user prompt.
- Responde un objeto JSON válido que cita verbatim el PRIMER excerpt.
- Sin excerpts → respuesta "I don't know" con confidenceScore 0.

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: FakeGenerationService
Responsibilities:
  - Producir salidas estructuradas deterministas (mismo prompt → misma salida)
  - Contar llamadas (útil en tests de integración)
Collaborators:
  - domain.services.GenerationService
Constraints:
  - Sin IO / sin dependencias externas
"""

from __future__ import annotations

import json
from typing import Any

from ....crosscutting.exceptions import GenerationError
from ....crosscutting.logger import logger
from ....domain.services import GenerationService

_EXCERPTS_MARKER = "PROVIDED DOCUMENT EXCERPTS"

DEFAULT_CONFIDENCE = 0.8


def _extract_excerpts(user_prompt: str) -> list[dict[str, Any]]:
    """R: Array JSON que sigue al marcador de excerpts ([] si no hay)."""
    marker_at = user_prompt.find(_EXCERPTS_MARKER)
    if marker_at == -1:
        return []
    start = user_prompt.find("[", marker_at)
    if start == -1:
        return []
    try:
        value, _ = json.JSONDecoder().raw_decode(user_prompt, start)
    except json.JSONDecodeError:
        return []
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _build_response(excerpts: list[dict[str, Any]], confidence: float) -> dict:
    if not excerpts:
        return {
            "answer": "I don't know based on the provided documents.",
            "sourceDocuments": [],
            "confidenceScore": 0,
            "recommendation": "Ingest a document that covers this question.",
        }

    first = excerpts[0]
    source = {
        "name": str(first.get("name", "")),
        "pageOrSection": str(first.get("pageOrSection", "")),
        "excerpt": str(first.get("excerpt", "")),
    }
    return {
        "answer": f"According to {source['name']}: {source['excerpt']}",
        "sourceDocuments": [source],
        "confidenceScore": confidence,
        "recommendation": "Review the cited excerpt for full details.",
    }


class FakeGenerationService(GenerationService):
    """R: GenerationService determinista para tests/CI."""

    MODEL_ID = "fake-llm-v1"

    def __init__(self, *, confidence: float = DEFAULT_CONFIDENCE) -> None:
        if not 0 <= confidence <= 1:
            raise ValueError("confidence must be between 0 and 1")
        self._confidence = confidence
        self.calls = 0
        logger.debug(
            "FakeGenerationService initialized",
            extra={"model_id": self.MODEL_ID, "confidence": confidence},
        )

    @property
    def model_id(self) -> str:
        return self.MODEL_ID

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        if not (user_prompt or "").strip():
            raise GenerationError("User prompt must not be empty")
        self.calls += 1
        payload = _build_response(_extract_excerpts(user_prompt), self._confidence)
        return json.dumps(payload, ensure_ascii=False)
