"""
Name: Google Gemini Generation Service (Adapter)

Qué hace
--------
Implementación concreta de `domain.services.GenerationService` sobre Google
GenAI (Gemini):
  - system prompt vía `system_instruction`, user prompt como contenido
  - temperatura 0 (salida determinista)
  - reintento de errores transitorios (tenacity, ver retry.py)
  - traducción de fallas del provider a GenerationError

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: GoogleGenerationService
Responsibilities:
  - Ejecutar una completion (system + user) y devolver el texto recortado
  - Fallar con GenerationError si no hay candidato de completion
Collaborators:
  - google.genai.Client: SDK externo
  - retry.create_retry_decorator: resiliencia
Constraints:
  - No parsea ni valida JSON: eso es responsabilidad del use case
"""

from __future__ import annotations

from typing import Callable

from google import genai

from ....crosscutting.exceptions import GenerationError
from ....crosscutting.logger import logger
from ....domain.services import GenerationService
from ..retry import create_retry_decorator


class GoogleGenerationService(GenerationService):
    """R: Gemini implementation of GenerationService."""

    DEFAULT_MODEL_ID = "gemini-1.5-flash"
    TEMPERATURE = 0.0

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: genai.Client | None = None,
        model_id: str | None = None,
        base_url: str | None = None,
        retry_decorator: Callable | None = None,
    ) -> None:
        """
        R: Inicializa el servicio (preferible vía DI).

        Raises:
            GenerationError: si no hay API key y no se inyectó `client`.
        """
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("GoogleGenerationService: GOOGLE_API_KEY not configured")
            raise GenerationError("GOOGLE_API_KEY not configured")

        self._client = client or _build_client(resolved_key, base_url)
        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()

        decorator = retry_decorator or create_retry_decorator()
        self._generate_content = decorator(self._client.models.generate_content)

        logger.info(
            "GoogleGenerationService initialized",
            extra={"model_id": self._model_id, "temperature": self.TEMPERATURE},
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        if not (user_prompt or "").strip():
            raise GenerationError("User prompt must not be empty")

        try:
            response = self._generate_content(
                model=self._model_id,
                contents=user_prompt,
                config={
                    "system_instruction": system_prompt,
                    "temperature": self.TEMPERATURE,
                },
            )
        except Exception as exc:
            logger.error(
                "GoogleGenerationService: Generation failed",
                exc_info=True,
                extra={"model_id": self._model_id, "error_type": type(exc).__name__},
            )
            raise GenerationError(
                "Failed to generate response", original_error=exc
            ) from exc

        if not getattr(response, "candidates", None):
            raise GenerationError("Generation provider returned no completion")

        text = (getattr(response, "text", "") or "").strip()
        logger.info(
            "GoogleGenerationService: Response generated",
            extra={"model_id": self._model_id, "output_chars": len(text)},
        )
        return text


def _build_client(api_key: str, base_url: str | None) -> genai.Client:
    """R: genai.Client con base_url opcional (http_options)."""
    if base_url and base_url.strip():
        return genai.Client(
            api_key=api_key, http_options={"base_url": base_url.strip()}
        )
    return genai.Client(api_key=api_key)
