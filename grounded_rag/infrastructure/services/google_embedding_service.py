"""
Name: Google Embeddings Service Implementation

Responsibilities:
  - Implement EmbeddingService (embed(text) -> vector) over Google GenAI
  - Use one symmetric task type for chunks and questions
  - Retry transient errors with exponential backoff + jitter
  - Translate provider failures into EmbeddingError

Collaborators:
  - domain.services.EmbeddingService: Interface implementation
  - google.genai: Google Gen AI SDK
  - retry: Resilience helper for transient errors

Constraints:
  - One text per call (ingestion embeds chunks sequentially)
  - Empty input is rejected before any network call

Notes:
  - Chunks and questions go through the same `embed` port, so the task type
    must be symmetric ("semantic_similarity") for cosine scores to be
    comparable.
"""

from __future__ import annotations

from typing import Callable

from google import genai

from ...crosscutting.exceptions import EmbeddingError
from ...crosscutting.logger import logger
from ...domain.services import EmbeddingService
from .retry import create_retry_decorator


class GoogleEmbeddingService(EmbeddingService):
    """R: Google implementation of EmbeddingService."""

    DEFAULT_MODEL_ID = "text-embedding-004"
    TASK_TYPE = "semantic_similarity"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        client: genai.Client | None = None,
        model_id: str | None = None,
        base_url: str | None = None,
        retry_decorator: Callable | None = None,
    ):
        """
        R: Initialize Google Embedding Service.

        Args:
            api_key: Google API key (injected by the container from Settings)
            client: Optional pre-built genai.Client (useful for tests)
            model_id: Override model id (default: text-embedding-004)
            base_url: Optional provider base URL (gateways/proxies)
            retry_decorator: Optional tenacity retry decorator

        Raises:
            EmbeddingError: If API key not configured and no client injected
        """
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("GoogleEmbeddingService: GOOGLE_API_KEY not configured")
            raise EmbeddingError("GOOGLE_API_KEY not configured")

        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()
        self._client = client or _build_client(resolved_key, base_url)

        decorator = retry_decorator or create_retry_decorator()
        self._embed_content = decorator(self._client.models.embed_content)

        logger.info(
            "GoogleEmbeddingService initialized",
            extra={"model_id": self._model_id, "task_type": self.TASK_TYPE},
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    def embed(self, text: str) -> list[float]:
        """R: Embedding de un único texto (chunk o pregunta)."""
        if not (text or "").strip():
            raise EmbeddingError("Text to embed must not be empty")

        try:
            resp = self._embed_content(
                model=self._model_id,
                contents=[text],
                config={"task_type": self.TASK_TYPE},
            )
        except Exception as exc:
            logger.error(
                "GoogleEmbeddingService: embed_content failed",
                exc_info=True,
                extra={"model_id": self._model_id, "error_type": type(exc).__name__},
            )
            raise EmbeddingError(
                "Failed to call embedding provider", original_error=exc
            ) from exc

        embeddings = getattr(resp, "embeddings", None) or []
        if not embeddings:
            raise EmbeddingError("Embedding provider returned no embeddings")

        values = getattr(embeddings[0], "values", None)
        if not values:
            raise EmbeddingError("Embedding provider returned an empty vector")

        return [float(v) for v in values]


def _build_client(api_key: str, base_url: str | None) -> genai.Client:
    """R: genai.Client con base_url opcional (http_options)."""
    if base_url and base_url.strip():
        return genai.Client(
            api_key=api_key, http_options={"base_url": base_url.strip()}
        )
    return genai.Client(api_key=api_key)
