"""
Name: Fake Embeddings Service (Deterministic Test Double)

Qué es
------
Implementación determinista de `EmbeddingService` para tests/CI/dev.
No realiza llamadas externas.

Estrategia: bag-of-words hasheado
---------------------------------
- Cada palabra (minúsculas, `\\w+`) suma 1.0 en el bucket sha256(palabra) % dim.
- Vectores no negativos: textos que comparten palabras tienen cosine > 0,
  así el umbral de relevancia se comporta de forma razonable en dev.
- Texto sin palabras (solo símbolos) → se hashea el texto completo a un bucket.

CRC (Class-Responsibility-Collaboration)
----------------------------------------
Class: FakeEmbeddingService
Responsibilities:
  - Generar embeddings deterministas (misma entrada → mismo vector)
  - Rechazar texto vacío (igual que el provider real)
Collaborators:
  - domain.services.EmbeddingService (contrato)
Constraints:
  - Sin IO / sin red
"""

from __future__ import annotations

import hashlib
import re
from typing import List

from ...crosscutting.exceptions import EmbeddingError
from ...crosscutting.logger import logger
from ...domain.services import EmbeddingService

DEFAULT_EMBEDDING_DIMENSION = 768

_WORD_RE = re.compile(r"\w+")


def _bucket(token: str, dimension: int) -> int:
    digest = hashlib.sha256(token.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") % dimension


def _build_embedding(text: str, dimension: int) -> List[float]:
    vector = [0.0] * dimension
    tokens = _WORD_RE.findall(text.lower()) or [text]
    for token in tokens:
        vector[_bucket(token, dimension)] += 1.0
    return vector


class FakeEmbeddingService(EmbeddingService):
    """R: EmbeddingService determinista para tests/CI."""

    MODEL_ID = "fake-embedding-v1"

    def __init__(self, *, dimension: int = DEFAULT_EMBEDDING_DIMENSION) -> None:
        if dimension <= 0:
            raise ValueError("dimension must be > 0")
        self._dimension = dimension
        logger.debug(
            "FakeEmbeddingService initialized",
            extra={"dimension": self._dimension, "model_id": self.MODEL_ID},
        )

    def embed(self, text: str) -> List[float]:
        normalized = (text or "").strip()
        if not normalized:
            raise EmbeddingError("Text to embed must not be empty")
        return _build_embedding(normalized, self._dimension)

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_id(self) -> str:
        return self.MODEL_ID
