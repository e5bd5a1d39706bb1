"""
===============================================================================
MÓDULO: Excepciones tipadas del núcleo RAG (errores internos)
===============================================================================

Objetivo
--------
Tener excepciones internas coherentes, con:
- error_code estable
- error_id para correlación con logs
- message “humana” (sin filtrar secretos)

Taxonomía
---------
- ValidationError: input inválido del caller (no se reintenta, sin llamadas externas)
- EmbeddingError: falla del colaborador de embeddings
- GenerationError: falla del colaborador de generación o salida inválida
  luego del intento de reparación
- SchemaViolation / ResponseParseError: salida del modelo mal formada
  (dispara el único intento de reparación)

“Sin evidencia” y “baja confianza” NO son errores: se resuelven con la
respuesta canónica de información insuficiente.

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  RAGError + subclases

Responsabilidades:
  - Estandarizar errores internos que luego se mapean a HTTP
  - Generar error_id para rastreo

Colaboradores:
  - api/exception_handlers.py (mapea a AppHTTPException)
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

from uuid import uuid4


class RAGError(Exception):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      RAGError

    Responsabilidades:
      - Base para errores internos del sistema
      - Proveer error_code + error_id + message

    Colaboradores:
      - api/exception_handlers.py
    ----------------------------------------------------------------------------
    """

    error_code: str = "RAG_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class ValidationError(RAGError):
    """Input inválido (pregunta vacía/excesiva, top_k fuera de rango, nombre vacío)."""

    error_code: str = "VALIDATION_ERROR"


class EmbeddingError(RAGError):
    """Errores de embeddings (provider externo o input vacío)."""

    error_code: str = "EMBEDDING_ERROR"


class EmbeddingDimensionError(EmbeddingError):
    """Vector con dimensionalidad distinta a la del índice (modo estricto)."""

    error_code: str = "EMBEDDING_DIMENSION_ERROR"


class GenerationError(RAGError):
    """Errores del modelo generativo (provider externo / salida irreparable)."""

    error_code: str = "GENERATION_ERROR"


class SchemaViolation(RAGError):
    """La salida del modelo no cumple el contrato de respuesta."""

    error_code: str = "SCHEMA_VIOLATION"


class ResponseParseError(SchemaViolation):
    """La salida del modelo no contiene un objeto JSON parseable."""

    error_code: str = "RESPONSE_PARSE_ERROR"
