"""
===============================================================================
TARJETA CRC — grounded_rag/api/exception_handlers.py (Manejo Centralizado)
===============================================================================

Responsabilidades:
  - Traducir excepciones del núcleo RAG a respuestas HTTP RFC7807.
  - Renderizar errores de validación del request (pydantic) con el mismo
    formato que ValidationError del núcleo.
  - Loguear errores con request_id + error_id.

Mapeo:
  - ValidationError          → 422 VALIDATION_ERROR
  - RequestValidationError   → 422 VALIDATION_ERROR
  - EmbeddingError (+Dim.)   → 503 EMBEDDING_ERROR
  - GenerationError          → 503 GENERATION_ERROR
  - RAGError (resto)         → 500 INTERNAL_ERROR
  - Exception                → 500 INTERNAL_ERROR (sin detalles en producción)
===============================================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..crosscutting.config import get_settings
from ..crosscutting.error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    validation_error,
)
from ..crosscutting.exceptions import (
    EmbeddingError,
    GenerationError,
    RAGError,
    ValidationError,
)
from ..crosscutting.logger import logger


async def _handle_service_error(
    request: Request,
    *,
    exc: RAGError,
    code: ErrorCode,
    status_code: int,
) -> JSONResponse:
    """Helper común para errores tipados del núcleo."""
    log = logger.warning if status_code < 500 else logger.error
    log(
        "Error de servicio",
        extra={
            "code": code.value,
            "error_code": exc.error_code,
            "error_id": exc.error_id,
            "error": exc.message,
        },
    )

    app_exc = AppHTTPException(
        status_code=status_code,
        code=code,
        detail=exc.message,
        errors=[{"error_id": exc.error_id, "error_code": exc.error_code}],
    )
    return await app_exception_handler(request, app_exc)


async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.VALIDATION_ERROR, status_code=422
    )


async def embedding_error_handler(
    request: Request, exc: EmbeddingError
) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.EMBEDDING_ERROR, status_code=503
    )


async def generation_error_handler(
    request: Request, exc: GenerationError
) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.GENERATION_ERROR, status_code=503
    )


async def rag_error_handler(request: Request, exc: RAGError) -> JSONResponse:
    return await _handle_service_error(
        request, exc=exc, code=ErrorCode.INTERNAL_ERROR, status_code=500
    )


def _field_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "msg": err.get("msg", ""),
        }
        for err in exc.errors()
    ]


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Errores de schema del request (pydantic) como RFC7807 VALIDATION_ERROR."""
    errors = _field_errors(exc)
    logger.warning("Request inválido", extra={"validation_errors": errors})
    return await app_exception_handler(
        request, validation_error("Request validation failed", errors)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback para excepciones no tipadas (log completo, respuesta genérica)."""
    logger.error(
        "Excepción no controlada",
        exc_info=True,
        extra={"error_type": type(exc).__name__},
    )

    detail = "Error interno." if get_settings().is_production() else str(exc)
    app_exc = AppHTTPException(
        status_code=500,
        code=ErrorCode.INTERNAL_ERROR,
        detail=detail,
    )
    return await app_exception_handler(request, app_exc)


def register_exception_handlers(app) -> None:
    """
    Registra handlers en la app FastAPI.

    Starlette resuelve por MRO: EmbeddingDimensionError usa el handler de
    EmbeddingError y RAGError queda como fallback de errores tipados.
    """
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(EmbeddingError, embedding_error_handler)
    app.add_exception_handler(GenerationError, generation_error_handler)
    app.add_exception_handler(RAGError, rag_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = ["register_exception_handlers"]
