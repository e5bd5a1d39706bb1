"""
===============================================================================
MÓDULO: Respuestas de error estándar (RFC 7807 / Problem Details)
===============================================================================

Objetivo
--------
Uniformar los errores HTTP para que:
- El cliente pueda manejar por "code"
- El backend pueda correlacionar por request_id / error_id

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  AppHTTPException + app_exception_handler

Responsabilidades:
  - Definir catálogo de códigos de error (ErrorCode)
  - Construir payload RFC7807 (ErrorDetail)
  - Proveer factory para errores de validación

Colaboradores:
  - crosscutting/middleware.py (request_id)
  - api/exception_handlers.py (mapea errores internos)
===============================================================================
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(str, Enum):
    # 4xx
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # 5xx
    INTERNAL_ERROR = "INTERNAL_ERROR"
    EMBEDDING_ERROR = "EMBEDDING_ERROR"
    GENERATION_ERROR = "GENERATION_ERROR"


class ErrorDetail(BaseModel):
    """
    Modelo RFC 7807 (Problem Details).

    Campos extra:
    - code: error code estable para clientes
    - errors: lista opcional de detalles (ej: [{"field":"query","msg":"..."}])
    """

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

_OPENAPI_ERROR_CONTENT = {
    PROBLEM_JSON_MEDIA_TYPE: {"schema": {"$ref": "#/components/schemas/ErrorDetail"}}
}

OPENAPI_ERROR_RESPONSES = {
    "422": {
        "description": "Validation Error (RFC7807)",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    },
    "503": {
        "description": "Provider Unavailable (RFC7807)",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    },
    "default": {
        "description": "Error (RFC7807)",
        "model": ErrorDetail,
        "content": _OPENAPI_ERROR_CONTENT,
    },
}


class AppHTTPException(HTTPException):
    """HTTPException con ErrorCode estable y errors[] opcional."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


# ---------------------------------------------------------------------------
# Factory de error de validación
# ---------------------------------------------------------------------------
def validation_error(
    detail: str, errors: list[dict[str, Any]] | None = None
) -> AppHTTPException:
    return AppHTTPException(422, ErrorCode.VALIDATION_ERROR, detail, errors)


# ---------------------------------------------------------------------------
# Handler FastAPI
# ---------------------------------------------------------------------------
async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    """Serializa AppHTTPException como problem+json (incluye request_id)."""
    request_id = getattr(getattr(request, "state", None), "request_id", None)

    errors = exc.errors or []
    if request_id:
        errors = [*errors, {"request_id": request_id}]

    error = ErrorDetail(
        type=f"about:blank/{exc.code.value.lower()}",
        title=exc.code.value.replace("_", " ").title(),
        status=exc.status_code,
        detail=str(exc.detail),
        code=exc.code,
        instance=str(request.url),
        errors=errors or None,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error.model_dump(mode="json", exclude_none=True),
        headers=getattr(exc, "headers", None),
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )
