"""
===============================================================================
TARJETA CRC — router.py (Router raíz / Composición)
===============================================================================

Responsabilidades:
  - Definir el APIRouter raíz que se incluye con prefix="/v1".
  - Centralizar responses RFC7807 para OpenAPI.
  - Componer sub-routers (documents / query).
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter

from ....crosscutting.error_responses import OPENAPI_ERROR_RESPONSES
from .routers.documents import router as documents_router
from .routers.query import router as query_router


def build_router() -> APIRouter:
    """Construye el router raíz v1 (sin side effects al importar sub-módulos)."""
    api_router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)
    api_router.include_router(documents_router)
    api_router.include_router(query_router)
    return api_router


router = build_router()

__all__ = ["router", "build_router"]
