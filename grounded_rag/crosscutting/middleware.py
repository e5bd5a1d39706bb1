"""
===============================================================================
MÓDULO: Middleware HTTP de contexto de request
===============================================================================

RequestContextMiddleware:
  - Generar/propagar X-Request-Id
  - Setear contextvars (request_id / method / path) para los logs
  - Loguear cada request con status y latencia
  - Limpiar el contexto al final (sin filtraciones entre requests)

Colaboradores:
  - grounded_rag/context.py
  - crosscutting/logger.py
===============================================================================
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..context import clear_context, set_request_context
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"
_MAX_REQUEST_ID_LEN = 128


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Contexto por request + log de finalización."""

    _QUIET_PATHS = {"/healthz"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        incoming = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
        request_id = (
            incoming if self._is_valid_request_id(incoming) else str(uuid.uuid4())
        )

        set_request_context(
            request_id=request_id, method=request.method, path=request.url.path
        )
        request.state.request_id = request_id

        start = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        except Exception:
            logger.exception(
                "request falló",
                extra={
                    "status_code": 500,
                    "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )
            raise
        finally:
            if request.url.path not in self._QUIET_PATHS:
                logger.info(
                    "request completado",
                    extra={
                        "status_code": status_code,
                        "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                    },
                )
            clear_context()

    @staticmethod
    def _is_valid_request_id(value: str) -> bool:
        return bool(value) and len(value) <= _MAX_REQUEST_ID_LEN
