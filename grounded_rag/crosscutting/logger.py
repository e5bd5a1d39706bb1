# grounded_rag/crosscutting/logger.py
"""
===============================================================================
MÓDULO: Logger estructurado (JSON) con contexto de request
===============================================================================

Objetivo
--------
Loguear de forma:
- Parseable (JSON)
- Correlacionable (request_id / method / path)
- Segura (redacción de secretos y de texto de documentos)

-------------------------------------------------------------------------------
CRC (Component Card)
-------------------------------------------------------------------------------
Componente:
  JSONFormatter + setup_logger()

Responsabilidades:
  - Formatear logs como JSON
  - Enriquecer con contexto (request_id, method, path)
  - Redactar campos sensibles y limitar tamaños

Colaboradores:
  - grounded_rag/context.py (ContextVars)
  - crosscutting/config.py (nivel y formato)
===============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import sys
import traceback
from datetime import datetime, timezone
from typing import Any

# Atributos estándar del LogRecord: no se copian como "extra".
_RESERVED_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}


class _Redactor:
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      _Redactor

    Responsabilidades:
      - Redactar claves sensibles (credenciales del provider)
      - Reducir campos con texto de documentos a un largo
      - Recortar strings gigantes y estructuras profundas

    Colaboradores:
      - JSONFormatter
    ----------------------------------------------------------------------------
    """

    SENSITIVE_KEYS = frozenset(
        {
            "password",
            "secret",
            "token",
            "authorization",
            "api_key",
            "apikey",
            "x-api-key",
            "google_api_key",
            "credential",
        }
    )

    # Contenido privado del corpus: se loguea solo su tamaño.
    CONTENT_KEYS = frozenset({"text", "excerpt", "raw_output", "prompt", "user_prompt"})

    def __init__(self, max_str: int = 4_000, max_depth: int = 4):
        self._max_str = max_str
        self._max_depth = max_depth

    def sanitize(self, value: Any, *, depth: int = 0, key: str | None = None) -> Any:
        lowered = key.lower() if key else ""
        if lowered in self.SENSITIVE_KEYS:
            return "***REDACTADO***"

        if lowered in self.CONTENT_KEYS and isinstance(value, str):
            return f"<texto {len(value)} chars>"

        if depth > self._max_depth:
            return "***TRUNCADO***"

        if isinstance(value, str):
            if len(value) <= self._max_str:
                return value
            return value[: self._max_str] + "…(truncado)"

        if isinstance(value, (bytes, bytearray)):
            return f"<bytes {len(value)}B>"

        if isinstance(value, dict):
            return {
                str(k): self.sanitize(v, depth=depth + 1, key=str(k))
                for k, v in value.items()
            }

        if isinstance(value, (list, tuple)):
            return [self.sanitize(v, depth=depth + 1, key=key) for v in value]

        try:
            json.dumps(value)
            return value
        except (TypeError, ValueError):
            return str(value)


class JSONFormatter(logging.Formatter):
    """
    ----------------------------------------------------------------------------
    CRC (Class Card)
    ----------------------------------------------------------------------------
    Clase:
      JSONFormatter

    Responsabilidades:
      - Convertir LogRecord -> JSON (una línea)
      - Enriquecer con contexto de request
      - Adjuntar stacktrace cuando hay excepción

    Colaboradores:
      - grounded_rag/context.get_context_dict()
      - _Redactor
    ----------------------------------------------------------------------------
    """

    def __init__(self):
        super().__init__()
        self._redactor = _Redactor()

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "pid": os.getpid(),
        }

        from ..context import get_context_dict

        payload.update(get_context_dict())

        for k, v in record.__dict__.items():
            if k in _RESERVED_RECORD_ATTRS:
                continue
            payload[k] = self._redactor.sanitize(v, key=k)

        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else None
            exc_msg = str(record.exc_info[1]) if record.exc_info[1] else None
            payload["exception"] = {
                "type": exc_type,
                "message": exc_msg,
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(
            payload, ensure_ascii=False, default=str, separators=(",", ":")
        )


def setup_logger(name: str = "grounded-rag") -> logging.Logger:
    """
    Crea y configura el logger global.

    - Evita duplicación de handlers en reimport
    - Respeta log_level / log_json desde Settings cuando estén disponibles
      (si la config es inválida, se usa INFO + JSON y el error aparece al
      primer get_settings() del composition root)
    """
    log = logging.getLogger(name)

    level = "INFO"
    use_json = True

    try:
        from .config import get_settings

        s = get_settings()
        level = (s.log_level or "INFO").upper()
        use_json = s.log_json
    except ValueError:
        # pydantic.ValidationError hereda de ValueError.
        pass

    log.setLevel(getattr(logging, level, logging.INFO))

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            JSONFormatter()
            if use_json
            else logging.Formatter("%(levelname)s %(name)s %(message)s")
        )
        log.addHandler(handler)

    return log


# Instancia global (import-friendly)
logger = setup_logger()
