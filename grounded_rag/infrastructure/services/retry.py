"""
Name: Provider Retry Policy (tenacity)

Qué es
------
Política de resiliencia para las llamadas a providers externos (embeddings y
generación). Se aplica DENTRO de los adapters: el núcleo RAG nunca reintenta
fallas de transporte por su cuenta.

CRC (Component Card)
--------------------
Component: retry helper
Responsibilities:
  - Clasificar errores: transitorio (reintentar) vs permanente (fail-fast)
  - Construir un decorator tenacity con exponential backoff + jitter
  - Loguear cada reintento con contexto mínimo
Collaborators:
  - tenacity
  - crosscutting.config.get_settings (attempts / delays)
  - crosscutting.logger
Constraints:
  - Transitorios: 408, 429, 5xx, timeouts, errores de conexión
  - Permanentes: 400, 401, 403, 404 (credenciales/modelo inválido)
  - Desconocido → no se reintenta
"""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ...crosscutting.config import get_settings
from ...crosscutting.logger import logger

T = TypeVar("T")

TRANSIENT_HTTP_CODES: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504})
PERMANENT_HTTP_CODES: frozenset[int] = frozenset({400, 401, 403, 404})

# google.genai.errors.APIError expone `code`; httpx expone `response.status_code`.
_STATUS_ATTRS = ("code", "status_code")

_TRANSIENT_NAME_HINTS = (
    "timeout",
    "timedout",
    "connect",
    "unavailable",
    "resourceexhausted",
    "deadline",
)

_TRANSIENT_MESSAGE_HINTS = (
    "rate limit",
    "too many requests",
    "quota exceeded",
    "temporarily unavailable",
    "service unavailable",
    "connection reset",
    "connection refused",
    "timed out",
    "deadline exceeded",
)


def get_http_status_code(exception: BaseException) -> Optional[int]:
    """R: Status HTTP de la excepción, si el SDK lo expone (None si no)."""
    for attr in _STATUS_ATTRS:
        value = getattr(exception, attr, None)
        # Algunos SDKs usan `code` para status gRPC (< 100): se ignora.
        if isinstance(value, int) and not isinstance(value, bool) and value >= 100:
            return value

    response = getattr(exception, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    return None


def is_transient_error(exception: BaseException) -> bool:
    """
    R: ¿Vale la pena reintentar?

    Orden de decisión:
      1) status HTTP conocido
      2) TimeoutError / ConnectionError
      3) heurística por nombre de clase y por mensaje
    """
    status_code = get_http_status_code(exception)
    if status_code is not None:
        if status_code in PERMANENT_HTTP_CODES:
            return False
        if status_code in TRANSIENT_HTTP_CODES:
            return True

    if isinstance(exception, (TimeoutError, ConnectionError)):
        return True

    name = type(exception).__name__.lower()
    if any(hint in name for hint in _TRANSIENT_NAME_HINTS):
        return True

    message = str(exception).lower()
    return any(hint in message for hint in _TRANSIENT_MESSAGE_HINTS)


def _log_retry(retry_state: RetryCallState) -> None:
    """R: Hook before_sleep de tenacity."""
    fn_name = getattr(retry_state.fn, "__name__", "unknown")
    wait_seconds = retry_state.next_action.sleep if retry_state.next_action else 0
    exc = retry_state.outcome.exception() if retry_state.outcome else None

    logger.warning(
        "Retrying provider call",
        extra={
            "provider_call": fn_name,
            "attempt": retry_state.attempt_number,
            "wait_seconds": round(float(wait_seconds), 2),
            "error_type": type(exc).__name__ if exc else None,
        },
    )


def create_retry_decorator(
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    R: Decorator tenacity para un adapter de provider.

    Los overrides explícitos ganan sobre Settings (útil en tests: delays en 0).
    reraise=True: se propaga la última excepción original (el adapter la
    traduce a EmbeddingError / GenerationError).
    """
    settings = get_settings()

    attempts = settings.retry_max_attempts if max_attempts is None else max_attempts
    initial = (
        settings.retry_base_delay_seconds if base_delay is None else float(base_delay)
    )
    ceiling = (
        settings.retry_max_delay_seconds if max_delay is None else float(max_delay)
    )

    if attempts <= 0:
        raise ValueError("max_attempts must be > 0")
    if initial < 0:
        raise ValueError("base_delay must be >= 0")
    if ceiling < 0:
        raise ValueError("max_delay must be >= 0")

    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential_jitter(initial=initial, max=ceiling, jitter=initial),
        retry=retry_if_exception(is_transient_error),
        before_sleep=_log_retry,
        reraise=True,
    )
