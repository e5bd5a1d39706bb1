"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount router with RAG endpoints under /v1 prefix
  - Expose health check endpoint

Collaborators:
  - FastAPI: ASGI web framework
  - CORSMiddleware: Cross-Origin Resource Sharing handler
  - RequestContextMiddleware: Request ID and logging context
  - interfaces.api.http.router: ingest, query, documents
  - container: shared index + optional demo seeding

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - No authentication (out of scope)
  - In-memory index: content is lost on restart

Notes:
  - Env validation happens in lifespan (startup), not at import time
  - The index is cleared on shutdown
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..container import get_vector_store, reset_container, seed_default_documents_once
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import RequestContextMiddleware
from ..interfaces.api.http.router import router
from .exception_handlers import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings, seeds, clears the index."""
    settings = get_settings()

    try:
        if settings.dev_seed_documents:
            seed_default_documents_once()

        logger.info(
            "Grounded RAG API starting up",
            extra={
                "app_env": settings.app_env,
                "fake_llm": settings.fake_llm,
                "fake_embeddings": settings.fake_embeddings,
                "chunk_max_tokens": settings.chunk_max_tokens,
                "strict_dimensions": settings.vector_store_strict_dimensions,
                "indexed_chunks": len(get_vector_store()),
            },
        )

        yield

    finally:
        reset_container()
        logger.info("Grounded RAG API shutting down")


def _get_allowed_origins() -> list[str]:
    """CORS origins from settings, with fallback for import-time config errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except ValueError:
        return ["http://localhost:3000"]


app = FastAPI(
    title="Grounded RAG API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "ingest", "description": "Text ingestion into the in-memory index"},
        {"name": "query", "description": "Grounded question answering"},
        {"name": "documents", "description": "Ingested documents (preview)"},
    ],
)

# Middleware order (bottom = first to execute): RequestContext → CORS → routes
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-Id"],
)

app.include_router(router, prefix="/v1")

register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """
    Liveness check.

    Returns:
        ok: always True while the process serves requests
        chunks: number of chunks currently indexed
        request_id: Correlation ID for this request
    """
    return {
        "ok": True,
        "chunks": len(get_vector_store()),
        "request_id": getattr(request.state, "request_id", None),
    }
