"""
Infrastructure Services

Adapters concretos para los puertos de embeddings y generación.
"""

from .fake_embedding_service import FakeEmbeddingService
from .google_embedding_service import GoogleEmbeddingService
from .llm import FakeGenerationService, GoogleGenerationService
from .retry import create_retry_decorator, is_transient_error

__all__ = [
    "FakeEmbeddingService",
    "GoogleEmbeddingService",
    "FakeGenerationService",
    "GoogleGenerationService",
    "create_retry_decorator",
    "is_transient_error",
]
