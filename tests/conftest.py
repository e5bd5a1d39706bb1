"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment (deterministic fakes, no .env file)
  - Provide reusable fixtures (mock ports, in-memory index, model outputs)

Collaborators:
  - pytest: Test framework
  - unittest.mock: Mocking library
  - grounded_rag.domain: Entities and ports

Notes:
  - Env vars are set BEFORE importing grounded_rag (Settings is cached)
  - Use function-scoped fixtures for per-test isolation
"""

import json
import os
import sys
from pathlib import Path
from typing import Callable
from unittest.mock import Mock

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ["APP_ENV"] = "test"
os.environ["FAKE_LLM"] = "1"
os.environ["FAKE_EMBEDDINGS"] = "1"
os.environ.setdefault("DEV_SEED_DOCUMENTS", "0")

from grounded_rag.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from grounded_rag.domain.entities import (  # noqa: E402
    DocumentChunk,
    VectorMetadata,
)
from grounded_rag.domain.services import (  # noqa: E402
    EmbeddingService,
    GenerationService,
)
from grounded_rag.infrastructure.repositories import (  # noqa: E402
    InMemoryVectorStore,
)


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


# ============================================================================
# Builders
# ============================================================================


def make_chunk(
    embedding, name: str = "Policy", section: str = "chunk 1", text: str = "text"
) -> DocumentChunk:
    """R: DocumentChunk with explicit metadata (tests only)."""
    return DocumentChunk(
        embedding=embedding,
        metadata=VectorMetadata(name=name, page_or_section=section, text=text),
    )


def model_output(
    *,
    answer: str = "Remote work is allowed up to three days per week.",
    excerpt: str = "Remote work is allowed up to three days per week.",
    confidence=0.9,
    name: str = "Policy",
    section: str = "chunk 1",
    **extra,
) -> str:
    """R: JSON string shaped like a valid model response."""
    payload = {
        "answer": answer,
        "sourceDocuments": [
            {"name": name, "pageOrSection": section, "excerpt": excerpt}
        ],
        "confidenceScore": confidence,
        "recommendation": "Check with HR for exceptions.",
    }
    payload.update(extra)
    return json.dumps(payload)


@pytest.fixture
def chunk_factory() -> Callable[..., DocumentChunk]:
    return make_chunk


@pytest.fixture
def model_output_factory() -> Callable[..., str]:
    return model_output


# ============================================================================
# Ports
# ============================================================================


@pytest.fixture
def mock_embedding_service() -> Mock:
    """
    R: Mock EmbeddingService.

    Pre-configured behaviors:
    - embed() returns a 3-dimensional unit vector on the first axis
    """
    mock = Mock(spec=EmbeddingService)
    mock.embed.return_value = [1.0, 0.0, 0.0]
    return mock


@pytest.fixture
def mock_generation_service() -> Mock:
    """
    R: Mock GenerationService.

    Pre-configured behaviors:
    - generate() returns a valid, high-confidence JSON response
    """
    mock = Mock(spec=GenerationService)
    mock.generate.return_value = model_output()
    return mock


# ============================================================================
# Index
# ============================================================================


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def policy_store(vector_store: InMemoryVectorStore) -> InMemoryVectorStore:
    """R: Index with one policy chunk aligned with mock_embedding_service."""
    vector_store.add_documents(
        [
            make_chunk(
                [1.0, 0.0, 0.0],
                text="Remote work is allowed up to three days per week.",
            )
        ]
    )
    return vector_store
