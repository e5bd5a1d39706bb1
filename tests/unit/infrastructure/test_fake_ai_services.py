"""
Name: Deterministic AI Services Unit Tests

Responsibilities:
  - Validate FakeEmbeddingService determinism and lexical similarity
  - Validate FakeGenerationService grounding on the prompt excerpts
"""

import json

import numpy as np
import pytest

from grounded_rag.application.prompts import RAG_SYSTEM_PROMPT, build_user_prompt
from grounded_rag.crosscutting.exceptions import EmbeddingError, GenerationError
from grounded_rag.infrastructure.services import (
    FakeEmbeddingService,
    FakeGenerationService,
)


def _cosine(a, b) -> float:
    a = np.asarray(a)
    b = np.asarray(b)
    return float(a @ b / (np.linalg.norm(a) * np.linalg.norm(b)))


@pytest.mark.unit
class TestFakeEmbeddingService:
    def test_same_text_same_vector(self):
        service = FakeEmbeddingService(dimension=64)

        assert service.embed("Remote work policy") == service.embed("Remote work policy")
        assert len(service.embed("anything")) == 64

    def test_is_case_insensitive(self):
        service = FakeEmbeddingService()
        assert service.embed("Remote WORK") == service.embed("remote work")

    def test_shared_words_score_higher(self):
        service = FakeEmbeddingService()
        doc = service.embed("Remote work is allowed three days per week.")

        related = _cosine(doc, service.embed("remote work days per week"))
        unrelated = _cosine(doc, service.embed("expense reimbursement receipts"))

        assert related > unrelated

    def test_punctuation_only_text_still_embeds(self):
        vector = FakeEmbeddingService(dimension=16).embed("???")
        assert sum(vector) == 1.0

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_text_raises(self, text):
        with pytest.raises(EmbeddingError):
            FakeEmbeddingService().embed(text)

    def test_invalid_dimension(self):
        with pytest.raises(ValueError):
            FakeEmbeddingService(dimension=0)


@pytest.mark.unit
class TestFakeGenerationService:
    def test_cites_first_excerpt_verbatim(self):
        excerpt = "Remote work is allowed up to three days per week."
        prompt = build_user_prompt(
            "How many remote days?",
            [{"name": "Policy", "pageOrSection": "chunk 1", "excerpt": excerpt}],
        )
        service = FakeGenerationService(confidence=0.7)

        payload = json.loads(service.generate(RAG_SYSTEM_PROMPT, prompt))

        assert payload["sourceDocuments"] == [
            {"name": "Policy", "pageOrSection": "chunk 1", "excerpt": excerpt}
        ]
        assert payload["confidenceScore"] == 0.7
        assert excerpt in payload["answer"]
        assert service.calls == 1

    def test_without_excerpts_reports_zero_confidence(self):
        payload = json.loads(
            FakeGenerationService().generate(RAG_SYSTEM_PROMPT, "USER QUESTION: hi")
        )

        assert payload["sourceDocuments"] == []
        assert payload["confidenceScore"] == 0

    def test_empty_prompt_raises(self):
        with pytest.raises(GenerationError):
            FakeGenerationService().generate(RAG_SYSTEM_PROMPT, "  ")

    def test_invalid_confidence(self):
        with pytest.raises(ValueError):
            FakeGenerationService(confidence=1.5)
