"""
Name: EvidenceRetriever Unit Tests

Responsibilities:
  - Validate the relevance floor and ranking passthrough
  - Validate error translation for the embedding port
"""

from unittest.mock import Mock

import pytest

from grounded_rag.application.usecases import EvidenceRetriever
from grounded_rag.crosscutting.exceptions import EmbeddingError
from grounded_rag.crosscutting.timing import StageTimings
from grounded_rag.domain.entities import ScoredResult, VectorMetadata
from grounded_rag.domain.services import VectorStore


def _result(score: float, name: str) -> ScoredResult:
    return ScoredResult(
        score=score,
        metadata=VectorMetadata(name=name, page_or_section="chunk 1", text=name),
    )


@pytest.mark.unit
class TestEvidenceRetriever:
    def test_filters_below_floor_and_keeps_order(self, mock_embedding_service):
        store = Mock(spec=VectorStore)
        store.similarity_search.return_value = [
            _result(0.9, "a"),
            _result(0.2, "floor"),
            _result(0.19, "below"),
            _result(float("nan"), "nan"),
        ]
        retriever = EvidenceRetriever(mock_embedding_service, store)

        evidence = retriever.retrieve("question", 4)

        assert [r.metadata.name for r in evidence] == ["a", "floor"]
        store.similarity_search.assert_called_once_with([1.0, 0.0, 0.0], 4)

    def test_custom_floor(self, mock_embedding_service, policy_store):
        retriever = EvidenceRetriever(
            mock_embedding_service, policy_store, min_relevance_score=1.5
        )

        assert retriever.retrieve("question", 5) == []
        assert retriever.min_relevance_score == 1.5

    def test_embeds_the_question(self, mock_embedding_service, policy_store):
        retriever = EvidenceRetriever(mock_embedding_service, policy_store)

        evidence = retriever.retrieve("remote work?", 5)

        mock_embedding_service.embed.assert_called_once_with("remote work?")
        assert len(evidence) == 1
        assert evidence[0].score == pytest.approx(1.0)

    def test_unexpected_embedding_failure_is_wrapped(self, mock_embedding_service):
        mock_embedding_service.embed.side_effect = RuntimeError("socket closed")
        retriever = EvidenceRetriever(mock_embedding_service, Mock(spec=VectorStore))

        with pytest.raises(EmbeddingError) as exc_info:
            retriever.retrieve("question", 5)

        assert isinstance(exc_info.value.original_error, RuntimeError)

    def test_records_stage_timings(self, mock_embedding_service, policy_store):
        timings = StageTimings()
        retriever = EvidenceRetriever(mock_embedding_service, policy_store)

        retriever.retrieve("question", 5, timings=timings)

        assert {"embed_ms", "retrieve_ms", "total_ms"} <= set(timings.to_dict())
