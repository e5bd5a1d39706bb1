"""
Name: IngestTextUseCase Unit Tests

Responsibilities:
  - Validate chunk → embed → index orchestration and chunk labels
  - Validate all-or-nothing indexing when embedding fails mid-document
  - Validate the document registry side channel
"""

from unittest.mock import Mock

import pytest

from grounded_rag.application.usecases import IngestTextInput, IngestTextUseCase
from grounded_rag.application.usecases.ingest_text import chunk_label
from grounded_rag.crosscutting.exceptions import EmbeddingError, ValidationError
from grounded_rag.domain.services import TextChunkerService, VectorStore
from grounded_rag.infrastructure.repositories import (
    InMemoryDocumentRegistry,
    InMemoryVectorStore,
)


@pytest.fixture
def chunker() -> Mock:
    mock = Mock(spec=TextChunkerService)
    mock.chunk.return_value = ["First piece.", "Second piece.", "Third piece."]
    return mock


@pytest.fixture
def registry() -> InMemoryDocumentRegistry:
    return InMemoryDocumentRegistry()


@pytest.fixture
def use_case(chunker, mock_embedding_service, vector_store, registry):
    return IngestTextUseCase(chunker, mock_embedding_service, vector_store, registry)


def _stored_labels(store: InMemoryVectorStore) -> list:
    return [r.metadata.page_or_section for r in store.similarity_search([1.0, 0.0, 0.0], 0)]


@pytest.mark.unit
class TestChunkLabel:
    def test_plain(self):
        assert chunk_label(3) == "chunk 3"

    def test_with_section(self):
        assert chunk_label(1, " Intro ") == "Intro (chunk 1)"

    def test_blank_section_is_ignored(self):
        assert chunk_label(2, "   ") == "chunk 2"


@pytest.mark.unit
class TestIngestText:
    def test_indexes_every_chunk_with_sequential_labels(
        self, use_case, vector_store, mock_embedding_service
    ):
        result = use_case.execute(IngestTextInput(document_name=" Policy ", text="raw"))

        assert result.chunks_added == 3
        assert len(vector_store) == 3
        assert mock_embedding_service.embed.call_count == 3
        assert _stored_labels(vector_store) == ["chunk 1", "chunk 2", "chunk 3"]
        names = {r.metadata.name for r in vector_store.similarity_search([1.0, 0.0, 0.0], 0)}
        assert names == {"Policy"}

    def test_section_label_prefixes_locator(self, use_case, vector_store):
        use_case.execute(
            IngestTextInput(document_name="Policy", text="raw", section_label="Default")
        )

        assert _stored_labels(vector_store)[0] == "Default (chunk 1)"

    def test_chunk_text_is_stored_verbatim(self, use_case, vector_store):
        use_case.execute(IngestTextInput(document_name="Policy", text="raw"))

        texts = [r.metadata.text for r in vector_store.similarity_search([1.0, 0.0, 0.0], 0)]
        assert texts == ["First piece.", "Second piece.", "Third piece."]

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_document_name(self, use_case, chunker, name):
        with pytest.raises(ValidationError):
            use_case.execute(IngestTextInput(document_name=name, text="raw"))

        chunker.chunk.assert_not_called()

    def test_empty_text_adds_nothing_but_registers(
        self, use_case, chunker, mock_embedding_service, vector_store, registry
    ):
        chunker.chunk.return_value = []

        result = use_case.execute(IngestTextInput(document_name="Empty", text="   "))

        assert result.chunks_added == 0
        assert len(vector_store) == 0
        mock_embedding_service.embed.assert_not_called()
        assert [d.name for d in registry.list_documents()] == ["Empty"]

    def test_reingesting_is_repeatable_and_appends_duplicates(
        self, use_case, vector_store, registry
    ):
        """R: Same text → same chunks_added and same label sequence each time."""
        first = use_case.execute(IngestTextInput(document_name="Policy", text="raw"))
        second = use_case.execute(IngestTextInput(document_name="Policy", text="raw"))

        labels = _stored_labels(vector_store)
        assert first == second
        assert first.chunks_added == 3
        assert labels[:3] == labels[3:] == ["chunk 1", "chunk 2", "chunk 3"]
        assert len(vector_store) == 6
        assert len(registry) == 1

    def test_embedding_failure_indexes_nothing(
        self, use_case, mock_embedding_service, vector_store, registry
    ):
        mock_embedding_service.embed.side_effect = [
            [1.0, 0.0, 0.0],
            RuntimeError("provider down"),
        ]

        with pytest.raises(EmbeddingError, match="chunk 2"):
            use_case.execute(IngestTextInput(document_name="Policy", text="raw"))

        assert len(vector_store) == 0
        assert len(registry) == 0

    def test_typed_embedding_error_propagates_unchanged(
        self, use_case, mock_embedding_service
    ):
        original = EmbeddingError("quota")
        mock_embedding_service.embed.side_effect = original

        with pytest.raises(EmbeddingError) as exc_info:
            use_case.execute(IngestTextInput(document_name="Policy", text="raw"))

        assert exc_info.value is original

    def test_chunks_added_reports_store_insertions(
        self, chunker, mock_embedding_service
    ):
        """R: Chunks discarded by the index are not counted."""
        store = Mock(spec=VectorStore)
        store.add_documents.return_value = 2
        use_case = IngestTextUseCase(chunker, mock_embedding_service, store)

        result = use_case.execute(IngestTextInput(document_name="Policy", text="raw"))

        assert result.chunks_added == 2
        store.add_documents.assert_called_once()
        assert len(store.add_documents.call_args.args[0]) == 3
