"""
Name: InMemoryDocumentRegistry Unit Tests

Responsibilities:
  - Validate upsert-by-name semantics and ordering of the listing
  - Validate name normalization and the empty-name guard
"""

from datetime import datetime, timedelta, timezone

import pytest

from grounded_rag.crosscutting.exceptions import ValidationError
from grounded_rag.infrastructure.repositories.in_memory import (
    InMemoryDocumentRegistry,
)


class _Clock:
    def __init__(self) -> None:
        self._now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


@pytest.mark.unit
class TestDocumentRegistry:
    def test_upsert_stores_raw_text(self):
        registry = InMemoryDocumentRegistry()

        stored = registry.upsert("Policy", "Line one.\r\n\r\nLine two.  ")

        assert stored.name == "Policy"
        assert stored.text == "Line one.\r\n\r\nLine two.  "
        assert stored.ingested_at.tzinfo is not None

    def test_upsert_replaces_same_name(self):
        """R: Re-ingesting a name replaces its entry (one per name)."""
        clock = _Clock()
        registry = InMemoryDocumentRegistry(clock=clock)
        first = registry.upsert("Policy", "v1")

        second = registry.upsert("  Policy ", "v2")

        docs = registry.list_documents()
        assert len(docs) == 1
        assert docs[0].text == "v2"
        assert second.ingested_at > first.ingested_at

    def test_listing_is_sorted_case_insensitively(self):
        registry = InMemoryDocumentRegistry()
        for name in ("beta", "Alpha", "gamma"):
            registry.upsert(name, "x")

        assert [d.name for d in registry.list_documents()] == ["Alpha", "beta", "gamma"]

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_is_rejected(self, name):
        registry = InMemoryDocumentRegistry()

        with pytest.raises(ValidationError):
            registry.upsert(name, "text")

        assert len(registry) == 0

    def test_clear(self):
        registry = InMemoryDocumentRegistry()
        registry.upsert("Policy", "x")

        registry.clear()

        assert registry.list_documents() == []
