"""Utilidades de texto (chunking)."""

from .chunker import (
    DEFAULT_MAX_TOKENS_PER_CHUNK,
    ParagraphTextChunker,
    chunk_text,
    estimate_tokens,
    normalize_text,
    split_by_chars,
)

__all__ = [
    "DEFAULT_MAX_TOKENS_PER_CHUNK",
    "ParagraphTextChunker",
    "chunk_text",
    "estimate_tokens",
    "normalize_text",
    "split_by_chars",
]
