"""
===============================================================================
CRC CARD — infrastructure/text/chunker.py
===============================================================================

Componente:
  Chunking de texto por párrafos (determinístico, sin tokenizer)

Responsabilidades:
  - Partir texto crudo en chunks acotados para embedding y citas.
  - Preferir cortes naturales: párrafo → oración → caracteres.
  - Exponer:
      * estimate_tokens(...) -> int (heurística chars/4)
      * chunk_text(...) -> list[str]
      * ParagraphTextChunker (servicio)

Colaboradores:
  - application/usecases/ingest_text.py (consume TextChunkerService)

Invariantes:
  - Orden de salida = orden del documento.
  - Ningún chunk vacío (tras strip).
  - Todo chunk cumple estimate_tokens(chunk) <= max_tokens_per_chunk.
  - Texto vacío / solo whitespace → [] (no es error).
===============================================================================
"""

from __future__ import annotations

import math
import re
from typing import Final, Iterable

DEFAULT_MAX_TOKENS_PER_CHUNK: Final[int] = 500

# Heurística determinística: 1 token ≈ 4 caracteres.
CHARS_PER_TOKEN: Final[int] = 4

_PARAGRAPH_BREAK_RE: Final[re.Pattern[str]] = re.compile(r"\n\s*\n+")
_SENTENCE_BREAK_RE: Final[re.Pattern[str]] = re.compile(r"(?<=[.!?])\s+")

_PARAGRAPH_JOINER: Final[str] = "\n\n"
_SENTENCE_JOINER: Final[str] = " "


def estimate_tokens(text: str) -> int:
    """Estima tokens sin tokenizer: ceil(len(text) / 4)."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def normalize_text(text: str | None) -> str:
    """Normaliza saltos de línea (CRLF → LF) y recorta extremos."""
    return (text or "").replace("\r\n", "\n").strip()


def _validate_max_tokens(max_tokens_per_chunk: int) -> int:
    if isinstance(max_tokens_per_chunk, bool) or not isinstance(
        max_tokens_per_chunk, int
    ):
        raise ValueError(
            f"max_tokens_per_chunk debe ser int. got={max_tokens_per_chunk!r}"
        )
    if max_tokens_per_chunk <= 0:
        raise ValueError(f"max_tokens_per_chunk debe ser > 0. got={max_tokens_per_chunk}")
    return max_tokens_per_chunk


def _split_pieces(text: str, pattern: re.Pattern[str]) -> list[str]:
    """Split + strip + descarte de vacíos (párrafos u oraciones)."""
    return [piece.strip() for piece in pattern.split(text) if piece.strip()]


def split_by_chars(text: str, max_tokens_per_chunk: int) -> list[str]:
    """
    Corte “bruto” en ventanas de max_tokens_per_chunk * 4 caracteres.

    Sin preferencia semántica: último recurso para oraciones/párrafos gigantes.
    """
    max_chars = max_tokens_per_chunk * CHARS_PER_TOKEN
    pieces: list[str] = []
    for start in range(0, len(text), max_chars):
        piece = text[start : start + max_chars].strip()
        if piece:
            pieces.append(piece)
    return pieces


class _GreedyPacker:
    """
    Acumula piezas enteras en un buffer mientras el estimado no supere el límite.

    Se reutiliza para párrafos (joiner "\\n\\n") y oraciones (joiner " ").
    """

    def __init__(self, max_tokens: int, joiner: str) -> None:
        self._max_tokens = max_tokens
        self._joiner = joiner
        self._buffer = ""
        self.chunks: list[str] = []

    def fits(self, piece: str) -> bool:
        return estimate_tokens(piece) <= self._max_tokens

    def add(self, piece: str) -> bool:
        """Intenta sumar `piece` al buffer; si no entra, flushea y devuelve False."""
        if not self._buffer:
            if self.fits(piece):
                self._buffer = piece
                return True
            return False

        candidate = f"{self._buffer}{self._joiner}{piece}"
        if self.fits(candidate):
            self._buffer = candidate
            return True

        self.flush()
        if self.fits(piece):
            self._buffer = piece
            return True
        return False

    def emit(self, pieces: Iterable[str]) -> None:
        """Emite chunks ya partidos (el buffer debe estar vacío)."""
        self.chunks.extend(pieces)

    def flush(self) -> None:
        trimmed = self._buffer.strip()
        if trimmed:
            self.chunks.append(trimmed)
        self._buffer = ""


def _split_by_sentences(paragraph: str, max_tokens: int) -> list[str]:
    """Párrafo sobredimensionado → oraciones acumuladas; oración gigante → chars."""
    sentences = _split_pieces(paragraph, _SENTENCE_BREAK_RE)
    if len(sentences) <= 1:
        return split_by_chars(paragraph, max_tokens)

    packer = _GreedyPacker(max_tokens, _SENTENCE_JOINER)
    for sentence in sentences:
        if not packer.add(sentence):
            packer.emit(split_by_chars(sentence, max_tokens))
    packer.flush()
    return packer.chunks


def chunk_text(
    text: str,
    max_tokens_per_chunk: int = DEFAULT_MAX_TOKENS_PER_CHUNK,
    prefer_paragraph_boundaries: bool = True,
) -> list[str]:
    """
    Parte el texto en chunks respetando párrafos enteros cuando es posible.

    Algoritmo:
      1) Normalizar y separar párrafos por líneas en blanco.
      2) Acumular párrafos (unidos por línea en blanco) mientras entren.
      3) Párrafo que solo ya excede el límite:
           - prefer_paragraph_boundaries=True  → oraciones, luego chars
           - prefer_paragraph_boundaries=False → chars directo
    """
    max_tokens = _validate_max_tokens(max_tokens_per_chunk)

    raw = normalize_text(text)
    if not raw:
        return []

    # Caso corto: un chunk único, verbatim (sin re-unir párrafos).
    if estimate_tokens(raw) <= max_tokens:
        return [raw]

    packer = _GreedyPacker(max_tokens, _PARAGRAPH_JOINER)
    for paragraph in _split_pieces(raw, _PARAGRAPH_BREAK_RE):
        if packer.add(paragraph):
            continue

        if prefer_paragraph_boundaries:
            packer.emit(_split_by_sentences(paragraph, max_tokens))
        else:
            packer.emit(split_by_chars(paragraph, max_tokens))

    packer.flush()
    return packer.chunks


class ParagraphTextChunker:
    """
    Servicio de chunking por párrafos (implementa TextChunkerService).

    Diseño:
      - Valida parámetros al construir (fail-fast).
      - `chunk()` delega a `chunk_text`.
    """

    def __init__(
        self,
        max_tokens_per_chunk: int = DEFAULT_MAX_TOKENS_PER_CHUNK,
        prefer_paragraph_boundaries: bool = True,
    ):
        self.max_tokens_per_chunk = _validate_max_tokens(max_tokens_per_chunk)
        self.prefer_paragraph_boundaries = prefer_paragraph_boundaries

    def chunk(self, text: str) -> list[str]:
        return chunk_text(
            text,
            max_tokens_per_chunk=self.max_tokens_per_chunk,
            prefer_paragraph_boundaries=self.prefer_paragraph_boundaries,
        )
