"""grounded_rag: RAG con grounding estricto sobre un índice vectorial en memoria."""

__version__ = "0.1.0"
