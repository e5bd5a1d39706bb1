"""Entrada HTTP (FastAPI app + exception handlers)."""
