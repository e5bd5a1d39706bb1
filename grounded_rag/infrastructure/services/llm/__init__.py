"""Adapters de generación (Gemini + fake determinista)."""

from .fake_llm import FakeGenerationService
from .google_llm_service import GoogleGenerationService

__all__ = ["FakeGenerationService", "GoogleGenerationService"]
