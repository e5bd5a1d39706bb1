"""
Name: Settings Unit Tests

Responsibilities:
  - Validate defaults, range validators and cross-field checks
  - Validate the provider credential requirement
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from grounded_rag.crosscutting.config import Settings


def _settings(**overrides) -> Settings:
    values = {"fake_llm": True, "fake_embeddings": True, "google_api_key": ""}
    values.update(overrides)
    return Settings(**values)


@pytest.mark.unit
class TestSettingsDefaults:
    def test_rag_defaults(self, monkeypatch):
        for var in (
            "RAG_MIN_RELEVANCE_SCORE",
            "RAG_LOW_CONFIDENCE_THRESHOLD",
            "RAG_MAX_EXCERPT_CHARS",
            "RAG_MAX_GENERATION_ATTEMPTS",
            "DEFAULT_TOP_K",
            "MAX_TOP_K",
            "CHUNK_MAX_TOKENS",
        ):
            monkeypatch.delenv(var, raising=False)

        settings = _settings()

        assert settings.rag_min_relevance_score == 0.2
        assert settings.rag_low_confidence_threshold == 0.3
        assert settings.rag_max_excerpt_chars == 1200
        assert settings.rag_max_generation_attempts == 2
        assert settings.default_top_k == 5
        assert settings.max_top_k == 20
        assert settings.chunk_max_tokens == 500

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RAG_LOW_CONFIDENCE_THRESHOLD", "0.5")
        monkeypatch.setenv("MAX_TOP_K", "10")

        settings = _settings()

        assert settings.rag_low_confidence_threshold == 0.5
        assert settings.max_top_k == 10


@pytest.mark.unit
class TestSettingsValidation:
    def test_api_key_required_without_fakes(self):
        with pytest.raises(PydanticValidationError, match="GOOGLE_API_KEY"):
            _settings(fake_llm=False, fake_embeddings=True)

    def test_api_key_satisfies_requirement(self):
        settings = _settings(fake_llm=False, fake_embeddings=False, google_api_key="k")
        assert settings.google_api_key == "k"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("rag_min_relevance_score", 1.5),
            ("rag_low_confidence_threshold", -0.1),
            ("rag_max_excerpt_chars", 0),
            ("rag_max_generation_attempts", 0),
            ("chunk_max_tokens", 0),
        ],
    )
    def test_out_of_range_values(self, field, value):
        with pytest.raises(PydanticValidationError):
            _settings(**{field: value})

    def test_default_top_k_must_fit_max(self):
        settings = _settings(default_top_k=30, max_top_k=20)

        with pytest.raises(ValueError, match="default_top_k"):
            settings.validate_top_k_params()

    def test_allowed_origins_list(self):
        settings = _settings(allowed_origins=" http://a.com , ,http://b.com")
        assert settings.get_allowed_origins_list() == ["http://a.com", "http://b.com"]

    @pytest.mark.parametrize(
        "env,expected", [("production", True), (" Production ", True), ("test", False)]
    )
    def test_is_production(self, env, expected):
        assert _settings(app_env=env).is_production() is expected
