"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the grounded RAG contract

Collaborators:
  - api/main.py: reads settings for CORS, seeding and startup logging
  - container.py: reads settings to wire chunker, index, retriever and adapters
  - interfaces/api/http/schemas: reads request validation limits

Constraints:
  - Lives in crosscutting, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache for performance
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/production/test)
        log_level: Root log level (default: INFO)
        log_json: Emit JSON logs (default: True)
        allowed_origins: Comma-separated CORS origins
        google_api_key: Google GenAI API key (embeddings + generation)
        google_base_url: Optional provider base URL (gateways/proxies)
        embedding_model_id: Embedding model identifier
        generation_model_id: Generation model identifier
        fake_embeddings: Use deterministic fake embeddings (CI/dev)
        fake_llm: Use deterministic fake generation (CI/dev)
        chunk_max_tokens: Estimated tokens per chunk (default: 500)
        chunk_prefer_paragraph_boundaries: Try sentence splits before char splits
        rag_min_relevance_score: Relevance floor for evidence (default: 0.2)
        rag_low_confidence_threshold: Confidence gate (default: 0.3)
        rag_max_excerpt_chars: Max chars per excerpt in the prompt (default: 1200)
        rag_max_generation_attempts: Attempt budget, first call + repairs (default: 2)
        default_top_k: Default number of chunks to retrieve (default: 5)
        max_top_k: Maximum top_k for queries (default: 20)
        max_query_chars: Maximum question length (default: 4000)
        vector_store_strict_dimensions: Reject mismatched embedding sizes (default: True)
        dev_seed_documents: Ingest the demo corpus at startup (default: False)
        retry_max_attempts: Provider retry attempts for transient errors
        retry_base_delay_seconds: Initial backoff delay
        retry_max_delay_seconds: Max backoff delay
    """

    # Environment
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"

    # Provider (Google GenAI)
    google_api_key: str = ""
    google_base_url: str = ""
    embedding_model_id: str = "text-embedding-004"
    generation_model_id: str = "gemini-1.5-flash"

    # Testing/CI
    fake_llm: bool = False
    fake_embeddings: bool = False

    # Chunking configuration
    chunk_max_tokens: int = 500
    chunk_prefer_paragraph_boundaries: bool = True

    # RAG contract
    rag_min_relevance_score: float = 0.2
    rag_low_confidence_threshold: float = 0.3
    rag_max_excerpt_chars: int = 1200
    rag_max_generation_attempts: int = 2

    # API limits
    default_top_k: int = 5
    max_top_k: int = 20
    max_query_chars: int = 4000

    # Vector index
    vector_store_strict_dimensions: bool = True

    # Dev Tools
    dev_seed_documents: bool = False

    # Retry/Resilience
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_max_delay_seconds: float = 30.0

    @field_validator("chunk_max_tokens")
    @classmethod
    def chunk_max_tokens_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("chunk_max_tokens must be greater than 0")
        return v

    @field_validator("rag_min_relevance_score", "rag_low_confidence_threshold")
    @classmethod
    def threshold_in_unit_interval(cls, v: float) -> float:
        if v < 0 or v > 1:
            raise ValueError("RAG thresholds must be between 0 and 1")
        return v

    @field_validator("rag_max_excerpt_chars")
    @classmethod
    def excerpt_chars_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("rag_max_excerpt_chars must be greater than 0")
        return v

    @field_validator("rag_max_generation_attempts")
    @classmethod
    def attempts_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("rag_max_generation_attempts must be >= 1")
        return v

    def validate_top_k_params(self) -> None:
        """
        Cross-field validation: default_top_k must lie in 1..max_top_k.
        Called explicitly after instantiation.
        """
        if self.max_top_k < 1:
            raise ValueError("max_top_k must be >= 1")
        if not 1 <= self.default_top_k <= self.max_top_k:
            raise ValueError(
                f"default_top_k ({self.default_top_k}) must be between 1 and "
                f"max_top_k ({self.max_top_k})"
            )

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @model_validator(mode="after")
    def validate_ai_requirements(self):
        if not self.google_api_key and not (self.fake_llm and self.fake_embeddings):
            raise ValueError(
                "GOOGLE_API_KEY is required unless FAKE_LLM=1 and FAKE_EMBEDDINGS=1"
            )
        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    settings = Settings()
    settings.validate_top_k_params()
    return settings
