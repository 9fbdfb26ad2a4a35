"""Configuration management for AI Study Notes."""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Value shipped in the example .env; treated the same as an unset key.
PLACEHOLDER_OPENAI_KEY = "your_openai_api_key_here"


def _sanitize_secret(value: str) -> str:
    """Remove BOM characters and whitespace from secrets.

    Secrets pasted into .env files or injected by hosting platforms may carry
    BOM characters that break HTTP headers.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Chat / note generation (OpenRouter)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    chat_model: str = "meta-llama/llama-3.2-3b-instruct:free"

    # Embeddings (OpenAI)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    embedding_model: str = "text-embedding-3-small"

    # Backend service (Supabase)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    storage_bucket: str = "documents"

    # Sent to OpenRouter for attribution
    site_url: str = "http://localhost:3000"
    app_title: str = "AI Study Notes"

    @field_validator(
        "openrouter_api_key",
        "openai_api_key",
        "supabase_url",
        "supabase_anon_key",
        mode="after",
    )
    @classmethod
    def sanitize_secrets(cls, value: str) -> str:
        """Remove BOM and whitespace from secret values."""
        return _sanitize_secret(value)

    # Chunking
    chunk_size: int = 1000
    chunk_overlap: int = 200

    # Retrieval
    retrieval_limit: int = 5
    match_threshold: float = 0.7
    manual_scan_limit: int = 20

    # Upload limits
    max_files: int = 10
    max_file_size: int = 50 * 1024 * 1024
    max_combined_text_length: int = 50_000
    embed_chunks_on_upload: bool = False

    # Note generation
    notes_input_limit: int = 8000
    notes_max_tokens: int = 2000
    notes_temperature: float = 0.3

    # Network
    request_timeout: float = 30.0
    stream_read_timeout: float = 120.0
    error_word_delay: float = 0.02

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    debug: bool = False

    @model_validator(mode="after")
    def check_chunking(self) -> "Settings":
        """Reject chunk settings that would stop the chunker from advancing."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.chunk_overlap < 0 or self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and less than chunk_size")
        return self

    @property
    def effective_openai_api_key(self) -> str:
        """OpenAI key, or an empty string when unset or left as the placeholder."""
        if self.openai_api_key == PLACEHOLDER_OPENAI_KEY:
            return ""
        return self.openai_api_key

    @property
    def backend_configured(self) -> bool:
        """Whether the Supabase URL and anon key are both present."""
        return bool(self.supabase_url and self.supabase_anon_key)


# Global settings instance
settings = Settings()
