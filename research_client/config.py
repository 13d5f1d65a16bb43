"""Client configuration with environment variable loading.

Pydantic-based configuration for the research assistant client.
Values come from the environment, with a .env file loaded first.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()

# Models offered per LLM provider. The first entry is the provider default.
MODEL_OPTIONS: dict[str, list[str]] = {
    "openai": ["gpt-4o", "gpt-4", "gpt-3.5-turbo"],
    "anthropic": ["claude-3-opus", "claude-3-sonnet"],
    "deepseek": ["deepseek-coder", "deepseek-chat"],
    "gemini": ["gemini-1.5-pro", "gemini-1.0-pro"],
}

DEFAULT_PROVIDER = "openai"


class ClientConfig(BaseModel):
    """Configuration for the research assistant client.

    Attributes:
        api_base_url: Base URL of the research assistant backend.
        request_timeout: Timeout in seconds for regular requests.
        upload_timeout: Timeout in seconds for document uploads.
        session_store_path: JSON file holding saved sessions. Empty keeps
            sessions in memory only.
        max_sessions: Number of sessions kept before the oldest is evicted.
        llm_provider: Provider used for queries.
        llm_model: Model used for queries.
        embedding_provider: Provider the backend embeds uploads with.
        preview_length: Characters of extracted text shown per uploaded file.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("API_BASE_URL", "http://localhost:8000"),
        description="Research assistant backend URL",
    )
    request_timeout: float = Field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "300")),
        gt=0,
        description="Request timeout in seconds",
    )
    upload_timeout: float = Field(
        default_factory=lambda: float(os.getenv("UPLOAD_TIMEOUT", "600")),
        gt=0,
        description="Upload timeout in seconds",
    )
    session_store_path: str = Field(
        default_factory=lambda: os.getenv("SESSION_STORE_PATH", "data/chat-sessions.json"),
        description="Path of the saved sessions file",
    )
    max_sessions: int = Field(
        default_factory=lambda: int(os.getenv("MAX_SESSIONS", "10")),
        ge=1,
        le=100,
        description="Maximum number of sessions kept",
    )
    llm_provider: str = Field(
        default_factory=lambda: os.getenv("LLM_PROVIDER", DEFAULT_PROVIDER),
        description="LLM provider for queries",
    )
    llm_model: str | None = Field(
        default_factory=lambda: os.getenv("LLM_MODEL") or None,
        description="LLM model (None for the provider default)",
    )
    embedding_provider: str = Field(
        default_factory=lambda: os.getenv("EMBEDDING_PROVIDER", "google"),
        description="Embedding provider for uploaded documents",
    )
    preview_length: int = Field(
        default_factory=lambda: int(os.getenv("PREVIEW_LENGTH", "250")),
        ge=1,
        description="Characters of extracted text shown per file",
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("llm_provider")
    @classmethod
    def validate_llm_provider(cls, v: str) -> str:
        """Validate that the provider is one we offer models for."""
        v = v.strip().lower()
        if v not in MODEL_OPTIONS:
            available = ", ".join(MODEL_OPTIONS)
            raise ValueError(f"Unknown LLM_PROVIDER '{v}'. Available: {available}")
        return v

    @model_validator(mode="after")
    def resolve_llm_model(self) -> "ClientConfig":
        """Default the model to the provider's first model and validate it."""
        models = MODEL_OPTIONS[self.llm_provider]
        if self.llm_model is None:
            self.llm_model = models[0]
        elif self.llm_model not in models:
            raise ValueError(
                f"Model '{self.llm_model}' is not offered by {self.llm_provider}"
            )
        return self


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValidationError: If an environment value is invalid.
    """
    return ClientConfig()
