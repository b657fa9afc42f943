"""Configuration for the Cosmos DB REST client."""

from urllib.parse import urlsplit

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .auth import TokenType, classify_token
from .headers import ConsistencyLevel


class CosmosConfig(BaseSettings):
    """Configuration for the Cosmos DB REST client.

    All settings can be configured via environment variables with COSMOS_ prefix.

    Credentials:
        - COSMOS_ENDPOINT: Account endpoint (e.g. https://myaccount.documents.azure.com)
        - COSMOS_KEY: Master key (base64) or a resource token

    Token type:
        - token_type="auto" (default): resource token if the key carries the
          ``type=resource`` marker, otherwise master key
        - token_type="master" / "resource": skip classification
    """

    model_config = SettingsConfigDict(
        env_prefix="COSMOS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    endpoint: str = Field(
        default="https://localhost:8081",
        validation_alias=AliasChoices("endpoint", "COSMOS_ENDPOINT", "COSMOS_URL"),
    )
    key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("key", "COSMOS_KEY", "COSMOS_MASTER_KEY"),
        repr=False,
    )
    token_type: str = Field(
        default="auto",
        description="Token type: 'master', 'resource', or 'auto'",
    )
    consistency_level: ConsistencyLevel | None = Field(
        default=None,
        description="Default consistency level sent with every request",
    )
    timeout: float = Field(default=60.0, ge=1.0, le=300.0)

    log_level: str = Field(default="INFO")

    @field_validator("token_type")
    @classmethod
    def validate_token_type(cls, v: str) -> str:
        """Validate token type is one of the allowed values."""
        valid = {"master", "resource", "auto"}
        if v.lower() not in valid:
            raise ValueError(f"Invalid token type: {v}. Must be one of {valid}")
        return v.lower()

    @field_validator("endpoint")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format and strip trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @property
    def host(self) -> str:
        """Host header value for the endpoint (includes a non-default port)."""
        return urlsplit(self.endpoint).netloc

    @property
    def resolved_token_type(self) -> TokenType:
        """Determine the token type to sign with.

        When token_type is "auto", the key is classified by its content.
        """
        if self.token_type != "auto":
            return TokenType(self.token_type)
        return classify_token(self.key or "")

    def validate_config(self) -> None:
        """Validate that credentials are present.

        Raises:
            ValueError: If no key is configured.
        """
        if not self.key:
            raise ValueError(
                "A master key or resource token is required. "
                "Example: COSMOS_KEY=<primary key from the Azure portal>"
            )
