from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class MentionConfig(BaseSettings):
    """Centralized configuration model for all environment variables."""

    # Entity cache configuration
    user_cache_size: int = Field(default=500, env="USER_CACHE_SIZE")
    emoji_cache_size: int = Field(default=500, env="EMOJI_CACHE_SIZE")

    # Mention resolution configuration
    resolve_unknown_emoji: bool = Field(default=False, env="RESOLVE_UNKNOWN_EMOJI")

    # OpenTelemetry configuration
    otel_service_name: str = Field(default="guildmentions", env="OTEL_SERVICE_NAME")
    otel_exporter_otlp_endpoint: str = Field(
        default="localhost:4317", env="OTEL_EXPORTER_OTLP_ENDPOINT"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("user_cache_size", "emoji_cache_size")
    @classmethod
    def validate_cache_size(cls, v: int) -> int:
        """Validate cache sizes are positive."""
        if v <= 0:
            raise ValueError("Cache size must be positive")
        return v

    @field_validator("otel_exporter_otlp_endpoint")
    @classmethod
    def validate_otlp_endpoint(cls, v: str) -> str:
        """Validate the OTLP endpoint looks like host:port."""
        host, _, port = v.rpartition(":")
        if not host or not port.isdigit() or not (1 <= int(port) <= 65535):
            raise ValueError("OTEL_EXPORTER_OTLP_ENDPOINT must be host:port with a port between 1 and 65535")
        return v
