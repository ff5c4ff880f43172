"""API server configuration models."""

from pydantic import BaseModel, Field


class APIConfig(BaseModel):
    """HTTP surface configuration."""

    title: str = Field(default="Switchyard API", description="OpenAPI title")
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=8000, ge=1, le=65535, description="Bind port")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins",
    )
    cors_allow_credentials: bool = Field(
        default=False,
        description="Allow credentials on CORS requests",
    )
