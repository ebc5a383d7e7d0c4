"""Configuration models and loading."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, SecretStr

UPSTREAM_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.5-flash-image:generateContent"
)
WILDCARD = "*"


class ServerSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = 8080


class UpstreamSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = UPSTREAM_URL
    timeout: float = 120.0


class ProxyConfig(BaseModel):
    """Process-wide settings, read once from the environment."""

    model_config = ConfigDict(frozen=True)

    backend_key: SecretStr = SecretStr("")
    gen_api_key: SecretStr = SecretStr("")
    # None means any origin is allowed
    allowed_origins: tuple[str, ...] | None = None
    server: ServerSettings = Field(default_factory=ServerSettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)

    @property
    def allows_any_origin(self) -> bool:
        return self.allowed_origins is None


def parse_allowed_origins(raw: str | None) -> tuple[str, ...] | None:
    """Parse ALLOWED_ORIGINS into an origin list, or None for wildcard."""
    if raw is None:
        return None
    origins = tuple(part.strip() for part in raw.split(",") if part.strip())
    if not origins or WILDCARD in origins:
        return None
    return origins


def load_config(environ: Mapping[str, str] | None = None) -> ProxyConfig:
    """Build the config from environment variables."""
    env = os.environ if environ is None else environ

    server: dict[str, str] = {}
    if env.get("HOST"):
        server["host"] = env["HOST"]
    if env.get("PORT"):
        server["port"] = env["PORT"]

    return ProxyConfig.model_validate(
        {
            "backend_key": env.get("BACKEND_KEY", ""),
            "gen_api_key": env.get("GEN_API_KEY", ""),
            "allowed_origins": parse_allowed_origins(env.get("ALLOWED_ORIGINS")),
            "server": server,
        }
    )
