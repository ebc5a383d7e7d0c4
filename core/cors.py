"""CORS response header construction."""

from core.config import WILDCARD, ProxyConfig

ALLOW_METHODS = "POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, x-backend-key, authorization, x-requested-with"
MAX_AGE = "600"
# Literal value browsers treat as "no origin allowed"
DISALLOWED_ORIGIN = "null"


class CorsPolicy:
    """Build CORS headers for a request origin."""

    def __init__(self, allowed_origins: tuple[str, ...] | None = None) -> None:
        self._allowed = None if allowed_origins is None else frozenset(allowed_origins)

    @classmethod
    def from_config(cls, config: ProxyConfig) -> "CorsPolicy":
        return cls(config.allowed_origins)

    def allow_origin(self, origin: str | None) -> str:
        """Return the Access-Control-Allow-Origin value for ``origin``."""
        if self._allowed is None:
            return origin or WILDCARD
        if origin and origin in self._allowed:
            return origin
        return DISALLOWED_ORIGIN

    def headers_for(self, origin: str | None) -> dict[str, str]:
        allow_origin = self.allow_origin(origin)
        headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Max-Age": MAX_AGE,
        }
        if allow_origin != WILDCARD:
            headers["Vary"] = "Origin"
        return headers
