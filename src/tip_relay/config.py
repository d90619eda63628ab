import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Upstream tip stream
    upstream_host: str = os.getenv("UPSTREAM_HOST", "bundles-api-rest.jito.wtf")
    upstream_scheme: str = os.getenv("UPSTREAM_SCHEME", "ws")
    feed_path: str = os.getenv("FEED_PATH", "/api/v1/bundles/tip_stream")
    connect_timeout: float = float(os.getenv("CONNECT_TIMEOUT", "10"))

    # Cache
    cache_ttl: float = float(os.getenv("CACHE_TTL", "300"))  # 5 minutes
    cache_gc_interval: float = float(os.getenv("CACHE_GC_INTERVAL", "300"))
    cache_key: str = "current"

    # Shutdown grace period for the upstream close handshake
    shutdown_timeout: float = float(os.getenv("SHUTDOWN_TIMEOUT", "1"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8080"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Static annotations attached to every response
    annotation_repository: str = os.getenv("ANNOTATION_REPOSITORY", "https://github.com/kyee-rs/fuji")
    annotation_author: str = os.getenv("ANNOTATION_AUTHOR", "Dutch (@devkyee on TG)")
    annotation_language: str = "Python"

    @property
    def feed_url(self) -> str:
        """Full WebSocket URL of the upstream tip stream.

        Returns:
            URL built from scheme, host and feed path
        """
        return f"{self.upstream_scheme}://{self.upstream_host}{self.feed_path}"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not self.upstream_host:
            raise ValueError("UPSTREAM_HOST must not be empty")

        if self.upstream_scheme not in ("ws", "wss"):
            raise ValueError(f"UPSTREAM_SCHEME must be 'ws' or 'wss', got {self.upstream_scheme!r}")

        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be positive")

        if self.cache_gc_interval <= 0:
            raise ValueError("CACHE_GC_INTERVAL must be positive")

        if self.shutdown_timeout <= 0:
            raise ValueError("SHUTDOWN_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
