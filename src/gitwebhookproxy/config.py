"""
Application configuration using pydantic-settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError
from .webhook.parser import DEFAULT_MAX_BODY_SIZE


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Git Webhook Proxy"
    app_version: str = "1.0.0"
    debug: bool = False

    # Server
    listen_address: str = ":8080"

    # Proxy
    upstream_url: str = ""
    allowed_paths: str = ""  # comma separated, empty allows every path
    provider: str = "github"
    secret: str = ""
    max_body_size: int = DEFAULT_MAX_BODY_SIZE

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def allowed_path_list(self) -> list[str]:
        """Allowed paths with blank entries dropped."""
        return [p.strip() for p in self.allowed_paths.split(",") if p.strip()]

    @property
    def host(self) -> str:
        return self._split_listen_address()[0]

    @property
    def port(self) -> int:
        return self._split_listen_address()[1]

    def _split_listen_address(self) -> tuple[str, int]:
        address = self.listen_address.strip()
        if not address:
            raise ConfigurationError("Cannot create Proxy with empty listenAddress", "listen_address")

        host, sep, port = address.rpartition(":")
        if not sep or not port.isdigit():
            raise ConfigurationError(
                f"Invalid listen address '{address}', expected host:port",
                "listen_address"
            )
        return host or "0.0.0.0", int(port)


# Global settings instance
settings = Settings()
