"""
Webhook models shared by providers, parser and proxy.
"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


CONTENT_TYPE_HEADER = "content-type"


class GitProvider(str, Enum):
    """Supported Git providers."""
    GITEA = "gitea"
    GITHUB = "github"
    GITLAB = "gitlab"


class Hook(BaseModel):
    """Normalized webhook delivery, ready to be replayed upstream."""

    model_config = ConfigDict(frozen=True)

    request_method: str = Field(..., description="HTTP method used when replaying upstream")
    headers: dict[str, str] = Field(default_factory=dict, description="Inbound headers, lower-cased names")
    payload: bytes = Field(b"", description="Raw inbound body")

    def get_header(self, name: str) -> str:
        """Case-insensitive header lookup, empty string when absent."""
        return self.headers.get(name.lower(), "")
