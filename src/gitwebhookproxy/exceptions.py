"""
Exception hierarchy for the webhook proxy.

Startup problems raise ConfigurationError and stop the process. Everything
else is raised while handling a single delivery and is mapped to an HTTP
status by the proxy.
"""
from typing import Optional


class ProxyError(Exception):
    """Base exception for the webhook proxy."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ProxyError):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message)
        self.config_key = config_key


class ProviderError(ProxyError):
    """Raised when a provider cannot be created."""


class UnknownProviderError(ProviderError):
    """Raised for a provider name that is not supported."""

    def __init__(self, name: str):
        super().__init__(f"Unknown provider: '{name}'")
        self.name = name


class EmptySecretError(ProviderError):
    """Raised when a provider is created without a secret."""

    def __init__(self):
        super().__init__("Cannot create provider with empty secret")


class ParseError(ProxyError):
    """Raised when an inbound request cannot be turned into a Hook."""


class BodyReadError(ParseError):
    """Raised when the request body cannot be read or is too large."""


class MissingHeaderError(ParseError):
    """Raised when a header the provider requires is absent."""

    def __init__(self, header: str):
        super().__init__(f"Required header '{header}' not found in Request")
        self.header = header


class RedirectError(ProxyError):
    """Raised when a hook cannot be forwarded upstream."""


class NilHookError(RedirectError):
    """Raised when redirect is called without a hook."""

    def __init__(self):
        super().__init__("Cannot redirect with nil Hook")


class InvalidURLError(RedirectError):
    """Raised when the upstream target URL cannot be parsed."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Invalid upstream URL '{url}': {reason}")
        self.url = url


class TransportError(RedirectError):
    """Raised when the outbound request fails at the transport level."""
