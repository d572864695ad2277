"""
Git Webhook Proxy.

Validates webhook deliveries from GitHub, GitLab and Gitea and relays them
to an upstream service.
"""
from .exceptions import ProxyError, ConfigurationError
from .proxy import Proxy

__version__ = "1.0.0"

__all__ = [
    "ProxyError",
    "ConfigurationError",
    "Proxy",
]
