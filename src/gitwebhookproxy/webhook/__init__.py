"""
Webhook handling module.
"""
from .models import CONTENT_TYPE_HEADER, GitProvider, Hook
from .providers import (
    Provider,
    GitHubProvider,
    GitLabProvider,
    GiteaProvider,
    ProviderFactory,
    new_provider,
)
from .parser import DEFAULT_MAX_BODY_SIZE, parse

__all__ = [
    "CONTENT_TYPE_HEADER",
    "GitProvider",
    "Hook",
    "Provider",
    "GitHubProvider",
    "GitLabProvider",
    "GiteaProvider",
    "ProviderFactory",
    "new_provider",
    "DEFAULT_MAX_BODY_SIZE",
    "parse",
]
