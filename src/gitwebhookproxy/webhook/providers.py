"""
Webhook providers for different Git hosting vendors.

A provider knows which headers carry the signature and event type of its
vendor's deliveries and how to check the signature against the shared
secret.
"""
from abc import ABC, abstractmethod
import hashlib
import hmac
import logging

from ..exceptions import EmptySecretError, UnknownProviderError
from .models import GitProvider, Hook

logger = logging.getLogger(__name__)


def _hmac_hexdigest(secret: str, payload: bytes, digestmod) -> str:
    return hmac.new(secret.encode(), payload, digestmod).hexdigest()


def _equal(expected: str, actual: str) -> bool:
    return hmac.compare_digest(expected.encode(), actual.encode())


class Provider(ABC):
    """Abstract base class for webhook providers."""

    name: GitProvider
    request_method: str = "POST"
    event_header: str
    signature_header: str

    def __init__(self, secret: str):
        self.secret = secret

    @property
    def required_headers(self) -> list[str]:
        """Headers every delivery from this vendor must carry."""
        return [self.event_header]

    @abstractmethod
    def validate(self, hook: Hook) -> bool:
        """Check the hook's signature against the shared secret."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name.value!r})"


class GitHubProvider(Provider):
    """GitHub webhooks (X-Hub-Signature-256, falling back to X-Hub-Signature)."""

    name = GitProvider.GITHUB
    event_header = "X-GitHub-Event"
    signature_header = "X-Hub-Signature-256"
    legacy_signature_header = "X-Hub-Signature"

    def validate(self, hook: Hook) -> bool:
        signature = hook.get_header(self.signature_header)
        if signature:
            return self._check(signature, "sha256=", hashlib.sha256, hook.payload)

        signature = hook.get_header(self.legacy_signature_header)
        if signature:
            return self._check(signature, "sha1=", hashlib.sha1, hook.payload)

        logger.debug("GitHub delivery carries no signature header")
        return False

    def _check(self, signature: str, prefix: str, digestmod, payload: bytes) -> bool:
        if not signature.startswith(prefix):
            logger.debug(f"Malformed GitHub signature, expected prefix '{prefix}'")
            return False

        expected = _hmac_hexdigest(self.secret, payload, digestmod)
        return _equal(expected, signature[len(prefix):].lower())


class GitLabProvider(Provider):
    """GitLab webhooks (X-Gitlab-Token carries the secret itself)."""

    name = GitProvider.GITLAB
    event_header = "X-Gitlab-Event"
    signature_header = "X-Gitlab-Token"

    def validate(self, hook: Hook) -> bool:
        token = hook.get_header(self.signature_header).strip()
        if not token:
            return False
        return _equal(self.secret.strip(), token)


class GiteaProvider(Provider):
    """Gitea webhooks (X-Gitea-Signature, bare hex HMAC-SHA256)."""

    name = GitProvider.GITEA
    event_header = "X-Gitea-Event"
    signature_header = "X-Gitea-Signature"

    def validate(self, hook: Hook) -> bool:
        signature = hook.get_header(self.signature_header)
        if not signature:
            return False

        expected = _hmac_hexdigest(self.secret, hook.payload, hashlib.sha256)
        return _equal(expected, signature.lower())


class ProviderFactory:
    """Factory for creating webhook providers."""

    _providers = {
        GitProvider.GITEA: GiteaProvider,
        GitProvider.GITHUB: GitHubProvider,
        GitProvider.GITLAB: GitLabProvider,
    }

    @classmethod
    def create(cls, name: str, secret: str) -> Provider:
        """
        Create provider for the given name.

        Names are matched exactly (case-sensitive) against GitProvider values.

        Raises:
            UnknownProviderError: If the name is empty or not supported
            EmptySecretError: If the secret is blank
        """
        try:
            provider = GitProvider(name)
        except ValueError:
            raise UnknownProviderError(name)

        if not secret or not secret.strip():
            raise EmptySecretError()

        return cls._providers[provider](secret)


def new_provider(name: str, secret: str) -> Provider:
    """Create a provider by name, bound to the shared secret."""
    return ProviderFactory.create(name, secret)
