import os
from dataclasses import dataclass
from typing import Optional

GITHUB_API_BASE = "https://api.github.com/"
GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
USER_AGENT = "GitHub-API-Proxy"
DEFAULT_CACHE_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class Credentials:
    """Server-held GitHub credentials. Empty strings count as missing."""

    token: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    @property
    def has_client_pair(self) -> bool:
        return bool(self.client_id) and bool(self.client_secret)

    @property
    def usable(self) -> bool:
        return self.has_token or self.has_client_pair

    @property
    def strategy(self) -> Optional[str]:
        """Which credential form wins: "token", "client" or None."""
        if self.has_token:
            return "token"
        if self.has_client_pair:
            return "client"
        return None


@dataclass(frozen=True)
class ProxyConfig:
    """Configuration handed to the translator for a single invocation."""

    credentials: Credentials
    api_base: str = GITHUB_API_BASE
    graphql_url: str = GITHUB_GRAPHQL_URL
    user_agent: str = USER_AGENT


@dataclass(frozen=True)
class ClientConfig:
    """Settings for talking to a deployed proxy from Python."""

    proxy_url: str
    cache_target: Optional[str] = None
    cache_seconds: int = DEFAULT_CACHE_SECONDS


def load_credentials() -> Credentials:
    return Credentials(
        token=os.environ.get("GITHUB_TOKEN") or None,
        client_id=os.environ.get("GITHUB_CLIENT_ID") or None,
        client_secret=os.environ.get("GITHUB_CLIENT_SECRET") or None,
    )


def load_proxy_config() -> ProxyConfig:
    """Load proxy configuration from environment variables.

    Missing credentials are not an error here; the translator reports them
    as a configuration failure so the caller still gets a JSON response.
    """
    return ProxyConfig(credentials=load_credentials())


def load_client_config() -> ClientConfig:
    proxy_url = os.environ.get("GITHUB_PROXY_URL")
    if not proxy_url:
        raise RuntimeError("GITHUB_PROXY_URL must be set")

    raw_seconds = os.environ.get("GITHUB_PROXY_CACHE_SECONDS", str(DEFAULT_CACHE_SECONDS))
    try:
        cache_seconds = int(raw_seconds)
    except ValueError as exc:
        raise RuntimeError(f"GITHUB_PROXY_CACHE_SECONDS is not an integer: {raw_seconds}") from exc

    return ClientConfig(
        proxy_url=proxy_url.rstrip("/"),
        cache_target=os.environ.get("GITHUB_PROXY_CACHE"),
        cache_seconds=cache_seconds,
    )
