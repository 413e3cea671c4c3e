import logging
from typing import Any, Dict, Optional

import requests

from ghproxy.config import USER_AGENT


class GitHubClient:
    """Single-call transport to the GitHub API.

    No retries and no timeout beyond what requests does by default; a slow or
    failing upstream decides the outcome of the invocation.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        user_agent: str = USER_AGENT,
    ):
        self.session = session or requests.Session()
        self.user_agent = user_agent

    def get_rest(self, url: str, auth_headers: Dict[str, str]) -> requests.Response:
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/vnd.github+json",
            **auth_headers,
        }
        logging.info("Proxying request to: %s", _redact(url))
        return self.session.get(url, headers=headers)

    def post_graphql(
        self, url: str, payload: Dict[str, Any], auth_headers: Dict[str, str]
    ) -> requests.Response:
        headers = {
            "User-Agent": self.user_agent,
            "Content-Type": "application/json",
            "Accept": "application/json",
            **auth_headers,
        }
        logging.info("Proxying GraphQL request to: %s", url)
        return self.session.post(url, json=payload, headers=headers)


def _redact(url: str) -> str:
    # Client credentials may ride in the query string: the secret is hidden and
    # the id cut down to the same short hint the auth module logs.
    base, sep, query = url.partition("?")
    if not sep:
        return url
    parts = []
    for part in query.split("&"):
        key, _, value = part.partition("=")
        if key == "client_secret":
            part = f"{key}=[REDACTED]"
        elif key == "client_id":
            part = f"{key}={value[:4]}..."
        parts.append(part)
    return f"{base}?{'&'.join(parts)}"
