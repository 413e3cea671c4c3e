import base64
import logging
from typing import Dict, List, Tuple

from ghproxy.config import Credentials


def _require_usable(credentials: Credentials) -> None:
    if not credentials.usable:
        raise ValueError("No usable GitHub credentials configured")


def _client_id_hint(credentials: Credentials) -> str:
    return f"{credentials.client_id[:4]}..."


def rest_auth(credentials: Credentials) -> Tuple[Dict[str, str], List[Tuple[str, str]]]:
    """Return (headers, query params) that authenticate a REST call.

    Token auth goes in the Authorization header; the client id/secret pair is
    sent as query parameters.
    """
    _require_usable(credentials)
    if credentials.has_token:
        logging.info("Using token-based authentication")
        return {"Authorization": f"Bearer {credentials.token}"}, []

    logging.info(
        "Using client ID/secret authentication: client_id=%s",
        _client_id_hint(credentials),
    )
    return {}, [
        ("client_id", credentials.client_id),
        ("client_secret", credentials.client_secret),
    ]


def basic_auth_value(client_id: str, client_secret: str) -> str:
    encoded = base64.b64encode(f"{client_id}:{client_secret}".encode("utf-8"))
    return f"Basic {encoded.decode('ascii')}"


def graphql_auth(credentials: Credentials) -> Dict[str, str]:
    """GraphQL only accepts header auth, so the client pair goes in Basic auth."""
    _require_usable(credentials)
    if credentials.has_token:
        logging.info("Using token-based authentication for GraphQL")
        return {"Authorization": f"Bearer {credentials.token}"}

    logging.info(
        "Using Basic authentication for GraphQL: client_id=%s",
        _client_id_hint(credentials),
    )
    return {
        "Authorization": basic_auth_value(credentials.client_id, credentials.client_secret)
    }
