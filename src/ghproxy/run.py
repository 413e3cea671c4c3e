import logging
from typing import Any, Dict, Optional

from ghproxy.clients.github import GitHubClient
from ghproxy.config import ProxyConfig, load_proxy_config
from ghproxy.models import InboundRequest, ProxyResponse
from ghproxy.services.translator import RequestTranslator


def handle_request(
    request: InboundRequest,
    config: Optional[ProxyConfig] = None,
    client: Optional[GitHubClient] = None,
) -> ProxyResponse:
    """Shared entry for the CLI, the local server and Lambda.

    Configuration is resolved per call unless one is passed in.
    """
    config = config or load_proxy_config()
    result = RequestTranslator(config, client=client).handle(request)
    if not result.ok:
        logging.warning(
            "Proxy request failed (%s): %s", result.failure.kind.value, result.failure.message
        )
    return result.to_response()


def response_to_payload(response: ProxyResponse) -> Dict[str, Any]:
    """Convert a ProxyResponse into the Lambda proxy-integration shape."""
    return {
        "statusCode": response.status,
        "headers": dict(response.headers),
        "body": response.render_body(),
    }
