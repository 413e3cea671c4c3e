"""AWS Lambda entry point for the GitHub API proxy."""

import base64
import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

from dotenv import load_dotenv

from ghproxy.models import ErrorKind, InboundRequest, ProxyFailure
from ghproxy.run import handle_request, response_to_payload

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Load environment variables (token, client id/secret) when running outside AWS config.
load_dotenv()

# API Gateway route is /api/github/{path+}
ROUTE_PREFIX = "/api/github"


def _http_method(event: Dict[str, Any]) -> str:
    context = event.get("requestContext") or {}
    http_info = context.get("http") or {}
    method = http_info.get("method") or event.get("httpMethod") or ""
    return method.upper()


def _raw_path(event: Dict[str, Any]) -> str:
    return event.get("rawPath") or event.get("path") or ""


def _route_path(event: Dict[str, Any]) -> str:
    params = event.get("pathParameters") or {}
    path = params.get("path")
    if path is None:
        path = _raw_path(event)
        if path.startswith(ROUTE_PREFIX):
            path = path[len(ROUTE_PREFIX):]
    return path.lstrip("/")


def _query_pairs(event: Dict[str, Any]) -> List[Tuple[str, str]]:
    raw_query = event.get("rawQueryString")
    if raw_query:
        return parse_qsl(raw_query, keep_blank_values=True)

    multi = event.get("multiValueQueryStringParameters")
    if multi:
        return [(key, value) for key, values in multi.items() for value in values or []]

    single = event.get("queryStringParameters") or {}
    return [(key, value) for key, value in single.items() if value is not None]


def _raw_body(event: Dict[str, Any]) -> Optional[str]:
    raw_body = event.get("body")
    if raw_body is None:
        return None
    if event.get("isBase64Encoded"):
        raw_body = base64.b64decode(raw_body).decode("utf-8")
    return raw_body


def _request_url(event: Dict[str, Any]) -> str:
    url = _raw_path(event)
    if event.get("rawQueryString"):
        url = f"{url}?{event['rawQueryString']}"
    return url


def event_to_request(event: Dict[str, Any]) -> InboundRequest:
    return InboundRequest(
        method=_http_method(event),
        path=_route_path(event),
        query=_query_pairs(event),
        body=_raw_body(event),
        headers={k.lower(): v for k, v in (event.get("headers") or {}).items()},
        url=_request_url(event),
    )


def lambda_handler(event, context):
    try:
        request = event_to_request(event)
    except ValueError as exc:
        logger.exception("Failed to decode request event")
        failure = ProxyFailure(ErrorKind.VALIDATION, "Malformed request body", details=str(exc))
        return response_to_payload(failure.to_response())

    logger.info("%s %s", request.method, request.path or "/")
    response = handle_request(request)
    return response_to_payload(response)
