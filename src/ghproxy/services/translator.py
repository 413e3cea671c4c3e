import json
import logging
from typing import Any, Dict, Optional

import requests

from ghproxy.clients.github import GitHubClient
from ghproxy.config import ProxyConfig
from ghproxy.models import ErrorKind, InboundRequest, ProxyResponse, ProxyResult
from ghproxy.services.auth import graphql_auth, rest_auth
from ghproxy.utils.cors import cors_headers, expose_headers
from ghproxy.utils.rate_limit import RateLimitInfo
from ghproxy.utils.urls import build_upstream_url

MISSING_CREDENTIALS = "Server configuration error - Missing authentication credentials"
MISSING_GRAPHQL_QUERY = "Missing GraphQL query in request body"
PROXY_FAILED = "Failed to proxy GitHub API request"

DEFAULT_GRAPHQL_QUERY = "{viewer{login}}"


class _ValidationError(ValueError):
    pass


class RequestTranslator:
    """Turns an inbound request into one GitHub call and the relayed response."""

    def __init__(self, config: ProxyConfig, client: Optional[GitHubClient] = None):
        self.config = config
        self.client = client or GitHubClient(user_agent=config.user_agent)

    def handle(self, request: InboundRequest) -> ProxyResult:
        if request.method.upper() == "OPTIONS":
            return ProxyResult.success(
                ProxyResponse(status=200, headers=cors_headers(), body="", is_json=False)
            )

        credentials = self.config.credentials
        logging.info(
            "Credentials check: token=%s client_id=%s client_secret=%s",
            credentials.has_token,
            bool(credentials.client_id),
            bool(credentials.client_secret),
        )
        if not credentials.usable:
            logging.error("GitHub credentials not configured")
            return ProxyResult.fail(ErrorKind.CONFIGURATION, MISSING_CREDENTIALS)

        try:
            if self.is_graphql(request):
                return self._proxy_graphql(request)
            return self._proxy_rest(request)
        except _ValidationError as exc:
            return ProxyResult.fail(ErrorKind.VALIDATION, str(exc))
        except Exception as exc:
            # Transport errors quote the request URL, which may carry credentials.
            message = self._scrub(str(exc))
            logging.error("Error proxying GitHub API: %s", message)
            return ProxyResult.fail(ErrorKind.UPSTREAM, PROXY_FAILED, details=message)

    def _scrub(self, message: str) -> str:
        credentials = self.config.credentials
        for secret in (credentials.token, credentials.client_secret):
            if secret:
                message = message.replace(secret, "[REDACTED]")
        if credentials.client_id:
            message = message.replace(credentials.client_id, f"{credentials.client_id[:4]}...")
        return message

    @staticmethod
    def is_graphql(request: InboundRequest) -> bool:
        return request.path.strip("/") == "graphql" or "/graphql" in request.url

    def _proxy_rest(self, request: InboundRequest) -> ProxyResult:
        auth_headers, auth_params = rest_auth(self.config.credentials)
        url = build_upstream_url(
            self.config.api_base, request.path, request.query, extra_params=auth_params
        )

        response = self.client.get_rest(url, auth_headers)
        rate_limit = self._log_rate_limit(response)

        content_type = response.headers.get("content-type")
        if content_type and "application/json" in content_type:
            body: Any = response.json()
            is_json = True
        else:
            body = response.text
            is_json = False

        headers = self._relay_headers(content_type or "application/json", rate_limit)
        return ProxyResult.success(
            ProxyResponse(
                status=response.status_code, headers=headers, body=body, is_json=is_json
            )
        )

    def _proxy_graphql(self, request: InboundRequest) -> ProxyResult:
        payload = self._graphql_payload(request.body)
        auth_headers = graphql_auth(self.config.credentials)

        response = self.client.post_graphql(self.config.graphql_url, payload, auth_headers)
        rate_limit = self._log_rate_limit(response)

        headers = self._relay_headers("application/json", rate_limit)
        return ProxyResult.success(
            ProxyResponse(status=response.status_code, headers=headers, body=response.json())
        )

    @staticmethod
    def _graphql_payload(raw_body: Optional[str]) -> Dict[str, Any]:
        # No body at all falls back to a viewer query; a body without a query
        # is rejected.
        if raw_body is None or raw_body == "":
            return {"query": DEFAULT_GRAPHQL_QUERY}

        try:
            payload = json.loads(raw_body)
        except json.JSONDecodeError as exc:
            raise _ValidationError(MISSING_GRAPHQL_QUERY) from exc

        if not isinstance(payload, dict):
            raise _ValidationError(MISSING_GRAPHQL_QUERY)
        query = payload.get("query")
        if not isinstance(query, str) or not query.strip():
            raise _ValidationError(MISSING_GRAPHQL_QUERY)
        return payload

    @staticmethod
    def _relay_headers(content_type: str, rate_limit: RateLimitInfo) -> Dict[str, str]:
        return {
            "Content-Type": content_type,
            **rate_limit.as_headers(),
            **cors_headers(),
            **expose_headers(),
        }

    @staticmethod
    def _log_rate_limit(response: requests.Response) -> RateLimitInfo:
        rate_limit = RateLimitInfo.from_headers(response.headers)
        logging.info(
            "Rate limit info - Limit: %s, Remaining: %s, Reset: %s",
            rate_limit.limit,
            rate_limit.remaining,
            rate_limit.reset,
        )
        return rate_limit
