import logging
from typing import Any, Optional
from urllib.parse import urlencode

import requests

from ghproxy.cache import Cache, MemoryCache
from ghproxy.config import GITHUB_API_BASE
from ghproxy.utils.urls import LEGACY_CREDENTIAL_PARAMS, filter_query, split_query


class ProxyClient:
    """Calls GitHub through a deployed proxy, caching results locally."""

    def __init__(
        self,
        proxy_url: str,
        cache: Optional[Cache] = None,
        session: Optional[requests.Session] = None,
    ):
        self.proxy_url = proxy_url.rstrip("/")
        self.cache = cache if cache is not None else MemoryCache()
        self.session = session or requests.Session()

    def proxied_url(self, url: str) -> str:
        """Rewrite a direct api.github.com URL onto the proxy.

        Legacy client_id/client_secret parameters are dropped; the proxy adds
        its own credentials.
        """
        if not url.startswith(GITHUB_API_BASE):
            logging.warning("URL is not a GitHub API URL: %s", url)
            return url

        path = url[len(GITHUB_API_BASE):].split("?", 1)[0]
        result = f"{self.proxy_url}/{path}"

        params = filter_query(split_query(url), LEGACY_CREDENTIAL_PARAMS)
        if params:
            result = f"{result}?{urlencode(params)}"

        logging.debug("Original URL: %s -> proxied URL: %s", url, result)
        return result

    def get_json(self, url: str) -> Any:
        target = self.proxied_url(url)
        cached = self.cache.get(target)
        if cached is not None:
            logging.info("Using cached response for %s", target)
            return cached

        response = self.session.get(target)
        response.raise_for_status()
        data = response.json()
        self.cache.set(target, data)
        return data
