from typing import Iterable, List, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit

# Never copied from the caller's query string.
EXCLUDED_QUERY_PARAMS = frozenset({"code", "client_id", "client_secret"})
LEGACY_CREDENTIAL_PARAMS = frozenset({"client_id", "client_secret"})


def filter_query(
    pairs: Iterable[Tuple[str, str]], excluded: Iterable[str] = EXCLUDED_QUERY_PARAMS
) -> List[Tuple[str, str]]:
    excluded = frozenset(excluded)
    return [(key, value) for key, value in pairs if key not in excluded]


def build_upstream_url(
    api_base: str,
    path: str,
    query: Iterable[Tuple[str, str]] = (),
    extra_params: Optional[Iterable[Tuple[str, str]]] = None,
) -> str:
    """Join the upstream base with the route path and a filtered query.

    ``extra_params`` are appended after the caller's parameters and are not
    subject to filtering (used for client id/secret auth).
    """
    url = api_base + path.lstrip("/")
    params = filter_query(query)
    if extra_params:
        params.extend(extra_params)
    if not params:
        return url
    separator = "&" if urlsplit(url).query else "?"
    return f"{url}{separator}{urlencode(params)}"


def split_query(url: str) -> List[Tuple[str, str]]:
    return parse_qsl(urlsplit(url).query, keep_blank_values=True)
