from typing import Dict

from ghproxy.utils.rate_limit import RATE_LIMIT_HEADERS

ALLOWED_METHODS = "GET, POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization"


def cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": ALLOWED_METHODS,
        "Access-Control-Allow-Headers": ALLOWED_HEADERS,
    }


def expose_headers() -> Dict[str, str]:
    """Let browser clients read the relayed rate-limit headers."""
    return {"Access-Control-Expose-Headers": ", ".join(RATE_LIMIT_HEADERS)}
