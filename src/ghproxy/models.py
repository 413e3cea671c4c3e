import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ghproxy.utils.cors import cors_headers

QueryPairs = List[Tuple[str, str]]


@dataclass(frozen=True)
class InboundRequest:
    """A caller's request, already lifted out of the hosting event."""

    method: str
    path: str = ""
    query: QueryPairs = field(default_factory=list)
    body: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    url: str = ""


@dataclass(frozen=True)
class ProxyResponse:
    """Final response handed back to the caller. Built once, never mutated."""

    status: int
    headers: Dict[str, str]
    body: Any = None
    is_json: bool = True

    def render_body(self) -> str:
        if self.is_json:
            return json.dumps(self.body)
        return str(self.body)


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    UPSTREAM = "upstream"


_STATUS_BY_KIND = {
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.VALIDATION: 400,
    ErrorKind.UPSTREAM: 500,
}


@dataclass(frozen=True)
class ProxyFailure:
    """Why the proxy could not relay an upstream result."""

    kind: ErrorKind
    message: str
    details: Optional[str] = None

    @property
    def status(self) -> int:
        return _STATUS_BY_KIND[self.kind]

    def to_response(self) -> ProxyResponse:
        body: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        headers = {"Content-Type": "application/json", **cors_headers()}
        return ProxyResponse(status=self.status, headers=headers, body=body)


@dataclass(frozen=True)
class ProxyResult:
    """Either a relayed response or a failure, never both."""

    response: Optional[ProxyResponse] = None
    failure: Optional[ProxyFailure] = None

    @classmethod
    def success(cls, response: ProxyResponse) -> "ProxyResult":
        return cls(response=response)

    @classmethod
    def fail(
        cls, kind: ErrorKind, message: str, details: Optional[str] = None
    ) -> "ProxyResult":
        return cls(failure=ProxyFailure(kind=kind, message=message, details=details))

    @property
    def ok(self) -> bool:
        return self.failure is None

    def to_response(self) -> ProxyResponse:
        if self.failure is not None:
            return self.failure.to_response()
        return self.response
