"""Authorization check: trigger rules, filter chain selection and status mapping."""

from __future__ import annotations

import abc
import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

__all__ = [
    "RpcCode",
    "Status",
    "HttpAttributes",
    "CheckRequest",
    "HeaderValue",
    "DeniedResponse",
    "OkResponse",
    "CheckResponse",
    "Filter",
    "FilterChain",
    "CheckResult",
    "request_path",
    "status_for_code",
    "check",
]

log = logging.getLogger(__name__)


class RpcCode(enum.IntEnum):
    """Canonical RPC status codes."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


@dataclass(frozen=True)
class Status:
    """Outcome of a check as reported to the caller."""

    code: RpcCode = RpcCode.OK
    message: str = ""

    def ok(self) -> bool:
        return self.code == RpcCode.OK


@dataclass
class HttpAttributes:
    """The HTTP attributes of the request being authorized."""

    scheme: str = ""
    host: str = ""
    path: str = ""
    query: str = ""
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class CheckRequest:
    """A request to authorize an HTTP call."""

    http: HttpAttributes = field(default_factory=HttpAttributes)


@dataclass
class HeaderValue:
    key: str
    value: str


@dataclass
class DeniedResponse:
    """Response sent back instead of forwarding the request."""

    status_code: int = 403
    headers: list[HeaderValue] = field(default_factory=list)
    body: str = ""


@dataclass
class OkResponse:
    """Headers to add to a request that is allowed through."""

    headers: list[HeaderValue] = field(default_factory=list)


@dataclass
class CheckResponse:
    denied_response: DeniedResponse | None = None
    ok_response: OkResponse | None = None

    def has_denied_response(self) -> bool:
        return self.denied_response is not None


class Filter(abc.ABC):
    """A single request processor created by a filter chain."""

    @abc.abstractmethod
    def process(self, request: CheckRequest, response: CheckResponse) -> RpcCode:
        """Process the request, filling in the response, and return a code."""


class FilterChain(abc.ABC):
    """A named set of filters applied to requests it matches."""

    @abc.abstractmethod
    def name(self) -> str:
        """The chain's name."""

    @abc.abstractmethod
    def matches(self, request: CheckRequest) -> bool:
        """Whether this chain handles the request."""

    @abc.abstractmethod
    def new(self) -> Filter:
        """A fresh filter instance for one request."""

    @abc.abstractmethod
    def do_periodic_cleanup(self) -> None:
        """Release expired state held by the chain."""


@dataclass
class CheckResult:
    status: Status
    response: CheckResponse


_ALLOWED_CODES = frozenset(
    {RpcCode.OK, RpcCode.UNAUTHENTICATED, RpcCode.PERMISSION_DENIED}
)


def request_path(path: str) -> str:
    """Return the path component of a path that may carry a query or fragment."""
    for separator in ("?", "#"):
        path = path.partition(separator)[0]
    return path


def status_for_code(code: int) -> Status:
    """Map a filter's result code to the status returned to the caller.

    Requests that were processed correctly (even when denied) are OK; a
    malformed request is INVALID_ARGUMENT; anything else is INTERNAL.
    """
    if code in _ALLOWED_CODES:
        return Status(RpcCode.OK)
    if code == RpcCode.INVALID_ARGUMENT:
        return Status(RpcCode.INVALID_ARGUMENT, "invalid request")
    return Status(RpcCode.INTERNAL, "internal error")


def _describe(request: CheckRequest) -> str:
    http = request.http
    return f"{http.scheme}://{http.host}{http.path}"


def check(
    request: CheckRequest,
    chains: Iterable[FilterChain],
    trigger_rule_matcher: Callable[[str], bool] | None = None,
) -> CheckResult:
    """Authorize a request with the first matching filter chain.

    ``trigger_rule_matcher`` decides from the request path whether the request
    is subject to authorization at all; ``None`` means every path is.
    """
    response = CheckResponse()
    try:
        path = request_path(request.http.path)
        if trigger_rule_matcher is not None and not trigger_rule_matcher(path):
            log.debug(
                "no matching trigger rule, allowing request to proceed %s",
                _describe(request),
            )
            return CheckResult(Status(RpcCode.OK), response)

        for chain in chains:
            if chain.matches(request):
                log.debug(
                    "processing request %s with filter chain %s",
                    _describe(request),
                    chain.name(),
                )
                code = chain.new().process(request, response)
                return CheckResult(status_for_code(code), response)

        log.debug("no matching filter chain for request to %s", _describe(request))
        return CheckResult(Status(RpcCode.OK), response)
    except Exception:
        log.exception("unexpected error while checking request")
    return CheckResult(Status(RpcCode.INTERNAL, "internal error"), response)