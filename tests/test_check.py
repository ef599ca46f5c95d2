import pytest

from authgate.check import (
    CheckRequest,
    CheckResponse,
    DeniedResponse,
    Filter,
    FilterChain,
    HeaderValue,
    HttpAttributes,
    RpcCode,
    Status,
    check,
    request_path,
    status_for_code,
)

FOUND = 302


class RedirectFilter(Filter):
    def process(self, request, response):
        response.denied_response = DeniedResponse(
            status_code=FOUND,
            headers=[HeaderValue("location", "https://google3/path3?client_id=app")],
        )
        return RpcCode.UNAUTHENTICATED


class CodeFilter(Filter):
    def __init__(self, code):
        self.code = code

    def process(self, request, response):
        return self.code


class TenantChain(FilterChain):
    def __init__(self, tenant, filter_factory=RedirectFilter):
        self.tenant = tenant
        self.filter_factory = filter_factory
        self.cleanups = 0

    def name(self):
        return self.tenant

    def matches(self, request):
        return request.http.headers.get("x-tenant-identifier") == self.tenant

    def new(self):
        return self.filter_factory()

    def do_periodic_cleanup(self):
        self.cleanups += 1


class BrokenChain(TenantChain):
    def matches(self, request):
        raise RuntimeError("boom")


def trigger_rules(path):
    return path != "/status/version"


def make_request(path, tenant):
    return CheckRequest(
        http=HttpAttributes(
            scheme="https", path=path, headers={"x-tenant-identifier": tenant}
        )
    )


def configured_chains():
    return [TenantChain("tenant1"), TenantChain("tenant2")]


def test_unmatched_tenant_for_matching_trigger_path():
    request = make_request("/status/foo#some-fragment", "unknown-tenant")
    result = check(request, configured_chains(), trigger_rules)
    assert result.status.ok()
    assert not result.response.has_denied_response()


def test_matched_tenant_for_non_matching_trigger_path():
    request = make_request("/status/version?some-query", "tenant1")
    result = check(request, configured_chains(), trigger_rules)
    assert result.status.ok()
    assert not result.response.has_denied_response()


def test_matched_tenant_for_matching_trigger_path():
    request = make_request("/status/foo?some-query", "tenant1")
    result = check(request, configured_chains(), None)
    assert result.status.ok()
    assert result.response.denied_response.status_code == FOUND
    locations = [
        h.value for h in result.response.denied_response.headers if h.key == "location"
    ]
    assert len(locations) == 1
    assert "https://google3/path3" in locations[0]


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/status/foo#some-fragment", "/status/foo"),
        ("/status/version?some-query", "/status/version"),
        ("/a?b#c", "/a"),
        ("/plain", "/plain"),
        ("", ""),
    ],
)
def test_request_path(path, expected):
    assert request_path(path) == expected


@pytest.mark.parametrize(
    "code", [RpcCode.OK, RpcCode.UNAUTHENTICATED, RpcCode.PERMISSION_DENIED]
)
def test_status_for_allowed_codes(code):
    assert status_for_code(code) == Status(RpcCode.OK)


def test_status_for_invalid_argument():
    assert status_for_code(RpcCode.INVALID_ARGUMENT) == Status(
        RpcCode.INVALID_ARGUMENT, "invalid request"
    )


@pytest.mark.parametrize("code", [RpcCode.INTERNAL, RpcCode.UNAVAILABLE, 99])
def test_status_for_other_codes(code):
    assert status_for_code(code) == Status(RpcCode.INTERNAL, "internal error")


def test_filter_invalid_argument_is_reported():
    chain = TenantChain("tenant1", lambda: CodeFilter(RpcCode.INVALID_ARGUMENT))
    result = check(make_request("/x", "tenant1"), [chain], None)
    assert result.status.code == RpcCode.INVALID_ARGUMENT
    assert not result.status.ok()


def test_first_matching_chain_wins():
    first = TenantChain("tenant1", lambda: CodeFilter(RpcCode.UNAVAILABLE))
    second = TenantChain("tenant1")
    result = check(make_request("/x", "tenant1"), [first, second], None)
    assert result.status.code == RpcCode.INTERNAL
    assert not result.response.has_denied_response()


def test_exception_in_chain_is_internal_error():
    result = check(make_request("/x", "tenant1"), [BrokenChain("tenant1")], None)
    assert result.status == Status(RpcCode.INTERNAL, "internal error")


def test_trigger_rules_skip_chains_entirely():
    result = check(
        make_request("/x", "tenant1"), [BrokenChain("tenant1")], lambda path: False
    )
    assert result.status.ok()


def test_empty_request_with_no_chains_is_allowed():
    result = check(CheckRequest(), [], None)
    assert result.status.ok()
    assert result.response == CheckResponse()