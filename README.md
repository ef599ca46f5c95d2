# authgate

`authgate` decides whether an incoming HTTP request may go on to the
application or must be stopped, for example by being redirected to log in.
The decision is made by filter chains that you supply; `authgate` selects the
chain, runs it and turns its result into a status.

## Modules

- `authgate.check`: the request and response types, the `Filter` and
  `FilterChain` interfaces, and the `check` function.
- `authgate.service`: `AuthService`, which runs checks on a thread pool and
  cleans up the chains at a fixed interval.

## How a request is checked

`check(request, chains, trigger_rule_matcher=None)` works through these steps:

1. It takes the path of the request, without any query string or fragment,
   using `request_path` (for example `"/status/foo?x=1"` becomes
   `"/status/foo"`).
2. If `trigger_rule_matcher` is given, it is called with that path. When it
   returns false, the request is allowed and the response is left empty.
   When `trigger_rule_matcher` is `None`, every path is checked.
3. It looks for the first `FilterChain` whose `matches(request)` is true.
   That chain's `new()` gives a `Filter`, and the filter's
   `process(request, response)` fills in the `CheckResponse` and returns an
   `RpcCode`.
4. The code becomes a `Status` through `status_for_code`:
   - `OK`, `UNAUTHENTICATED` and `PERMISSION_DENIED` give an OK status. The
     decision itself is carried in the response (for instance a
     `DeniedResponse` with a redirect).
   - `INVALID_ARGUMENT` gives `Status(RpcCode.INVALID_ARGUMENT, "invalid request")`.
   - Any other code gives `Status(RpcCode.INTERNAL, "internal error")`.
5. If no chain matches, the request is allowed with an empty response.

If anything raises an exception during the check, it is logged and the status
is `INTERNAL` with the message `"internal error"`.

The result is a `CheckResult` holding the `Status` and the `CheckResponse`.
`Status.ok()` tells whether the code is `OK`, and
`CheckResponse.has_denied_response()` whether a `DeniedResponse` was set.

```python
from authgate.check import CheckRequest, HttpAttributes, check

request = CheckRequest(http=HttpAttributes(scheme="https", host="example.com",
                                           path="/status/foo?x=1"))
result = check(request, chains=[], trigger_rule_matcher=lambda path: True)
assert result.status.ok()
assert not result.response.has_denied_response()
```

## Writing a filter chain

Subclass `FilterChain` and implement `name()`, `matches(request)`, `new()`
and `do_periodic_cleanup()`. `new()` returns a `Filter` subclass whose
`process(request, response)` sets `response.denied_response` or
`response.ok_response` and returns an `RpcCode`.

## Running a service

`AuthService(chains, trigger_rule_matcher=None, threads=1, cleanup_interval=60.0)`
runs checks on a pool of `threads` worker threads. While it runs, it calls
`do_periodic_cleanup` on each chain every `cleanup_interval` seconds.

```python
from authgate.service import AuthService

with AuthService(chains, trigger_rule_matcher, threads=4, cleanup_interval=60) as service:
    future = service.submit(request)
    result = future.result()
```

- `submit(request)` returns a `concurrent.futures.Future` that resolves to a
  `CheckResult`. It raises `RuntimeError` when the service is not running.
- `start()` and `stop()` control the service by hand. `start()` raises
  `RuntimeError` if the service is already running; `stop()` waits for
  queued checks to finish and does nothing if the service is not running.
- `running` tells whether the service has been started and not stopped.
- `run_cleanup()` runs one cleanup pass straight away. An error from one
  chain's cleanup is logged and does not stop the others.
- `threads` below 1 or a `cleanup_interval` that is not positive raise
  `ValueError`.

## What it does not do

`authgate` has no network listener: it does not accept requests from a proxy
by itself, so requests reach it only through `check` or `AuthService.submit`.
It does not read a configuration file, and it ships no ready-made filter
chains (such as an OpenID Connect login flow) and no session storage; those
are supplied by the caller as `FilterChain` implementations and trigger-rule
callables.