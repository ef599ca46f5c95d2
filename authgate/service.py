"""Threaded authorization service with periodic cleanup of filter chains."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor

from authgate.check import CheckRequest, CheckResult, FilterChain, check

__all__ = ["AuthService"]

log = logging.getLogger(__name__)


class AuthService:
    """Runs authorization checks on a pool of worker threads.

    While running, every filter chain is asked to clean up its expired state
    once per ``cleanup_interval`` seconds.
    """

    def __init__(
        self,
        chains: Iterable[FilterChain],
        trigger_rule_matcher: Callable[[str], bool] | None = None,
        threads: int = 1,
        cleanup_interval: float = 60.0,
    ) -> None:
        if threads < 1:
            raise ValueError("threads must be at least 1")
        if cleanup_interval <= 0:
            raise ValueError("cleanup_interval must be positive")
        self.chains = list(chains)
        self.trigger_rule_matcher = trigger_rule_matcher
        self.threads = threads
        self.cleanup_interval = cleanup_interval
        self._lock = threading.Lock()
        self._executor: ThreadPoolExecutor | None = None
        self._cleaner: threading.Thread | None = None
        self._stopping = threading.Event()

    @property
    def running(self) -> bool:
        return self._executor is not None

    def start(self) -> None:
        """Start the worker pool and the periodic cleanup task."""
        with self._lock:
            if self._executor is not None:
                raise RuntimeError("service is already running")
            self._stopping.clear()
            self._executor = ThreadPoolExecutor(
                max_workers=self.threads, thread_name_prefix="authgate-worker"
            )
            self._cleaner = threading.Thread(
                target=self._cleanup_loop, name="authgate-cleanup", daemon=True
            )
            self._cleaner.start()
        log.info("service started with %d worker threads", self.threads)

    def stop(self) -> None:
        """Stop accepting requests and wait for outstanding ones to finish."""
        with self._lock:
            executor, self._executor = self._executor, None
            cleaner, self._cleaner = self._cleaner, None
        if executor is None:
            return
        log.info("service shutting down")
        self._stopping.set()
        if cleaner is not None:
            cleaner.join()
        executor.shutdown(wait=True)

    def submit(self, request: CheckRequest) -> Future[CheckResult]:
        """Queue a request for checking; the future yields its CheckResult."""
        with self._lock:
            if self._executor is None:
                raise RuntimeError("service is not running")
            return self._executor.submit(
                check, request, self.chains, self.trigger_rule_matcher
            )

    def run_cleanup(self) -> None:
        """Run one cleanup pass over every filter chain."""
        log.info(
            "starting periodic cleanup (period of %s seconds)", self.cleanup_interval
        )
        for chain in self.chains:
            try:
                chain.do_periodic_cleanup()
            except Exception:
                log.exception("cleanup of filter chain %s failed", chain.name())

    def _cleanup_loop(self) -> None:
        while not self._stopping.wait(self.cleanup_interval):
            self.run_cleanup()

    def __enter__(self) -> AuthService:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()