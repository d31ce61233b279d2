"""Prometheus metrics for Cognito provider calls.

Usage:
    ```python
    from idp_cognito.observability import IdpMetrics

    with IdpMetrics.operation("initiate_auth"):
        reply = await client.initiate_auth(**params)
    ```
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from prometheus_client import Counter, Histogram

from ..exceptions import error_code

if TYPE_CHECKING:
    from collections.abc import Generator

_logger = logging.getLogger(__name__)


class _IdpMetricsRegistry:
    """Registry for Cognito Prometheus metrics.

    Lazily creates the collectors on first use.
    """

    def __init__(self) -> None:
        self._histogram: Any = None
        self._counter: Any = None
        self._login_counter: Any = None
        self._initialized = False

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return

        self._histogram = Histogram(
            "cognito_idp_call_duration_seconds",
            "Cognito provider call duration",
            ["operation"],
        )
        self._counter = Counter(
            "cognito_idp_calls_total",
            "Cognito provider call count",
            ["operation", "outcome"],
        )
        self._login_counter = Counter(
            "cognito_idp_logins_total",
            "Login attempts by response status",
            ["status"],
        )
        self._initialized = True

    @property
    def histogram(self) -> Any:
        self._ensure_initialized()
        return self._histogram

    @property
    def counter(self) -> Any:
        self._ensure_initialized()
        return self._counter

    @property
    def login_counter(self) -> Any:
        self._ensure_initialized()
        return self._login_counter


# Global registry instance
_registry = _IdpMetricsRegistry()


class IdpMetrics:
    """Metric helpers for Cognito provider calls."""

    @staticmethod
    @contextmanager
    def operation(operation: str) -> Generator[None, None, None]:
        """Context manager timing one provider call.

        The outcome label is ``success``, the Cognito error code of a
        failed call, or ``error`` for failures without one.

        Args:
            operation: Cognito action in snake case (e.g. ``initiate_auth``).
        """
        outcome = "success"
        start = time.monotonic()

        try:
            yield
        except Exception as e:
            outcome = error_code(e) or "error"
            raise
        finally:
            duration = time.monotonic() - start
            try:
                _registry.histogram.labels(operation=operation).observe(duration)
                _registry.counter.labels(operation=operation, outcome=outcome).inc()
            except ValueError:
                _logger.debug("Failed to record call metrics", exc_info=True)


def record_login(status_code: int) -> None:
    """Record the status a login answered with."""
    _registry.login_counter.labels(status=str(status_code)).inc()


__all__: list[str] = [
    "IdpMetrics",
    "record_login",
]
