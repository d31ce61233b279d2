"""OpenTelemetry spans for Cognito provider calls.

Usage:
    ```python
    from idp_cognito.observability import IdpTracing

    with IdpTracing.span("get_user"):
        reply = await client.get_user(AccessToken=token)
    ```

Without a configured tracer provider the OpenTelemetry API hands out
non-recording spans, so the helpers cost next to nothing.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from ..exceptions import error_code

if TYPE_CHECKING:
    from collections.abc import Generator

PROVIDER = "cognito"


class _TracerRegistry:
    """Lazy tracer initialization."""

    def __init__(self) -> None:
        self._tracer: Any = None

    @property
    def tracer(self) -> Any:
        if self._tracer is None:
            self._tracer = trace.get_tracer("idp-cognito")
        return self._tracer


_registry = _TracerRegistry()


class IdpTracing:
    """Span helpers for Cognito provider calls."""

    @staticmethod
    @contextmanager
    def span(
        operation: str,
        *,
        attributes: dict[str, Any] | None = None,
    ) -> Generator[Any, None, None]:
        """Context manager for a traced provider call.

        Args:
            operation: Cognito action in snake case.
            attributes: Additional span attributes.

        Yields:
            The active span.
        """
        with _registry.tracer.start_as_current_span(
            f"{PROVIDER}.{operation}",
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            span.set_attribute("idp.provider", PROVIDER)
            span.set_attribute("idp.operation", operation)
            if attributes:
                for key, value in attributes.items():
                    span.set_attribute(key, str(value))

            try:
                yield span
            except Exception as e:
                IdpTracing.set_error(span, e)
                raise
            else:
                IdpTracing.set_success(span)

    @staticmethod
    def set_success(span: Any) -> None:
        """Mark span as successful."""
        span.set_status(Status(StatusCode.OK))

    @staticmethod
    def set_error(span: Any, error: Exception) -> None:
        """Mark span as failed with error."""
        code = error_code(error)
        if code:
            span.set_attribute("idp.error_code", code)
        span.set_status(Status(StatusCode.ERROR, str(error)))
        span.record_exception(error)


__all__: list[str] = ["IdpTracing", "PROVIDER"]
