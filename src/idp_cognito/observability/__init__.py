"""Observability helpers for Cognito provider calls.

Every provider call made by the services is timed into Prometheus and
wrapped in an OpenTelemetry span.

Usage:
    ```python
    from idp_cognito.observability import IdpMetrics, IdpTracing

    with IdpTracing.span("get_user"), IdpMetrics.operation("get_user"):
        reply = await client.get_user(AccessToken=token)
    ```
"""

from __future__ import annotations

from .metrics import IdpMetrics, record_login
from .tracing import PROVIDER, IdpTracing

__all__: list[str] = [
    # Metrics
    "IdpMetrics",
    "record_login",
    # Tracing
    "IdpTracing",
    "PROVIDER",
]
