"""
Middleware Package

- metrics.py: Prometheus request metrics and job board activity counters
"""

from jobboard.middleware.metrics import (
    PrometheusMiddleware,
    setup_metrics,
    route_label,
)

__all__ = [
    "PrometheusMiddleware",
    "setup_metrics",
    "route_label",
]
