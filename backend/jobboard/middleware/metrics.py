"""
Prometheus Metrics

HTTP metrics (latency, counts, in-flight requests) labelled by route
template, plus job board activity counters incremented by the routers and
the expiry sweep.

Usage:
    from jobboard.middleware.metrics import setup_metrics
    setup_metrics(app)      # adds the middleware and GET /metrics
"""

import logging
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CONTENT_TYPE_LATEST,
    generate_latest,
    REGISTRY,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from jobboard.services.storage import PUBLIC_PREFIX

logger = logging.getLogger(__name__)

# Paths that are never measured
UNTRACKED_PATHS = {"/metrics", "/health"}

# ==================== HTTP ====================

REQUEST_LATENCY = Histogram(
    "jobboard_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "route", "status"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

REQUEST_COUNT = Counter(
    "jobboard_http_requests_total",
    "HTTP requests by route and status",
    ["method", "route", "status"]
)

ACTIVE_REQUESTS = Gauge(
    "jobboard_http_requests_in_flight",
    "HTTP requests currently being served",
    ["method"]
)

# ==================== Job board activity ====================

SUBMISSIONS = Counter(
    "job_submissions_total",
    "Job postings submitted",
    ["job_type"]
)

APPLICATIONS = Counter(
    "job_applications_total",
    "Applications received"
)

APPLICATION_STATUS_CHANGES = Counter(
    "application_status_changes_total",
    "Applicant status updates by posters",
    ["status"]
)

MODERATION_DECISIONS = Counter(
    "moderation_decisions_total",
    "Reviewer decisions on pending postings",
    ["decision"]
)

OTP_SENT = Counter(
    "otp_codes_sent_total",
    "Sign-in codes sent",
    ["purpose"]
)

PHONE_LOOKUPS = Counter(
    "phone_lookups_total",
    "Submission form phone lookups",
    ["found"]
)

EXPIRED_POSTINGS = Counter(
    "postings_expired_total",
    "Postings moved to expired by the sweep"
)


def route_label(request: Request) -> str:
    """
    Route template for a served request, e.g. /jobs/{slug}.

    Uploaded documents share one label and unknown paths are "unmatched",
    so raw URLs never become label values.
    """
    for route in request.app.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return route.path
    if request.url.path.startswith(PUBLIC_PREFIX):
        return PUBLIC_PREFIX
    return "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)

        method = request.method
        ACTIVE_REQUESTS.labels(method=method).inc()
        start = time.perf_counter()
        status = "500"

        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        except Exception as e:
            logger.error(f"Unhandled error on {method} {request.url.path}: {e}")
            raise
        finally:
            route = route_label(request)
            REQUEST_LATENCY.labels(method=method, route=route, status=status).observe(
                time.perf_counter() - start
            )
            REQUEST_COUNT.labels(method=method, route=route, status=status).inc()
            ACTIVE_REQUESTS.labels(method=method).dec()


def metrics_endpoint(request: Request) -> Response:
    return PlainTextResponse(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


def setup_metrics(app: FastAPI) -> None:
    app.add_middleware(PrometheusMiddleware)
    app.add_route("/metrics", metrics_endpoint, methods=["GET"])
    logger.info("Prometheus metrics configured")


# ==================== Helper Functions ====================

def record_submission(job_type: str) -> None:
    SUBMISSIONS.labels(job_type=job_type).inc()


def record_application() -> None:
    APPLICATIONS.inc()


def record_application_status(status: str) -> None:
    APPLICATION_STATUS_CHANGES.labels(status=status).inc()


def record_moderation(decision: str) -> None:
    MODERATION_DECISIONS.labels(decision=decision).inc()


def record_otp_sent(purpose: str) -> None:
    OTP_SENT.labels(purpose=purpose).inc()


def record_phone_lookup(found: bool) -> None:
    PHONE_LOOKUPS.labels(found=str(found).lower()).inc()


def record_expired(count: int) -> None:
    EXPIRED_POSTINGS.inc(count)
