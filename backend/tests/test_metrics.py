"""
Tests for Prometheus metrics

Tests cover:
- /metrics and /health endpoints
- Route template labels
- Activity counters
"""

import pytest
from prometheus_client import REGISTRY
from starlette.requests import Request

from jobboard.main import app
from jobboard.middleware.metrics import record_moderation, route_label


def fake_request(path, method="GET"):
    return Request({
        "type": "http",
        "method": method,
        "path": path,
        "root_path": "",
        "query_string": b"",
        "headers": [],
        "app": app,
    })


class TestRouteLabel:
    def test_uses_route_template(self):
        assert route_label(fake_request("/jobs/field-organizer-1a2b")) == "/jobs/{slug}"

    def test_post_route_template(self):
        assert route_label(fake_request("/review/jobs/abc/approve", method="POST")) == "/review/jobs/{job_id}/approve"

    def test_uploads_share_a_label(self):
        path = "/storage/v1/object/public/job-applications/job-1/a.pdf"
        assert route_label(fake_request(path)) == "/storage/v1/object/public"

    def test_unknown_path(self):
        assert route_label(fake_request("/wp-admin")) == "unmatched"


class TestCounters:
    def test_record_moderation(self):
        before = REGISTRY.get_sample_value(
            "moderation_decisions_total", {"decision": "approved"}
        ) or 0
        record_moderation("approved")
        after = REGISTRY.get_sample_value("moderation_decisions_total", {"decision": "approved"})
        assert after == before + 1


class TestEndpoints:
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_metrics_exposes_request_counts(self, client):
        await client.get("/jobs")
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert 'jobboard_http_requests_total{method="GET",route="/jobs",status="200"}' in response.text
