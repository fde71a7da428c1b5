"""Tests for the HTTP service and CLI."""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, patch

from articlebot.core.errors import ConfigurationError
from articlebot.core.schemas import PostStats
from articlebot.publisher import factory
from articlebot.publisher.results import (
    BatchResult,
    BatchStats,
    CheckStatus,
    HealthCheck,
    HealthReport,
)
from articlebot.service.app import create_app
from articlebot.service.main import main


@pytest.fixture
def pipeline():
    mock = AsyncMock()
    mock.health_check.return_value = HealthReport.from_checks([
        HealthCheck(name="environment", status=CheckStatus.PASS),
        HealthCheck(name="store", status=CheckStatus.PASS),
    ])
    mock.statistics.return_value = PostStats(total_posts=12, published_today=2, average_reading_time=8)
    mock.generate.return_value = BatchResult(
        success=True,
        stats=BatchStats(requested=2, generated=2, average_seo_score=71),
    )
    return mock


@pytest.fixture
def client(settings, pipeline):
    return TestClient(create_app("publisher", settings=settings, pipeline=pipeline))


class TestHealthEndpoint:

    def test_healthy(self, client):
        response = client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "publisher"
        assert {c["name"] for c in data["checks"]} == {"environment", "store"}

    def test_unhealthy(self, client, pipeline):
        pipeline.health_check.return_value = HealthReport.from_checks([
            HealthCheck(name="store", status=CheckStatus.FAIL, message="unreachable"),
        ])

        response = client.get("/healthz")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestStatsEndpoint:

    def test_stats(self, client):
        response = client.get("/stats")

        assert response.status_code == 200
        assert response.json()["stats"] == {
            "total_posts": 12, "published_today": 2, "average_reading_time": 8,
        }


class TestCronEndpoint:

    def test_runs_batch_with_default_count(self, client, pipeline, settings):
        response = client.post("/cron/generate")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Generated 2 of 2 posts"
        assert data["result"]["stats"]["average_seo_score"] == 71
        pipeline.generate.assert_awaited_once_with(settings.posts_per_run)

    def test_count_from_body(self, client, pipeline):
        client.post("/cron/generate", json={"count": 5})
        pipeline.generate.assert_awaited_once_with(5)

    def test_count_out_of_range(self, client, pipeline):
        response = client.post("/cron/generate", json={"count": 50})
        assert response.status_code == 422
        pipeline.generate.assert_not_awaited()

    def test_secret_required_when_configured(self, settings, pipeline):
        settings.cron_secret = "s3cret"
        client = TestClient(create_app("publisher", settings=settings, pipeline=pipeline))

        rejected = client.post("/cron/generate", headers={"Authorization": "Bearer wrong"})
        missing = client.post("/cron/generate")
        accepted = client.post("/cron/generate", headers={"Authorization": "Bearer s3cret"})

        assert rejected.status_code == 401
        assert rejected.json() == {"error": "Unauthorized"}
        assert missing.status_code == 401
        assert accepted.status_code == 200
        assert pipeline.generate.await_count == 1

    def test_configuration_error(self, client, pipeline):
        pipeline.generate.side_effect = ConfigurationError(
            "Missing required environment variables: OPENAI_API_KEY", missing=["OPENAI_API_KEY"],
        )

        response = client.post("/cron/generate")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "Configuration error"
        assert data["missing"] == ["OPENAI_API_KEY"]

    def test_usage(self, client):
        response = client.get("/cron/generate")
        assert response.status_code == 200
        assert response.json()["usage"]["method"] == "POST"


class TestCLI:

    def test_run_dry_run_exits_nonzero_without_key(self, settings):
        settings.openai_api_key = ""
        with patch("articlebot.service.main.get_settings", return_value=settings):
            assert main(["run", "--dry-run", "--count", "1"]) == 2

    def test_health_releases_database_connections(self, settings, tmp_path):
        settings.db_url = f"sqlite+aiosqlite:///{tmp_path / 'posts.db'}"
        engines = []
        real_create_engine = factory.create_engine

        def tracking_create_engine(*args, **kwargs):
            engine = real_create_engine(*args, **kwargs)
            engines.append(engine)
            return engine

        with patch("articlebot.service.main.get_settings", return_value=settings), \
                patch.object(factory, "create_engine", tracking_create_engine):
            assert main(["health"]) == 0

        assert len(engines) == 1
        assert engines[0].pool.checkedin() == 0

    def test_stats_command(self, settings, tmp_path, capsys):
        settings.db_url = f"sqlite+aiosqlite:///{tmp_path / 'posts.db'}"
        with patch("articlebot.service.main.get_settings", return_value=settings):
            assert main(["init-db"]) == 0
            assert main(["stats"]) == 0

        assert "Published posts: 0" in capsys.readouterr().out
