"""
Layout Migrator — API Endpoint Unit Tests

Tests for REST endpoints: health check, pure transform, full migration.
Prolibu calls are mocked at the router module: no real API requests.
"""

import inspect
from unittest.mock import AsyncMock

import pytest
from fastapi import status

from layout_migrator.api.migrations import transform_layout
from layout_migrator.client import ProlibuApiError
from layout_migrator.config import settings
from layout_migrator.models import CreatedTemplate
from layout_migrator.pipeline import MigrationError, migrate_from_layout

NO_PAGES = {"_id": "tpl-empty", "contentTemplateName": "Empty", "templateType": "layout", "pages": []}


# -----------------------------------------------------------------------------
# Health Check Tests
# -----------------------------------------------------------------------------


class TestHealthCheck:
    """Tests for /api/health endpoint."""

    @pytest.mark.asyncio
    async def test_health_check_returns_ok(self, client):
        """Test health check endpoint returns status ok and version."""
        response = await client.get("/api/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "ok", "version": "0.1.0"}


# -----------------------------------------------------------------------------
# Transform Tests (POST /api/migrations/transform)
# -----------------------------------------------------------------------------


class TestTransform:
    """Tests for POST /api/migrations/transform."""

    @pytest.mark.asyncio
    async def test_transforms_layout(self, client, e2e_layout):
        """Test a v1 layout comes back as a camelCase v2 result."""
        response = await client.post("/api/migrations/transform", json=e2e_layout)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["validation"]["valid"] is True
        assert data["stats"]["pages"] == 2
        assert data["document"]["pages"][1]["isPlaceholder"] is True

    @pytest.mark.asyncio
    async def test_rejects_layout_without_pages(self, client):
        """Test an empty layout is a 400 with an error code."""
        response = await client.post("/api/migrations/transform", json=NO_PAGES)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        detail = response.json()["detail"]
        assert "no pages" in detail["message"]
        assert detail["error_code"].startswith("LM-")

    @pytest.mark.asyncio
    async def test_rejects_malformed_layout(self, client):
        """Test a body missing required fields is rejected."""
        response = await client.post("/api/migrations/transform", json={"_id": "x"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_runs_in_threadpool(self):
        """The CPU-bound transform route is sync so it stays off the event loop."""
        handler = inspect.unwrap(transform_layout)
        assert not inspect.iscoroutinefunction(transform_layout)
        assert not inspect.iscoroutinefunction(handler)


# -----------------------------------------------------------------------------
# Migration Tests (POST /api/migrations)
# -----------------------------------------------------------------------------


class TestRunMigration:
    """Tests for POST /api/migrations."""

    @pytest.mark.asyncio
    async def test_dry_run(self, client, e2e_layout, monkeypatch):
        """Test dry run transforms without uploading."""
        mock_migrate = AsyncMock(return_value=migrate_from_layout(e2e_layout))
        mock_create = AsyncMock()
        monkeypatch.setattr("layout_migrator.api.migrations.migrate", mock_migrate)
        monkeypatch.setattr("layout_migrator.api.migrations.create_content_template", mock_create)

        response = await client.post("/api/migrations", json={"templateId": "main-layout", "dryRun": True})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["created"] is None
        assert data["result"]["stats"]["pages"] == 2
        assert mock_migrate.call_args.args[0] == "main-layout"
        assert mock_migrate.call_args.kwargs["config"].authorization == "Bearer test-token"
        mock_create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uploads_result(self, client, e2e_layout, monkeypatch):
        """Test a full migration returns the created template."""
        monkeypatch.setattr(
            "layout_migrator.api.migrations.migrate", AsyncMock(return_value=migrate_from_layout(e2e_layout))
        )
        mock_create = AsyncMock(return_value=CreatedTemplate(id="new-1", name="Proposal v2"))
        monkeypatch.setattr("layout_migrator.api.migrations.create_content_template", mock_create)

        response = await client.post(
            "/api/migrations", json={"templateId": "main-layout", "name": "Proposal v2", "templateType": "content"}
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["created"] == {"id": "new-1", "name": "Proposal v2"}
        assert mock_create.call_args.args[2:] == ("Proposal v2", "content")

    @pytest.mark.asyncio
    async def test_font_sync_disabled(self, client, e2e_layout, monkeypatch):
        """Test syncFonts false passes no font config."""
        mock_migrate = AsyncMock(return_value=migrate_from_layout(e2e_layout))
        monkeypatch.setattr("layout_migrator.api.migrations.migrate", mock_migrate)

        await client.post("/api/migrations", json={"templateId": "main-layout", "dryRun": True, "syncFonts": False})

        assert mock_migrate.call_args.kwargs["font_api_config"] is None

    @pytest.mark.asyncio
    async def test_rejects_empty_template_id(self, client):
        """Test an empty template id is rejected."""
        response = await client.post("/api/migrations", json={"templateId": ""})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_not_configured(self, client, monkeypatch):
        """Test missing credentials is a 503."""
        monkeypatch.setattr(settings, "prolibu_auth_token", "")

        response = await client.post("/api/migrations", json={"templateId": "main-layout"})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["detail"]["error_code"].startswith("LM-")

    @pytest.mark.asyncio
    async def test_upstream_error(self, client, monkeypatch):
        """Test Prolibu failures map to 502."""
        monkeypatch.setattr(
            "layout_migrator.api.migrations.migrate",
            AsyncMock(side_effect=ProlibuApiError("API error: 404 Not Found fetching template x", 404)),
        )

        response = await client.post("/api/migrations", json={"templateId": "x"})

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert response.json()["detail"]["message"].startswith("Prolibu API error:")

    @pytest.mark.asyncio
    async def test_migration_error(self, client, monkeypatch):
        """Test pipeline precondition failures map to 400."""
        monkeypatch.setattr(
            "layout_migrator.api.migrations.migrate",
            AsyncMock(side_effect=MigrationError("Layout has no pages — nothing to migrate.")),
        )

        response = await client.post("/api/migrations", json={"templateId": "x"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
