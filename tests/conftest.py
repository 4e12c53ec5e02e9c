"""
Layout Migrator — Shared Test Fixtures

Builders for v1 source trees, a sample end-to-end layout, an in-process HTTP
client for the FastAPI app, and httpx MockTransport helpers for Prolibu calls.
"""

import os
import sys
from typing import Any, Callable, Optional

import httpx
import pytest
from httpx import AsyncClient, ASGITransport

# Ensure layout_migrator is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


# -----------------------------------------------------------------------------
# Environment Setup (before importing app modules)
# -----------------------------------------------------------------------------

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:3000")
os.environ.setdefault("PROLIBU_API_URL", "https://acme.prolibu.com/api")
os.environ.setdefault("PROLIBU_AUTH_TOKEN", "test-token")
os.environ.setdefault("MIGRATION_RATE_LIMIT", "1000/minute")

from layout_migrator.client import ProlibuConfig  # noqa: E402
from layout_migrator.models import SourceLayout, SourceNode, SourcePage  # noqa: E402
from layout_migrator.transformers.context import TransformContext  # noqa: E402


# -----------------------------------------------------------------------------
# Source Tree Builders
# -----------------------------------------------------------------------------


def make_node(
    type: str,
    name: str = "",
    styles: Optional[dict[str, Any]] = None,
    children: Optional[list[SourceNode]] = None,
    **extra,
) -> SourceNode:
    """Build a v1 node. `extra` accepts content, value, com_comp_config."""
    return SourceNode(type=type, name=name, styles=styles, children=children, **extra)


def make_layout(
    frames: list[SourceNode],
    embedded_fonts: Optional[list] = None,
    default_font: Optional[str] = None,
    name: str = "Main Layout",
) -> SourceLayout:
    return SourceLayout(
        id="tpl-123",
        content_template_name=name,
        content_template_code="main-layout",
        template_type="layout",
        pages=[SourcePage(name="Page 1", children=frames)],
        embedded_fonts=embedded_fonts,
        default_font=default_font,
    )


@pytest.fixture
def ctx() -> TransformContext:
    """Fresh transformation context (no fonts, no font map)."""
    return TransformContext()


@pytest.fixture
def e2e_layout() -> dict:
    """Wire-format v1 layout: one plain frame with a wildcard text, one snippets slot."""
    return {
        "_id": "tpl-e2e",
        "contentTemplateName": "Proposal",
        "contentTemplateCode": "main-layout",
        "templateType": "layout",
        "pages": [
            {
                "name": "Page 1",
                "children": [
                    {
                        "name": "Cover",
                        "type": "FRAME",
                        "styles": {"backgroundColor": "#FFFFFF"},
                        "children": [
                            {
                                "name": "Greeting",
                                "type": "localText",
                                "styles": {"left": "40px", "top": "60px", "width": "300px", "height": "40px"},
                                "content": "<p>Hello {{ name }}</p>",
                            }
                        ],
                    },
                    {
                        "name": "presetPage",
                        "type": "presetPage",
                        "children": [{"name": "layoutProductSnippets", "type": "localLayoutContent"}],
                    },
                ],
            }
        ],
    }


# -----------------------------------------------------------------------------
# HTTP Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def prolibu_config() -> ProlibuConfig:
    return ProlibuConfig(base_url="https://acme.prolibu.com/api", auth_token="Bearer test-token")


def mock_http(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """httpx client whose every request is answered by `handler`."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    """Retries back off instantly in tests."""
    monkeypatch.setattr("layout_migrator.client.RETRY_BASE_DELAY_SECONDS", 0.0)


@pytest.fixture
async def client():
    """Async HTTP client for testing FastAPI endpoints."""
    from layout_migrator.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
