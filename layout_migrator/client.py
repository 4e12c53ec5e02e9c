"""
Layout Migrator — Prolibu API Client

Fetches v1 content templates and uploads migrated documents as new templates.
httpx AsyncClient with timeout, retry with exponential backoff on transient
failures, and strict JSON / schema validation of responses.
"""

import asyncio
import json
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from layout_migrator.config import generate_error_code, log, settings
from layout_migrator.models import CreatedTemplate, Document, GoogleFont, SourceLayout

RETRYABLE_STATUS = frozenset({408, 429, 500, 502, 503, 504})
RETRY_BASE_DELAY_SECONDS = 1.0
RETRY_MAX_DELAY_SECONDS = 8.0


class ProlibuApiError(Exception):
    def __init__(self, message: str, status_code: int = 0, response_body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class ProlibuParseError(Exception):
    def __init__(self, message: str, errors: Optional[list[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


@dataclass
class ProlibuConfig:
    base_url: str                # e.g. https://acme.prolibu.com/api
    auth_token: str
    timeout_seconds: float = 30.0
    max_retries: int = 3

    @classmethod
    def from_settings(cls, source=None) -> "ProlibuConfig":
        source = source or settings
        return cls(
            base_url=source.prolibu_api_url,
            auth_token=source.prolibu_auth_token,
            timeout_seconds=source.request_timeout_seconds,
            max_retries=source.max_retries,
        )

    @property
    def api_root(self) -> str:
        return self.base_url.rstrip("/")

    @property
    def authorization(self) -> str:
        return bearer(self.auth_token)


def bearer(token: str) -> str:
    """Normalize to exactly one "Bearer " prefix."""
    return token if token.startswith("Bearer ") else f"Bearer {token}"


@asynccontextmanager
async def http_client(config: ProlibuConfig, client: Optional[httpx.AsyncClient] = None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the caller's client as-is, or a short-lived one owned by this call."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=config.timeout_seconds) as owned:
        yield owned


# ──────────────────────────────────────────────────────
# Fetch
# ──────────────────────────────────────────────────────

async def fetch_content_template(
    template_id: str, config: ProlibuConfig, client: Optional[httpx.AsyncClient] = None
) -> SourceLayout:
    """GET a v1 content template (embedded fonts populated) and validate its structure.

    Raises:
        ProlibuApiError: transport failure, non-2xx response, or invalid JSON.
        ProlibuParseError: the payload does not match the v1 layout schema.
    """
    populate = json.dumps([{"path": "embeddedFonts", "select": "fileName url mimeType"}], separators=(",", ":"))
    url = f"{config.api_root}/v2/contenttemplate/{template_id}?populatePath={quote(populate)}"

    async with http_client(config, client) as http:
        response = await request_with_retry(
            http, "GET", url, config, context=f"fetching template {template_id}", headers=_json_headers(config)
        )
    data = parse_json(response, f"template {template_id}")

    try:
        layout = SourceLayout.model_validate(data)
    except ValidationError as e:
        code = generate_error_code()
        log("ERROR", "template payload invalid", template_id=template_id, error_code=code, error=str(e))
        raise ProlibuParseError(
            f"Invalid API response structure for template {template_id}: {e}", e.errors()
        ) from e

    log("INFO", "template fetched", template_id=template_id, pages=len(layout.pages))
    return layout


# ──────────────────────────────────────────────────────
# Create
# ──────────────────────────────────────────────────────

def google_fonts_link_tags(fonts: list[GoogleFont]) -> str:
    tags = []
    for font in fonts:
        weights = f":wght@{';'.join(str(w) for w in font.weights)}" if font.weights else ""
        family = "+".join(font.family.split())
        tags.append(
            f'<link href="https://fonts.googleapis.com/css2?family={family}{weights}&display=swap" rel="stylesheet">'
        )
    return "\n".join(tags)


def document_to_payload(doc: Document, name: Optional[str] = None, template_type: Optional[str] = None) -> dict:
    """Content-template payload for a v2 document. Nodes and settings ride on pages[0] only."""
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    nodes = {node_id: node.model_dump(by_alias=True, mode="json") for node_id, node in doc.nodes.items()}
    settings_payload = doc.settings.model_dump(by_alias=True, mode="json")

    pages = []
    for index, page in enumerate(doc.pages):
        entry = page.model_dump(by_alias=True, mode="json", exclude={"placeholder"})
        if page.placeholder is not None:
            entry["placeholder"] = page.placeholder.model_dump(by_alias=True, mode="json")
        if index == 0:
            entry["nodes"] = nodes
            entry["settings"] = settings_payload
        pages.append(entry)

    payload: dict[str, Any] = {
        "contentTemplateName": name or f"{doc.name} [migrated {today}]",
        "templateType": template_type or "layout",
        "pages": pages,
        "html": "",
        "meta": {"googleFonts": google_fonts_link_tags(doc.settings.typography.google_fonts)},
    }
    if doc.settings.typography.default_font_family:
        payload["defaultFont"] = doc.settings.typography.default_font_family
    return payload


async def create_content_template(
    doc: Document,
    config: ProlibuConfig,
    name: Optional[str] = None,
    template_type: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> CreatedTemplate:
    """POST the migrated document as a new content template. Never retried on HTTP status."""
    payload = document_to_payload(doc, name, template_type)
    url = f"{config.api_root}/v2/contenttemplate/"

    async with http_client(config, client) as http:
        response = await request_with_retry(
            http, "POST", url, config, context="creating template", headers=_json_headers(config), json=payload
        )
    data = parse_json(response, "create response")

    template_id = (data.get("_id") or data.get("id")) if isinstance(data, dict) else None
    if not template_id:
        raise ProlibuApiError("API returned no _id for created template", response.status_code, response.text)

    log("INFO", "template created", template_id=template_id)
    return CreatedTemplate(id=template_id, name=data.get("contentTemplateName"))


# ──────────────────────────────────────────────────────
# HTTP helpers (retry + safe JSON)
# ──────────────────────────────────────────────────────

def _json_headers(config: ProlibuConfig) -> dict[str, str]:
    return {"Authorization": config.authorization, "Content-Type": "application/json"}


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after failed attempt `attempt` (1-based): 1, 2, 4, 8, 8, ..."""
    return min(RETRY_BASE_DELAY_SECONDS * 2 ** (attempt - 1), RETRY_MAX_DELAY_SECONDS)


async def request_with_retry(
    http: httpx.AsyncClient,
    method: str,
    url: str,
    config: ProlibuConfig,
    context: str,
    **kwargs,
) -> httpx.Response:
    """Send a request, retrying network errors (any method) and transient statuses (GET only).

    Timeouts are not retried.
    """
    attempt = 1
    while True:
        try:
            response = await http.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise ProlibuApiError(f"Request timed out ({config.timeout_seconds}s) {context}") from e
        except httpx.TransportError as e:
            if attempt < config.max_retries:
                log("WARN", "network error, retrying", context=context, attempt=attempt, error=str(e))
                await asyncio.sleep(backoff_delay(attempt))
                attempt += 1
                continue
            raise ProlibuApiError(
                f"Network error {context} after {config.max_retries} attempts: {e}"
            ) from e

        if response.status_code in RETRYABLE_STATUS and method == "GET" and attempt < config.max_retries:
            log("WARN", "transient HTTP error, retrying", context=context, attempt=attempt, status=response.status_code)
            await asyncio.sleep(backoff_delay(attempt))
            attempt += 1
            continue

        if not response.is_success:
            raise ProlibuApiError(
                f"API error: {response.status_code} {response.reason_phrase} {context}",
                response.status_code,
                response.text,
            )
        return response


def parse_json(response: httpx.Response, context: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise ProlibuApiError(
            f"Invalid JSON response {context}: {response.text[:200]}", response.status_code, response.text
        ) from e
