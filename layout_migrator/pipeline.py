"""
Layout Migrator — Migration Pipeline

Orchestrates the full flow:
  fetch → sync fonts → resolve fonts → per-frame (preset | marker | generic) →
  assemble → validate

`migrate_from_layout` is the synchronous, IO-free core; `migrate` wraps it with
the API client and font synchronizer.
"""

import time
from typing import Any, Mapping, Optional, Union

import httpx

from layout_migrator.client import ProlibuConfig, fetch_content_template
from layout_migrator.config import MIGRATION_CONFIG, log
from layout_migrator.document import build_document_shell
from layout_migrator.font_sync import sync_fonts
from layout_migrator.fonts import resolve_fonts
from layout_migrator.models import MigrationResult, PageSize, SourceLayout
from layout_migrator.transformers.context import TransformContext
from layout_migrator.transformers.page import transform_page
from layout_migrator.transformers.presets import (
    MigrationError,
    UnknownPresetError,
    detect_marker_preset,
    detect_page_preset,
    resolve_marker_preset,
    resolve_page_preset,
)
from layout_migrator.validation import validate_document


def default_page_size() -> PageSize:
    return PageSize(**MIGRATION_CONFIG["page_sizes"]["fixed"])


def migrate_from_layout(
    layout: Union[SourceLayout, Mapping[str, Any]],
    page_size: Optional[PageSize] = None,
    font_map: Optional[Mapping[str, str]] = None,
) -> MigrationResult:
    """Transform an already-fetched v1 layout into a validated v2 document. No IO.

    Raises:
        MigrationError: the layout has no pages.
    """
    if not isinstance(layout, SourceLayout):
        layout = SourceLayout.model_validate(layout)
    if not layout.pages:
        raise MigrationError("Layout has no pages — nothing to migrate.")

    start = time.monotonic()
    page_size = page_size or default_page_size()
    font_map = dict(font_map) if font_map else None
    log("INFO", "migration started", template_id=layout.id, frames=len(layout.pages[0].children))

    fonts = resolve_fonts(layout)
    document = build_document_shell(layout, fonts, font_map)
    ctx = TransformContext(fonts=fonts, font_map=font_map, template_id=layout.id)

    # v1 layouts hold a single page whose children are the real pages
    for index, frame in enumerate(layout.pages[0].children):
        preset = detect_page_preset(frame)
        marker_id = None if preset else detect_marker_preset(frame)

        if preset:
            resolved = resolve_page_preset(preset.preset_id, preset.v1_props, ctx, frame.styles)
        elif marker_id:
            resolved = resolve_marker_preset(marker_id, ctx)
        else:
            resolved = transform_page(frame, index, page_size, ctx)

        for node in resolved.nodes:
            document.nodes[node.id] = node
        document.pages.append(resolved.page)

    validation = validate_document(document)
    for issue in validation.warnings:
        ctx.warnings.append(f"Validation: {issue.message} ({issue.path})")

    log(
        "INFO",
        "migration completed",
        template_id=layout.id,
        pages=ctx.stats.pages,
        nodes=len(document.nodes),
        warnings=len(ctx.warnings),
        valid=validation.valid,
        duration_ms=int((time.monotonic() - start) * 1000),
    )
    return MigrationResult(document=document, validation=validation, warnings=ctx.warnings, stats=ctx.stats)


async def migrate(
    template_id: str,
    config: Optional[ProlibuConfig] = None,
    layout: Optional[Union[SourceLayout, Mapping[str, Any]]] = None,
    font_api_config: Optional[ProlibuConfig] = None,
    page_size: Optional[PageSize] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> MigrationResult:
    """Fetch (unless `layout` is given), sync fonts (when `font_api_config` is given), transform.

    Raises:
        MigrationError: neither a layout nor a client config was provided, or no pages.
        ProlibuApiError / ProlibuParseError: the fetch failed.
    """
    if layout is not None:
        source = layout if isinstance(layout, SourceLayout) else SourceLayout.model_validate(layout)
    elif config is not None:
        source = await fetch_content_template(template_id, config, client)
    else:
        raise MigrationError("Either config or layout must be provided")

    font_sync = None
    if font_api_config is not None and source.embedded_fonts:
        font_sync = await sync_fonts(source.embedded_fonts, font_api_config, client)

    result = migrate_from_layout(source, page_size, font_sync.name_map if font_sync else None)
    result.font_sync = font_sync
    return result
