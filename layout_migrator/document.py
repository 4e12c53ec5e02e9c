"""
Layout Migrator — Document Shell

Everything in a v2 Document except pages and nodes: settings, assets, metadata.
"""

from datetime import datetime, timezone
from typing import Mapping, Optional

from layout_migrator.config import MIGRATION_CONFIG
from layout_migrator.fonts import ResolvedFonts
from layout_migrator.models import (
    Document,
    DocumentAssets,
    DocumentMetadata,
    DocumentSettings,
    GridSettings,
    RulerSettings,
    SourceLayout,
    TypographySettings,
)
from layout_migrator.styles import resolve_font_family


def build_document_shell(
    layout: SourceLayout,
    fonts: ResolvedFonts,
    font_map: Optional[Mapping[str, str]] = None,
) -> Document:
    now = datetime.now(timezone.utc).isoformat()
    typography = MIGRATION_CONFIG["typography"]

    default_family = fonts.default_font_family
    if font_map and default_family:
        default_family = resolve_font_family(default_family, font_map)

    # Layout fonts first, then the editor defaults; order-preserving dedupe
    available = list(dict.fromkeys([*fonts.available_fonts, *typography["available_fonts"]]))

    settings = DocumentSettings(
        grid=GridSettings(**MIGRATION_CONFIG["grid"]),
        rulers=RulerSettings(**MIGRATION_CONFIG["rulers"]),
        background=MIGRATION_CONFIG["background"],
        typography=TypographySettings(
            default_font_family=default_family,
            default_font_size=typography["default_font_size"],
            default_font_weight=typography["default_font_weight"],
            default_line_height=typography["default_line_height"],
            default_text_color=typography["default_text_color"],
            available_fonts=available,
        ),
    )

    return Document(
        version=MIGRATION_CONFIG["schema_version"],
        name=layout.content_template_name,
        created_at=now,
        updated_at=now,
        settings=settings,
        assets=DocumentAssets(images={}, fonts=dict(fonts.font_assets)),
        metadata=DocumentMetadata(
            figma_source=None,
            ai_generated=False,
            custom={
                "prolibuId": layout.id,
                "templateType": layout.template_type,
                "contentTemplateCode": layout.content_template_code,
                "migratedAt": now,
            },
        ),
    )
