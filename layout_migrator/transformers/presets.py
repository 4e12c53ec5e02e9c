"""
Layout Migrator — Page Preset Resolver

Some v1 frames are whole-page widgets (quote table, quick approval, FAQ
accordion) or placeholder slots (product snippets, custom content). Those are
not converted node by node: they are replaced with the canonical v2 page the
editor itself would create, with any v1 component configuration merged in.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional

from layout_migrator.models import (
    WHITE,
    ComponentNode,
    FrameNode,
    Page,
    PageSize,
    PlaceholderConfig,
    PlaceholderRules,
    RGBA,
    SceneNode,
    SourceKind,
    SourceNode,
    TextNode,
    rich_text_content,
    solid,
)
from layout_migrator.styles import parse_int
from layout_migrator.transformers.component import clean_props
from layout_migrator.transformers.context import TransformContext


class MigrationError(Exception):
    """A pipeline precondition was violated; the migration cannot continue."""


class UnknownPresetError(MigrationError):
    pass


# v1 localGroup name → v2 content page preset id
V1_TO_V2_PRESET_MAP: dict[str, str] = {
    "quotePage": "quote-page",
    "quickProposalApprovalPage": "quick-proposal-approval-page",
    "accordionPage": "accordion-page",
}


@dataclass(frozen=True)
class PresetComponent:
    plugin_id: str
    component_name: str
    default_props: dict[str, Any]
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class PagePreset:
    name: str
    width: float
    height: float
    orientation: Literal["portrait", "landscape"]
    component: PresetComponent
    background: RGBA = field(default_factory=WHITE.model_copy)
    auto_grow: bool = False
    min_height: Optional[float] = None


def _quote_column(label: str, cell: str, width: str) -> dict[str, Any]:
    return {"label": label, "cell": cell, "width": width, "minWidth": width, "visible": True}


# Must stay in sync with the editor's content page presets
V2_PRESETS: dict[str, PagePreset] = {
    "quote-page": PagePreset(
        name="Quote",
        width=612,
        height=792,
        orientation="portrait",
        auto_grow=True,
        min_height=792,
        component=PresetComponent(
            plugin_id="com-quote",
            component_name="Price Quote",
            x=32,
            y=32,
            width=548,
            height=728,
            default_props={
                "title": "Price Summary.",
                "summary": "",
                "hideTitleAndDescription": False,
                "repeatHeaders": False,
                "showTitleAndDescription": True,
                "showDateExpanded": False,
                "showGroupExpanded": False,
                "showFamilyExpanded": False,
                "showLineItemExpanded": False,
                "showConsolidated": False,
                "showAditionalNotes": False,
                "hideSummaryOfDates": False,
                "hideSummaryOfGroups": False,
                "hideSummaryOfFamilies": False,
                "hideSummaryOfTotal": False,
                "showPaymentPlan": True,
                "columns": [
                    _quote_column("Concept", "productName", "110px"),
                    _quote_column("Qty.", "quantity", "25px"),
                    _quote_column("U. Price", "netUnitPrice", "55px"),
                    _quote_column("Sub Total", "subTotal", "55px"),
                    _quote_column("Discount", "discountAmount", "55px"),
                    _quote_column("Taxes", "netTotalTaxAmount", "55px"),
                    _quote_column("Total", "total", "75px"),
                ],
                "paymentPlanColumns": [
                    {"label": "#", "cell": "number", "width": 60, "minWidth": 60, "visible": True, "align": "center"},
                    {"label": "Title", "cell": "title", "width": 280, "minWidth": 200, "visible": True, "align": "left"},
                    {"label": "Payment Date", "cell": "dueDate", "width": 120, "minWidth": 120, "visible": True, "align": "center"},
                    {"label": "Total", "cell": "total", "width": 100, "visible": True, "align": "right"},
                ],
            },
        ),
    ),
    "quick-proposal-approval-page": PagePreset(
        name="Quick Approval",
        width=792,
        height=612,
        orientation="landscape",
        component=PresetComponent(
            plugin_id="com-quick-proposal-approval",
            component_name="Quick Proposal Approval",
            x=40,
            y=100,
            width=712,
            height=472,
            default_props={
                "title": "Proposal Approval.",
                "descriptionText": None,
                "descriptionApproved": None,
                "descriptionDenied": None,
            },
        ),
    ),
    "accordion-page": PagePreset(
        name="FAQ / Accordion",
        width=792,
        height=612,
        orientation="landscape",
        auto_grow=True,
        min_height=612,
        component=PresetComponent(
            plugin_id="com-accordion",
            component_name="Accordion",
            x=40,
            y=40,
            width=712,
            height=500,
            default_props={
                "rows": [
                    {"title": "Title", "description": "Description", "expanded": False, "blockExpanded": False}
                ],
                "startExpanded": False,
            },
        ),
    ),
}


@dataclass
class ResolvedPage:
    page: Page
    root: FrameNode
    nodes: list[SceneNode] = field(default_factory=list)


# ──────────────────────────────────────────────────────
# Named page presets
# ──────────────────────────────────────────────────────

@dataclass
class PresetDetection:
    preset_id: str
    preset_child: SourceNode
    v1_props: Optional[dict[str, Any]]


def preset_component_key(group_name: str) -> str:
    """"quotePage" → "comQuote"."""
    base = group_name[: -len("Page")] if group_name.endswith("Page") else group_name
    return f"com{base[:1].upper()}{base[1:]}"


def extract_config_props(node: SourceNode, component_key: str) -> Optional[dict[str, Any]]:
    """Depth-first: nested configuration wins over the same key on an ancestor."""
    for child in node.children or []:
        found = extract_config_props(child, component_key)
        if found is not None:
            return found

    config = (node.com_comp_config or {}).get(component_key)
    if config:
        return clean_props(config)
    return None


def detect_page_preset(frame: SourceNode) -> Optional[PresetDetection]:
    for child in frame.children or []:
        if child.kind is SourceKind.GROUP and child.name in V1_TO_V2_PRESET_MAP:
            return PresetDetection(
                preset_id=V1_TO_V2_PRESET_MAP[child.name],
                preset_child=child,
                v1_props=extract_config_props(child, preset_component_key(child.name)),
            )
    return None


def resolve_page_preset(
    preset_id: str,
    v1_props: Optional[Mapping[str, Any]],
    ctx: TransformContext,
    v1_styles: Optional[Mapping[str, Any]] = None,
) -> ResolvedPage:
    """Build the canonical v2 page for a preset, v1 props merged over its defaults.

    Raises:
        UnknownPresetError: preset_id is not a known v2 preset.
    """
    preset = V2_PRESETS.get(preset_id)
    if preset is None:
        raise UnknownPresetError(f"Unknown V2 preset ID: {preset_id}")

    styles = v1_styles or {}
    source_min_height = styles.get("minHeight")
    is_auto_grow = styles.get("height") == "auto" or source_min_height is not None or preset.auto_grow
    min_height = parse_int(str(source_min_height)) if source_min_height else None
    if min_height is None:
        min_height = preset.min_height
    grown_height = min_height if min_height is not None else preset.height

    root = FrameNode(
        name=preset.name,
        parent_id=None,
        width=preset.width,
        height=grown_height if is_auto_grow else preset.height,
        fills=[solid(preset.background)],
        clip_content=True,
        auto_grow=True if is_auto_grow else None,
        min_height=grown_height if is_auto_grow else None,
    )

    spec = preset.component
    props = copy.deepcopy(spec.default_props)
    props.update(copy.deepcopy(dict(v1_props or {})))

    component = ComponentNode(
        name=spec.component_name,
        parent_id=root.id,
        x=spec.x,
        y=spec.y,
        width=spec.width,
        height=spec.height,
        plugin_id=spec.plugin_id,
        component_name=spec.component_name,
        props=props,
    )
    root.children.append(component.id)

    page = Page(
        name=preset.name,
        root_id=root.id,
        orientation=preset.orientation,
        size=PageSize(width=preset.width, height=preset.height),
        types=[],
        is_placeholder=False,
    )

    ctx.stats.component_nodes += 1
    ctx.stats.pages += 1
    ctx.warn(f'PagePresetResolved: Using V2 "{preset_id}" preset structure (V1 props merged)')

    return ResolvedPage(page=page, root=root, nodes=[root, component])


# ──────────────────────────────────────────────────────
# Marker placeholder pages
# ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class MarkerPreset:
    name: str
    marker_text: str
    content_type: Literal["snippets", "external"]
    width: float = 792
    height: float = 80
    background: RGBA = field(default_factory=lambda: RGBA(r=26, g=26, b=26, a=1))


MARKER_PRESETS: dict[str, MarkerPreset] = {
    "snippets-placeholder": MarkerPreset(
        name="Product Snippets", marker_text="{{{productSnippets}}}", content_type="snippets"
    ),
    "custom-content": MarkerPreset(
        name="Custom Content", marker_text="{{{customContent}}}", content_type="external"
    ),
}


def detect_marker_preset(frame: SourceNode) -> Optional[str]:
    """Marker preset id for a frame holding a localLayoutContent slot, else None."""
    for child in frame.children or []:
        if child.kind is not SourceKind.LAYOUT_CONTENT:
            continue
        name = (child.name or "").lower()
        if "layoutproductsnippets" in name:
            return "snippets-placeholder"
        if "layoutcontent" in name:
            return "custom-content"
    return None


def resolve_marker_preset(marker_id: str, ctx: TransformContext) -> ResolvedPage:
    preset = MARKER_PRESETS.get(marker_id)
    if preset is None:
        raise UnknownPresetError(f"Unknown marker preset ID: {marker_id}")

    root = FrameNode(
        name=preset.name,
        parent_id=None,
        width=preset.width,
        height=preset.height,
        fills=[solid(preset.background)],
        clip_content=True,
    )
    text = TextNode(
        name=preset.marker_text,
        parent_id=root.id,
        x=0,
        y=0,
        width=preset.width,
        height=preset.height,
        content=rich_text_content(preset.marker_text),
        tiptap_state=None,
        html_content=f"<p>{preset.marker_text}</p>",
        characters=preset.marker_text,
        fills=[solid(WHITE)],
        text_auto_resize="none",
    )
    root.children.append(text.id)

    page = Page(
        name=preset.name,
        root_id=root.id,
        orientation="landscape",
        size=PageSize(width=preset.width, height=preset.height),
        types=["marker"],
        is_placeholder=True,
        placeholder=PlaceholderConfig(
            content_type=preset.content_type, rules=PlaceholderRules(empty_behavior="hide")
        ),
    )

    ctx.stats.pages += 1
    ctx.stats.text_nodes += 1
    ctx.warn(f'MarkerPresetResolved: Using V2 "{marker_id}" preset for placeholder page')

    return ResolvedPage(page=page, root=root, nodes=[root, text])
