"""
Single source of truth for all Pydantic models (v1 source layout, v2 document, results, API).
Target models serialize with camelCase aliases; dump with `by_alias=True` for the wire format.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def generate_id() -> str:
    return str(uuid.uuid4())


class WireModel(BaseModel):
    """Base for every model that crosses the Prolibu / Design Studio boundary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------------------------------------------------------
# Source (v1) Layout Models
# -----------------------------------------------------------------------------


class SourceKind(str, Enum):
    """Closed set of v1 node tags the router knows about."""

    TEXT = "localText"
    RECTANGLE = "localRectangle"
    GROUP = "localGroup"
    COM = "localCom"
    LINE = "localLineHorizontal"
    LAYOUT_CONTENT = "localLayoutContent"
    UNKNOWN = "unknown"

    @classmethod
    def of(cls, tag: str | None) -> SourceKind:
        """Map a raw tag to a kind. Unrecognized tags map to UNKNOWN, never raise."""
        try:
            return cls(tag)
        except ValueError:
            return cls.UNKNOWN


class SourceNode(WireModel):
    name: str = ""
    type: str = ""
    styles: Optional[dict[str, Union[str, int, float, None]]] = None
    content: Optional[str] = None
    value: Optional[str] = None
    children: Optional[list[SourceNode]] = None
    com_comp_config: Optional[dict[str, Any]] = None

    @property
    def kind(self) -> SourceKind:
        return SourceKind.of(self.type)


class SourcePage(WireModel):
    name: Optional[str] = None
    children: list[SourceNode] = Field(default_factory=list)


class PopulatedFont(WireModel):
    """Embedded font populated with its file record."""
    id: str = Field(alias="_id")
    file_name: str
    file_path: Optional[str] = None
    url: str
    mime_type: Optional[str] = None
    size: Optional[float] = None


class LegacyFont(WireModel):
    font_name: str
    font_url: str


# A bare string is an unpopulated font id with no usable data.
EmbeddedFont = Union[PopulatedFont, LegacyFont, str]


class SourceLayout(WireModel):
    id: str = Field(alias="_id")
    content_template_name: str
    content_template_code: Optional[str] = None
    template_type: str
    pages: list[SourcePage]
    default_font: Optional[str] = None
    secondary_font: Optional[str] = None
    embedded_fonts: Optional[list[EmbeddedFont]] = None
    assets: Optional[list[Any]] = None


# -----------------------------------------------------------------------------
# Paint & Geometry Models
# -----------------------------------------------------------------------------


class RGBA(WireModel):
    r: int
    g: int
    b: int
    a: float = 1


class SolidFill(WireModel):
    type: Literal["solid"] = "solid"
    color: RGBA
    opacity: float = 1


class Stroke(WireModel):
    color: RGBA
    weight: float = 1
    style: Literal["solid", "dashed", "dotted"] = "solid"


class Constraints(WireModel):
    horizontal: str = "left"
    vertical: str = "top"


class Point(WireModel):
    x: float = 0
    y: float = 0


class Padding(WireModel):
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


class ImageTransform(WireModel):
    scale: float = 1
    offset_x: float = 0
    offset_y: float = 0


class LineHeight(WireModel):
    value: float
    unit: Literal["px", "auto"] = "px"


class LetterSpacing(WireModel):
    value: float = 0
    unit: Literal["px"] = "px"


WHITE = RGBA(r=255, g=255, b=255, a=1)
BLACK = RGBA(r=0, g=0, b=0, a=1)
GRAY = RGBA(r=128, g=128, b=128, a=1)


def solid(color: RGBA) -> SolidFill:
    return SolidFill(color=color.model_copy())


# -----------------------------------------------------------------------------
# Scene Node Models (v2)
# -----------------------------------------------------------------------------


class BaseSceneNode(WireModel):
    id: str = Field(default_factory=generate_id)
    name: str = ""
    parent_id: Optional[str] = None
    children: list[str] = Field(default_factory=list)
    x: float = 0
    y: float = 0
    width: float = 100
    height: float = 100
    rotation: float = 0
    visible: bool = True
    locked: bool = False
    opacity: float = 1
    constraints: Constraints = Field(default_factory=Constraints)
    blend_mode: str = "normal"
    plugin_data: dict[str, Any] = Field(default_factory=dict)
    fills: list[SolidFill] = Field(default_factory=list)
    strokes: list[Stroke] = Field(default_factory=list)


class FrameNode(BaseSceneNode):
    type: Literal["FRAME"] = "FRAME"
    fills: list[SolidFill] = Field(default_factory=lambda: [solid(WHITE)])
    clip_content: bool = True
    constrain_children: bool = True
    stroke_weight: float = 0
    stroke_align: str = "inside"
    corner_radius: float = 0
    layout_mode: str = "none"
    layout_wrap: bool = False
    padding: Padding = Field(default_factory=Padding)
    item_spacing: float = 0
    counter_axis_align: str = "start"
    primary_axis_align: str = "start"
    effects: list[dict[str, Any]] = Field(default_factory=list)
    background_image: Optional[str] = None
    background_size: Optional[str] = None
    auto_grow: Optional[bool] = None
    min_height: Optional[float] = None


class TextNode(BaseSceneNode):
    type: Literal["TEXT"] = "TEXT"
    content: dict[str, Any] = Field(default_factory=dict)
    tiptap_state: Optional[dict[str, Any]] = None
    html_content: str = ""
    characters: str = ""
    font_family: str = "inherit"
    font_weight: int = 400
    font_size: float = 16
    line_height: LineHeight = Field(default_factory=lambda: LineHeight(value=1.5, unit="auto"))
    letter_spacing: LetterSpacing = Field(default_factory=LetterSpacing)
    text_align: Literal["left", "center", "right", "justify"] = "left"
    vertical_align: str = "top"
    text_decoration: str = "none"
    text_transform: str = "none"
    fills: list[SolidFill] = Field(default_factory=lambda: [solid(BLACK)])
    background_fills: list[SolidFill] = Field(default_factory=list)
    stroke_weight: float = 1
    stroke_align: str = "inside"
    corner_radius: float = 0
    padding: Padding = Field(default_factory=Padding)
    text_auto_resize: str = "width-and-height"


class RectangleNode(BaseSceneNode):
    type: Literal["RECTANGLE"] = "RECTANGLE"
    fills: list[SolidFill] = Field(default_factory=lambda: [solid(GRAY)])
    stroke_weight: float = 0
    stroke_align: str = "inside"
    corner_radius: float = 0
    effects: list[dict[str, Any]] = Field(default_factory=list)


class ImageNode(BaseSceneNode):
    type: Literal["IMAGE"] = "IMAGE"
    image_ref: str
    scale_mode: Literal["fill", "fit", "crop", "tile"] = "fill"
    image_transform: ImageTransform = Field(default_factory=ImageTransform)
    corner_radius: float = 0
    effects: list[dict[str, Any]] = Field(default_factory=list)


class LineNode(BaseSceneNode):
    type: Literal["LINE"] = "LINE"
    stroke_weight: float = 1
    start_point: Point = Field(default_factory=Point)
    end_point: Point = Field(default_factory=Point)


class ComponentNode(BaseSceneNode):
    type: Literal["COMPONENT"] = "COMPONENT"
    plugin_id: str
    component_name: str
    props: dict[str, Any] = Field(default_factory=dict)
    plugin_version: str = "1.0.0"
    fallback_render: Literal["placeholder", "hide"] = "placeholder"


SceneNode = Annotated[
    Union[FrameNode, TextNode, RectangleNode, ImageNode, LineNode, ComponentNode],
    Field(discriminator="type"),
]


def rich_text_content(text: str) -> dict[str, Any]:
    """Single-paragraph rich text document (the editor regenerates full state on open)."""
    return {
        "type": "doc",
        "content": [
            {
                "type": "paragraph",
                "content": [{"type": "text", "text": text}] if text else [],
            }
        ],
    }


# -----------------------------------------------------------------------------
# Page & Document Models (v2)
# -----------------------------------------------------------------------------


class PageSize(WireModel):
    width: float
    height: float
    preset: str = "fixed"


class PlaceholderRules(WireModel):
    empty_behavior: Literal["hide", "show"] = "hide"


class PlaceholderConfig(WireModel):
    content_type: Literal["snippets", "external"]
    rules: PlaceholderRules = Field(default_factory=PlaceholderRules)


class Page(WireModel):
    id: str = Field(default_factory=generate_id)
    name: str
    root_id: str
    orientation: Literal["portrait", "landscape"] = "landscape"
    size: PageSize
    types: list[str] = Field(default_factory=list)
    is_placeholder: bool = False
    placeholder: Optional[PlaceholderConfig] = None


class GoogleFont(WireModel):
    family: str
    weights: list[int] = Field(default_factory=list)


class TypographySettings(WireModel):
    default_font_family: str = "Inter"
    default_font_size: float = 16
    default_font_weight: int = 400
    default_line_height: float = 1.5
    default_text_color: str = "#000000"
    available_fonts: list[str] = Field(default_factory=list)
    google_fonts: list[GoogleFont] = Field(default_factory=list)


class GridSettings(WireModel):
    enabled: bool = True
    size: int = 8
    color: str = "#E5E5E5"
    snap: bool = True


class RulerSettings(WireModel):
    enabled: bool = True
    unit: str = "px"


class DocumentSettings(WireModel):
    grid: GridSettings = Field(default_factory=GridSettings)
    rulers: RulerSettings = Field(default_factory=RulerSettings)
    background: str = "#FFFFFF"
    typography: TypographySettings = Field(default_factory=TypographySettings)


class FontAsset(WireModel):
    family: str
    weights: list[int]
    source: Literal["custom", "google", "system"] = "custom"
    url: str = ""


class DocumentAssets(WireModel):
    images: dict[str, Any] = Field(default_factory=dict)
    fonts: dict[str, FontAsset] = Field(default_factory=dict)


class DocumentMetadata(WireModel):
    figma_source: Optional[Any] = None
    ai_generated: bool = False
    custom: dict[str, Any] = Field(default_factory=dict)


class Document(WireModel):
    version: str
    id: str = Field(default_factory=generate_id)
    name: str
    created_at: str
    updated_at: str
    settings: DocumentSettings
    assets: DocumentAssets
    metadata: DocumentMetadata
    pages: list[Page] = Field(default_factory=list)
    nodes: dict[str, SceneNode] = Field(default_factory=dict)


# -----------------------------------------------------------------------------
# Result Models
# -----------------------------------------------------------------------------


class ValidationIssue(WireModel):
    path: str
    message: str
    code: str


class ValidationResult(WireModel):
    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)
    warnings: list[ValidationIssue] = Field(default_factory=list)


class MigrationStats(WireModel):
    total_source_nodes: int = 0
    migrated_nodes: int = 0
    skipped_nodes: int = 0
    pages: int = 0
    text_nodes: int = 0
    component_nodes: int = 0
    image_nodes: int = 0
    rectangle_nodes: int = 0
    line_nodes: int = 0
    frame_nodes: int = 0


class FontSyncFailure(WireModel):
    name: str
    error: str


class FontSyncResult(WireModel):
    name_map: dict[str, str] = Field(default_factory=dict)  # source font name → fontCode
    uploaded: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failed: list[FontSyncFailure] = Field(default_factory=list)


class MigrationResult(WireModel):
    document: Document
    validation: ValidationResult
    warnings: list[str] = Field(default_factory=list)
    stats: MigrationStats
    font_sync: Optional[FontSyncResult] = None


class CreatedTemplate(WireModel):
    id: str
    name: Optional[str] = None


# -----------------------------------------------------------------------------
# API Request / Response Models
# -----------------------------------------------------------------------------


class MigrateRequest(WireModel):
    template_id: str = Field(..., min_length=1, description="contentTemplateCode or _id of the v1 template")
    name: Optional[str] = Field(None, description="Name for the new template (default: original + ' [migrated <date>]')")
    template_type: str = Field("layout", description="'layout' | 'content' | 'snippet'")
    dry_run: bool = False
    sync_fonts: bool = True


class MigrateResponse(WireModel):
    result: MigrationResult
    created: Optional[CreatedTemplate] = None
