"""
Layout Migrator — Page Transformer

Generic path for a v1 frame that is neither a preset nor a marker slot: a root
FRAME synthesized from the frame's styles, with every child routed under it.
"""

from layout_migrator.colors import parse_color
from layout_migrator.models import WHITE, FrameNode, Page, PageSize, SourceKind, SourceNode, solid
from layout_migrator.styles import parse_node_styles
from layout_migrator.transformers.context import TransformContext
from layout_migrator.transformers.presets import ResolvedPage
from layout_migrator.transformers.router import route_node
from layout_migrator.wildcards import convert_wildcards


def transform_page(frame: SourceNode, index: int, page_size: PageSize, ctx: TransformContext) -> ResolvedPage:
    styles = parse_node_styles(frame.styles)
    is_auto_grow = styles.height_auto or styles.min_height is not None
    grown_height = styles.min_height if styles.min_height is not None else page_size.height
    background_image = convert_wildcards(styles.background_image) if styles.background_image else None
    name = frame.name or f"Page {index + 1}"

    root = FrameNode(
        name=name,
        parent_id=None,
        width=page_size.width,
        height=grown_height if is_auto_grow else page_size.height,
        fills=[solid(parse_color(styles.background_color) if styles.background_color else WHITE)],
        background_image=background_image,
        background_size="cover" if background_image else None,
        auto_grow=True if is_auto_grow else None,
        min_height=grown_height if is_auto_grow else None,
        clip_content=True,
    )
    ctx.stats.pages += 1

    nodes = [root]
    for child in frame.children or []:
        if child.kind is SourceKind.LAYOUT_CONTENT:
            # Slot markers on a frame that did not resolve to a marker page
            ctx.stats.total_source_nodes += 1
            ctx.stats.skipped_nodes += 1
            continue

        for produced in route_node(child, root.id, ctx):
            if produced.parent_id == root.id:
                root.children.append(produced.id)
            nodes.append(produced)

    page = Page(
        name=name,
        root_id=root.id,
        orientation="landscape",
        size=page_size.model_copy(),
        types=[],
        is_placeholder=False,
    )
    return ResolvedPage(page=page, root=root, nodes=nodes)
