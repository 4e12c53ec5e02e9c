"""
Layout Migrator — Component Transformer

A v1 component is a localGroup whose subtree contains a localCom marker named
after the component ("--comQuote"). Its editor configuration lives in
`comCompConfig[comName]` on the group or on a group further down the path to
the marker; the deepest non-empty one wins.

Groups without a marker become a plain FRAME wrapper whose children are routed
normally.
"""

import copy
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from layout_migrator.models import ComponentNode, FrameNode, SceneNode, SourceKind, SourceNode
from layout_migrator.styles import ParsedStyles, parse_node_styles
from layout_migrator.transformers.context import TransformContext

# Editor-only UI hints stored next to the real props
RESERVED_CONFIG_KEY = "$configs"


@dataclass(frozen=True)
class PluginInfo:
    plugin_id: str
    component_name: str


PLUGIN_MAP: dict[str, PluginInfo] = {
    "comProposalHeader": PluginInfo("com-proposal-header", "Proposal Header"),
    "comAgent": PluginInfo("com-agent", "Agent Info"),
    "comQuote": PluginInfo("com-quote", "Price Quote"),
    "comQuickProposalApproval": PluginInfo("com-quick-proposal-approval", "Quick Approval"),
    "comRate": PluginInfo("com-rate", "Rating"),
    "comAccordion": PluginInfo("com-accordion", "Accordion"),
    "comPaymentPlan": PluginInfo("com-payment-plan", "Payment Plan"),
    "comAttachment": PluginInfo("com-attachment", "Attachment"),
    # Render-only: not editable on the canvas, still rendered on export
    "comAvatar": PluginInfo("com-avatar", "Avatar"),
    "comSign": PluginInfo("com-sign", "Signature"),
    "comAgreementSignature": PluginInfo("com-agreement-signature", "Agreement Signature"),
}

RENDER_ONLY_COMPONENTS = frozenset({"comAvatar", "comSign", "comAgreementSignature"})

RouteFn = Callable[[SourceNode, str, TransformContext], list[SceneNode]]


@dataclass
class MarkerMatch:
    marker: SourceNode
    config_node: Optional[SourceNode]


def find_marker(node: SourceNode, config_ancestor: Optional[SourceNode] = None) -> Optional[MarkerMatch]:
    """Depth-first search for a localCom marker.

    Direct children are checked before descending into nested localGroups, in
    child order; the first hit wins. `config_node` is the deepest node on the
    path to the marker carrying a non-empty comCompConfig.
    """
    config_node = node if node.com_comp_config else config_ancestor
    children = node.children or []

    for child in children:
        if child.kind is SourceKind.COM:
            return MarkerMatch(marker=child, config_node=config_node)

    for child in children:
        if child.kind is SourceKind.GROUP:
            match = find_marker(child, config_node)
            if match:
                return match
    return None


def component_name_of(marker: SourceNode) -> str:
    """"--comQuote" → "comQuote"."""
    return re.sub(r"^--", "", marker.name)


def dash_case(name: str) -> str:
    """"comFancyWidget" → "com-fancy-widget"."""
    return re.sub(r"([A-Z])", r"-\1", name).lower().lstrip("-")


def clean_props(props: Optional[dict[str, Any]]) -> dict[str, Any]:
    return {k: copy.deepcopy(v) for k, v in (props or {}).items() if k != RESERVED_CONFIG_KEY}


def transform_component(
    group: SourceNode, parent_id: str, ctx: TransformContext, route: RouteFn
) -> list[SceneNode]:
    """localGroup → one COMPONENT, or a FRAME wrapper plus its routed descendants."""
    styles = parse_node_styles(group.styles)
    match = find_marker(group)

    if match is None:
        ctx.warn(f'MissingLocalCom: localGroup "{group.name}" has no localCom descendant')
        return _wrapper_with_children(group, parent_id, styles, ctx, route)

    com_name = component_name_of(match.marker)
    config = (match.config_node.com_comp_config or {}) if match.config_node else {}
    props = clean_props(config.get(com_name))

    plugin = PLUGIN_MAP.get(com_name)
    if plugin is None:
        ctx.warn(
            f'UnknownComponent: "{com_name}" from localCom "{match.marker.name}" has no known plugin mapping'
        )
        plugin = PluginInfo(dash_case(com_name), com_name)
        name = com_name
    else:
        name = plugin.component_name
        if com_name in RENDER_ONLY_COMPONENTS:
            ctx.warn(f'RenderOnlyComponent: "{com_name}" is not editable in canvas but will render in export')

    ctx.stats.component_nodes += 1
    return [
        ComponentNode(
            name=name,
            parent_id=parent_id,
            x=styles.x,
            y=styles.y,
            width=styles.width,
            height=styles.height,
            visible=styles.visible,
            opacity=styles.opacity,
            plugin_id=plugin.plugin_id,
            component_name=plugin.component_name,
            props=props,
        )
    ]


def _wrapper_with_children(
    group: SourceNode, parent_id: str, styles: ParsedStyles, ctx: TransformContext, route: RouteFn
) -> list[SceneNode]:
    ctx.stats.frame_nodes += 1
    wrapper = FrameNode(
        name=group.name or "Component Wrapper",
        parent_id=parent_id,
        x=styles.x,
        y=styles.y,
        width=styles.width,
        height=styles.height,
        visible=styles.visible,
        opacity=styles.opacity,
        fills=[],
        clip_content=False,
    )

    nodes: list[SceneNode] = [wrapper]
    for child in group.children or []:
        for produced in route(child, wrapper.id, ctx):
            if produced.parent_id == wrapper.id:
                wrapper.children.append(produced.id)
            nodes.append(produced)
    return nodes
