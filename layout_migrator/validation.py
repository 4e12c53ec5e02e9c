"""
Layout Migrator — Graph Validator

Structural checks on an assembled v2 document. Errors mean the document is
broken (missing containers, bad page roots, dangling references); warnings are
informational (parent/child disagreement, orphans). Never raises on bad input:
ids that are not strings are reported as unresolvable references.
"""

from typing import Any, Union

from layout_migrator.models import Document, ValidationIssue, ValidationResult


def _is_id(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _children(node: dict[str, Any]) -> list[Any]:
    children = node.get("children")
    return children if isinstance(children, list) else []


def validate_document(document: Union[Document, dict[str, Any]]) -> ValidationResult:
    """Validate a Document model or its camelCase wire dict."""
    if isinstance(document, Document):
        data = document.model_dump(by_alias=True, mode="json")
    else:
        data = document

    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    def error(path: str, message: str, code: str) -> None:
        errors.append(ValidationIssue(path=path, message=message, code=code))

    def warning(path: str, message: str, code: str) -> None:
        warnings.append(ValidationIssue(path=path, message=message, code=code))

    if not data.get("version"):
        error("version", "Document version is required", "MISSING_VERSION")
    if not data.get("id"):
        error("id", "Document id is required", "MISSING_ID")

    pages = data.get("pages")
    nodes = data.get("nodes")
    if not isinstance(pages, list):
        error("pages", "Document pages must be an array", "MISSING_PAGES")
        pages = []
    if not isinstance(nodes, dict):
        error("nodes", "Document nodes must be an object", "MISSING_NODES")
        nodes = {}
    nodes = {node_id: node for node_id, node in nodes.items() if isinstance(node, dict)}

    # Page roots
    root_ids: list[str] = []
    for i, page in enumerate(pages):
        path = f"pages[{i}].rootId"
        root_id = page.get("rootId") if isinstance(page, dict) else None
        if not root_id:
            error(path, "Page is missing rootId", "PAGE_MISSING_ROOT_ID")
            continue
        root = nodes.get(root_id) if _is_id(root_id) else None
        if root is None:
            error(path, f'Page root "{root_id}" not found in nodes', "PAGE_ROOT_NOT_FOUND")
            continue
        if root.get("type") != "FRAME":
            error(path, f'Page root "{root_id}" must be a FRAME, got {root.get("type")}', "PAGE_ROOT_NOT_FRAME")
        if root.get("parentId") is not None:
            warning(f"nodes.{root_id}.parentId", f'Page root "{root_id}" should not have a parent', "PAGE_ROOT_HAS_PARENT")
        root_ids.append(root_id)

    # Parent / child consistency
    for node_id, node in nodes.items():
        parent_id = node.get("parentId")
        if parent_id is not None:
            parent = nodes.get(parent_id) if _is_id(parent_id) else None
            if parent is None:
                error(f"nodes.{node_id}.parentId", f'Parent "{parent_id}" does not exist', "DANGLING_PARENT_REF")
            elif node_id not in _children(parent):
                warning(
                    f"nodes.{node_id}.parentId",
                    f'Node "{node_id}" is not listed in children of parent "{parent_id}"',
                    "PARENT_CHILDREN_MISMATCH",
                )

        for i, child_id in enumerate(_children(node)):
            path = f"nodes.{node_id}.children[{i}]"
            child = nodes.get(child_id) if _is_id(child_id) else None
            if child is None:
                error(path, f'Child "{child_id}" does not exist', "DANGLING_CHILD_REF")
            elif child.get("parentId") != node_id:
                warning(
                    path,
                    f'Child "{child_id}" has parentId "{child.get("parentId")}", expected "{node_id}"',
                    "CHILDREN_PARENT_MISMATCH",
                )

    # Reachability from page roots
    reachable: set[str] = set()
    stack = list(root_ids)
    while stack:
        current = stack.pop()
        if current in reachable or current not in nodes:
            continue
        reachable.add(current)
        stack.extend(child_id for child_id in _children(nodes[current]) if _is_id(child_id))

    for node_id in nodes:
        if node_id not in reachable:
            warning(f"nodes.{node_id}", f'Node "{node_id}" is not reachable from any page root', "ORPHANED_NODE")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
