"""
Layout Migrator — Rich Text Normalization

v1 text nodes hold HTML produced by a Quill editor, which encodes formatting in
classes (ql-align-center, ql-font-NouvelR_Bold) and editor scaffolding
(pr-wildcard spans, contenteditable attributes). The v2 editor (Tiptap) reads
inline styles, so classes are rewritten into style declarations here.

BeautifulSoup (html.parser) does the parsing; output keeps void tags as <br>.
"""

import re
from typing import Mapping

from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from layout_migrator.styles import resolve_font_family

# Minimal escaping (&, <, >) and HTML5 void tags: "<br>" rather than "<br/>"
_OUTPUT_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)

_ALIGN_CLASS = re.compile(r"^ql-align-(justify|center|right|left)$")
_FONT_CLASS = re.compile(r"^ql-font-(\S+)$")
_EDITOR_CLASSES = {"pr-wildcard"}
_EDITOR_ATTRIBUTES = ("contenteditable",)


def normalize_rich_text(html: str, font_map: Mapping[str, str] | None = None) -> str:
    """Rewrite Quill class-based formatting into inline styles and drop editor scaffolding."""
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(True):
        _normalize_tag(tag, font_map)
    return soup.decode(formatter=_OUTPUT_FORMATTER)


def _normalize_tag(tag: Tag, font_map: Mapping[str, str] | None) -> None:
    for attr in _EDITOR_ATTRIBUTES:
        tag.attrs.pop(attr, None)

    classes = tag.attrs.pop("class", None)
    style = tag.attrs.pop("style", None) or ""
    if isinstance(classes, str):
        classes = classes.split()

    kept: list[str] = []
    for cls in classes or []:
        align = _ALIGN_CLASS.match(cls)
        font = _FONT_CLASS.match(cls)
        if align:
            style = merge_styles(style, f"text-align: {align.group(1)}")
        elif font:
            style = merge_styles(style, f"font-family: {resolve_font_family(font.group(1), font_map)}")
        elif cls.startswith("ql-align-") or cls in _EDITOR_CLASSES:
            continue
        else:
            kept.append(cls)

    # Re-attach after the remaining attributes: other attrs, then class, then style
    if kept:
        tag["class"] = kept
    if style:
        tag["style"] = style


def merge_styles(existing: str, new: str) -> str:
    """Merge two CSS declaration strings; properties in `new` win."""
    declarations: dict[str, str] = {}
    for block in (existing, new):
        for decl in split_declarations(block):
            prop, sep, val = decl.partition(":")
            if prop.strip() and sep:
                declarations[prop.strip()] = val.strip()
    return "; ".join(f"{prop}: {val}" for prop, val in declarations.items())


def split_declarations(block: str) -> list[str]:
    """Split a style attribute on ";" outside parentheses and quotes.

    `url(data:image/png;base64,...)` and quoted font names stay whole.
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    quote: str | None = None

    for char in block:
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")" and depth:
            depth -= 1
        elif char == ";" and not depth:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)

    parts.append("".join(current))
    return parts


def html_to_plain_text(html: str) -> str:
    """Plain-text projection: <br> and paragraph breaks become newlines, tags removed."""
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for paragraph in soup.find_all("p"):
        previous = paragraph.find_previous_sibling()
        if previous is not None and previous.name == "p":
            paragraph.insert_before("\n")

    return soup.get_text().replace("\xa0", " ").strip()


_TEXT_ALIGN = {
    value: re.compile(rf"text-align:\s*{value}\b") for value in ("justify", "center", "right")
}


def dominant_text_align(html: str) -> str:
    """Single paragraph alignment for the node: justify > center > right, else left."""
    for value, pattern in _TEXT_ALIGN.items():
        if pattern.search(html):
            return value
    return "left"
