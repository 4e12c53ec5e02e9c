"""
Layout Migrator — Wildcard Converter

v1 templates use Mustache-style double braces: {{ variable }}.
v2 documents use Handlebars-style triple braces: {{{ variable }}}.

A double-brace pair is rewritten only when it is not already flanked by an
extra brace on either side, so existing triple braces are left untouched and
convert_wildcards(convert_wildcards(s)) == convert_wildcards(s).
"""

import re

# Braces are excluded from the expression body so a rewrite can never create a
# new double-brace match on a second pass.
_DOUBLE_BRACE = re.compile(r"(?<!\{)\{\{(?!\{)([^{}]*?)\}\}(?!\})")


def convert_wildcards(text: str) -> str:
    """{{ x }} → {{{ x }}}; {{{ x }}} unchanged."""
    if not text:
        return text
    return _DOUBLE_BRACE.sub(r"{{{\1}}}", text)


def has_wildcard(text: str) -> bool:
    """True if text contains a template expression in either brace style."""
    return bool(re.search(r"\{\{.*?\}\}", text))
