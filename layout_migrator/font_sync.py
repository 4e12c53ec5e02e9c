"""
Layout Migrator — Font Synchronizer

Makes sure every embedded v1 font exists in the target account's font registry:
  1. extract fonts with a downloadable URL (exact names, extension dropped)
  2. list the fonts already registered
  3. for each missing font, download it and upload it (sequentially)
  4. return a name map (source font name → fontCode) for the transformers

Per-font failures never raise; they are collected in `failed`.
"""

import json
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from layout_migrator.client import ProlibuConfig, http_client
from layout_migrator.config import log
from layout_migrator.fonts import font_name_and_url, strip_font_extension
from layout_migrator.models import EmbeddedFont, FontSyncFailure, FontSyncResult

# Upload timestamps appended by the v1 uploader: "NouvelR_Bold__roge__1756820731109"
_UPLOAD_SUFFIX = re.compile(r"__[a-zA-Z0-9]+__\d+$")
_FONT_FILE_EXTENSION = re.compile(r"\.(ttf|otf|woff2?)$", re.IGNORECASE)
_DUPLICATE_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (r"already exists", r"duplicate", r"unique constraint", r"fontcode.*taken", r"E11000")
]


class FontSyncError(Exception):
    pass


@dataclass
class FontToSync:
    name: str                 # exact source name, also used as fontName and fontCode
    url: str
    mapped_names: list[str]   # every source name that should resolve to this font


def extract_fonts(embedded_fonts: list[EmbeddedFont]) -> list[FontToSync]:
    """Unique fonts that carry a URL. Both the full name and its upload-suffix-free base are mapped."""
    fonts: list[FontToSync] = []
    seen: set[str] = set()

    for font in embedded_fonts:
        shape = font_name_and_url(font)
        if shape is None or not shape[1]:
            continue
        file_name, url = shape

        name = strip_font_extension(file_name)
        if name in seen:
            continue
        seen.add(name)

        # Quill classes reference the base name (ql-font-NouvelR_Bold)
        mapped = [name]
        base = _UPLOAD_SUFFIX.sub("", name)
        if base != name and base not in seen:
            mapped.append(base)
            seen.add(base)

        fonts.append(FontToSync(name=name, url=url, mapped_names=mapped))
    return fonts


def is_duplicate_error(message: str) -> bool:
    return any(p.search(message) for p in _DUPLICATE_PATTERNS)


async def sync_fonts(
    embedded_fonts: list[EmbeddedFont],
    config: ProlibuConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> FontSyncResult:
    result = FontSyncResult()
    fonts = extract_fonts(embedded_fonts)
    if not fonts:
        return result

    async with http_client(config, client) as http:
        existing_codes = {f.get("fontCode") for f in await fetch_existing_fonts(http, config)}

        for font in fonts:
            font_code = font.name
            if font_code in existing_codes:
                result.skipped.append(font.name)
            else:
                try:
                    content = await download_font(http, font.url)
                    font_code = await upload_font(http, config, font, content)
                    result.uploaded.append(font.name)
                except (FontSyncError, httpx.HTTPError) as e:
                    if is_duplicate_error(str(e)):
                        result.skipped.append(font.name)
                    else:
                        log("WARN", "font sync failed", font=font.name, error=str(e))
                        result.failed.append(FontSyncFailure(name=font.name, error=str(e)))
                    font_code = font.name

            for source_name in font.mapped_names:
                result.name_map[source_name] = font_code

    log(
        "INFO",
        "font sync completed",
        uploaded=len(result.uploaded),
        skipped=len(result.skipped),
        failed=len(result.failed),
    )
    return result


async def fetch_existing_fonts(http: httpx.AsyncClient, config: ProlibuConfig) -> list[dict]:
    """Fonts registered in the target account. Any failure means "none known"."""
    params = {
        "select": "fontName fontCode fontFile",
        "populatePath": json.dumps({"path": "fontFile", "select": "url"}, separators=(",", ":")),
    }
    headers = {"Accept": "application/json", "Authorization": config.authorization}
    try:
        response = await http.get(f"{config.api_root}/v2/font", params=params, headers=headers)
        if not response.is_success:
            log("WARN", "font list unavailable", status=response.status_code)
            return []
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        log("WARN", "font list unavailable", error=str(e))
        return []

    fonts = data if isinstance(data, list) else (data.get("data") or [] if isinstance(data, dict) else [])
    return [f for f in fonts if isinstance(f, dict)]


async def download_font(http: httpx.AsyncClient, url: str) -> bytes:
    response = await http.get(url, follow_redirects=True)
    if not response.is_success:
        raise FontSyncError(f"Failed to download: HTTP {response.status_code}")
    return response.content


async def upload_font(http: httpx.AsyncClient, config: ProlibuConfig, font: FontToSync, content: bytes) -> str:
    """Multipart upload; returns the fontCode the registry assigned."""
    match = _FONT_FILE_EXTENSION.search(font.url)
    extension = match.group(1) if match else "ttf"

    response = await http.post(
        f"{config.api_root}/v2/font",
        headers={"Authorization": config.authorization},
        data={
            "fontName": font.name,
            "fontCode": font.name,
            "allowEveryone": json.dumps({"view": True, "edit": True}),
        },
        files={"fontFile": (f"{font.name}.{extension}", content, f"font/{extension.lower()}")},
    )
    if not response.is_success:
        try:
            detail = response.json().get("error")
        except (ValueError, AttributeError):
            detail = None
        raise FontSyncError(detail or f"HTTP {response.status_code}")

    try:
        return response.json().get("fontCode") or font.name
    except (ValueError, AttributeError):
        return font.name
