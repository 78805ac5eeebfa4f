"""Variable extraction from protected pages and challenge scripts.

Pure logic, no I/O. Everything is regex extraction over raw source text;
no HTML parsing and no JavaScript execution.
"""

import logging
import re

from akamai_sdk._errors import (
    AkamaiError,
    PixelHtmlVarNotFound,
    PixelScriptVarNotFound,
)
from akamai_sdk._hexstring import from_hex_string

logger = logging.getLogger("akamai_sdk")

# ── Web SDK script ────────────────────────────────────────────────────────────

_SCRIPT_PATH_RE = re.compile(
    rb'<script type="text/javascript".* src="([/\w\-]+)">'
)

# ── Pixel challenge ───────────────────────────────────────────────────────────

_PIXEL_HTML_VAR_RE = re.compile(rb'bazadebezolkohpepadr="([^"]*)"')
_DECIMAL_RE = re.compile(rb"[+-]?[0-9]+")
_PIXEL_SCRIPT_URL_RE = re.compile(
    rb'src="(https?://.+/akam/\d+/\w+)"', re.IGNORECASE
)
_PIXEL_SCRIPT_INDEX_RE = re.compile(rb"g=_\[(\d+)]")
_PIXEL_SCRIPT_ARRAY_RE = re.compile(rb"var _=\[(.+)];", re.IGNORECASE)
_PIXEL_SCRIPT_STRINGS_RE = re.compile(rb'"([^",]*)"')


def _as_bytes(src: bytes | str) -> bytes:
    if isinstance(src, str):
        return src.encode("utf-8")
    return src


def get_script_path(src: bytes | str) -> str | None:
    """Get the web SDK script path from a page, or None if absent.

    The path is always relative to the page's origin and starts with "/".
    """
    match = _SCRIPT_PATH_RE.search(_as_bytes(src))
    if not match:
        return None
    return match.group(1).decode("ascii")


def get_pixel_challenge_script_url(
    src: bytes | str,
) -> tuple[str, str] | None:
    """Get the pixel challenge script URL and its payload post URL.

    Returns ``(script_url, post_url)``, or None if the page has no pixel
    challenge. The post URL is the script URL with its last path segment
    prefixed by ``pixel_``.
    """
    match = _PIXEL_SCRIPT_URL_RE.search(_as_bytes(src))
    if not match:
        return None

    script_url = match.group(1).decode("utf-8", errors="replace")
    base, _, last = script_url.rpartition("/")
    post_url = f"{base}/pixel_{last}"
    return script_url, post_url


def get_pixel_challenge_html_var(src: bytes | str) -> int:
    """Get the pixel challenge HTML variable from a page.

    Raises PixelHtmlVarNotFound when the attribute is missing. When it is
    present but not numeric, the raised error's cause is the ValueError.
    """
    match = _PIXEL_HTML_VAR_RE.search(_as_bytes(src))
    if not match:
        raise PixelHtmlVarNotFound()

    raw = match.group(1)
    if not _DECIMAL_RE.fullmatch(raw):
        e = ValueError(f"invalid integer: {raw.decode('utf-8', 'replace')!r}")
        raise PixelHtmlVarNotFound(e) from e
    return int(raw)


def get_pixel_challenge_script_var(src: bytes | str) -> str:
    """Get the dynamic pixel challenge variable from the pixel script.

    The script hides the value in a literal array of hex-escaped strings
    (``var _=["\\x61", ...];``) and reads it with ``g=_[N]``.

    Raises PixelScriptVarNotFound on any failure; the cause explains which
    step failed.
    """
    src = _as_bytes(src)

    index_match = _PIXEL_SCRIPT_INDEX_RE.search(src)
    if not index_match:
        raise PixelScriptVarNotFound(
            LookupError("array index reference not found")
        )
    try:
        index = int(index_match.group(1))
    except ValueError as e:
        raise PixelScriptVarNotFound(e) from e

    array_match = _PIXEL_SCRIPT_ARRAY_RE.search(src)
    if not array_match:
        raise PixelScriptVarNotFound(
            LookupError("string array declaration not found")
        )

    raw_strings = _PIXEL_SCRIPT_STRINGS_RE.findall(array_match.group(1))
    if index >= len(raw_strings):
        raise PixelScriptVarNotFound(
            IndexError(
                f"string index out of range: {index} >= {len(raw_strings)}"
            )
        )

    encoded = raw_strings[index].decode("utf-8", errors="replace")
    try:
        value = from_hex_string(encoded)
    except AkamaiError as e:
        raise PixelScriptVarNotFound(e) from e

    logger.debug("Pixel script var found at index %d", index)
    return value
