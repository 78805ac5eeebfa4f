"""Decoder for the backslash-hex string encoding used in vendor scripts."""

import re

from akamai_sdk._errors import HexDecodeError

_HEX_DIGITS_RE = re.compile(r"[0-9a-fA-F]+")


def from_hex_string(s: str) -> str:
    r"""Convert ``\x61\x62``-style escapes to the characters they encode.

    Raises HexDecodeError if a segment is not valid base 16.
    """
    chars = []
    # First element is always an empty string
    for segment in s.split("\\")[1:]:
        digits = segment.replace("x", "", 1)
        try:
            # int() alone would also take signs, underscores and whitespace
            if not _HEX_DIGITS_RE.fullmatch(digits):
                raise ValueError(f"invalid base 16 literal: {digits!r}")
            chars.append(chr(int(digits, 16)))
        except (ValueError, OverflowError) as e:
            raise HexDecodeError(segment, e) from e
    return "".join(chars)
