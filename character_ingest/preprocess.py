"""
Text preprocessing ahead of row splitting.

- byte order mark removal
- newline normalization: CRLF/CR -> LF
- blank line collapsing
- UTF-8 decoding of uploaded bytes
"""

from __future__ import annotations

import re

from charset_normalizer import from_bytes

from .errors import InvalidEncoding

BOM = "\ufeff"
_BLANK_RUN = re.compile(r"\n\s*\n")
_CJK = re.compile("[\u4e00-\u9fa5]")


def normalize_text(text: str) -> str:
    if text.startswith(BOM):
        text = text[1:]

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _BLANK_RUN.sub("\n", text)
    return text.strip()


def encoding_label(text: str, had_bom: bool = False) -> str:
    if had_bom or text.startswith(BOM):
        return "UTF-8 with BOM"
    if _CJK.search(text):
        return "UTF-8 (CJK)"
    return "UTF-8"


def decode_payload(raw: bytes) -> tuple[str, str]:
    """
    Decode uploaded bytes as UTF-8, tolerating a BOM.

    Non UTF-8 input is rejected rather than converted; charset-normalizer is
    only consulted to name the probable encoding in the error.
    """
    had_bom = raw.startswith(b"\xef\xbb\xbf")
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        match = from_bytes(raw).best()
        detected = match.encoding if match is not None else None
        message = "Input is not valid UTF-8."
        if detected:
            message = f"Input is not valid UTF-8 (detected {detected})."
        raise InvalidEncoding(message) from exc

    return text, encoding_label(text, had_bom=had_bom)
