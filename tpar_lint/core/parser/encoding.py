"""
Input encoding.

TPAR records are plain ASCII, but files produced by accounting packages turn
up as UTF-8 (sometimes with a BOM) or Windows-1252 when names carry accents.
Detection falls back to charset-normalizer only for non-ASCII input.
"""

from __future__ import annotations

import logging

from charset_normalizer import from_bytes

from .errors import ReportReadError

logger = logging.getLogger(__name__)

UTF8_BOM = b"\xef\xbb\xbf"

# Bytes inspected when guessing; eight full records
DETECTION_SAMPLE_SIZE = 8 * 998

FALLBACK_ENCODING = "windows-1252"

# charset-normalizer names folded onto the codecs reported to users
_CANONICAL = {
    "ascii": "utf-8",
    "utf_8": "utf-8",
    "utf8": "utf-8",
    "cp1252": "windows-1252",
    "latin_1": "windows-1252",
    "latin-1": "windows-1252",
    "iso-8859-1": "windows-1252",
}


def detect_encoding(data: bytes) -> str:
    """
    Guess the encoding of report file data.

    Order: UTF-8 BOM, pure ASCII, charset-normalizer on the leading sample,
    then a UTF-8 trial decode of the whole input with Windows-1252 as the
    last resort. The ASCII shortcut and the chosen codec are checked
    against the whole input, not just the sample.

    Returns:
        "utf-8-sig", "utf-8", "windows-1252" or another codec name
    """
    if data.startswith(UTF8_BOM):
        return "utf-8-sig"

    if data.isascii():
        return "utf-8"

    sample = data[:DETECTION_SAMPLE_SIZE]
    if not sample.isascii():
        best = from_bytes(sample).best()
        if best is not None:
            guessed = _CANONICAL.get(best.encoding.lower(), best.encoding.lower())
            logger.debug("charset-normalizer guessed %s", guessed)
            if _decodes(data, guessed):
                return guessed

    if _decodes(data, "utf-8"):
        return "utf-8"
    logger.debug("Input is not valid UTF-8, falling back to %s", FALLBACK_ENCODING)
    return FALLBACK_ENCODING


def _decodes(data: bytes, encoding: str) -> bool:
    try:
        data.decode(encoding)
    except (LookupError, UnicodeDecodeError):
        return False
    return True


def decode(data: bytes, encoding: str) -> str:
    """
    Decode bytes strictly.

    Replacement characters keep column positions but hide bad bytes inside
    fields, so an undecodable file is fatal.

    Raises:
        ReportReadError: Unknown codec or invalid byte sequence
    """
    try:
        return data.decode(encoding)
    except LookupError:
        raise ReportReadError(
            f"Unknown encoding: {encoding}",
            context={"encoding": encoding},
        ) from None
    except UnicodeDecodeError as e:
        raise ReportReadError(
            f"Invalid byte sequence for {encoding} at offset {e.start}",
            context={"encoding": encoding, "offset": e.start},
        ) from None
