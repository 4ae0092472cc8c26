"""Fixed-offset field extraction."""

from __future__ import annotations


def extract_field(content: str, start: int, length: int) -> str:
    """
    Return `length` characters of `content` starting at 1-based column `start`.

    A record too short to hold the whole field yields "" (the line-length
    pre-check reports short records, extraction never fails).
    """
    begin = start - 1
    end = begin + length
    if begin < 0 or length <= 0 or len(content) < end:
        return ""
    return content[begin:end]
