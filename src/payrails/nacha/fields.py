"""Fixed-width field helpers for NACHA records.

Numeric fields are right-aligned and zero-filled and never truncated;
alphanumeric fields are left-aligned, space-filled, and cut to their width.
Positions are 1-based inclusive, matching the published record layouts.
"""

from __future__ import annotations

import re

from payrails.domain.errors import AchValidationError, FormatError

RECORD_LENGTH = 94
FILLER_RECORD = "9" * RECORD_LENGTH

_NON_DIGIT = re.compile(r"\D")


def numeric(value: int | str | None, width: int, *, name: str = "Numeric field") -> str:
    """Zero-padded numeric field; non-digits are dropped.

    Raises:
        AchValidationError: if the digits do not fit in *width*.
    """
    text = _NON_DIGIT.sub("", "" if value is None else str(value))
    if len(text) > width:
        raise AchValidationError(
            f"{name} {text} does not fit in {width} digits",
            detail={"field": name, "width": width},
        )
    return text.rjust(width, "0")


def alpha(value: str | None, width: int) -> str:
    """Space-padded alphanumeric field."""
    return ("" if value is None else str(value))[:width].ljust(width)


def blank(width: int) -> str:
    return " " * width


def cut(line: str, start: int, end: int) -> str:
    """Raw slice of columns *start*..*end* (1-based, inclusive)."""
    return line[start - 1 : end]


def cut_alpha(line: str, start: int, end: int) -> str:
    """Alphanumeric field with padding removed."""
    return cut(line, start, end).rstrip()


def cut_int(line: str, start: int, end: int, *, name: str, line_no: int) -> int:
    """Numeric field as ``int``; raises :class:`FormatError` on non-digits."""
    raw = cut(line, start, end)
    if not raw.isdigit():
        raise FormatError(f"{name} must be numeric, got {raw!r}", line=line_no)
    return int(raw)
