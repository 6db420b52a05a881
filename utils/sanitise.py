"""
Whitespace / emoji sanitiser shared by the request gate and the record
validators.
"""

from __future__ import annotations

from typing import Optional

import regex

# any whitespace (incl. NBSP) or any emoji / pictograph
NO_WS_EMOJI_RE = regex.compile(
    r"[\s\u00A0]|\p{Emoji_Presentation}|\p{Extended_Pictographic}"
)

_WS_RUN_RE = regex.compile(r"\s+")


def is_invalid(value: Optional[str] = "") -> bool:
    """True when *value* contains whitespace or an emoji/pictographic char."""
    return NO_WS_EMOJI_RE.search(value or "") is not None


def clean(value: Optional[str] = "") -> str:
    """Strip every whitespace run out of *value*."""
    return _WS_RUN_RE.sub("", value or "")
