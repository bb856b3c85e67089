"""Strip code-fence decoration that models wrap around their answers.

Best effort: every opening fence (``` plus optional language tag plus newline)
and every remaining ``` is removed wherever it appears, then the text is
trimmed. It is not pair-aware, so an artifact that legitimately contains
triple backticks loses them.
"""
from __future__ import annotations

import re
from typing import Optional

_OPEN_FENCE = re.compile(r"```\w*\n")
_FENCE = "```"

def sanitize(text: Optional[str]) -> str:
    if not text:
        return ""
    s = _OPEN_FENCE.sub("", text)
    s = s.replace(_FENCE, "")
    return s.strip()
