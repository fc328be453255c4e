"""Post-processing utilities for generated Cadence code.

Turns a raw model completion into plain Cadence source by:
- stripping Markdown fences
- normalising line endings
"""

from __future__ import annotations

import re

_FENCE_OPEN = re.compile(r"^```[\w-]*[ \t]*\n?")


def strip_markdown_fences(cadence_code: str) -> str:
    """Remove common Markdown code fences from the model output."""
    code = cadence_code.strip()
    if code.startswith("```"):
        code = _FENCE_OPEN.sub("", code, count=1)
    if code.endswith("```"):
        code = code[: -len("```")]
    return code.strip()


def clean_generated_code(cadence_code: str) -> str:
    """First-pass cleanup applied to every completion before validation."""
    if not cadence_code:
        return ""
    code = cadence_code.replace("\r\n", "\n").replace("\r", "\n")
    return strip_markdown_fences(code)
