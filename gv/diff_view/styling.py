"""Added/removed line backgrounds layered over syntax colors."""

from __future__ import annotations

import re

_SGR_RE = re.compile(r"\x1b\[([0-9;]*)m")
_LOW_CONTRAST_FG = "38;5;246"


def _merge_params(params: str, bg_sgr: str) -> str:
    """Append ``bg_sgr`` to one SGR parameter list.

    Faint text and near-black foregrounds are lifted so they stay legible on
    the tinted background.
    """
    parts = [part for part in params.split(";") if part] or ["0"]
    merged: list[str] = []
    index = 0
    while index < len(parts):
        token = parts[index]
        if token == "38" and index + 2 < len(parts) and parts[index + 1] == "5":
            color = parts[index + 2]
            if color.isdigit() and 232 <= int(color) <= 240:
                merged.append(_LOW_CONTRAST_FG)
            else:
                merged.extend(parts[index: index + 3])
            index += 3
            continue
        if token in {"2", "30", "90"}:
            if token != "2":
                merged.append(_LOW_CONTRAST_FG)
            index += 1
            continue
        merged.append(token)
        index += 1
    merged.append(bg_sgr)
    return ";".join(merged)


def apply_line_background(text: str, bg_sgr: str) -> str:
    """Keep ``bg_sgr`` active across every SGR reset inside ``text``."""
    if not bg_sgr:
        return text
    body = _SGR_RE.sub(lambda match: f"\033[{_merge_params(match.group(1), bg_sgr)}m", text)
    return f"\033[{bg_sgr}m{body}\033[0m"
