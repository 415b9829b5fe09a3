from __future__ import annotations

from typing import List, Protocol


class Measures(Protocol):
    def width_of(self, text: str, font_size: float) -> float: ...


def wrap_text(text: str, max_width: float, metrics: Measures, font_size: float) -> List[str]:
    """Greedy word wrap against font metrics.

    Words are added to the current line while the joined line still fits in
    ``max_width``; the word that would overflow starts the next line. A single
    word wider than ``max_width`` is kept whole on its own line rather than
    being split by character.
    """
    words = (text or "").split()
    lines: List[str] = []
    line = ""
    for word in words:
        if not line:
            line = word
            continue
        trial = f"{line} {word}"
        if metrics.width_of(trial, font_size) <= max_width:
            line = trial
        else:
            lines.append(line)
            line = word
    if line:
        lines.append(line)
    return lines
