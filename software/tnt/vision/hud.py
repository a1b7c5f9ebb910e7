from __future__ import annotations

from typing import Mapping

import cv2

# HUD text style
HUD_FONT    = cv2.FONT_HERSHEY_SIMPLEX
HUD_SCALE   = 0.5
HUD_THICK   = 1
HUD_GAP     = 5   # vertical gap between lines
HUD_TOP_PAD = 4   # keeps the first line from clipping at the top edge
HUD_COLOR   = (0, 255, 0)


def draw_wrapped_text(
    img,
    text: str,
    x: int,
    y: int,
    max_width: int,
    scale: float = HUD_SCALE,
    color=HUD_COLOR,
    thick: int = HUD_THICK,
) -> int:
    """
    Draw word-wrapped text onto `img` in place.

    `y` is the top margin; the first baseline is offset by the font ascent.
    Returns the y coordinate just below the last drawn line.
    """
    words = text.split()
    if not words:
        return y

    (_, ascent), _ = cv2.getTextSize("Ag", HUD_FONT, scale, thick)
    line_h = int(ascent + HUD_GAP)
    baseline_y = int(y + ascent + HUD_TOP_PAD)

    line = ""
    for w in words:
        candidate = w if not line else f"{line} {w}"
        (tw, _), _ = cv2.getTextSize(candidate, HUD_FONT, scale, thick)
        if tw <= max_width or not line:
            line = candidate
            continue
        cv2.putText(img, line, (x, baseline_y), HUD_FONT, scale, color, thick, cv2.LINE_AA)
        baseline_y += line_h
        line = w

    cv2.putText(img, line, (x, baseline_y), HUD_FONT, scale, color, thick, cv2.LINE_AA)
    return baseline_y + line_h


def draw_metrics(img, latest: Mapping[str, float], margin: int = 8) -> int:
    """Overlay the most recent value of each metric, one metric per line."""
    y = margin
    max_w = max(img.shape[1] - 2 * margin, 1)
    for name in sorted(latest):
        y = draw_wrapped_text(img, f"{name}: {latest[name]:.3f}", margin, y, max_w)
    return y
