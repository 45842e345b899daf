"""
Wrapped text block measurement.

Layout works in top-origin millimetres; only the width is converted to
points for reportlab's font metrics (simpleSplit).
"""

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth


def _break_word(word: str, max_width: float, font_name: str, font_size: float) -> list:
    """Cut a token wider than max_width into the longest prefixes that fit."""
    pieces = []
    current = ""
    for ch in word:
        if current and stringWidth(current + ch, font_name, font_size) > max_width:
            pieces.append(current)
            current = ch
        else:
            current += ch
    if current:
        pieces.append(current)
    return pieces


def split_line(line: str, content_width: float, font_name: str = "Helvetica",
               font_size: float = 11, unit: float = mm) -> list:
    """Word-wrap one logical line into sub-lines no wider than content_width.

    simpleSplit leaves a single word longer than the line intact, so such
    parts are hard-broken by character.
    """
    max_width = content_width * unit
    parts = []
    for part in simpleSplit(line, font_name, font_size, max_width):
        if stringWidth(part, font_name, font_size) > max_width:
            parts.extend(_break_word(part, max_width, font_name, font_size))
        else:
            parts.append(part)
    return parts


def wrap_lines(lines, content_width: float, line_height: float,
               font_name: str = "Helvetica", font_size: float = 11,
               unit: float = mm) -> dict:
    """Wrap a paragraph block.

    A blank line takes one line_height and has no drawable text (its entry
    is []). Any other line takes len(sub_lines) * line_height.

    Returns:
        {"wrapped_lines": [[str, ...], ...], "total_height": float}
    """
    wrapped = []
    total = 0.0
    for line in lines:
        if line.strip() == "":
            wrapped.append([])
            total += line_height
            continue
        parts = split_line(line, content_width, font_name, font_size, unit)
        wrapped.append(parts)
        total += len(parts) * line_height
    return {"wrapped_lines": wrapped, "total_height": total}


def centered_start(box_top: float, box_height: float, content_height: float,
                   padding_top: float, padding_bottom: float) -> float:
    """Top y that vertically centers content_height inside the padded box.

    Content taller than the padded area overflows; the result can then sit
    above box_top + padding_top.
    """
    return box_top + padding_top + (box_height - padding_top - padding_bottom - content_height) / 2
