"""Text sizes, ranges and line/column positions."""

from jsongenpy.text.text import (
    Position,
    TextRange,
    TextSize,
    slice_text_range,
)

__all__ = [
    "Position",
    "TextRange",
    "TextSize",
    "slice_text_range",
]
