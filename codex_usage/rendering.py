"""Rendering functions for coloured text and usage bars."""

import math

from .constants import ANSI, BAR_EMPTY, BAR_FULL, CRITICAL_PERCENT, WARN_PERCENT


def paint(text: str, *styles: str, color: bool = True) -> str:
    """Wrap text in ANSI styles (names from constants.ANSI)."""
    if not color or not styles:
        return text
    codes = "".join(ANSI[style] for style in styles)
    return f"{codes}{text}{ANSI['reset']}"


def usage_styles(percentage: float) -> tuple[str, ...]:
    """Styles for a usage percentage: red+bold, yellow, or green."""
    if percentage >= CRITICAL_PERCENT:
        return ("red", "bold")
    elif percentage >= WARN_PERCENT:
        return ("yellow",)
    else:
        return ("green",)


def get_progress_bar(percentage: float, width: int) -> str:
    """Convert percentage to a Unicode block progress bar (plain, no color)."""
    filled = math.floor(percentage / 100.0 * width + 0.5)
    filled = max(0, min(width, filled))
    return BAR_FULL * filled + BAR_EMPTY * (width - filled)


def usage_bar(percentage: float, width: int, color: bool = True) -> str:
    """Progress bar coloured by usage level."""
    return paint(
        get_progress_bar(percentage, width), *usage_styles(percentage), color=color
    )


def pct_coloured(percentage: float, color: bool = True) -> str:
    """Percentage as a fixed-width string like ' 42.5%', coloured by level."""
    return paint(f"{percentage:5.1f}%", *usage_styles(percentage), color=color)
