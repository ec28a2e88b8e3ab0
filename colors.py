"""
Piece color palette for OptiCut diagrams and reports.
"""

from typing import Tuple
import matplotlib.colors as mcolors

PALETTE = [
    '#3b82f6',  # blue
    '#f97316',  # orange
    '#ef4444',  # red
    '#22c55e',  # green
    '#a855f7',  # purple
    '#14b8a6',  # teal
    '#eab308',  # yellow
    '#ec4899',  # pink
    '#6366f1',  # indigo
    '#84cc16',  # lime
    '#f43f5e',  # rose
    '#0ea5e9',  # sky
    '#8b5cf6',  # violet
    '#10b981',  # emerald
    '#fb923c',
    '#60a5fa',
    '#34d399',
    '#c084fc',
    '#f472b6',
    '#fbbf24'   # amber
]

DARK_TEXT = '#1e293b'
LIGHT_TEXT = '#ffffff'


def get_piece_color(request_index: int) -> str:
    """Color for a piece type; the palette repeats after 20 types."""
    return PALETTE[request_index % len(PALETTE)]


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert a '#rrggbb' color to 0-255 channel values.

    Args:
        hex_color: Hex color string

    Returns:
        Tuple of (red, green, blue)
    """
    r, g, b = mcolors.to_rgb(hex_color)
    return round(r * 255), round(g * 255), round(b * 255)


def get_text_color(background: str) -> str:
    """
    Pick a readable label color for a piece background.

    Args:
        background: Hex background color

    Returns:
        Dark text on light backgrounds, white text otherwise
    """
    r, g, b = hex_to_rgb(background)
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return DARK_TEXT if luminance > 0.55 else LIGHT_TEXT
