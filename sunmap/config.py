"""
config.py
---------
Central configuration for the sunshine heatmap renderer and preview server.

This module is imported by:
- sunmap/cities.py            (month names, month lengths)
- sunmap/color_scale.py       (colour stop table, label colours)
- sunmap/heatmap_renderer.py  (layout, palette, captions, fonts)
- sunmap/render.py            (default output path)
- sunmap/app.py               (port, MIME table)

Everything here is read-only after import. Nothing in the pipeline mutates it.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Tuple

from matplotlib import font_manager

RGB = Tuple[int, int, int]

# -----------------------------------------------------------------------------
# CALENDAR
# -----------------------------------------------------------------------------
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Non-leap year. Used for hours/day averages only.
DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# -----------------------------------------------------------------------------
# COLOUR SCALE
# -----------------------------------------------------------------------------
# Evenly spaced across [min, max] of the observed monthly values:
# dark navy -> steel blue -> light yellow -> warm gold -> deep orange
COLOR_STOPS: Tuple[RGB, ...] = (
    (30, 50, 100),
    (70, 130, 180),
    (180, 200, 160),
    (240, 200, 60),
    (210, 120, 20),
)

# Cell labels switch to the dark colour above this perceptual luminance.
LUMINANCE_THRESHOLD = 0.55

# -----------------------------------------------------------------------------
# PALETTE
# -----------------------------------------------------------------------------
BACKGROUND: RGB = (250, 250, 247)      # #fafaf7
DARK_TEXT: RGB = (26, 26, 46)          # #1a1a2e
LIGHT_TEXT: RGB = (255, 255, 255)
SUBTITLE_TEXT: RGB = (85, 85, 85)      # #555
CAPTION_TEXT: RGB = (136, 136, 136)    # #888
LATITUDE_TEXT: RGB = (153, 153, 153)   # #999
MUTED_TEXT: RGB = (119, 119, 119)      # #777
RULE_LINE: RGB = (204, 204, 204)       # #ccc
ROW_SEPARATOR: RGB = (232, 229, 221)   # #e8e5dd
TICK_LINE: RGB = (136, 136, 136)
ANNUAL_FILL: RGB = (240, 237, 230)     # #f0ede6

# -----------------------------------------------------------------------------
# LAYOUT
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class LayoutConfig:
    cell_width: int = 70
    cell_height: int = 55
    label_width: int = 130     # city labels on the left
    annual_width: int = 80     # annual total column
    pad: int = 30              # left and right margin
    top_margin: int = 120      # title block
    header_height: int = 40    # month headers
    bottom_margin: int = 120   # legend + footer
    legend_width: int = 320
    legend_height: int = 16
    legend_offset: int = 35    # gap between last row and legend bar


LAYOUT = LayoutConfig()

LEGEND_TICKS = (50, 100, 150, 200, 250, 300, 330)

# -----------------------------------------------------------------------------
# CAPTIONS
# -----------------------------------------------------------------------------
TITLE = "Which U.S. Cities Get the Most Sunshine, and When?"
SUBTITLE = "Average Monthly Hours of Sunshine in Six Major Cities (1981–2010)"
CAPTION = ("Cities ordered by latitude (north to south). "
           "Values show hours of sunshine per month.")
LEGEND_TITLE = "Hours of Sunshine per Month"
ANNUAL_HEADER = "Annual"
ANNUAL_UNIT = "hrs/yr"
FOOTER = "Data source: usclimatedata.com | Averages over 1981–2010"

# Font sizes in pixels.
FONT_SIZES: Dict[str, int] = {
    "title": 22,
    "subtitle": 14,
    "caption": 12,
    "header": 13,
    "row_label": 14,
    "latitude": 11,
    "cell": 15,
    "small": 11,
}

FONT_FAMILY = "DejaVu Sans"

# -----------------------------------------------------------------------------
# OUTPUT / SERVER
# -----------------------------------------------------------------------------
OUTPUT_PATH = "visualization.png"

SERVER_HOST = "localhost"
SERVER_PORT = 8123

PREVIEW_DOCUMENT = Path(__file__).resolve().parent / "static" / "preview.html"

MIME_TYPES: Dict[str, str] = {
    ".html": "text/html",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".css": "text/css",
    ".js": "text/javascript",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


def mime_type_for(path: str) -> str:
    """Look up the Content-Type for a file by its extension."""
    return MIME_TYPES.get(Path(path).suffix, DEFAULT_MIME_TYPE)


@lru_cache(maxsize=None)
def font_path(bold: bool = False) -> str:
    """
    Resolve the TrueType file for the label font.

    matplotlib bundles DejaVu Sans, so this resolves to the same file on
    every machine and rendered text does not depend on system fonts.
    """
    props = font_manager.FontProperties(
        family=FONT_FAMILY,
        weight="bold" if bold else "normal",
    )
    return font_manager.findfont(props, fallback_to_default=True)


def ensure_parent_dir(path: str) -> Path:
    """
    Make sure the directory that will hold `path` exists.
    Call this before writing PNGs/CSVs.

    Returns:
        `path` as a Path.
    """
    p = Path(path)
    if p.parent and not p.parent.exists():
        p.parent.mkdir(parents=True, exist_ok=True)
        print(f"[config] created output dir {p.parent}")
    return p
