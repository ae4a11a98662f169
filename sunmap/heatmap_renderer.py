"""
heatmap_renderer.py
-------------------
Render the city-by-month sunshine grid to a PNG heatmap.

This is called by:
- sunmap/render.py      (command line: writes visualization.png)

Input to generate_heatmap():
    cities   : sequence of City, drawn top to bottom in the given order
    out_path : where to save the PNG
    layout   : LayoutConfig (cell sizes, margins); defaults to config.LAYOUT

Canvas size:
    width  = pad*2 + label_width + 12*cell_width + annual_width
    height = top_margin + header_height + n_cities*cell_height + bottom_margin

Draw order matters, later strokes overdraw earlier fills:
    background -> title block -> month headers + divider
    -> rows (label, latitude, 12 cells, annual cell, separator)
    -> legend (caption, gradient bar, border, ticks) -> footer

The output is a pure function of the inputs: no timestamps, no randomness,
and fonts come from the files bundled with matplotlib.
"""

from functools import lru_cache
from io import BytesIO
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from sunmap import config
from sunmap.cities import City
from sunmap.color_scale import ColorScale


# -----------------------------------------------------------------------------
# Geometry
# -----------------------------------------------------------------------------
def canvas_size(n_cities: int, layout: config.LayoutConfig = config.LAYOUT) -> Tuple[int, int]:
    """Pixel (width, height) of the heatmap for `n_cities` rows."""
    grid_w = len(config.MONTHS) * layout.cell_width
    width = layout.pad * 2 + layout.label_width + grid_w + layout.annual_width
    height = (layout.top_margin + layout.header_height
              + n_cities * layout.cell_height + layout.bottom_margin)
    return width, height


@lru_cache(maxsize=None)
def _font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(config.font_path(bold), size)


def _format_value(value) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def _format_total(value) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.1f}"


def _format_latitude(lat: float) -> str:
    hemisphere = "N" if lat >= 0 else "S"
    return f"{abs(lat):.1f}°{hemisphere}"


# -----------------------------------------------------------------------------
# Drawing passes
# -----------------------------------------------------------------------------
def _draw_title(draw: ImageDraw.ImageDraw, width: int) -> None:
    cx = width / 2
    sizes = config.FONT_SIZES
    draw.text((cx, 40), config.TITLE, fill=config.DARK_TEXT,
              font=_font(sizes["title"], bold=True), anchor="ms")
    draw.text((cx, 62), config.SUBTITLE, fill=config.SUBTITLE_TEXT,
              font=_font(sizes["subtitle"]), anchor="ms")
    draw.text((cx, 82), config.CAPTION, fill=config.CAPTION_TEXT,
              font=_font(sizes["caption"]), anchor="ms")


def _draw_headers(draw: ImageDraw.ImageDraw, layout: config.LayoutConfig) -> None:
    grid_x = layout.pad + layout.label_width
    grid_y = layout.top_margin + layout.header_height
    grid_w = len(config.MONTHS) * layout.cell_width
    baseline = grid_y - 12
    font = _font(config.FONT_SIZES["header"], bold=True)

    for i, month in enumerate(config.MONTHS):
        x = grid_x + i * layout.cell_width + layout.cell_width / 2
        draw.text((x, baseline), month, fill=config.DARK_TEXT, font=font, anchor="ms")
    draw.text((grid_x + grid_w + layout.annual_width / 2, baseline), config.ANNUAL_HEADER,
              fill=config.DARK_TEXT, font=font, anchor="ms")

    # thin rule under the headers
    draw.line([(grid_x, grid_y), (grid_x + grid_w + layout.annual_width, grid_y)],
              fill=config.RULE_LINE, width=1)


def _draw_row(
    draw: ImageDraw.ImageDraw,
    city: City,
    row: int,
    is_last: bool,
    scale: ColorScale,
    layout: config.LayoutConfig,
) -> None:
    sizes = config.FONT_SIZES
    cw, ch = layout.cell_width, layout.cell_height
    grid_x = layout.pad + layout.label_width
    grid_w = len(config.MONTHS) * cw
    y = layout.top_margin + layout.header_height + row * ch
    mid = y + ch / 2

    # city label + latitude, right-aligned against the grid
    draw.text((grid_x - 12, mid + 1), city.name, fill=config.DARK_TEXT,
              font=_font(sizes["row_label"], bold=True), anchor="rs")
    draw.text((grid_x - 12, mid + 16), _format_latitude(city.lat), fill=config.LATITUDE_TEXT,
              font=_font(sizes["latitude"]), anchor="rs")

    cell_font = _font(sizes["cell"], bold=True)
    for col, value in enumerate(city.monthly):
        x = grid_x + col * cw
        draw.rectangle([x + 1, y + 1, x + cw - 2, y + ch - 2], fill=scale.color_for(value))
        # background-coloured outline separates neighbouring cells
        draw.rectangle([x - 1, y - 1, x + cw, y + ch], outline=config.BACKGROUND, width=2)
        draw.text((x + cw / 2, mid + 5), _format_value(value),
                  fill=scale.text_color_for(value), font=cell_font, anchor="ms")

    # annual total, flat neutral fill
    ax = grid_x + grid_w
    draw.rectangle([ax + 4, y + 1, ax + layout.annual_width - 3, y + ch - 2],
                   fill=config.ANNUAL_FILL)
    draw.text((ax + layout.annual_width / 2, mid + 1), _format_total(city.annual_total),
              fill=config.DARK_TEXT, font=cell_font, anchor="ms")
    draw.text((ax + layout.annual_width / 2, mid + 16), config.ANNUAL_UNIT,
              fill=config.MUTED_TEXT, font=_font(sizes["small"]), anchor="ms")

    if not is_last:
        draw.line([(layout.pad, y + ch), (ax + layout.annual_width, y + ch)],
                  fill=config.ROW_SEPARATOR, width=1)


def legend_origin(n_cities: int, layout: config.LayoutConfig = config.LAYOUT) -> Tuple[int, int]:
    """Top-left pixel of the legend gradient bar."""
    width, _ = canvas_size(n_cities, layout)
    x = (width - layout.legend_width) // 2
    y = layout.top_margin + layout.header_height + n_cities * layout.cell_height + layout.legend_offset
    return x, y


def tick_position(value: float, scale: ColorScale, legend_x: int, legend_width: int) -> Optional[float]:
    """
    Horizontal pixel of a legend tick, or None if the tick would sit
    off the bar (more than 8px past either end).
    """
    span = scale.max_value - scale.min_value
    t = 0.0 if span == 0 else (value - scale.min_value) / span
    x = legend_x + t * legend_width
    if x < legend_x - 8 or x > legend_x + legend_width + 8:
        return None
    return x


def _draw_legend(
    draw: ImageDraw.ImageDraw,
    n_cities: int,
    scale: ColorScale,
    layout: config.LayoutConfig,
) -> int:
    width, _ = canvas_size(n_cities, layout)
    lx, ly = legend_origin(n_cities, layout)
    lw, lh = layout.legend_width, layout.legend_height
    small = _font(config.FONT_SIZES["small"])

    draw.text((width / 2, ly - 8), config.LEGEND_TITLE, fill=config.SUBTITLE_TEXT,
              font=_font(config.FONT_SIZES["caption"]), anchor="ms")

    # one-pixel columns sampled across the value range
    for i in range(lw):
        color = scale.color_for(scale.value_at(i / lw))
        draw.line([(lx + i, ly), (lx + i, ly + lh - 1)], fill=color, width=1)

    draw.rectangle([lx, ly, lx + lw, ly + lh], outline=config.RULE_LINE, width=1)

    for value in config.LEGEND_TICKS:
        x = tick_position(value, scale, lx, lw)
        if x is None:
            continue
        x = int(round(x))
        draw.line([(x, ly + lh), (x, ly + lh + 4)], fill=config.TICK_LINE, width=1)
        draw.text((x, ly + lh + 16), _format_value(value), fill=config.SUBTITLE_TEXT,
                  font=small, anchor="ms")
    return ly


# -----------------------------------------------------------------------------
# Public entry points
# -----------------------------------------------------------------------------
def render_image(
    cities: Sequence[City],
    layout: config.LayoutConfig = config.LAYOUT,
    scale: Optional[ColorScale] = None,
) -> Image.Image:
    """
    Draw the full heatmap and return it as an RGB Pillow image.

    Args:
        cities: rows, top to bottom. Must not be empty.
        layout: pixel geometry
        scale: colour scale; built from the cities' monthly range if None

    Raises:
        ValueError: no cities, or Pillow rejects the canvas size
    """
    if scale is None:
        scale = ColorScale.from_cities(cities)

    width, height = canvas_size(len(cities), layout)
    image = Image.new("RGB", (width, height), config.BACKGROUND)
    draw = ImageDraw.Draw(image)

    _draw_title(draw, width)
    _draw_headers(draw, layout)
    for row, city in enumerate(cities):
        _draw_row(draw, city, row, row == len(cities) - 1, scale, layout)
    legend_y = _draw_legend(draw, len(cities), scale, layout)

    draw.text((width / 2, legend_y + 45), config.FOOTER, fill=config.MUTED_TEXT,
              font=_font(config.FONT_SIZES["small"]), anchor="ms")
    return image


def encode_png(image: Image.Image) -> bytes:
    """Serialise an image to PNG bytes."""
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def write_png(data: bytes, out_path: str) -> str:
    """Write PNG bytes to `out_path`, replacing any existing file."""
    path = config.ensure_parent_dir(out_path)
    with open(path, "wb") as f:
        f.write(data)
    return out_path


def generate_heatmap(
    cities: Sequence[City],
    out_path: str = config.OUTPUT_PATH,
    layout: config.LayoutConfig = config.LAYOUT,
) -> str:
    """
    Render the heatmap for `cities` and save it as a PNG.

    Args:
        cities: rows to draw, in display order
        out_path: filesystem path for the PNG (overwritten)
        layout: pixel geometry

    Returns:
        The out_path string.
    """
    image = render_image(cities, layout)
    return write_png(encode_png(image), out_path)
