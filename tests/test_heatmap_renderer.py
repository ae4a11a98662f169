from PIL import Image

from sunmap import config
from sunmap.cities import DEFAULT_CITIES, City
from sunmap.color_scale import ColorScale
from sunmap.heatmap_renderer import (
    canvas_size,
    encode_png,
    generate_heatmap,
    legend_origin,
    render_image,
    tick_position,
)

LAYOUT = config.LAYOUT
GRID_X = LAYOUT.pad + LAYOUT.label_width
GRID_Y = LAYOUT.top_margin + LAYOUT.header_height


def test_canvas_size_formula():
    assert canvas_size(6) == (30 + 130 + 840 + 80 + 30, 120 + 40 + 6 * 55 + 120)
    assert canvas_size(6) == (1110, 610)
    assert canvas_size(1) == (1110, 335)


def test_canvas_size_custom_layout():
    layout = config.LayoutConfig(cell_width=50, cell_height=40, label_width=100,
                                 annual_width=60, pad=10, top_margin=80,
                                 header_height=30, bottom_margin=90)
    assert canvas_size(3, layout) == (10 * 2 + 100 + 12 * 50 + 60, 80 + 30 + 3 * 40 + 90)


def test_render_image_dimensions_and_background():
    image = render_image(DEFAULT_CITIES)
    assert image.mode == "RGB"
    assert image.size == (1110, 610)
    assert image.getpixel((0, 0)) == config.BACKGROUND
    assert image.getpixel((1109, 609)) == config.BACKGROUND


def test_cells_are_filled_from_color_scale():
    image = render_image(DEFAULT_CITIES)
    scale = ColorScale.from_cities(DEFAULT_CITIES)
    for row, city in enumerate(DEFAULT_CITIES):
        y = GRID_Y + row * LAYOUT.cell_height
        for col, value in enumerate(city.monthly):
            x = GRID_X + col * LAYOUT.cell_width
            assert image.getpixel((x + 5, y + 5)) == scale.color_for(value)


def test_cell_outline_uses_background():
    image = render_image(DEFAULT_CITIES)
    # boundary between Jan and Feb in the first row
    x = GRID_X + LAYOUT.cell_width
    assert image.getpixel((x, GRID_Y + 20)) == config.BACKGROUND


def test_annual_cell_is_neutral():
    image = render_image(DEFAULT_CITIES)
    ax = GRID_X + 12 * LAYOUT.cell_width
    for row in range(len(DEFAULT_CITIES)):
        y = GRID_Y + row * LAYOUT.cell_height
        assert image.getpixel((ax + 6, y + 3)) == config.ANNUAL_FILL


def test_legend_gradient_samples_scale():
    image = render_image(DEFAULT_CITIES)
    scale = ColorScale.from_cities(DEFAULT_CITIES)
    lx, ly = legend_origin(len(DEFAULT_CITIES))
    assert (lx, ly) == (395, 525)
    for i in (1, 80, 160, 240, 319):
        expected = scale.color_for(scale.value_at(i / LAYOUT.legend_width))
        assert image.getpixel((lx + i, ly + 8)) == expected


def test_tick_positions():
    scale = ColorScale(52, 330)
    x = tick_position(330, scale, 395, 320)
    assert x == 395 + 320
    # just below the range still gets a tick
    assert 390 < tick_position(50, scale, 395, 320) < 395
    assert tick_position(1000, scale, 395, 320) is None


def test_render_is_deterministic():
    first = render_image(DEFAULT_CITIES)
    second = render_image(DEFAULT_CITIES)
    assert first.tobytes() == second.tobytes()
    assert encode_png(first) == encode_png(second)


def test_single_value_dataset_renders():
    flat = [City("Flat", 0.0, [100] * 12)]
    image = render_image(flat)
    assert image.size == canvas_size(1)
    assert image.getpixel((GRID_X + 5, GRID_Y + 5)) == config.COLOR_STOPS[0]


def test_generate_heatmap_writes_png(tmp_path):
    out = tmp_path / "nested" / "visualization.png"
    out.parent.mkdir()
    out.write_bytes(b"stale")
    result = generate_heatmap(DEFAULT_CITIES, str(out))
    assert result == str(out)
    with Image.open(out) as img:
        assert img.format == "PNG"
        assert img.size == (1110, 610)
    assert out.read_bytes() == encode_png(render_image(DEFAULT_CITIES))


def test_generate_heatmap_creates_parent_dir(tmp_path):
    out = tmp_path / "a" / "b" / "heatmap.png"
    generate_heatmap(DEFAULT_CITIES, str(out))
    assert out.exists()


def _count_pixels(image, box, color):
    x0, y0, x1, y1 = box
    return sum(
        1
        for x in range(x0, x1)
        for y in range(y0, y1)
        if image.getpixel((x, y)) == color
    )


def test_row_separators_between_rows_only():
    image = render_image(DEFAULT_CITIES)
    for row in range(len(DEFAULT_CITIES)):
        y = GRID_Y + (row + 1) * LAYOUT.cell_height
        expected = config.ROW_SEPARATOR if row < len(DEFAULT_CITIES) - 1 else config.BACKGROUND
        assert image.getpixel((LAYOUT.pad + 2, y)) == expected


def test_legend_border_and_ticks():
    image = render_image(DEFAULT_CITIES)
    scale = ColorScale.from_cities(DEFAULT_CITIES)
    lx, ly = legend_origin(len(DEFAULT_CITIES))
    assert image.getpixel((lx, ly)) == config.RULE_LINE
    assert image.getpixel((lx + LAYOUT.legend_width, ly + 8)) == config.RULE_LINE
    for value in (100, 200):
        x = int(round(tick_position(value, scale, lx, LAYOUT.legend_width)))
        assert image.getpixel((x, ly + LAYOUT.legend_height + 2)) == config.TICK_LINE


def test_cell_text_uses_text_color():
    image = render_image(DEFAULT_CITIES)
    scale = ColorScale.from_cities(DEFAULT_CITIES)
    checked = set()
    for row, city in enumerate(DEFAULT_CITIES):
        y = GRID_Y + row * LAYOUT.cell_height
        for col, value in enumerate(city.monthly):
            color = scale.text_color_for(value)
            if color in checked:
                continue
            x = GRID_X + col * LAYOUT.cell_width
            box = (x + 10, y + 12, x + LAYOUT.cell_width - 10, y + LAYOUT.cell_height - 12)
            assert _count_pixels(image, box, color) > 0
            checked.add(color)
    assert checked == {config.DARK_TEXT, config.LIGHT_TEXT}
