"""
render.py
---------
Command-line entry point: build the sunshine heatmap PNG.

    python -m sunmap.render
    python -m sunmap.render --csv cities.csv --out out/heatmap.png --summary-csv out/summary.csv

With no flags this renders the built-in six-city dataset to
visualization.png in the working directory and prints one line:

    Saved visualization.png (1110x610)

Any failure (bad input data, canvas creation, file write) is fatal:
the message goes to stderr and the process exits with status 1.
"""

import argparse
import sys
from typing import Any, Dict, Optional, Sequence

from sunmap import config
from sunmap.cities import DEFAULT_CITIES, City, cities_to_frame, load_cities_csv, value_range
from sunmap.heatmap_renderer import canvas_size, generate_heatmap


def run_render(
    cities: Sequence[City] = DEFAULT_CITIES,
    out_path: str = config.OUTPUT_PATH,
    summary_csv: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Render `cities`, write the PNG, optionally write a per-city summary CSV.

    Returns:
        summary dict:
        {
          "output": "visualization.png",
          "width": 1110,
          "height": 610,
          "cities": 6,
          "min_value": 52.0,
          "max_value": 330.0,
          "summary_csv": None | ".../summary.csv"
        }
    """
    lo, hi = value_range(cities)
    generate_heatmap(cities, out_path)

    if summary_csv:
        path = config.ensure_parent_dir(summary_csv)
        cities_to_frame(cities).to_csv(path, index=False)

    width, height = canvas_size(len(cities))
    return {
        "output": out_path,
        "width": width,
        "height": height,
        "cities": len(cities),
        "min_value": lo,
        "max_value": hi,
        "summary_csv": summary_csv,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render the city-by-month sunshine heatmap.")
    parser.add_argument("--csv", default=None,
                        help="load cities from CSV (name,lat,Jan..Dec) instead of the built-in data")
    parser.add_argument("--out", default=config.OUTPUT_PATH, help="output PNG path")
    parser.add_argument("--summary-csv", default=None,
                        help="also write a per-city table with annual totals")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cities = load_cities_csv(args.csv) if args.csv else DEFAULT_CITIES
        summary = run_render(cities, out_path=args.out, summary_csv=args.summary_csv)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Saved {summary['output']} ({summary['width']}x{summary['height']})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
