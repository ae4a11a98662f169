"""Sunshine heatmap: render a city-by-month PNG and serve a preview page."""

__version__ = "0.1.0"
