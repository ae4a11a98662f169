"""
cities.py
---------
City records and the dataset preparation step.

A City holds twelve monthly sunshine-hour values. The renderer needs:
    - each city's annual total (exact sum of the 12 months)
    - the global (min, max) over every monthly value, which defines the
      colour scale. Annual totals are NOT part of that range.

The built-in dataset is ordered by latitude, north to south. That order is
the caller's: nothing here sorts cities.

External data can be loaded from a CSV with columns:
    name,lat,Jan,Feb,Mar,Apr,May,Jun,Jul,Aug,Sep,Oct,Nov,Dec
"""

from dataclasses import dataclass
from numbers import Real
from typing import Iterable, List, Sequence, Tuple

import numpy as np
import pandas as pd

from sunmap import config


def _check_number(value, what: str) -> float:
    # bool is a Real subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (Real, np.number)):
        raise ValueError(f"{what} must be numeric, got {value!r}")
    if np.isnan(value):
        raise ValueError(f"{what} is missing")
    if not np.isfinite(value):
        raise ValueError(f"{what} must be finite, got {value!r}")
    return value


@dataclass(frozen=True)
class City:
    """One row of the heatmap."""
    name: str
    lat: float
    monthly: Tuple[float, ...]

    def __post_init__(self):
        values = tuple(self.monthly)
        if len(values) != len(config.MONTHS):
            raise ValueError(
                f"{self.name}: expected {len(config.MONTHS)} monthly values, got {len(values)}"
            )
        for month, v in zip(config.MONTHS, values):
            _check_number(v, f"{self.name} {month}")
            if v < 0:
                raise ValueError(f"{self.name} {month}: negative value {v}")
        _check_number(self.lat, f"{self.name} latitude")
        object.__setattr__(self, "monthly", values)

    @property
    def annual_total(self):
        return sum(self.monthly)

    @property
    def daily_averages(self) -> Tuple[float, ...]:
        """Average hours of sunshine per day for each month, one decimal."""
        return tuple(
            round(hours / days, 1)
            for hours, days in zip(self.monthly, config.DAYS_IN_MONTH)
        )


DEFAULT_CITIES: Tuple[City, ...] = (
    City("Seattle",       47.61, (69, 108, 178, 207, 253, 268, 312, 281, 221, 142, 72, 52)),
    City("Chicago",       41.88, (135, 136, 187, 215, 281, 311, 318, 283, 226, 193, 113, 106)),
    City("New York",      40.73, (154, 171, 213, 237, 268, 289, 302, 271, 235, 213, 169, 155)),
    City("San Francisco", 37.73, (165, 182, 251, 281, 314, 330, 300, 272, 267, 243, 189, 156)),
    City("Houston",       29.75, (144, 141, 193, 212, 266, 298, 294, 281, 238, 239, 181, 146)),
    City("Miami",         25.76, (222, 227, 266, 275, 280, 251, 267, 263, 216, 215, 212, 209)),
)


def value_range(cities: Sequence[City]) -> Tuple[float, float]:
    """
    Global (min, max) across every city's monthly values.

    Raises:
        ValueError: if `cities` is empty.
    """
    if not cities:
        raise ValueError("no cities to render")
    values = np.array([c.monthly for c in cities], dtype=float)
    return float(values.min()), float(values.max())


def load_cities_csv(path: str) -> List[City]:
    """
    Read cities from a CSV file, keeping file order.

    Args:
        path: CSV with a header row `name,lat,Jan,...,Dec`

    Returns:
        list of City

    Raises:
        ValueError: missing columns, empty file, non-numeric or missing cells,
                    blank city names
    """
    try:
        df = pd.read_csv(path)
    except pd.errors.EmptyDataError:
        raise ValueError(f"{path}: file is empty")

    required = ["name", "lat", *config.MONTHS]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing columns {missing}")
    if df.empty:
        raise ValueError(f"{path}: no rows")

    numeric_cols = ["lat", *config.MONTHS]
    numeric = df[numeric_cols].apply(pd.to_numeric, errors="coerce")
    bad = numeric.isna() & df[numeric_cols].notna()
    if bad.any().any():
        row, col = next(zip(*np.nonzero(bad.to_numpy())))
        raise ValueError(
            f"{path}: non-numeric value {df[numeric_cols].iat[row, col]!r} "
            f"in column {numeric_cols[col]} (row {row + 1})"
        )

    cities = []
    for i, row in numeric.iterrows():
        name = df.at[i, "name"]
        if pd.isna(name) or not str(name).strip():
            raise ValueError(f"{path}: blank city name (row {i + 1})")
        monthly = tuple(
            int(v) if float(v).is_integer() else float(v)
            for v in row[list(config.MONTHS)]
        )
        cities.append(City(str(name).strip(), float(row["lat"]), monthly))
    return cities


_DAILY_COLUMNS = [f"{m}_per_day" for m in config.MONTHS]


def cities_to_frame(cities: Iterable[City]) -> pd.DataFrame:
    """One row per city: name, lat, Jan..Dec, annual, then hours/day per month."""
    records = []
    for c in cities:
        rec = {"name": c.name, "lat": c.lat}
        rec.update(zip(config.MONTHS, c.monthly))
        rec["annual"] = c.annual_total
        rec.update(zip(_DAILY_COLUMNS, c.daily_averages))
        records.append(rec)
    return pd.DataFrame(records, columns=["name", "lat", *config.MONTHS, "annual", *_DAILY_COLUMNS])
