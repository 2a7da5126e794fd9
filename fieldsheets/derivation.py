"""Derived well quantities for groundwater sampling sheets.

The three derived fields of a well (water-column height, total water volume,
three purge volumes) are pure functions of total depth, water level and inner
diameter. They are never taken from user input: ``recompute`` either sets all
three from the current drivers or clears all three.

Casing is assumed cylindrical.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from fieldsheets.schema import WellCharacteristics

DERIVED_FIELDS = ("water_column_height", "total_water_volume", "three_volumes")


def parse_number(value: Any) -> Optional[float]:
    """Lenient numeric parse for form values; French decimal commas are accepted."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace("\u00a0", "").replace(" ", "")
        if not text:
            return None
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def water_column_height(total_depth_m: float, water_level_m: float) -> float:
    return total_depth_m - water_level_m


def water_volume_liters(inner_diameter_mm: float, column_height_m: float) -> float:
    radius_m = inner_diameter_mm / 2000.0
    return math.pi * radius_m * radius_m * column_height_m * 1000.0


def derive(total_depth: Any, water_level: Any, inner_diameter: Any) -> Dict[str, Optional[float]]:
    cleared: Dict[str, Optional[float]] = {name: None for name in DERIVED_FIELDS}
    depth = parse_number(total_depth)
    level = parse_number(water_level)
    diameter = parse_number(inner_diameter)
    if depth is None or level is None or diameter is None:
        return cleared
    height = water_column_height(depth, level)
    volume = water_volume_liters(diameter, height)
    return {
        "water_column_height": height,
        "total_water_volume": volume,
        "three_volumes": 3.0 * volume,
    }


def recompute(well: "WellCharacteristics") -> "WellCharacteristics":
    """Return a copy of ``well`` whose derived fields match its drivers."""
    values = derive(well.total_depth, well.water_level, well.inner_diameter)
    return well.model_copy(update=values)


__all__ = [
    "DERIVED_FIELDS",
    "derive",
    "parse_number",
    "recompute",
    "water_column_height",
    "water_volume_liters",
]
