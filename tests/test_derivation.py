"""Tests for derived well quantities."""

from __future__ import annotations

import math

import pytest

from fieldsheets.derivation import derive, parse_number, recompute
from fieldsheets.schema import WellCharacteristics


class TestParseNumber:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("10", 10.0),
            (" 3.5 ", 3.5),
            ("3,5", 3.5),
            ("1 250", 1250.0),
            (7, 7.0),
            (0, 0.0),
        ],
    )
    def test_numeric_values(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "nan", "inf", True])
    def test_non_numeric_values(self, raw):
        assert parse_number(raw) is None


class TestDerive:
    def test_reference_well(self):
        values = derive("10", "3", "110")
        assert values["water_column_height"] == pytest.approx(7.0)
        # pi * 0.055^2 * 7 * 1000 = 66.52 L
        assert values["total_water_volume"] == pytest.approx(66.54, abs=0.05)
        assert values["three_volumes"] == pytest.approx(199.62, abs=0.1)
        assert values["three_volumes"] == pytest.approx(3 * values["total_water_volume"])

    def test_formula(self):
        values = derive(12.5, 4.25, 52)
        height = 12.5 - 4.25
        volume = math.pi * (52 / 2000) ** 2 * height * 1000
        assert values["water_column_height"] == pytest.approx(height, abs=1e-9)
        assert values["total_water_volume"] == pytest.approx(volume, abs=1e-9)

    @pytest.mark.parametrize(
        "depth, level, diameter",
        [
            (None, "3", "110"),
            ("10", None, "110"),
            ("10", "3", None),
            ("10", "trois", "110"),
        ],
    )
    def test_missing_or_non_numeric_input_clears(self, depth, level, diameter):
        values = derive(depth, level, diameter)
        assert values == {"water_column_height": None, "total_water_volume": None, "three_volumes": None}

    def test_water_level_below_bottom_gives_negative_column(self):
        values = derive("3", "10", "110")
        assert values["water_column_height"] == pytest.approx(-7.0)
        assert values["total_water_volume"] == pytest.approx(-66.52, abs=0.01)
        assert values["three_volumes"] == pytest.approx(-199.57, abs=0.01)

    def test_zero_diameter_gives_zero_volume(self):
        values = derive("10", "3", "0")
        assert values["water_column_height"] == pytest.approx(7.0)
        assert values["total_water_volume"] == 0
        assert values["three_volumes"] == 0

    def test_dry_well_is_zero(self):
        values = derive("5", "5", "110")
        assert values["water_column_height"] == 0
        assert values["total_water_volume"] == 0


class TestRecompute:
    def test_sets_derived_fields(self):
        well = recompute(WellCharacteristics(total_depth="10", water_level="3", inner_diameter="110"))
        assert well.water_column_height == pytest.approx(7.0)
        assert well.total_water_volume == pytest.approx(66.52, abs=0.01)

    def test_idempotent(self):
        well = WellCharacteristics(total_depth="10", water_level="3", inner_diameter="110")
        once = recompute(well)
        assert recompute(once) == once

    def test_overwrites_stale_values(self):
        stale = WellCharacteristics(total_depth="10", water_level="3", inner_diameter="110").model_copy(
            update={"water_column_height": 99.0, "three_volumes": 1.0}
        )
        fresh = recompute(stale)
        assert fresh.water_column_height == pytest.approx(7.0)
        assert fresh.three_volumes == pytest.approx(199.57, abs=0.01)

    def test_partial_input_clears_previous_values(self):
        previous = recompute(WellCharacteristics(total_depth="10", water_level="3", inner_diameter="110"))
        edited = previous.model_copy(update={"water_level": None})
        cleared = recompute(edited)
        assert cleared.water_column_height is None
        assert cleared.total_water_volume is None
        assert cleared.three_volumes is None

    def test_does_not_mutate_input(self):
        well = WellCharacteristics(total_depth="10", water_level="3", inner_diameter="110")
        recompute(well)
        assert well.water_column_height is None
