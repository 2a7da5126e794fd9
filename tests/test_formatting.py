"""Tests for printable field values."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from fieldsheets.formatting import (
    PLACEHOLDER,
    format_number,
    is_blank,
    render_choice,
    render_date,
    render_datetime,
    render_field,
)
from fieldsheets.schema import LABORATORY_CHOICES


class TestFormatNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [(7.0, "7"), (66.5232, "66.52"), (199.5696, "199.57"), (0.5, "0.5"), (-0.001, "0"), (0, "0")],
    )
    def test_trailing_zeros_dropped(self, value, expected):
        assert format_number(value) == expected

    def test_decimals(self):
        assert format_number(3.14159, decimals=3) == "3.142"


class TestRenderField:
    @pytest.mark.parametrize("value", [None, "", "   ", [], ["", None]])
    def test_blank_values_use_placeholder(self, value):
        assert render_field(value) == PLACEHOLDER
        assert render_field(value, "m") == PLACEHOLDER

    def test_zero_is_a_value(self):
        assert render_field(0) == "0"
        assert render_field("0", "ppm") == "0 ppm"
        assert not is_blank(0)

    def test_unit_is_appended(self):
        assert render_field("2.5", "m") == "2.5 m"
        assert render_field(7.0, "m") == "7 m"

    def test_booleans(self):
        assert render_field(True) == "Oui"
        assert render_field(False) == "Non"

    def test_lists_are_joined(self):
        assert render_field(["A. Dupont", "", "B. Leroy"]) == "A. Dupont, B. Leroy"

    def test_text_is_stripped(self):
        assert render_field("  limon sableux ") == "limon sableux"


class TestRenderChoice:
    def test_known_value_shows_label(self):
        assert render_choice("wessling", LABORATORY_CHOICES) == "Wessling"

    def test_unknown_value_is_printed_as_is(self):
        assert render_choice("eurofins", LABORATORY_CHOICES) == "eurofins"

    def test_blank(self):
        assert render_choice(None, LABORATORY_CHOICES) == PLACEHOLDER


class TestRenderDates:
    def test_iso_date(self):
        assert render_date("2024-05-02") == "02/05/2024"
        assert render_date(date(2024, 5, 2)) == "02/05/2024"

    def test_free_text_date_is_kept(self):
        assert render_date("début mai") == "début mai"

    def test_blank_date(self):
        assert render_date("") == PLACEHOLDER

    def test_datetime_with_time(self):
        assert render_datetime("2024-05-02T09:15:00Z") == "02/05/2024 09:15"
        assert render_datetime(datetime(2024, 5, 2, 14, 30)) == "02/05/2024 14:30"

    def test_datetime_date_only(self):
        assert render_datetime("2024-05-02") == "02/05/2024"
