"""Tests for the page-cursor layout primitives."""

from __future__ import annotations

import logging

import pytest

from fieldsheets.layout import (
    CONTENT_BOTTOM,
    MIN_FIT_SIZE,
    TOP_MARGIN,
    GridStyle,
    ImageOp,
    PageBuilder,
    TableOp,
    TextOp,
    fit_line,
    line_height,
    text_width,
)
from tests.conftest import PNG_BYTES, FakeLoader

STYLE = GridStyle(col_widths=(40.0, 40.0))


class TestText:
    def test_single_line_advances_one_line(self):
        builder = PageBuilder()
        after = builder.text(15, 30, "Site : Client Industrie", size=10)
        assert after == pytest.approx(30 + line_height(10))
        op = builder.build()[0].ops[0]
        assert isinstance(op, TextOp)
        assert (op.x, op.y) == (15, 30)

    def test_wrapped_block_advances_per_line(self):
        builder = PageBuilder()
        long_text = "argile brune légèrement sableuse avec quelques graviers " * 4
        after = builder.text(15, 30, long_text, size=9, max_width=40)
        lines = builder.build()[0].ops[0].lines
        assert len(lines) > 1
        assert after == pytest.approx(30 + len(lines) * line_height(9))

    def test_explicit_newlines(self):
        builder = PageBuilder()
        builder.text(15, 30, "ligne 1\nligne 2")
        assert builder.build()[0].ops[0].lines == ("ligne 1", "ligne 2")


class TestFittedLine:
    def test_short_value_is_unchanged(self):
        assert fit_line("12 rue des Forges", 48) == ("12 rue des Forges", 10.0)

    def test_font_shrinks_to_fit(self):
        value = "Travaux Publics de la Région Lyonnaise"
        line, size = fit_line(value, 60)
        assert line == value
        assert MIN_FIT_SIZE <= size < 10.0
        assert text_width(line, size) <= 60

    def test_too_long_value_is_cut(self):
        line, size = fit_line("argile brune légèrement sableuse " * 10, 48)
        assert size == MIN_FIT_SIZE
        assert line.endswith("…")
        assert text_width(line, size) <= 48

    def test_newlines_are_flattened(self):
        assert fit_line("ligne 1\nligne 2", 100)[0] == "ligne 1 ligne 2"

    def test_zero_is_kept(self):
        assert fit_line(0, 20)[0] == "0"

    def test_text_line_keeps_the_pitch(self):
        builder = PageBuilder()
        after = builder.text_line(60, 50, "Société Anonyme des Travaux Publics de la Région Lyonnaise", 48)
        assert after == pytest.approx(50 + line_height(10))
        (op,) = builder.build()[0].ops
        assert len(op.lines) == 1
        assert text_width(op.lines[0], op.size) <= 48



class TestTable:
    def test_header_and_rows(self):
        builder = PageBuilder()
        end = builder.table(50, ["Paramètre", "Valeur"], [["pH", "7.2"], ["T°", "12"]], STYLE)
        pages = builder.build()
        (table,) = pages[0].tables()
        assert table.rows[0].header
        assert len(table.rows) == 3
        assert end == pytest.approx(50 + table.height)
        assert "7.2" in pages.texts()

    def test_column_mismatch(self):
        builder = PageBuilder()
        with pytest.raises(ValueError):
            builder.table(50, ["A", "B", "C"], [], STYLE)

    def test_empty_body_shows_message_row(self):
        builder = PageBuilder()
        builder.table(50, ["A", "B"], [], STYLE, empty_message="Aucune mesure renseignée")
        (table,) = builder.build()[0].tables()
        assert len(table.rows) == 2
        assert table.rows[1].span
        assert table.rows[1].cells == (("Aucune mesure renseignée",),)

    def test_empty_body_without_message_keeps_header(self):
        builder = PageBuilder()
        builder.table(50, ["A", "B"], [], STYLE)
        (table,) = builder.build()[0].tables()
        assert len(table.rows) == 1

    def test_long_table_splits_with_repeated_header(self):
        builder = PageBuilder()
        body = [[f"P{i}", str(i)] for i in range(80)]
        end = builder.table(200, ["Point", "Valeur"], body, STYLE)
        pages = builder.build()
        assert len(pages) > 1
        tables = [t for page in pages for t in page.tables()]
        assert all(t.rows[0].header for t in tables)
        assert sum(len(t.rows) - 1 for t in tables) == 80
        for page in pages:
            for t in page.tables():
                assert t.y + t.height <= CONTENT_BOTTOM + 1e-6
        assert tables[1].y == TOP_MARGIN
        assert end <= CONTENT_BOTTOM

    def test_table_that_cannot_start_moves_to_next_page(self):
        builder = PageBuilder()
        builder.table(CONTENT_BOTTOM - 2, ["A", "B"], [["1", "2"]], STYLE)
        pages = builder.build()
        assert len(pages) == 2
        assert pages[0].tables() == []
        assert pages[1].tables()[0].y == TOP_MARGIN


class TestImage:
    def test_loaded_image_is_placed(self):
        builder = PageBuilder(FakeLoader({"photos/a.png": PNG_BYTES}))
        assert builder.image(15, 30, "photos/a.png", 180, 90)
        (op,) = builder.build().images()
        assert isinstance(op, ImageOp)
        assert op.data == PNG_BYTES
        assert (op.width, op.height) == (180, 90)

    def test_failed_image_is_skipped_and_logged(self, caplog):
        builder = PageBuilder(FakeLoader())
        with caplog.at_level(logging.WARNING, logger="uvicorn.error"):
            assert not builder.image(15, 30, "photos/missing.png", 180, 90)
        builder.text(15, 130, "Photo 1")
        pages = builder.build()
        assert pages.images() == []
        assert "Photo 1" in pages.texts()
        assert "photos/missing.png" in caplog.text

    def test_no_loader(self):
        builder = PageBuilder()
        assert not builder.image(15, 30, "photos/a.png", 180, 90)


class TestPaging:
    def test_ensure_space_keeps_cursor_when_it_fits(self):
        builder = PageBuilder()
        assert builder.ensure_space(100, 50) == 100
        assert len(builder.build()) == 1

    def test_ensure_space_opens_page(self):
        builder = PageBuilder()
        builder.text(15, 270, "bas de page")
        assert builder.ensure_space(270, 30) == TOP_MARGIN
        builder.text(15, TOP_MARGIN, "haut de page")
        pages = builder.build()
        assert [p.number for p in pages] == [1, 2]
        assert pages[1].texts() == ["haut de page"]

    def test_builder_is_single_use(self):
        builder = PageBuilder()
        builder.build()
        with pytest.raises(RuntimeError):
            builder.text(15, 30, "trop tard")
        with pytest.raises(RuntimeError):
            builder.build()

    def test_page_ops_are_ordered(self):
        builder = PageBuilder()
        builder.text(15, 30, "titre")
        builder.table(40, ["A", "B"], [["1", "2"]], STYLE)
        ops = builder.build()[0].ops
        assert isinstance(ops[0], TextOp)
        assert isinstance(ops[1], TableOp)
