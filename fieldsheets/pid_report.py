from __future__ import annotations

from fieldsheets.formatting import render_choice, render_field
from fieldsheets.layout import PageBuilder, PageSequence
from fieldsheets.report_common import (
    EMPTY_MEASUREMENTS,
    GAS_HEADER,
    SheetWriter,
    common_rows,
    gas_cells,
    site_rows,
    weather_rows,
)
from fieldsheets.schema import STRUCTURE_CHOICES, PidData, Site, Survey

TITLE = "Campagne de mesures PID"


def compose(site: Site, survey: Survey, loader=None) -> PageSequence:
    data: PidData = survey.specific_data
    sheet = SheetWriter(PageBuilder(loader))
    sheet.header(TITLE)

    sheet.section("Informations générales")
    sheet.rows(site_rows(site))
    sheet.rows(common_rows(survey))

    structure = data.structure_description
    sheet.section("Description de l'ouvrage")
    sheet.rows(
        [
            ("Ouvrage temporaire ou permanent", render_choice(structure.type, STRUCTURE_CHOICES)),
            ("Type d'ouvrage", render_field(structure.details)),
        ]
    )

    sheet.section("Conditions météorologiques")
    sheet.rows(weather_rows(data.weather_conditions))

    sheet.section("Mesures semi-quantitatives des gaz du sol", fresh_page=True)
    body = [[render_field(m.location)] + gas_cells(m) for m in data.measurements]
    sheet.table(["Ouvrage/Maille"] + GAS_HEADER, body, [42, 28, 28, 28, 28, 28], empty_message=EMPTY_MEASUREMENTS)
    return sheet.builder.build()


__all__ = ["TITLE", "compose"]
