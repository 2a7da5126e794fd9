from __future__ import annotations

from fieldsheets.formatting import render_choice, render_field
from fieldsheets.layout import PageBuilder, PageSequence
from fieldsheets.report_common import (
    SheetWriter,
    common_rows,
    laboratory_rows,
    site_rows,
    weather_rows,
)
from fieldsheets.schema import GAS_SAMPLING_CHOICES, STRUCTURE_CHOICES, SUPPORT_CHOICES, GasData, Site, Survey

TITLE = "Fiche de prélèvement des gaz du sol"


def compose(site: Site, survey: Survey, loader=None) -> PageSequence:
    data: GasData = survey.specific_data
    sheet = SheetWriter(PageBuilder(loader))
    sheet.header(TITLE)

    sheet.section("Informations générales")
    sheet.rows(site_rows(site))
    sheet.rows(common_rows(survey))

    description = data.sample_description
    sheet.section("Description de l'ouvrage")
    sheet.rows(
        [
            ("Ouvrage temporaire ou permanent", render_choice(description.structure_type, STRUCTURE_CHOICES)),
            ("Description", render_field(description.details)),
        ]
    )

    sheet.section("Conditions météorologiques")
    sheet.rows(weather_rows(data.weather_conditions))

    sampling = data.sampling
    sheet.section("Description du prélèvement")
    sheet.rows(
        [
            ("Type d'échantillonnage", render_choice(sampling.type, GAS_SAMPLING_CHOICES)),
            ("Nombre de support", render_field(sampling.support_count)),
            ("Nature des supports", render_choice(sampling.support_type, SUPPORT_CHOICES)),
            ("Profondeur de l'ouvrage (m)", render_field(sampling.depth)),
            ("Type d'étanchéité", render_field(sampling.seal_type)),
            ("Description des sols", render_field(sampling.soil_description)),
        ]
    )

    purge = data.purge
    sheet.section("Purge de l'ouvrage")
    sheet.rows([("Détail de la purge", render_field(purge.details))])
    sheet.section("Mesures semi-quantitatives des gaz du sol")
    sheet.gas_readings(purge.measurements)

    sheet.section("Contrôle de débit", fresh_page=True)
    sheet.flow_control(purge.flow)

    sheet.section("Conditionnement et transport")
    sheet.rows(laboratory_rows(data.laboratory))
    return sheet.builder.build()


__all__ = ["TITLE", "compose"]
