from __future__ import annotations

from typing import List

from fieldsheets.formatting import PLACEHOLDER, is_blank, render_choice, render_field
from fieldsheets.layout import PageBuilder, PageSequence
from fieldsheets.report_common import (
    Row,
    SheetWriter,
    common_rows,
    laboratory_rows,
    site_rows,
    weather_rows,
)
from fieldsheets.schema import AIR_SAMPLING_CHOICES, SUPPORT_CHOICES, AmbientAirData, Site, Survey

TITLE = "Fiche de prélèvement d'air ambiant"


def _indoor_rows(survey: Survey) -> List[Row]:
    location = survey.common_data.location
    if location is None:
        return [("Pièce", PLACEHOLDER), ("Position dans la pièce", PLACEHOLDER), ("Coordonnées GPS", PLACEHOLDER)]
    gps = PLACEHOLDER
    coords = location.coordinates
    if coords is not None and not (is_blank(coords.x) and is_blank(coords.y)):
        gps = f"{render_field(coords.y)}, {render_field(coords.x)}"
    return [
        ("Pièce", render_field(location.room)),
        ("Position dans la pièce", render_field(location.position)),
        ("Coordonnées GPS", gps),
    ]


def compose(site: Site, survey: Survey, loader=None) -> PageSequence:
    data: AmbientAirData = survey.specific_data
    sheet = SheetWriter(PageBuilder(loader))
    sheet.header(TITLE)

    sheet.section("Informations générales")
    sheet.rows(site_rows(site))
    sheet.rows(common_rows(survey))

    sheet.section("Localisation")
    sheet.rows(_indoor_rows(survey))

    sheet.section("Conditions météorologiques")
    sheet.rows(weather_rows(data.weather_conditions))

    sampling = data.sampling
    sheet.section("Description du prélèvement")
    sheet.rows(
        [
            ("Type d'échantillonnage", render_choice(sampling.type, AIR_SAMPLING_CHOICES)),
            ("Nombre de support", render_field(sampling.support_count)),
            ("Nature des supports", render_choice(sampling.support_type, SUPPORT_CHOICES)),
            ("Description de l'installation", render_field(sampling.installation_description)),
            ("Hauteur de l'ouvrage (m)", render_field(sampling.height)),
            ("Présence d'aération / Ventilation", render_field(sampling.ventilation)),
            ("Travaux récents", render_field(sampling.recent_work)),
            ("Chauffage", render_field(sampling.heating)),
            ("Présence de sources d'interférences", render_field(sampling.interfering_sources)),
            ("Activités susceptibles d'interférer avec les prélèvements", render_field(sampling.interfering_activities)),
        ]
    )

    sheet.section("Mesures semi-quantitatives pour l'air intérieur avant prélèvement")
    sheet.gas_readings(data.measurements)

    sheet.section("Contrôle de débit", fresh_page=True)
    sheet.flow_control(data.flow)

    sheet.section("Conditionnement et transport")
    sheet.rows(laboratory_rows(data.laboratory))
    return sheet.builder.build()


__all__ = ["TITLE", "compose"]
