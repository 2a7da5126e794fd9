from __future__ import annotations

from typing import List, Optional, Tuple

from fieldsheets import config
from fieldsheets.formatting import PLACEHOLDER, is_blank, render_choice, render_date, render_field
from fieldsheets.layout import CONTENT_BOTTOM, GridStyle, PageBuilder, PageSequence
from fieldsheets.report_common import address_line, numbered_photos, photo_section
from fieldsheets.schema import LABORATORY_CHOICES, Site, SoilData, Survey

TITLE = "Fiche de suivi de sondage et prélèvement de sol"
EMPTY_OBSERVATIONS = "Aucune observation renseignée"

OBSERVATION_HEADER = ["Profondeur", "Description lithologique", "Eau", "Organoleptiques", "PID", "Échantillons"]
OBSERVATION_STYLE = GridStyle(col_widths=(22, 60, 22, 32, 18, 28))
# sample management: title 20 mm under the table, last row at +45
SAMPLE_BLOCK_HEIGHT = 50.0


def split_weather(summary: Optional[str]) -> Tuple[str, str]:
    """'Ensoleillé - 18°C' -> ('Ensoleillé', '18°C')."""
    if is_blank(summary):
        return PLACEHOLDER, PLACEHOLDER
    parts = [part.strip() for part in str(summary).split(" - ")]
    weather = parts[0] or PLACEHOLDER
    temperature = parts[1] if len(parts) > 1 and parts[1] else PLACEHOLDER
    return weather, temperature


def _label_rows(b: PageBuilder, x: float, value_x: float, y0: float, rows, value_width: float) -> None:
    for offset, (label, value) in enumerate(rows):
        y = y0 + 5 * offset
        b.text(x, y, f"{label}:")
        b.text_line(value_x, y, value, value_width)


def _first_page(b: PageBuilder, site: Site, survey: Survey, data: SoilData) -> None:
    b.image(10, 10, config.LOGO_REF, 30, 15)
    b.text(45, 20, TITLE, size=16, bold=True)

    b.text(10, 40, "Informations générales", size=12, bold=True)
    _label_rows(
        b,
        10,
        60,
        50,
        [
            ("Nom du sondage", render_field(data.name)),
            ("Numéro d'affaire", render_field(site.project_number)),
            ("Client", render_field(site.name)),
            ("Adresse et commune", address_line(site)),
            ("Chef de projet", render_field(site.project_manager)),
            ("Opérateur", render_field(site.engineer_in_charge)),
            ("Entreprise de forage", render_field(site.drilling_company)),
        ],
        value_width=48,
    )

    weather, temperature = split_weather(survey.common_data.weather_conditions)
    b.text(10, 90, "Conditions météorologiques", size=12, bold=True)
    _label_rows(
        b,
        10,
        60,
        100,
        [
            ("Date", render_date(survey.common_data.date)),
            ("Heure", render_field(survey.common_data.time)),
            ("Météo", weather),
            ("Température", temperature),
        ],
        value_width=48,
    )

    b.text(110, 40, "Localisation", size=12, bold=True)
    coords = data.coordinates
    _label_rows(
        b,
        110,
        160,
        50,
        [("X", render_field(coords.x)), ("Y", render_field(coords.y)), ("Z sol", render_field(coords.z))],
        value_width=40,
    )

    drilling = data.drilling_info
    b.text(110, 75, "Informations sur le sondage", size=12, bold=True)
    _label_rows(
        b,
        110,
        160,
        85,
        [
            ("Outil de sondage", render_field(drilling.tool)),
            ("Diamètre sondage", render_field(drilling.diameter, "mm")),
            ("Profondeur atteinte", render_field(drilling.depth, "m")),
            ("Rebouchage et réfection", render_field(drilling.refection)),
            ("Gestion des déblais", render_field(drilling.cuttings_management)),
        ],
        value_width=40,
    )
    b.text(110, 110, "Remarques / Revêtement:")
    b.text(160, 110, render_field(drilling.remarks), max_width=40)


def _observation_rows(data: SoilData) -> List[List[str]]:
    return [
        [
            render_field(obs.depth, "m"),
            render_field(obs.lithology),
            render_field(obs.water),
            render_field(obs.organoleptic),
            render_field(obs.pid, "ppm"),
            render_field(obs.samples),
        ]
        for obs in data.observations
    ]


def _photos(data: SoilData) -> List[Tuple[str, str]]:
    photos = numbered_photos(data.main_photos, "Photo du sondage")
    for obs in data.observations:
        caption = f"Observation à {render_field(obs.depth, 'm')}"
        photos.extend(numbered_photos(obs.photos, caption))
    return photos


def compose(site: Site, survey: Survey, loader=None) -> PageSequence:
    data: SoilData = survey.specific_data
    b = PageBuilder(loader)
    _first_page(b, site, survey, data)

    b.new_page()
    b.text(10, 20, "Observations", size=12, bold=True)
    final_y = b.table(25, OBSERVATION_HEADER, _observation_rows(data), OBSERVATION_STYLE, empty_message=EMPTY_OBSERVATIONS)

    y = final_y
    if y + SAMPLE_BLOCK_HEIGHT > CONTENT_BOTTOM:
        b.new_page()
        y = 0.0
    sm = data.sample_management
    b.text(10, y + 20, "Gestion des échantillons", size=12, bold=True)
    _label_rows(
        b,
        10,
        80,
        y + 30,
        [
            ("Transporteur", render_field(sm.transporter)),
            ("Laboratoire", render_choice(sm.laboratory, LABORATORY_CHOICES)),
            ("Conditionnement", render_field(sm.conditioning)),
            ("Date d'envoi", render_date(sm.shipping_date)),
        ],
        value_width=110,
    )

    photo_section(b, _photos(data))
    return b.build()


__all__ = ["EMPTY_OBSERVATIONS", "TITLE", "compose", "split_weather"]
