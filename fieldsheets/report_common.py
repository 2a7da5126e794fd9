"""Building blocks shared by the per-type report composers."""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from fieldsheets import config
from fieldsheets.formatting import PLACEHOLDER, is_blank, render_choice, render_date, render_field
from fieldsheets.layout import CONTENT_BOTTOM, TOP_MARGIN, GridStyle, PageBuilder, line_height, wrap_text
from fieldsheets.schema import (
    LABORATORY_CHOICES,
    Coordinates,
    FlowControl,
    GasReadings,
    Laboratory,
    SampleManagement,
    Site,
    Survey,
    SurveyType,
    Triplet,
    WeatherConditions,
)

Row = Tuple[str, str]

LOGO_BOX = (10.0, 10.0, 30.0, 15.0)
TITLE_X = 45.0
TITLE_Y = 20.0
TITLE_SIZE = 16
SECTION_SIZE = 12
BODY_SIZE = 10

LEFT = 14.0
VALUE_X = 84.0
VALUE_WIDTH = 112.0
ROW_GAP = 1.5

EMPTY_MEASUREMENTS = "Aucune mesure renseignée"
PHOTO_SECTION_TITLE = "Documentation photographique"

_NAME_FALLBACKS = {
    SurveyType.SOIL: "Sondage",
    SurveyType.GROUNDWATER: "Piézomètre sans nom",
    SurveyType.PID: "Campagne PID",
    SurveyType.GAS: "Ouvrage sans nom",
    SurveyType.AMBIENT_AIR: "Prélèvement sans nom",
    SurveyType.SURFACE_WATER: "Prélèvement sans nom",
}


def survey_name(survey: Survey) -> Optional[str]:
    """Name entered on the form, if any. PID campaigns are never named."""
    if survey.type is SurveyType.PID:
        return None
    specific = survey.specific_data
    candidates = [getattr(specific, "name", None)]
    if survey.type is SurveyType.GAS:
        candidates.append(specific.sample_description.name)
    if survey.type is not SurveyType.GROUNDWATER:
        candidates.append(survey.common_data.sampling_name)
    for candidate in candidates:
        if not is_blank(candidate):
            return str(candidate).strip()
    return None


def survey_display_name(survey: Survey) -> str:
    return survey_name(survey) or _NAME_FALLBACKS[survey.type]


def address_line(site: Site) -> str:
    parts = [part.strip() for part in (site.location, site.city) if not is_blank(part)]
    return ", ".join(parts) if parts else PLACEHOLDER


def site_rows(site: Site, *, drilling_company: bool = False) -> List[Row]:
    rows = [
        ("Client", render_field(site.name)),
        ("Numéro d'affaire", render_field(site.project_number)),
        ("Adresse et commune", address_line(site)),
        ("Chef de projet", render_field(site.project_manager)),
        ("Opérateur", render_field(site.engineer_in_charge)),
    ]
    if drilling_company:
        rows.append(("Entreprise de forage", render_field(site.drilling_company)))
    return rows


def common_rows(survey: Survey) -> List[Row]:
    common = survey.common_data
    return [
        ("Nom du prélèvement", survey_display_name(survey)),
        ("Date", render_date(common.date)),
        ("Heure", render_field(common.time)),
        ("Équipe terrain", render_field(common.field_team)),
        ("Matériel utilisé", render_field(common.equipment_used)),
    ]


def coordinate_rows(coords: Optional[Coordinates], z_label: str = "Z") -> List[Row]:
    coords = coords or Coordinates()
    return [
        ("X", render_field(coords.x)),
        ("Y", render_field(coords.y)),
        (z_label, render_field(coords.z)),
    ]


def sample_management_rows(sm: SampleManagement) -> List[Row]:
    return [
        ("Conditionnement/T°C", render_field(sm.conditioning)),
        ("Transporteur", render_field(sm.transporter)),
        ("Nom du laboratoire", render_choice(sm.laboratory, LABORATORY_CHOICES)),
        ("Date d'envoi au laboratoire", render_date(sm.shipping_date)),
    ]


def weather_rows(wc: WeatherConditions) -> List[Row]:
    return [
        ("Conditions", render_field(wc.description)),
        ("T°C ext", render_field(wc.external_temp, "°C")),
        ("T°C int", render_field(wc.internal_temp, "°C")),
        ("Pression (Pa)", render_field(wc.pressure)),
        ("Taux d'humidité dans l'air (%)", render_field(wc.humidity)),
        ("Vitesse et sens du vent", render_field(wc.wind_speed_direction)),
    ]


def laboratory_rows(lab: Laboratory) -> List[Row]:
    return [
        ("Laboratoire de destination", render_choice(lab.name, LABORATORY_CHOICES)),
        ("Type de conditionnement", render_field(lab.packaging)),
        ("Transporteur", render_field(lab.transporter)),
        ("Date et heure de remise au transporteur", render_field(lab.delivery_date)),
        ("Substances recherchées", render_field(lab.substances_to_analyze)),
    ]


GAS_HEADER = ["PID (ppmV)", "O2 (%)", "H2S (ppmV)", "CH4 (%)", "CO (ppmV)"]


def gas_cells(readings: GasReadings) -> List[str]:
    return [render_field(getattr(readings, name)) for name in ("pid", "o2", "h2s", "ch4", "co")]


class SheetWriter:
    """Top-to-bottom writer over a PageBuilder for single-column report bodies.

    Label rows keep a fixed pitch (values are fitted to one line), so every block placed
    before the first table sits at the same position whatever the survey holds.
    """

    def __init__(self, builder: PageBuilder, y: float = TOP_MARGIN) -> None:
        self.builder = builder
        self.y = y

    def header(self, title: str) -> None:
        x, y, width, height = LOGO_BOX
        self.builder.image(x, y, config.LOGO_REF, width, height)
        after = self.builder.text(TITLE_X, TITLE_Y, title, size=TITLE_SIZE, bold=True, max_width=210 - TITLE_X - 10)
        self.y = max(after, y + height) + 8

    def section(self, title: str, fresh_page: bool = False) -> None:
        """Section heading; repeatable sections pass ``fresh_page`` to start at the top of a page."""
        if fresh_page:
            self.new_page()
        self.y = self.builder.ensure_space(self.y, 2 * line_height(SECTION_SIZE) + line_height(BODY_SIZE))
        self.builder.text(LEFT, self.y, title, size=SECTION_SIZE, bold=True)
        self.y += line_height(SECTION_SIZE) + 3

    def rows(self, rows: Sequence[Row]) -> None:
        for label, value in rows:
            label_lines = wrap_text(f"{label} :", BODY_SIZE, True, VALUE_X - LEFT - 4)
            needed = len(label_lines) * line_height(BODY_SIZE)
            self.y = self.builder.ensure_space(self.y, needed)
            self.builder.text(LEFT, self.y, f"{label} :", size=BODY_SIZE, bold=True, max_width=VALUE_X - LEFT - 4)
            self.builder.text_line(VALUE_X, self.y, value, VALUE_WIDTH, size=BODY_SIZE)
            self.y += needed + ROW_GAP

    def table(
        self,
        header: Sequence[str],
        body: Sequence[Sequence[str]],
        col_widths: Sequence[float],
        empty_message: Optional[str] = None,
    ) -> None:
        style = GridStyle(col_widths=tuple(col_widths), x=LEFT)
        self.y = self.builder.table(self.y, header, body, style, empty_message=empty_message) + 6

    def triplets(
        self,
        rows: Sequence[Tuple[str, Triplet]],
        first_header: str = "Paramètre",
        header: Optional[Sequence[str]] = None,
    ) -> None:
        """Start/intermediate/end grid; a grid with no value at all prints one empty-state row."""
        header = header or [first_header, "Début", "Intermédiaire", "Fin"]
        if all(triplet.is_blank() for _, triplet in rows):
            body: List[List[str]] = []
        else:
            body = [
                [label, render_field(t.start), render_field(t.intermediate), render_field(t.end)]
                for label, t in rows
            ]
        self.table(header, body, [62, 40, 40, 40], empty_message=EMPTY_MEASUREMENTS)

    def flow_control(self, flow: FlowControl) -> None:
        self.rows(
            [
                ("Heure début", render_field(flow.start_time)),
                ("Heure fin", render_field(flow.end_time)),
                ("Durée prélèvement", render_field(flow.duration, "min")),
            ]
        )
        self.triplets(
            [("Débit (l/min)", flow.flow_rates)],
            header=["Débit (l/min)", "T0 (début)", "T1 (intermédiaire)", "T2 (fin)"],
        )
        self.rows(
            [
                ("Débit moyen retenu (l/min)", render_field(flow.average_flow)),
                ("Volume total prélevé (l)", render_field(flow.total_volume)),
            ]
        )

    def gas_readings(self, readings: GasReadings) -> None:
        self.table(GAS_HEADER, [gas_cells(readings)], [36.4] * 5)

    def new_page(self) -> None:
        self.builder.new_page()
        self.y = TOP_MARGIN


def photo_section(builder: PageBuilder, photos: Sequence[Tuple[str, str]]) -> None:
    """Two photos per page; each failure is skipped on its own and the caption is kept."""
    if not photos:
        return
    slots = (30.0, 150.0)
    for index, (ref, caption) in enumerate(photos):
        slot = index % len(slots)
        if slot == 0:
            builder.new_page()
            if index == 0:
                builder.text(10, 20, PHOTO_SECTION_TITLE, size=SECTION_SIZE, bold=True)
        top = slots[slot]
        builder.image(15, top, ref, 180, 90)
        builder.text(15, min(top + 95, CONTENT_BOTTOM), caption, size=BODY_SIZE)


def numbered_photos(refs: Sequence[str], caption: str) -> List[Tuple[str, str]]:
    refs = [ref for ref in refs if not is_blank(ref)]
    if len(refs) == 1:
        return [(refs[0], caption)]
    return [(ref, f"{caption} {index}") for index, ref in enumerate(refs, start=1)]


__all__ = [
    "EMPTY_MEASUREMENTS",
    "PHOTO_SECTION_TITLE",
    "SheetWriter",
    "address_line",
    "common_rows",
    "coordinate_rows",
    "laboratory_rows",
    "numbered_photos",
    "photo_section",
    "sample_management_rows",
    "site_rows",
    "survey_display_name",
    "survey_name",
    "weather_rows",
]
