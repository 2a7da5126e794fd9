from __future__ import annotations

from fieldsheets.formatting import render_choice, render_date, render_field
from fieldsheets.layout import PageBuilder, PageSequence
from fieldsheets.report_common import (
    SheetWriter,
    coordinate_rows,
    numbered_photos,
    photo_section,
    sample_management_rows,
    site_rows,
    survey_display_name,
)
from fieldsheets.schema import (
    ESTIMATED_FLOW_CHOICES,
    FLOW_TYPE_CHOICES,
    SURFACE_EQUIPMENT_CHOICES,
    SURFACE_SAMPLING_CHOICES,
    TURBIDITY_CHOICES,
    WATER_TYPE_CHOICES,
    WEATHER_CHOICES,
    Site,
    SurfaceWaterData,
    Survey,
)

TITLE = "Fiche de prélèvement des eaux superficielles"


def compose(site: Site, survey: Survey, loader=None) -> PageSequence:
    data: SurfaceWaterData = survey.specific_data
    info = data.general_info
    sheet = SheetWriter(PageBuilder(loader))
    sheet.header(TITLE)

    sheet.section("Informations générales")
    sheet.rows(site_rows(site))
    sheet.rows(
        [
            ("Nom du prélèvement", survey_display_name(survey)),
            ("Date", render_date(info.date or survey.common_data.date)),
            ("Heure", render_field(info.time or survey.common_data.time)),
            ("Température de l'air (°C)", render_field(info.air_temperature)),
            ("Condition météo", render_choice(info.weather_condition, WEATHER_CHOICES)),
        ]
    )

    sheet.section("Localisation du prélèvement")
    sheet.rows(coordinate_rows(data.location))

    sampling = data.sampling
    sheet.section("Condition de prélèvement - Échantillonnage")
    sheet.rows(
        [
            ("Type de prélèvement", render_choice(sampling.type, SURFACE_SAMPLING_CHOICES)),
            ("Matériel de prélèvement", render_choice(sampling.equipment, SURFACE_EQUIPMENT_CHOICES)),
            ("Niveau ou profondeur de prélèvement (m)", render_field(sampling.depth)),
        ]
    )

    station = data.station_description
    sheet.section("Description de la station de prélèvement")
    sheet.rows(
        [
            ("Description du point d'échantillonnage", render_field(station.description)),
            ("Type d'eau superficielle", render_choice(station.water_type, WATER_TYPE_CHOICES)),
            ("Débit estimé", render_choice(station.estimated_flow, ESTIMATED_FLOW_CHOICES)),
            ("Type d'écoulement", render_choice(station.flow_type, FLOW_TYPE_CHOICES)),
            ("Observations", render_field(station.observations)),
        ]
    )

    obs = data.field_observations
    sheet.section("Observation de terrain")
    sheet.rows(
        [
            ("Turbidité", render_choice(obs.turbidity, TURBIDITY_CHOICES)),
            ("Couleur de l'eau", render_field(obs.water_color)),
            ("Odeur de l'eau", render_field(obs.water_odor)),
            ("Présence de feuilles, mousses", render_field(obs.has_leaves_moss)),
            ("Présence de flottants", render_field(obs.has_floating)),
            ("Ombrage", render_field(obs.has_shade)),
        ]
    )

    params = data.parameters
    sheet.section("Paramètres à contrôler", fresh_page=True)
    sheet.triplets(
        [
            ("Heure", params.time),
            ("Température (°C)", params.temperature),
            ("Conductivité (µS/cm)", params.conductivity),
            ("pH", params.ph),
            ("Redox (mV)", params.redox),
            ("Remarques", params.remarks),
        ]
    )

    sheet.section("Gestion des échantillons")
    sheet.rows(sample_management_rows(data.sample_management))

    photo_section(sheet.builder, numbered_photos(data.photos, "Photo du prélèvement"))
    return sheet.builder.build()


__all__ = ["TITLE", "compose"]
