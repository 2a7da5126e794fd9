from __future__ import annotations

from fieldsheets.derivation import recompute
from fieldsheets.formatting import render_choice, render_date, render_datetime, render_field
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
from fieldsheets.schema import PURGE_TYPE_CHOICES, WEATHER_CHOICES, GroundwaterData, Site, Survey

TITLE = "Fiche de prélèvement des eaux souterraines"


def compose(site: Site, survey: Survey, loader=None) -> PageSequence:
    data: GroundwaterData = survey.specific_data
    common = survey.common_data
    info = data.general_info
    sheet = SheetWriter(PageBuilder(loader))
    sheet.header(TITLE)

    sheet.section("Informations générales")
    sheet.rows(site_rows(site))
    sheet.rows(
        [
            ("Nom de l'ouvrage", survey_display_name(survey)),
            ("Date", render_date(info.date or common.date)),
            ("Heure", render_field(info.time or common.time)),
            ("T° air", render_field(info.air_temp, "°C")),
            ("Condition météo", render_choice(info.weather, WEATHER_CHOICES)),
            ("Type d'ouvrage", render_field(info.well_type)),
            ("Usage", render_field(info.usage)),
        ]
    )

    sheet.section("Localisation du piézomètre")
    sheet.rows(coordinate_rows(data.location))

    sheet.section("État de l'ouvrage")
    sheet.rows(
        [
            ("Capot protection", render_field(info.has_protective_cover)),
            ("Margelle", render_field(info.has_curb)),
            ("Tubage", render_field(info.has_tubing)),
            ("Colmatage", render_field(info.has_sealing)),
            ("PID à l'ouverture (ppm)", render_field(data.pid_measurement)),
            ("Flottant (épaisseur en cm)", render_field(data.floating_thickness)),
        ]
    )

    # derived values always follow the printed inputs
    well = recompute(data.well_characteristics)
    sheet.section("Caractéristiques de l'ouvrage")
    sheet.rows(
        [
            ("Diamètre intérieur (mm)", render_field(well.inner_diameter)),
            ("Diamètre extérieur (mm)", render_field(well.outer_diameter)),
            ("Hauteur capot (m/sol TN)", render_field(well.cover_height)),
            ("Profondeur totale (m/sol TN)", render_field(well.total_depth)),
            ("Hauteur crépine (m)", render_field(well.screen_height)),
            ("Niveau piézométrique (m/sol TN)", render_field(well.water_level)),
            ("Hauteur colonne d'eau (m)", render_field(well.water_column_height)),
            ("Volume total d'eau (L)", render_field(well.total_water_volume)),
            ("3 volumes (L)", render_field(well.three_volumes)),
            ("Débit de purge prévu (l/min)", render_field(well.purging_rate)),
            ("Temps de pompage (min)", render_field(well.pumping_time)),
        ]
    )

    purge = data.purge
    sheet.section("Purge")
    sheet.rows(
        [
            ("Matériel utilisé", render_field(purge.equipment)),
            ("Matériaux (tuyaux)", render_field(purge.materials)),
            ("Type de purge", render_choice(purge.type, PURGE_TYPE_CHOICES)),
            ("Débit début purge (l/min)", render_field(purge.start_rate)),
            ("Fin purge (l/min)", render_field(purge.end_rate)),
            ("Position pompe/sol TN (m)", render_field(purge.pump_position)),
            ("Rabattement de l'eau (m)", render_field(purge.drawdown)),
            ("Traitement eau purge : Charbon actif", render_field(purge.treatment.activated_carbon)),
            ("Traitement eau purge : Autre", render_field(purge.treatment.other)),
            ("Volume rejet purge (L)", render_field(purge.purge_volume)),
        ]
    )

    sampling = data.sampling
    sheet.section("Prélèvement - Échantillonnage")
    sheet.rows(
        [
            ("Matériel utilisé", render_field(sampling.equipment)),
            ("Date et heure de début de pompage", render_datetime(sampling.start_date)),
            ("Durée de pompage (min)", render_field(sampling.duration)),
            ("Niveau de purge atteint (L)", render_field(sampling.purge_level)),
            ("Débit de pompage (l/min)", render_field(sampling.pumping_rate)),
            ("Position de la pompe (m/repère)", render_field(sampling.pump_position)),
            ("Nettoyage du matériel", render_field(sampling.equipment_cleaned)),
        ]
    )

    params = data.parameters
    sheet.section("Paramètres à contrôler", fresh_page=True)
    sheet.triplets(
        [
            ("Heure", params.time),
            ("Niveau d'eau (m)", params.water_level),
            ("Turbidité (NTU)", params.turbidity),
            ("Conductivité (µS/cm)", params.conductivity),
            ("pH", params.ph),
            ("Oxygène dissous (mg/l)", params.dissolved_oxygen),
            ("Température (°C)", params.temperature),
            ("Remarques", params.remarks),
            ("Valeur PID (ppm)", params.pid),
        ]
    )

    sheet.section("Gestion des échantillons")
    sheet.rows(sample_management_rows(data.sample_management))

    photo_section(sheet.builder, numbered_photos(data.photos, "Photo du piézomètre"))
    return sheet.builder.build()


__all__ = ["TITLE", "compose"]
