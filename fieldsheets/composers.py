from __future__ import annotations

from typing import Callable, Dict, Optional

from fieldsheets import (
    ambient_air_report,
    gas_report,
    groundwater_report,
    pid_report,
    soil_report,
    surface_water_report,
)
from fieldsheets.layout import ImageSource, PageSequence
from fieldsheets.schema import Site, Survey, SurveyType

Composer = Callable[..., PageSequence]

COMPOSERS: Dict[SurveyType, Composer] = {
    SurveyType.SOIL: soil_report.compose,
    SurveyType.GROUNDWATER: groundwater_report.compose,
    SurveyType.GAS: gas_report.compose,
    SurveyType.AMBIENT_AIR: ambient_air_report.compose,
    SurveyType.SURFACE_WATER: surface_water_report.compose,
    SurveyType.PID: pid_report.compose,
}

_missing = [t.value for t in SurveyType if t not in COMPOSERS]
if _missing:
    raise RuntimeError(f"No report composer registered for survey type(s): {', '.join(_missing)}")


def compose_report(site: Site, survey: Survey, loader: Optional[ImageSource] = None) -> PageSequence:
    return COMPOSERS[survey.type](site, survey, loader)


__all__ = ["COMPOSERS", "compose_report"]
