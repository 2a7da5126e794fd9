from __future__ import annotations

from typing import Iterable, List

from fieldsheets import config
from fieldsheets.formatting import render_date, render_field
from fieldsheets.layout import GridStyle, PageBuilder, PageSequence
from fieldsheets.report_common import address_line, survey_display_name
from fieldsheets.schema import SURVEY_TYPE_LABELS, Site, Survey

TITLE = "Liste des fiches de terrain"
EMPTY_LIST = "Aucune fiche de terrain"
LIST_HEADER = ["Date", "Nom", "Type", "Opérateurs"]
LIST_STYLE = GridStyle(col_widths=(30, 70, 40, 42))


def survey_row(survey: Survey) -> List[str]:
    return [
        render_date(survey.created_at),
        survey_display_name(survey),
        SURVEY_TYPE_LABELS[survey.type],
        render_field(survey.common_data.field_team),
    ]


def compose(site: Site, surveys: Iterable[Survey], loader=None) -> PageSequence:
    b = PageBuilder(loader)
    b.image(10, 10, config.LOGO_REF, 40, 20)
    b.text(60, 20, TITLE, size=16, bold=True)

    b.text(10, 40, f"Site: {render_field(site.name)}")
    b.text(10, 45, f"Localisation: {address_line(site)}")
    b.text(10, 50, f"N° de projet: {render_field(site.project_number)}")

    b.table(60, LIST_HEADER, [survey_row(survey) for survey in surveys], LIST_STYLE, empty_message=EMPTY_LIST)
    return b.build()


__all__ = ["EMPTY_LIST", "TITLE", "compose", "survey_row"]
