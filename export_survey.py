from __future__ import annotations

import argparse
from pathlib import Path

from fieldsheets import survey_store
from fieldsheets.blobs import ImageLoader
from fieldsheets.export import ExportError, ExportPipeline, PdfFileSink
from fieldsheets.report_common import survey_display_name
from fieldsheets.schema import SURVEY_TYPE_LABELS, Site, Survey


def print_site(site: Site) -> None:
    print(
        f"{site.id:<36} {site.status.value:<8} {site.project_number or '-':<12} "
        f"{site.name or '-':<24} {site.city or '-'}"
    )


def print_survey(survey: Survey) -> None:
    created = survey.created_at.strftime("%d/%m/%Y") if survey.created_at else "-"
    print(f"{survey.id:<36} {created:<10} {SURVEY_TYPE_LABELS[survey.type]:<20} {survey_display_name(survey)}")


def _pipeline(ns: argparse.Namespace) -> ExportPipeline:
    return ExportPipeline(survey_store, PdfFileSink(ns.out_dir), loader=ImageLoader())


def cmd_survey(ns: argparse.Namespace) -> None:
    try:
        path = _pipeline(ns).export_survey(ns.survey_id)
    except ExportError as exc:
        raise SystemExit(exc.message)
    print(f"Wrote {path}")


def cmd_site(ns: argparse.Namespace) -> None:
    try:
        path = _pipeline(ns).export_survey_list(ns.site_id)
    except ExportError as exc:
        raise SystemExit(exc.message)
    print(f"Wrote {path}")


def cmd_list_sites(ns: argparse.Namespace) -> None:
    sites = survey_store.list_sites(include_archived=ns.include_archived)
    if not sites:
        print("(no sites)")
        return
    for site in sites:
        print_site(site)


def cmd_list_surveys(ns: argparse.Namespace) -> None:
    if survey_store.get_site(ns.site_id) is None:
        raise SystemExit(f"Site '{ns.site_id}' not found")
    surveys = survey_store.list_surveys_by_site(ns.site_id)
    if not surveys:
        print("(no surveys)")
        return
    for survey in surveys:
        print_survey(survey)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export field survey sheets to PDF")
    parser.add_argument("--out-dir", dest="out_dir", type=Path, default=None, help="Output directory (default: ARTIFACTS_DIR)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_survey = sub.add_parser("survey", help="Export one survey sheet")
    p_survey.add_argument("survey_id")
    p_survey.set_defaults(func=cmd_survey)

    p_site = sub.add_parser("site", help="Export the survey list of a site")
    p_site.add_argument("site_id")
    p_site.set_defaults(func=cmd_site)

    p_sites = sub.add_parser("list-sites", help="List sites")
    p_sites.add_argument("--include-archived", action="store_true")
    p_sites.set_defaults(func=cmd_list_sites, include_archived=False)

    p_surveys = sub.add_parser("list-surveys", help="List the surveys of a site")
    p_surveys.add_argument("site_id")
    p_surveys.set_defaults(func=cmd_list_surveys)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
