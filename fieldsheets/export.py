"""Export pipeline: fetch a record, compose its pages, hand them to a sink.

Each export target (one survey, or the survey list of one site) runs through
``idle -> fetching -> composing -> writing -> idle``. Any failure passes
through ``failed`` before returning to ``idle`` and surfaces as
``ExportError``. A second trigger for a target that is not idle is ignored.
"""
from __future__ import annotations

import logging
import re
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from fieldsheets import config, survey_list_report
from fieldsheets.composers import compose_report
from fieldsheets.layout import ImageSource, PageSequence
from fieldsheets.pdf_writer import render_pdf
from fieldsheets.report_common import survey_name
from fieldsheets.schema import Site, Survey, SurveyType

log = logging.getLogger("uvicorn.error")

FILE_PREFIXES: Dict[SurveyType, str] = {
    SurveyType.SOIL: "sondage",
    SurveyType.GROUNDWATER: "piezometre",
    SurveyType.GAS: "gaz-du-sol",
    SurveyType.AMBIENT_AIR: "air-ambiant",
    SurveyType.SURFACE_WATER: "eaux-superficielles",
    SurveyType.PID: "campagne-pid",
}

_SEPARATORS = re.compile(r"[\\/]+")


class ExportState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    COMPOSING = "composing"
    WRITING = "writing"
    FAILED = "failed"


class ExportError(Exception):
    """Export failure carrying a user-facing message and the failing stage."""

    NOT_FOUND = "not_found"
    STORE = "store"
    COMPOSE = "compose"
    WRITE = "write"

    def __init__(self, message: str, kind: str) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind


class RecordStore(Protocol):
    def get_survey(self, survey_id: str) -> Optional[Survey]: ...

    def get_site(self, site_id: str) -> Optional[Site]: ...

    def list_surveys_by_site(self, site_id: str) -> List[Survey]: ...


class OutputSink(Protocol):
    def write(self, pages: PageSequence, filename: str) -> Any: ...


def _clean_name(text: str) -> str:
    return _SEPARATORS.sub("-", text.strip())


def build_filename(survey: Survey, when: datetime) -> str:
    name = survey_name(survey) or "sans-nom"
    return _clean_name(f"{FILE_PREFIXES[survey.type]}-{name}-{when.strftime('%Y-%m-%d-%H-%M')}")


def build_list_filename(site: Site) -> str:
    number = (site.project_number or "").strip() or "sans-numero"
    return _clean_name(f"fiches-{number}")


class PdfFileSink:
    """Renders page sequences to ``{out_dir}/{filename}.pdf`` through a temporary file."""

    def __init__(self, out_dir: Optional[Path] = None) -> None:
        self.out_dir = Path(out_dir or config.ARTIFACTS_DIR)

    def write(self, pages: PageSequence, filename: str) -> Path:
        self.out_dir.mkdir(parents=True, exist_ok=True)
        final = self.out_dir / f"{filename}.pdf"
        partial = final.with_name(final.name + ".part")
        try:
            render_pdf(pages, partial, title=filename)
            partial.replace(final)
        except Exception:
            partial.unlink(missing_ok=True)
            raise
        return final


class ExportPipeline:
    def __init__(
        self,
        store: RecordStore,
        sink: OutputSink,
        loader: Optional[ImageSource] = None,
        clock: Optional[Callable[[], datetime]] = None,
        on_transition: Optional[Callable[[str, ExportState], None]] = None,
    ) -> None:
        self.store = store
        self.sink = sink
        self.loader = loader
        self.clock = clock or datetime.now
        self.on_transition = on_transition
        self._lock = threading.Lock()
        self._states: Dict[str, ExportState] = {}

    def state(self, target: str) -> ExportState:
        with self._lock:
            return self._states.get(target, ExportState.IDLE)

    def _claim(self, target: str) -> bool:
        with self._lock:
            if target in self._states:
                return False
            self._states[target] = ExportState.FETCHING
        self._notify(target, ExportState.FETCHING)
        return True

    def _move(self, target: str, state: ExportState) -> None:
        with self._lock:
            self._states[target] = state
        self._notify(target, state)

    def _release(self, target: str) -> None:
        with self._lock:
            self._states.pop(target, None)
        self._notify(target, ExportState.IDLE)

    def _notify(self, target: str, state: ExportState) -> None:
        if self.on_transition is not None:
            self.on_transition(target, state)

    def _fetch_site(self, site_id: str) -> Site:
        try:
            site = self.store.get_site(site_id)
        except Exception as exc:
            log.exception("Failed to load site %s", site_id)
            raise ExportError("Impossible de récupérer le site. Veuillez réessayer.", ExportError.STORE) from exc
        if site is None:
            raise ExportError(f"Site introuvable : {site_id}", ExportError.NOT_FOUND)
        return site

    def _fetch_survey(self, survey_id: str) -> Tuple[Survey, Site]:
        try:
            survey = self.store.get_survey(survey_id)
        except Exception as exc:
            log.exception("Failed to load survey %s", survey_id)
            raise ExportError("Impossible de récupérer la fiche. Veuillez réessayer.", ExportError.STORE) from exc
        if survey is None:
            raise ExportError(f"Fiche introuvable : {survey_id}", ExportError.NOT_FOUND)
        return survey, self._fetch_site(survey.site_id)

    def _list_surveys(self, site_id: str) -> List[Survey]:
        try:
            return list(self.store.list_surveys_by_site(site_id))
        except Exception as exc:
            log.exception("Failed to list surveys of site %s", site_id)
            raise ExportError("Impossible de récupérer les fiches du site.", ExportError.STORE) from exc

    def _compose(self, target: str, build: Callable[[], PageSequence]) -> PageSequence:
        self._move(target, ExportState.COMPOSING)
        try:
            return build()
        except Exception as exc:
            log.exception("Report composition failed for %s", target)
            raise ExportError(
                "Une erreur est survenue lors de la génération du PDF. Veuillez réessayer.", ExportError.COMPOSE
            ) from exc

    def _write(self, target: str, pages: PageSequence, filename: str) -> Any:
        self._move(target, ExportState.WRITING)
        try:
            return self.sink.write(pages, filename)
        except Exception as exc:
            log.exception("Writing %s failed for %s", filename, target)
            raise ExportError("Impossible d'enregistrer le PDF. Veuillez réessayer.", ExportError.WRITE) from exc

    def export_survey(self, survey_id: str) -> Optional[Any]:
        """Export one survey; None when an export of the same survey is already running."""
        target = f"survey:{survey_id}"
        if not self._claim(target):
            log.warning("Export already in progress for %s; ignoring", target)
            return None
        try:
            survey, site = self._fetch_survey(survey_id)
            pages = self._compose(target, lambda: compose_report(site, survey, self.loader))
            handle = self._write(target, pages, build_filename(survey, self.clock()))
            log.info("Exported %s (%s pages) to %s", target, len(pages), handle)
            return handle
        except ExportError:
            self._move(target, ExportState.FAILED)
            raise
        finally:
            self._release(target)

    def export_survey_list(self, site_id: str, surveys: Optional[Iterable[Survey]] = None) -> Optional[Any]:
        target = f"site:{site_id}"
        if not self._claim(target):
            log.warning("Export already in progress for %s; ignoring", target)
            return None
        try:
            site = self._fetch_site(site_id)
            loaded = list(surveys) if surveys is not None else self._list_surveys(site_id)
            pages = self._compose(target, lambda: survey_list_report.compose(site, loaded, self.loader))
            handle = self._write(target, pages, build_list_filename(site))
            log.info("Exported survey list of %s (%s surveys) to %s", site_id, len(loaded), handle)
            return handle
        except ExportError:
            self._move(target, ExportState.FAILED)
            raise
        finally:
            self._release(target)


__all__ = [
    "ExportError",
    "ExportPipeline",
    "ExportState",
    "FILE_PREFIXES",
    "OutputSink",
    "PdfFileSink",
    "RecordStore",
    "build_filename",
    "build_list_filename",
]
