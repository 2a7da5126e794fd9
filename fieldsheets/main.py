# fieldsheets/main.py
from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel, ConfigDict

from fieldsheets import config, db, survey_store
from fieldsheets.blobs import ImageLoader
from fieldsheets.derivation import derive
from fieldsheets.export import ExportError, ExportPipeline, PdfFileSink
from fieldsheets.report_common import survey_display_name
from fieldsheets.schema import SURVEY_TYPE_LABELS, SurveyType, fields_for

log = logging.getLogger("uvicorn.error")

ARTIFACTS_DIR = config.ARTIFACTS_DIR
ARTIFACTS_DIR.mkdir(parents=True, exist_ok=True)

app = FastAPI(title="Fieldsheets API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

if db.USE_POSTGRES:
    log.info("Database backend: Postgres host=%s", os.environ.get("DB_HOST"))
else:
    log.warning("Database backend: SQLite at %s (DB_HOST unset)", survey_store._DB_PATH)

_PIPELINE: Optional[ExportPipeline] = None


def get_pipeline() -> ExportPipeline:
    global _PIPELINE
    if _PIPELINE is None:
        _PIPELINE = ExportPipeline(survey_store, PdfFileSink(ARTIFACTS_DIR), loader=ImageLoader())
    return _PIPELINE


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class SurveySummary(BaseModel):
    id: str
    type: SurveyType
    type_label: str
    name: str
    created_at: Optional[datetime] = None
    field_team: List[str] = []


class ExportResp(BaseModel):
    status: str
    file: Optional[str] = None
    url: Optional[str] = None


class RecomputeReq(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    total_depth: Optional[str] = None
    water_level: Optional[str] = None
    inner_diameter: Optional[str] = None


class RecomputeResp(BaseModel):
    water_column_height: Optional[float] = None
    total_water_volume: Optional[float] = None
    three_volumes: Optional[float] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
_ERROR_STATUS = {
    ExportError.NOT_FOUND: 404,
    ExportError.STORE: 502,
    ExportError.COMPOSE: 500,
    ExportError.WRITE: 500,
}


def _export_response(handle: Any) -> Any:
    if handle is None:
        return JSONResponse(status_code=202, content={"status": "ignored"})
    path = Path(handle)
    return ExportResp(status="ok", file=path.name, url=f"/exports/{path.name}")


def _http_error(exc: ExportError) -> HTTPException:
    return HTTPException(status_code=_ERROR_STATUS.get(exc.kind, 500), detail=exc.message)


def _safe_artifact(name: str) -> Path:
    candidate = (ARTIFACTS_DIR / name).resolve()
    try:
        candidate.relative_to(ARTIFACTS_DIR)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid artifact path")
    if candidate.suffix != ".pdf" or not candidate.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    return candidate


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@app.get("/healthz")
def healthz() -> Dict[str, bool]:
    return {"ok": True}


@app.get("/schema/{survey_type}")
def survey_schema(survey_type: str) -> Dict[str, Any]:
    try:
        kind = SurveyType(survey_type)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown survey type '{survey_type}'")
    return {
        "type": kind.value,
        "label": SURVEY_TYPE_LABELS[kind],
        "fields": [spec.to_dict() for spec in fields_for(kind)],
    }


@app.get("/sites/{site_id}/surveys", response_model=List[SurveySummary])
def site_surveys(site_id: str) -> List[SurveySummary]:
    if survey_store.get_site(site_id) is None:
        raise HTTPException(status_code=404, detail="Site introuvable")
    return [
        SurveySummary(
            id=survey.id,
            type=survey.type,
            type_label=SURVEY_TYPE_LABELS[survey.type],
            name=survey_display_name(survey),
            created_at=survey.created_at,
            field_team=survey.common_data.field_team,
        )
        for survey in survey_store.list_surveys_by_site(site_id)
    ]


@app.post("/surveys/{survey_id}/export", response_model=ExportResp)
def export_survey(survey_id: str, pipeline: ExportPipeline = Depends(get_pipeline)):
    try:
        handle = pipeline.export_survey(survey_id)
    except ExportError as exc:
        raise _http_error(exc) from exc
    return _export_response(handle)


@app.post("/sites/{site_id}/export", response_model=ExportResp)
def export_site(site_id: str, pipeline: ExportPipeline = Depends(get_pipeline)):
    try:
        handle = pipeline.export_survey_list(site_id)
    except ExportError as exc:
        raise _http_error(exc) from exc
    return _export_response(handle)


@app.get("/exports/{name}")
def download_export(name: str) -> FileResponse:
    path = _safe_artifact(name)
    return FileResponse(str(path), media_type="application/pdf", filename=path.name)


@app.post("/groundwater/recompute", response_model=RecomputeResp)
def groundwater_recompute(req: RecomputeReq) -> RecomputeResp:
    return RecomputeResp(**derive(req.total_depth, req.water_level, req.inner_diameter))
