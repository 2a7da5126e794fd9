from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from fieldsheets import config
from fieldsheets.db import USE_POSTGRES, get_postgres_conn, json_param, load_json, sqlite_conn
from fieldsheets.schema import GeoPoint, Site, SiteStatus, Survey, SurveyType

log = logging.getLogger("uvicorn.error")

_DB_PATH = config.DATA_DIR / "fieldsheets.db"


class StoreError(Exception):
    """Base class for record store failures."""


class RecordNotFoundError(StoreError):
    pass


class ImmutableFieldError(StoreError):
    pass


def _get_conn():
    if USE_POSTGRES:
        return get_postgres_conn()
    return sqlite_conn(_DB_PATH)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def _now() -> str:
    return _utcnow().isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def init_db() -> None:
    if USE_POSTGRES:
        json_type, time_type = "JSONB", "TIMESTAMPTZ"
    else:
        json_type, time_type = "TEXT", "TEXT"
    with _get_conn() as conn:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS sites (
                id TEXT PRIMARY KEY,
                name TEXT,
                location TEXT,
                city TEXT,
                project_number TEXT,
                project_manager TEXT,
                engineer_in_charge TEXT,
                drilling_company TEXT,
                description TEXT,
                visit_date TEXT,
                latitude DOUBLE PRECISION,
                longitude DOUBLE PRECISION,
                status TEXT NOT NULL DEFAULT 'active',
                created_at {time_type} NOT NULL,
                user_id TEXT
            )
            """
        )
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS surveys (
                id TEXT PRIMARY KEY,
                site_id TEXT NOT NULL REFERENCES sites(id) ON DELETE CASCADE,
                type TEXT NOT NULL,
                created_at {time_type} NOT NULL,
                updated_at {time_type},
                created_by TEXT,
                common_data {json_type},
                specific_data {json_type}
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_surveys_site ON surveys (site_id, created_at)")


def _row_to_site(row: Any) -> Site:
    data = dict(row)
    coordinates = None
    if data.get("latitude") is not None and data.get("longitude") is not None:
        coordinates = GeoPoint(latitude=data["latitude"], longitude=data["longitude"])
    return Site(
        id=data["id"],
        name=data.get("name"),
        location=data.get("location"),
        city=data.get("city"),
        project_number=data.get("project_number"),
        project_manager=data.get("project_manager"),
        engineer_in_charge=data.get("engineer_in_charge"),
        drilling_company=data.get("drilling_company"),
        description=data.get("description"),
        visit_date=data.get("visit_date"),
        coordinates=coordinates,
        status=data.get("status") or SiteStatus.ACTIVE,
        created_at=data.get("created_at"),
        user_id=data.get("user_id"),
    )


def _row_to_survey(row: Any) -> Survey:
    data = dict(row)
    return Survey.model_validate(
        {
            "id": data["id"],
            "site_id": data["site_id"],
            "type": data["type"],
            "created_at": data.get("created_at"),
            "updated_at": data.get("updated_at"),
            "created_by": data.get("created_by"),
            "common_data": load_json(data.get("common_data")),
            "specific_data": load_json(data.get("specific_data")),
        }
    )


def _dump(model: Any) -> Dict[str, Any]:
    return model.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Sites
# ---------------------------------------------------------------------------


def create_site(
    name: str,
    *,
    location: Optional[str] = None,
    city: Optional[str] = None,
    project_number: Optional[str] = None,
    project_manager: Optional[str] = None,
    engineer_in_charge: Optional[str] = None,
    drilling_company: Optional[str] = None,
    description: Optional[str] = None,
    visit_date: Optional[str] = None,
    coordinates: Optional[GeoPoint] = None,
    user_id: Optional[str] = None,
    site_id: Optional[str] = None,
) -> Site:
    site_id = site_id or _new_id()
    with _get_conn() as conn:
        conn.execute(
            """
            INSERT INTO sites
                (id, name, location, city, project_number, project_manager, engineer_in_charge,
                 drilling_company, description, visit_date, latitude, longitude, status, created_at, user_id)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                site_id,
                name,
                location,
                city,
                project_number,
                project_manager,
                engineer_in_charge,
                drilling_company,
                description,
                visit_date,
                coordinates.latitude if coordinates else None,
                coordinates.longitude if coordinates else None,
                SiteStatus.ACTIVE.value,
                _now(),
                user_id,
            ),
        )
    site = get_site(site_id)
    if site is None:
        raise StoreError(f"Site {site_id} was not persisted")
    return site


def get_site(site_id: str) -> Optional[Site]:
    with _get_conn() as conn:
        row = conn.execute("SELECT * FROM sites WHERE id = ?", (site_id,)).fetchone()
    return _row_to_site(row) if row else None


def list_sites(*, include_archived: bool = False) -> List[Site]:
    sql = "SELECT * FROM sites"
    params: tuple = ()
    if not include_archived:
        sql += " WHERE status = ?"
        params = (SiteStatus.ACTIVE.value,)
    sql += " ORDER BY created_at DESC"
    with _get_conn() as conn:
        rows = conn.execute(sql, params).fetchall()
    return [_row_to_site(row) for row in rows]


def archive_site(site_id: str) -> Site:
    with _get_conn() as conn:
        cursor = conn.execute("UPDATE sites SET status = ? WHERE id = ?", (SiteStatus.ARCHIVED.value, site_id))
        if cursor.rowcount == 0:
            raise RecordNotFoundError(f"Site {site_id} not found")
    log.info("Archived site %s", site_id)
    return get_site(site_id)


def delete_site(site_id: str) -> None:
    """Permanently delete a site and all of its surveys."""
    with _get_conn() as conn:
        conn.execute("DELETE FROM surveys WHERE site_id = ?", (site_id,))
        cursor = conn.execute("DELETE FROM sites WHERE id = ?", (site_id,))
        if cursor.rowcount == 0:
            raise RecordNotFoundError(f"Site {site_id} not found")
    log.info("Deleted site %s", site_id)


# ---------------------------------------------------------------------------
# Surveys
# ---------------------------------------------------------------------------


def create_survey(
    site_id: str,
    survey_type: Union[SurveyType, str],
    *,
    common_data: Optional[Dict[str, Any]] = None,
    specific_data: Optional[Dict[str, Any]] = None,
    created_by: Optional[str] = None,
    survey_id: Optional[str] = None,
) -> Survey:
    if get_site(site_id) is None:
        raise RecordNotFoundError(f"Site {site_id} not found")
    now = _now()
    survey = Survey.model_validate(
        {
            "id": survey_id or _new_id(),
            "site_id": site_id,
            "type": survey_type,
            "created_at": now,
            "updated_at": now,
            "created_by": created_by,
            "common_data": common_data or {},
            "specific_data": specific_data or {},
        }
    )
    with _get_conn() as conn:
        conn.execute(
            """
            INSERT INTO surveys (id, site_id, type, created_at, updated_at, created_by, common_data, specific_data)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                survey.id,
                site_id,
                survey.type.value,
                now,
                now,
                created_by,
                json_param(_dump(survey.common_data)),
                json_param(_dump(survey.specific_data)),
            ),
        )
    return survey


def get_survey(survey_id: str) -> Optional[Survey]:
    with _get_conn() as conn:
        row = conn.execute("SELECT * FROM surveys WHERE id = ?", (survey_id,)).fetchone()
    return _row_to_survey(row) if row else None


def list_surveys_by_site(site_id: str) -> List[Survey]:
    with _get_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM surveys WHERE site_id = ? ORDER BY created_at DESC", (site_id,)
        ).fetchall()
    surveys: List[Survey] = []
    for row in rows:
        try:
            surveys.append(_row_to_survey(row))
        except ValidationError:
            log.exception("Skipping unreadable survey %s", dict(row).get("id"))
    return surveys


def update_survey_data(
    survey_id: str,
    *,
    common_data: Optional[Dict[str, Any]] = None,
    specific_data: Optional[Dict[str, Any]] = None,
    survey_type: Union[SurveyType, str, None] = None,
) -> Survey:
    """Replace the data buckets of a survey. The type tag cannot change."""
    current = get_survey(survey_id)
    if current is None:
        raise RecordNotFoundError(f"Survey {survey_id} not found")
    if survey_type is not None and SurveyType(survey_type) is not current.type:
        raise ImmutableFieldError(f"Survey {survey_id} is a {current.type.value} survey; its type cannot change")
    stamp = _utcnow()
    now = stamp.isoformat()
    updated = current.edit(common_data=common_data, specific_data=specific_data, updated_at=stamp)
    with _get_conn() as conn:
        conn.execute(
            "UPDATE surveys SET common_data = ?, specific_data = ?, updated_at = ? WHERE id = ?",
            (json_param(_dump(updated.common_data)), json_param(_dump(updated.specific_data)), now, survey_id),
        )
    return updated


def delete_survey(survey_id: str) -> None:
    with _get_conn() as conn:
        cursor = conn.execute("DELETE FROM surveys WHERE id = ?", (survey_id,))
        if cursor.rowcount == 0:
            raise RecordNotFoundError(f"Survey {survey_id} not found")


init_db()


__all__ = [
    "ImmutableFieldError",
    "RecordNotFoundError",
    "StoreError",
    "archive_site",
    "create_site",
    "create_survey",
    "delete_site",
    "delete_survey",
    "get_site",
    "get_survey",
    "init_db",
    "list_sites",
    "list_surveys_by_site",
    "update_survey_data",
]
