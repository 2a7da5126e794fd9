"""Shared fixtures: temporary data directories, fake store, loader and sink."""

from __future__ import annotations

import base64
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# Point the package at throwaway directories before anything imports it.
_TMP = Path(tempfile.mkdtemp(prefix="fieldsheets-tests-"))
os.environ["FIELDSHEETS_DATA_DIR"] = str(_TMP / "data")
os.environ["ARTIFACTS_DIR"] = str(_TMP / "artifacts")
os.environ["FIELDSHEETS_PHOTOS_DIR"] = str(_TMP / "photos")
os.environ["FIELDSHEETS_STORAGE_URL"] = ""
os.environ["APP_ENV"] = "development"
os.environ.pop("DB_HOST", None)

import pytest  # noqa: E402

from fieldsheets.blobs import ImageLoadError  # noqa: E402
from fieldsheets.layout import PageSequence  # noqa: E402
from fieldsheets.schema import Site, Survey, SurveyType  # noqa: E402
from fieldsheets.survey_store import StoreError  # noqa: E402

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


class FakeLoader:
    """Serves known refs from memory and fails for everything else."""

    def __init__(self, images: Optional[Dict[str, bytes]] = None) -> None:
        self.images = dict(images or {})
        self.calls: List[str] = []

    def load(self, ref: str) -> bytes:
        self.calls.append(ref)
        if ref not in self.images:
            raise ImageLoadError(f"cannot load {ref}")
        return self.images[ref]


class FakeStore:
    """In-memory record store."""

    def __init__(self) -> None:
        self.sites: Dict[str, Site] = {}
        self.surveys: Dict[str, Survey] = {}
        self.fail = False
        self.list_calls = 0

    def add_site(self, site: Site) -> Site:
        self.sites[site.id] = site
        return site

    def add_survey(self, survey: Survey) -> Survey:
        self.surveys[survey.id] = survey
        return survey

    def get_site(self, site_id: str) -> Optional[Site]:
        if self.fail:
            raise StoreError("database unavailable")
        return self.sites.get(site_id)

    def get_survey(self, survey_id: str) -> Optional[Survey]:
        if self.fail:
            raise StoreError("database unavailable")
        return self.surveys.get(survey_id)

    def list_surveys_by_site(self, site_id: str) -> List[Survey]:
        if self.fail:
            raise StoreError("database unavailable")
        self.list_calls += 1
        found = [s for s in self.surveys.values() if s.site_id == site_id]
        return sorted(found, key=lambda s: s.created_at or datetime.min, reverse=True)


class RecordingSink:
    def __init__(self) -> None:
        self.writes: List[tuple] = []

    def write(self, pages: PageSequence, filename: str) -> Path:
        self.writes.append((pages, filename))
        return Path(f"{filename}.pdf")


def make_site(**overrides: Any) -> Site:
    data: Dict[str, Any] = {
        "id": "site-1",
        "name": "Client Industrie",
        "location": "12 rue des Forges",
        "city": "Lyon",
        "project_number": "AF-2024-017",
        "project_manager": "C. Martin",
        "engineer_in_charge": "L. Bernard",
        "drilling_company": "Forages du Rhône",
    }
    data.update(overrides)
    return Site.model_validate(data)


def make_survey(
    survey_type: SurveyType,
    specific: Optional[Dict[str, Any]] = None,
    common: Optional[Dict[str, Any]] = None,
    **overrides: Any,
) -> Survey:
    data: Dict[str, Any] = {
        "id": f"{survey_type.value}-1",
        "site_id": "site-1",
        "type": survey_type,
        "created_at": "2024-05-02T09:15:00+00:00",
        "common_data": common or {},
        "specific_data": specific or {},
    }
    data.update(overrides)
    return Survey.model_validate(data)


@pytest.fixture
def site() -> Site:
    return make_site()


@pytest.fixture
def empty_site() -> Site:
    return Site(id="site-1")


@pytest.fixture
def loader() -> FakeLoader:
    return FakeLoader()


@pytest.fixture
def store(site) -> FakeStore:
    fake = FakeStore()
    fake.add_site(site)
    return fake


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def groundwater_survey() -> Survey:
    return make_survey(
        SurveyType.GROUNDWATER,
        {
            "name": "PZ1",
            "wellCharacteristics": {"totalDepth": "10", "waterLevel": "3", "innerDiameter": "110"},
        },
    )
