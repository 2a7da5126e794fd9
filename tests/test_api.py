"""Tests for the HTTP API."""

from __future__ import annotations

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from fieldsheets import main, survey_store
from fieldsheets.export import ExportPipeline
from fieldsheets.main import app, get_pipeline
from fieldsheets.schema import SurveyType
from tests.conftest import make_survey


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def pipeline(store, sink):
    fake = ExportPipeline(store, sink)
    app.dependency_overrides[get_pipeline] = lambda: fake
    return fake


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setattr(survey_store, "_DB_PATH", tmp_path / "api.db")
    survey_store.init_db()
    return survey_store


class TestHealth:
    def test_healthz(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"ok": True}


class TestSchema:
    def test_known_type(self, client):
        response = client.get("/schema/groundwater")
        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "groundwater"
        assert body["label"] == "Eaux souterraines"
        names = [field["name"] for field in body["fields"]]
        assert "well_characteristics" in names

    def test_unknown_type(self, client):
        assert client.get("/schema/lidar").status_code == 404


class TestSiteSurveys:
    def test_lists_surveys(self, client, db):
        site = db.create_site("Client Industrie", site_id="site-api")
        db.create_survey(site.id, SurveyType.GROUNDWATER, specific_data={"name": "PZ3"})
        db.create_survey(site.id, SurveyType.PID, common_data={"fieldTeam": ["A. Dupont"]})
        response = client.get(f"/sites/{site.id}/surveys")
        assert response.status_code == 200
        rows = {row["type"]: row for row in response.json()}
        assert rows["groundwater"]["name"] == "PZ3"
        assert rows["groundwater"]["type_label"] == "Eaux souterraines"
        assert rows["pid"]["name"] == "Campagne PID"
        assert rows["pid"]["field_team"] == ["A. Dupont"]

    def test_missing_site(self, client, db):
        assert client.get("/sites/ghost/surveys").status_code == 404


class TestExport:
    def test_survey_export(self, client, pipeline, store, sink, groundwater_survey):
        store.add_survey(groundwater_survey)
        response = client.post(f"/surveys/{groundwater_survey.id}/export")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["file"].startswith("piezometre-PZ1-")
        assert body["url"] == f"/exports/{body['file']}"
        assert len(sink.writes) == 1

    def test_missing_survey(self, client, pipeline):
        response = client.post("/surveys/ghost/export")
        assert response.status_code == 404
        assert "introuvable" in response.json()["detail"]

    def test_store_failure(self, client, pipeline, store):
        store.fail = True
        assert client.post("/surveys/soil-1/export").status_code == 502

    def test_export_in_progress(self, client, pipeline, store, sink):
        store.add_survey(make_survey(SurveyType.SOIL))
        assert pipeline._claim("survey:soil-1")
        response = client.post("/surveys/soil-1/export")
        assert response.status_code == 202
        assert response.json() == {"status": "ignored"}
        assert sink.writes == []

    def test_site_export(self, client, pipeline, store):
        store.add_survey(make_survey(SurveyType.SOIL, {"name": "S1"}))
        response = client.post("/sites/site-1/export")
        assert response.status_code == 200
        assert response.json()["file"] == "fiches-AF-2024-017.pdf"

    def test_site_export_missing_site(self, client, pipeline):
        assert client.post("/sites/ghost/export").status_code == 404


class TestDownload:
    def test_download_pdf(self, client):
        path = main.ARTIFACTS_DIR / "sondage-S1-test.pdf"
        path.write_bytes(b"%PDF-1.4 test")
        try:
            response = client.get("/exports/sondage-S1-test.pdf")
            assert response.status_code == 200
            assert response.headers["content-type"] == "application/pdf"
            assert response.content == b"%PDF-1.4 test"
        finally:
            path.unlink()

    def test_missing_file(self, client):
        assert client.get("/exports/absent.pdf").status_code == 404

    def test_traversal_is_rejected(self):
        with pytest.raises(HTTPException) as excinfo:
            main._safe_artifact("../secret.pdf")
        assert excinfo.value.status_code == 400


class TestRecompute:
    def test_reference_well(self, client):
        response = client.post(
            "/groundwater/recompute", json={"total_depth": 10, "water_level": "3", "inner_diameter": "110"}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["water_column_height"] == pytest.approx(7.0)
        assert body["total_water_volume"] == pytest.approx(66.52, abs=0.01)
        assert body["three_volumes"] == pytest.approx(199.57, abs=0.01)

    def test_incomplete_input(self, client):
        response = client.post("/groundwater/recompute", json={"total_depth": "10"})
        assert response.json() == {"water_column_height": None, "total_water_volume": None, "three_volumes": None}
