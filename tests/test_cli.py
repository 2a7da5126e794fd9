"""Tests for the export command line."""

from __future__ import annotations

import pytest

import export_survey
from fieldsheets import survey_store
from fieldsheets.schema import SurveyType


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setattr(survey_store, "_DB_PATH", tmp_path / "cli.db")
    survey_store.init_db()
    return survey_store


class TestListing:
    def test_list_sites(self, db, capsys):
        db.create_site("Client Industrie", city="Lyon", project_number="AF-2024-017", site_id="site-cli")
        export_survey.main(["list-sites"])
        out = capsys.readouterr().out
        assert "site-cli" in out
        assert "AF-2024-017" in out

    def test_archived_sites_need_flag(self, db, capsys):
        db.create_site("Ancien client", site_id="old")
        db.archive_site("old")
        export_survey.main(["list-sites"])
        assert "(no sites)" in capsys.readouterr().out
        export_survey.main(["list-sites", "--include-archived"])
        assert "old" in capsys.readouterr().out

    def test_list_surveys(self, db, capsys):
        db.create_site("Client Industrie", site_id="site-cli")
        db.create_survey("site-cli", SurveyType.GROUNDWATER, specific_data={"name": "PZ1"})
        export_survey.main(["list-surveys", "site-cli"])
        out = capsys.readouterr().out
        assert "Eaux souterraines" in out
        assert "PZ1" in out

    def test_list_surveys_unknown_site(self, db):
        with pytest.raises(SystemExit) as excinfo:
            export_survey.main(["list-surveys", "ghost"])
        assert "not found" in str(excinfo.value)


class TestExport:
    def test_unknown_survey_exits_with_message(self, db, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            export_survey.main(["--out-dir", str(tmp_path), "survey", "ghost"])
        assert "introuvable" in str(excinfo.value)
        assert list(tmp_path.glob("*.pdf")) == []

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            export_survey.main([])
