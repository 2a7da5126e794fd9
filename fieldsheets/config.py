from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")

DATA_DIR = Path(os.environ.get("FIELDSHEETS_DATA_DIR") or (REPO_ROOT / "data")).resolve()
DATA_DIR.mkdir(parents=True, exist_ok=True)

ARTIFACTS_DIR = Path(os.environ.get("ARTIFACTS_DIR", "artifacts")).resolve()

PHOTOS_DIR = Path(os.environ.get("FIELDSHEETS_PHOTOS_DIR") or (REPO_ROOT / "photos")).resolve()

# Public storage base, e.g. https://<project>.supabase.co
STORAGE_URL = (os.environ.get("FIELDSHEETS_STORAGE_URL") or "").strip().rstrip("/")
PHOTO_BUCKET = (os.environ.get("FIELDSHEETS_PHOTO_BUCKET") or "survey-photos").strip()

LOGO_REF = (os.environ.get("FIELDSHEETS_LOGO") or "https://i.imgur.com/nEpYFLo.png").strip()

# Timeout for photo and logo downloads
HTTP_TIMEOUT_SEC = float(os.environ.get("HTTP_TIMEOUT_SEC", "25"))

USER_AGENT = "fieldsheets-report/1.0"
