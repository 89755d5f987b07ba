from __future__ import annotations

import json
from pathlib import Path

import pytest

from backend.runner.app import create_app

ALLOWED_ORIGIN = "https://advisory.valoraanalytics.com"

SAMPLE_DOCUMENT = {
    "metadata": {"coefficients": {"constant": 100, "exponent": 0.5}},
    "records": [
        {"recordId": 1, "title": "Harbour at Dusk", "imageBase64": "AAAA", "imageMimeType": "image/png"},
        {"recordId": 2, "title": "Study in Ochre", "imageBase64": "data:image/jpeg;base64,/9j/", "imagePath": "images/00002.jpg"},
        {"recordId": 3, "title": "Untitled", "isActive": False},
    ],
}


def _write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def write_json():
    return _write_json


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "art_database.json"


@pytest.fixture
def images_dir(tmp_path: Path) -> Path:
    d = tmp_path / "images" / "artworks"
    d.mkdir(parents=True)
    return d


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    d = tmp_path / "public"
    (d / "css").mkdir(parents=True)
    (d / "index.html").write_text("<h1>Valuation</h1>", encoding="utf-8")
    (d / "css" / "app.css").write_text("body { margin: 0; }", encoding="utf-8")
    return d


@pytest.fixture
def app(db_path, images_dir, public_dir):
    app = create_app({
        "TESTING": True,
        "ART_DB_PATH": db_path,
        "ARTWORK_IMAGES_DIR": images_dir,
        "PUBLIC_DIR": public_dir,
        "CORS_ORIGINS": [ALLOWED_ORIGIN],
        "OPENAI_API_KEY": "sk-test",
    })
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seeded_db(db_path: Path) -> Path:
    return _write_json(db_path, json.loads(json.dumps(SAMPLE_DOCUMENT)))
