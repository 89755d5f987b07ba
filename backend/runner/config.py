"""
Unified configuration for the art database tooling and API gateway.
All runner modules and pipeline scripts should import from this module instead
of defining their own paths.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()

# READ root (repo checkout)
PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _path_from_env(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value) if value else default


# Writable working copy (persistent disk on the host)
ART_DB_PATH = _path_from_env("ART_DB_PATH", PROJECT_ROOT / "public" / "data" / "art_database.json")

# Read-only seed copy shipped with the repo
ART_DB_SEED_PATH = _path_from_env(
    "ART_DB_SEED_PATH", PROJECT_ROOT / "initial_data" / "art_database.json"
)

# Per-record images: <5-digit id>.jpg
ARTWORK_IMAGES_DIR = _path_from_env(
    "ARTWORK_IMAGES_DIR", PROJECT_ROOT / "public" / "data" / "images" / "artworks"
)
PUBLIC_DIR = _path_from_env("PUBLIC_DIR", PROJECT_ROOT / "public")

IMAGE_ID_WIDTH = 5
IMAGE_EXTENSION = ".jpg"
IMAGE_MIME_TYPE = "image/jpeg"

# Keys consumed by downstream route handlers
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")

# --------------------------------------------------------------------------- #
#  CORS                                                                       #
# --------------------------------------------------------------------------- #
DEFAULT_CORS_ORIGINS: List[str] = [
    "https://robert-clark-4dee.mykajabi.com",
    "https://valora-analytics-api.onrender.com",
    "https://advisory.valoraanalytics.com",
    "https://stunning-arithmetic-16de6b.netlify.app",
]


def parse_origins(value: str) -> List[str]:
    """Split a comma separated origin list, dropping blanks and trailing slashes."""
    return [o.strip().rstrip("/") for o in value.split(",") if o.strip()]


CORS_ORIGINS: List[str] = (
    parse_origins(os.getenv("CORS_ORIGINS", "")) or list(DEFAULT_CORS_ORIGINS)
)
CORS_METHODS: List[str] = ["GET", "POST", "OPTIONS", "PUT", "DELETE"]
CORS_HEADERS: List[str] = ["Content-Type", "Authorization", "Cache-Control", "Pragma"]

# Large inline base64 images travel in JSON bodies
MAX_BODY_MB = int(os.getenv("MAX_BODY_MB", "50"))
MAX_CONTENT_LENGTH = MAX_BODY_MB * 1024 * 1024

PORT = int(os.getenv("PORT", "5000"))
