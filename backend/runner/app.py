"""
Flask API gateway for the art valuation front end.

Routes
------
GET    /health
GET    /api/health
GET    /api/records
GET    /api/records/<id>
DELETE /api/records/<id>
GET    /api/records/<id>/image
PATCH  /api/records/<id>/image
GET    /api/debug-database
GET    /api/debug-scan-images
POST   /api/debug-clean-images
GET    /images/artworks/<filename>
GET    /<filename>                    (public/ assets, registered last)
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, current_app, jsonify, request, send_from_directory
from flask_cors import CORS

from . import config
from .images import clean_legacy_images, decode_record_image, scan_legacy_images, split_data_uri
from .store import RecordStore, StoreError, find_record, load_art_database, record_id

log = logging.getLogger(__name__)


def _default_settings() -> Dict[str, Any]:
    return {
        "ART_DB_PATH": config.ART_DB_PATH,
        "ARTWORK_IMAGES_DIR": config.ARTWORK_IMAGES_DIR,
        "PUBLIC_DIR": config.PUBLIC_DIR,
        "CORS_ORIGINS": list(config.CORS_ORIGINS),
        "OPENAI_API_KEY": config.OPENAI_API_KEY,
        "ANTHROPIC_API_KEY": config.ANTHROPIC_API_KEY,
        "MAX_CONTENT_LENGTH": config.MAX_CONTENT_LENGTH,
    }


def _store() -> RecordStore:
    return RecordStore(current_app.config["ART_DB_PATH"])


def _load() -> Dict[str, Any]:
    return load_art_database(current_app.config["ART_DB_PATH"])


def create_app(overrides: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__, static_folder=None)
    app.config.update(_default_settings())
    if overrides:
        app.config.update(overrides)

    @app.after_request
    def declare_preflight_lists(resp):
        # Registered before CORS() so it runs after flask_cors has accepted the origin
        if request.method == "OPTIONS" and resp.headers.get("Access-Control-Allow-Origin"):
            resp.headers["Access-Control-Allow-Methods"] = ", ".join(config.CORS_METHODS)
            resp.headers["Access-Control-Allow-Headers"] = ", ".join(config.CORS_HEADERS)
        return resp

    # --------------------------------------------------------------------- #
    #  CORS: explicit allow-list, matching origin is reflected               #
    # --------------------------------------------------------------------- #
    CORS(
        app,
        resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}},
        methods=config.CORS_METHODS,
        allow_headers=config.CORS_HEADERS,
        supports_credentials=True,
        always_send=False,
    )

    if not app.config.get("OPENAI_API_KEY"):
        log.warning("⚠️  OPENAI_API_KEY is not set - AI backed routes will fail")

    register_routes(app)
    return app


def register_routes(app: Flask) -> None:
    @app.before_request
    def short_circuit_preflight():
        # CORS headers are added by flask_cors on the way out
        if request.method == "OPTIONS":
            return "", 200
        return None

    # ------------------------------------------------------------------- #
    #  Health                                                             #
    # ------------------------------------------------------------------- #
    @app.route("/health")
    def health() -> str:
        return "ok"

    @app.route("/api/health")
    def api_health():
        db_path = Path(current_app.config["ART_DB_PATH"])
        try:
            stats = db_path.stat()
        except OSError as e:
            return jsonify({"status": "unhealthy", "error": str(e), "dbPath": str(db_path)}), 500
        return jsonify({
            "status": "healthy",
            "db": {
                "path": str(db_path),
                "exists": True,
                "size": stats.st_size,
                "lastModified": datetime.fromtimestamp(stats.st_mtime, timezone.utc).isoformat(),
            },
        })

    # ------------------------------------------------------------------- #
    #  Records                                                            #
    # ------------------------------------------------------------------- #
    @app.route("/api/records", methods=["GET"])
    def list_records():
        records = _load()["records"]
        if request.args.get("inactive") != "true":
            records = [r for r in records if r.get("isActive") is not False]
        return jsonify(records)

    @app.route("/api/records/<rid>", methods=["GET"])
    def get_record(rid: str):
        record = find_record(_load(), rid)
        if record is None:
            return jsonify({"error": "Record not found"}), 404
        return jsonify(record)

    @app.route("/api/records/<rid>", methods=["DELETE"])
    def delete_record(rid: str):
        store = _store()
        document = store.load()
        record = find_record(document, rid)
        if record is None:
            return jsonify({"error": "Record not found"}), 404

        document["records"].remove(record)
        store.save(document)
        log.info("Deleted record %s", rid)
        return jsonify({"message": "Record permanently deleted"})

    @app.route("/api/records/<rid>/image", methods=["GET"])
    def get_record_image(rid: str):
        record = find_record(_load(), rid)
        if record is None or not record.get("imageBase64"):
            return jsonify({"error": "Image not found"}), 404
        try:
            data, mime = decode_record_image(record)
        except ValueError:
            return jsonify({"error": "Malformed imageBase64 format"}), 500
        return current_app.response_class(data, mimetype=mime)

    @app.route("/api/records/<rid>/image", methods=["PATCH"])
    def patch_record_image(rid: str):
        payload = request.get_json(silent=True) or {}
        parts = split_data_uri(payload.get("imageBase64"))
        if parts is None or not parts[0].startswith("image/"):
            return jsonify({"error": "Invalid or missing Base64 image data"}), 400

        store = _store()
        document = store.load()
        record = find_record(document, rid)
        if record is None:
            return jsonify({"error": "Record not found"}), 404

        mime, data = parts
        record["imageBase64"] = data
        record["imageMimeType"] = mime
        store.save(document)
        return jsonify({"success": True, "recordId": record_id(record), "mimeType": mime})

    # ------------------------------------------------------------------- #
    #  Debug / maintenance                                                #
    # ------------------------------------------------------------------- #
    @app.route("/api/debug-database", methods=["GET"])
    def debug_database():
        records = _load()["records"]
        sample = records[0] if records else None
        return jsonify({
            "databasePath": str(current_app.config["ART_DB_PATH"]),
            "databaseExists": Path(current_app.config["ART_DB_PATH"]).is_file(),
            "totalRecords": len(records),
            "sampleFieldNames": list(sample.keys()) if sample else [],
        })

    @app.route("/api/debug-scan-images", methods=["GET"])
    def debug_scan_images():
        records = _load()["records"]
        flagged = scan_legacy_images(records)
        return jsonify({
            "totalRecords": len(records),
            "flaggedCount": len(flagged),
            "flagged": flagged,
        })

    @app.route("/api/debug-clean-images", methods=["POST"])
    def debug_clean_images():
        store = _store()
        document = store.load()
        counts = clean_legacy_images(document["records"])
        if any(counts.values()):
            store.save(document)
        return jsonify({
            "success": True,
            **counts,
            "message": (
                f"Cleaned {counts['cleanedLegacyFields']} legacy fields and set "
                f"{counts['defaultedMimeTypes']} default MIME types."
            ),
        })

    # ------------------------------------------------------------------- #
    #  Static files                                                       #
    # ------------------------------------------------------------------- #
    @app.route("/images/artworks/<path:filename>", methods=["GET"])
    def serve_artwork_image(filename: str):
        return send_from_directory(current_app.config["ARTWORK_IMAGES_DIR"], filename)

    @app.route("/", methods=["GET"])
    def index():
        return send_from_directory(current_app.config["PUBLIC_DIR"], "index.html")

    @app.route("/<path:filename>", methods=["GET"])
    def serve_public(filename: str):
        return send_from_directory(current_app.config["PUBLIC_DIR"], filename)

    # ------------------------------------------------------------------- #
    #  Error Handlers                                                     #
    # ------------------------------------------------------------------- #
    @app.errorhandler(StoreError)
    def store_error(e):
        log.error("❌ Record store error: %s", e)
        return jsonify({"error": str(e)}), 500

    @app.errorhandler(413)  # Payload too large
    def too_large(e):
        limit_mb = current_app.config["MAX_CONTENT_LENGTH"] // (1024 * 1024)
        return jsonify({"error": f"Request body exceeds {limit_mb} MB"}), 413


app = create_app()

# --------------------------------------------------------------------------- #
if __name__ == "__main__":  # invoked via  python -m backend.runner.app
    logging.basicConfig(level=logging.INFO, format="%(asctime)s  %(levelname)s  %(message)s")
    app.run(host="0.0.0.0", port=config.PORT, debug=False)
