import datetime
import logging
import os

from flask import Flask, jsonify
from flask.helpers import get_debug_flag
from flask_cors import CORS

from config import Config
from errors import register_error_handlers
from extensions import db, migrate
from notifier import build_outbox
from storage import DiskFileStore


# =========================
# App factory
# =========================
def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not app.config.get("JWT_SECRET"):
        if not (app.debug or app.testing or get_debug_flag()):
            raise SystemExit("Refusing to start: JWT_SECRET is not set.")
        app.logger.warning("JWT_SECRET not set; using an insecure development secret")
        app.config["JWT_SECRET"] = "dev-insecure-secret"

    # werkzeug refuses bodies above this before reading them
    app.config["MAX_CONTENT_LENGTH"] = (
        app.config["MAX_UPLOAD_BYTES"] + app.config["FORM_OVERHEAD_BYTES"]
    )

    # Enable CORS for the frontend
    CORS(app, origins=app.config["FRONTEND_ORIGINS"])

    db.init_app(app)
    migrate.init_app(app, db)

    app.extensions["file_store"] = DiskFileStore(
        app.config["UPLOAD_FOLDER"], app.config["MAX_UPLOAD_BYTES"]
    )
    app.extensions["outbox"] = build_outbox(app.config)

    register_error_handlers(app)

    from students import bp as students_bp
    from uploads import bp as uploads_bp
    app.register_blueprint(students_bp)
    app.register_blueprint(uploads_bp)

    @app.get("/api/health")
    def health():
        return jsonify({
            "ok": True,
            "time": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        })

    with app.app_context():
        import models  # noqa: F401  (register tables)
        db.create_all()

    return app


# =========================
# Entrypoint
# =========================
if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=app.config["PORT"], debug=os.getenv("FLASK_DEBUG") == "1")
