# app.py — Rooms backend (age-gated rooms + uploads + admin deletes)
import logging
from logging.handlers import RotatingFileHandler

from flask import Flask, jsonify
from werkzeug.exceptions import RequestEntityTooLarge

from config import load_config
from defense import init_defense
from errors import RoomsError, TooLarge, error_response
from extensions import init_extensions
from routes_admin import bp_admin
from routes_age import bp_age
from routes_api import bp_api
from routes_files import bp_files, download_file, serve_file
from routes_rooms import bp_rooms

# multipart framing on top of the file itself
MULTIPART_SLACK = 64 * 1024


def create_app(test_config=None):
    cfg = load_config(test_config)
    app = Flask(__name__)
    app.config.update(MAX_CONTENT_LENGTH=cfg.max_file_bytes + MULTIPART_SLACK)

    _init_logging(app, cfg)
    init_extensions(app, cfg)
    limiter = init_defense(app, cfg)

    # ---------- Blueprints ----------
    limiter.limit(cfg.login_rate_limit)(bp_admin)
    # a gallery page fetches one /file per tile
    limiter.exempt(serve_file)
    limiter.exempt(download_file)
    app.register_blueprint(bp_rooms)
    app.register_blueprint(bp_files)
    app.register_blueprint(bp_age)
    app.register_blueprint(bp_admin)
    app.register_blueprint(bp_api)

    # ---------- Errors ----------
    @app.errorhandler(RoomsError)
    def _rooms_error(e):
        return error_response(e)

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(e):
        app.logger.warning("[UPLOAD] request body over %s bytes rejected", app.config["MAX_CONTENT_LENGTH"])
        return error_response(TooLarge(f"file exceeds {cfg.max_file_bytes} bytes"))

    # ---------- Health ----------
    @app.get("/health")
    @app.get("/healthz")
    def health():
        return jsonify(ok=True, service="rooms")

    app.logger.info("Rooms ready: data=%s max=%d bytes age_gate=%s room_create=%s",
                    cfg.data_dir, cfg.max_file_bytes, cfg.age_gate, cfg.room_create)
    return app


def _init_logging(app, cfg):
    app.logger.setLevel(logging.INFO)
    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    if not any(getattr(h, "_rooms", False) for h in app.logger.handlers):
        sh = logging.StreamHandler(); sh.setFormatter(fmt); sh._rooms = True
        app.logger.addHandler(sh)
    if cfg.logs_dir is None:
        return
    try:
        cfg.logs_dir.mkdir(parents=True, exist_ok=True)
        log_file = (cfg.logs_dir / "backend.log").resolve()
        if any(getattr(h, "baseFilename", None) == str(log_file) for h in app.logger.handlers):
            return
        fh = RotatingFileHandler(log_file, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
        fh.setFormatter(fmt); app.logger.addHandler(fh)
    except OSError as e:
        app.logger.warning("file logging disabled (%s): %s", cfg.logs_dir, e)


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=load_config().port)
