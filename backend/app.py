# app.py
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional, Type

from dotenv import load_dotenv
from flask import Flask, current_app, jsonify, render_template, request
from flask_cors import CORS
from flask_talisman import Talisman
from werkzeug.exceptions import HTTPException, MethodNotAllowed, RequestEntityTooLarge

# --- Load env BEFORE importing config (so config sees env) ---
ENV_PATH = Path(__file__).with_name(".env")
load_dotenv(ENV_PATH)

# --- Local modules ---
from config import BaseConfig, CompletionSettings, DevConfig, ProdConfig, validate_required_secrets
from errors import AnalysisError, InvalidRequest
from analysis import Completer, analyze, request_from_form, request_from_json
from llm_client import CompletionClient

LOG = logging.getLogger("app")

FORM_MIMETYPES = {"multipart/form-data", "application/x-www-form-urlencoded"}
API_PREFIXES = ("/api/", "/v1/")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _security_headers(app: Flask) -> None:
    if app.config.get("FORCE_HTTPS"):
        # Prod: strict CSP + HTTPS
        Talisman(
            app,
            force_https=True,
            content_security_policy={
                "default-src": ["'self'"],
                "base-uri": ["'self'"],
                "img-src": ["'self'", "data:"],
                "style-src": ["'self'"],
                "script-src": ["'self'"],
                "connect-src": ["'self'"],
                "frame-ancestors": ["'none'"],
            },
            session_cookie_secure=True,
            frame_options="DENY",
            referrer_policy="strict-origin-when-cross-origin",
        )
    else:
        # Dev/test: no HTTPS redirect, inline styles allowed
        Talisman(
            app,
            force_https=False,
            content_security_policy={
                "default-src": ["'self'"],
                "img-src": ["'self'", "data:"],
                "style-src": ["'self'", "'unsafe-inline'"],
                "script-src": ["'self'"],
                "connect-src": ["'self'"],
                "frame-ancestors": ["'none'"],
            },
            session_cookie_secure=False,
            frame_options="DENY",
            referrer_policy="strict-origin-when-cross-origin",
        )


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AnalysisError)
    def _analysis_error(e: AnalysisError):
        LOG.warning("%s: %s", e.__class__.__name__, e.detail)
        return jsonify({"detail": e.detail}), e.status_code

    @app.errorhandler(MethodNotAllowed)
    def _method_not_allowed(e: MethodNotAllowed):
        if not request.path.startswith(API_PREFIXES):
            return e
        return jsonify({"detail": "Method Not Allowed. Only POST requests are accepted for this endpoint."}), 405

    @app.errorhandler(RequestEntityTooLarge)
    def _too_large(e: RequestEntityTooLarge):
        limit_mb = (current_app.config.get("MAX_CONTENT_LENGTH") or 0) // (1024 * 1024)
        return jsonify({"detail": f"Request body too large (limit {limit_mb}MB)."}), 413

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        if isinstance(e, HTTPException):
            return e
        LOG.exception("Unhandled error in request %s %s", request.method, request.path)
        return jsonify({"detail": "An unexpected server error occurred during analysis."}), 500


def _read_analysis_request():
    if request.mimetype in FORM_MIMETYPES:
        return request_from_form(request.form, request.files)
    payload = request.get_json(silent=True)
    if payload is None:
        raise InvalidRequest("Request body must be a JSON object or a multipart form.")
    return request_from_json(payload)


# ------------------------------
# App factory
# ------------------------------
def create_app(config_class: Optional[Type[BaseConfig]] = None, completer: Optional[Completer] = None) -> Flask:
    """Build the Flask app.

    ``completer`` is anything with ``complete(prompt) -> str``; when omitted a
    CompletionClient is built from the app config.
    """
    if config_class is None:
        config_class = ProdConfig if os.getenv("ENV") == "prod" else DevConfig

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.sort_keys = False
    app.url_map.strict_slashes = False  # avoid /v1/analyze_resume -> /v1/analyze_resume/ redirects
    _configure_logging(app.config["LOG_LEVEL"])
    validate_required_secrets(app.config)  # raises only when ENV=prod and the key is missing

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]},
                   r"/v1/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=False,
        allow_headers=["Content-Type"],
        methods=["POST", "OPTIONS"],
        max_age=600,
    )
    _security_headers(app)
    _register_error_handlers(app)

    settings = CompletionSettings.from_config(app.config)
    app.extensions["completer"] = completer if completer is not None else CompletionClient(settings)
    app.extensions["completion_configured"] = completer is not None or settings.configured

    # ------------------------------
    # Frontend landing
    # ------------------------------
    @app.get("/")
    def home():
        return render_template("index.html", max_resume_mb=app.config["MAX_RESUME_BYTES"] // (1024 * 1024))

    @app.get("/health")
    def health():
        return jsonify({
            "status": "ok",
            "completion_configured": bool(app.extensions["completion_configured"]),
        })

    # ------------------------------
    # Resume analysis
    # ------------------------------
    @app.route("/v1/analyze_resume/", methods=["POST"])
    @app.route("/api/analyze-resume", methods=["POST"])
    def analyze_resume():
        LOG.info("Received %s request for %s (%s)", request.method, request.path, request.mimetype)
        req = _read_analysis_request()
        result = analyze(
            req,
            current_app.extensions["completer"],
            max_bytes=current_app.config["MAX_RESUME_BYTES"],
        )
        return jsonify(result), 200

    return app


app = create_app()

# ------------------------------
# Entrypoint
# ------------------------------
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "3001")), debug=app.config.get("DEBUG", False))
