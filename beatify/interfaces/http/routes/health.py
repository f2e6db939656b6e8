from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from beatify.database.db_manager import db

health_bp = Blueprint("health_bp", __name__)


@health_bp.route("/healthz")
def healthz():
    status = 200
    checks = {}

    try:
        db.session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError as exc:  # pragma: no cover - DB failure path
        status = 503
        checks["database"] = f"error: {exc}"

    registry = current_app.extensions.get("provider_registry")
    providers = registry.status() if registry is not None else {}
    checks["providers"] = {name: ("configured" if ok else "unconfigured") for name, ok in providers.items()}

    overall = "ok" if status == 200 else "degraded"
    return jsonify({"status": overall, "checks": checks}), status


@health_bp.route("/readyz")
def readyz():
    """Ready once at least one provider can serve tracks."""
    registry = current_app.extensions.get("provider_registry")
    configured = [name for name, ok in (registry.status() if registry else {}).items() if ok]
    ready = bool(configured)
    payload = {
        "status": "ready" if ready else "blocked",
        "configured_providers": configured,
    }
    return jsonify(payload), 200 if ready else 503
