from flask import Blueprint, jsonify

from itts_community.health.checks import run_health_checks

health_bp = Blueprint("health", __name__)


@health_bp.route("/api/v1/health", methods=["GET"])
def health():
    results = run_health_checks()

    status_code = 200
    if results["status"] == "degraded":
        status_code = 503

    return jsonify(results), status_code


@health_bp.route("/healthz", methods=["GET"])
def healthz():
    return jsonify({"status": "ok"}), 200
