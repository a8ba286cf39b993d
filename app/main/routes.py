"""
app/main/routes.py
──────────────────
Health check for load balancers and monitoring.
"""
from datetime import datetime

from flask import current_app
from sqlalchemy import text

from app import db
from app.main import main


@main.route("/health")
def health():
    """Health check for load balancers and monitoring."""
    status = "ok"
    failures = []

    try:
        db.session.execute(text("SELECT 1"))
    except Exception as e:
        status = "error"
        failures.append(f"DB: {str(e)}")
        current_app.logger.error(f"Health check failed (DB): {e}")

    response = {
        "status": status,
        "timestamp": datetime.utcnow().isoformat(),
        "details": {
            "db": "ok" if not failures else "error",
        }
    }

    if failures:
        response["failures"] = failures

    return response, 200 if status != "error" else 500
