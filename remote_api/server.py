"""Small JSON API exposing the condition manager to a dashboard.

The dashboard polls /conditions/visible to know what to render and
posts to /conditions/<type>/silence when the user dismisses a card.
"""

import logging
import os
from functools import wraps

from flask import Flask, current_app, jsonify, request

from dashboard_conditions.config import get_config
from dashboard_conditions.manager import ConditionManager, get_condition_manager

logger = logging.getLogger(__name__)


def require_auth(f):
    """Decorator to require auth token for sensitive endpoints."""
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_token = current_app.config.get("AUTH_TOKEN", "")
        if auth_token:
            token = request.headers.get("Authorization", "").replace("Bearer ", "")
            if token != auth_token:
                return jsonify({"error": "Unauthorized"}), 401
        return f(*args, **kwargs)
    return decorated


def _manager() -> ConditionManager:
    return current_app.config["CONDITION_MANAGER"]


def _serialize(conditions) -> list[dict]:
    return [c.to_dict() for c in conditions]


def create_app(manager: ConditionManager, auth_token: str = "") -> Flask:
    """Create the API app bound to a condition manager."""
    app = Flask(__name__)
    app.config["CONDITION_MANAGER"] = manager
    app.config["AUTH_TOKEN"] = auth_token

    @app.route("/status")
    def status():
        """Get a count of held and visible conditions."""
        manager = _manager()
        return jsonify({
            "conditions": len(manager.get_conditions()),
            "visible": len(manager.get_visible_conditions()),
        })

    @app.route("/conditions")
    def list_conditions():
        """List every condition, oldest change first."""
        return jsonify(_serialize(_manager().get_conditions()))

    @app.route("/conditions/visible")
    def list_visible():
        """List the conditions the dashboard should show."""
        return jsonify(_serialize(_manager().get_visible_conditions()))

    @app.route("/conditions/<type_id>/silence", methods=["POST"])
    @require_auth
    def silence_condition(type_id: str):
        """Dismiss a condition until it next goes inactive."""
        condition = _manager().get_condition(type_id)
        if condition is None:
            return jsonify({"error": f"Unknown condition: {type_id}"}), 404
        condition.silence()
        logger.info(f"Silenced {type_id}")
        return jsonify(condition.to_dict())

    @app.route("/refresh", methods=["POST"])
    @require_auth
    def refresh():
        """Re-check every condition and return the visible ones."""
        manager = _manager()
        manager.refresh_all()
        return jsonify(_serialize(manager.get_visible_conditions()))

    return app


if __name__ == "__main__":
    # For development only
    logging.basicConfig(level=logging.INFO)
    config = get_config(os.environ.get("DASHBOARD_CONDITIONS_CONFIG"))
    server = config.server_settings
    app = create_app(
        get_condition_manager(config.condition_context()),
        auth_token=os.environ.get("DASHBOARD_AUTH_TOKEN", server.get("auth_token", "")),
    )
    app.run(host=server.get("host", "127.0.0.1"), port=server.get("port", 8080), debug=True)
