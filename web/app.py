"""
Sparks - Web API

A Flask JSON API for capturing, reviewing and browsing ideas.

Run with: python -m web.app
Or: flask --app web.app run
"""

import hmac
import logging
from typing import Optional

from flask import Blueprint, Flask, current_app, jsonify, request

from sparks.capture import CaptureWorkflow
from sparks.config import ALLOWED_USERNAME, AUTH_HEADER, DEBUG
from sparks.errors import (
    MalformedResponseError,
    NotFoundError,
    RateLimitError,
    StoreError,
    UpstreamError,
    ValidationError,
    user_message,
)
from sparks.logging_setup import configure_logging
from sparks.models.idea import PRIORITIES, STATUSES
from sparks.services import CompletionClient, IdeaNormalizer
from sparks.storage import Storage, build_storage
from sparks.views.filters import SORT_ORDERS, ViewFilters, derive_view

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)

# Endpoints reachable without the identity header
PUBLIC_ENDPOINTS = {"api.health"}


def get_workflow() -> CaptureWorkflow:
    """The workflow constructed by create_app for this application."""
    return current_app.extensions["sparks.workflow"]


# =============================================================================
# Access Gate
# =============================================================================

def is_authorized(identity: Optional[str], allowed: str) -> bool:
    """Only the single configured identity may use the API. No config, no access."""
    if not allowed or not identity:
        return False
    return hmac.compare_digest(identity.encode("utf-8"), allowed.encode("utf-8"))


@api.before_app_request
def require_identity():
    if request.endpoint in PUBLIC_ENDPOINTS:
        return None
    identity = request.headers.get(current_app.config["SPARKS_AUTH_HEADER"])
    if not is_authorized(identity, current_app.config["SPARKS_ALLOWED_USER"]):
        return jsonify({"error": "Unauthorized"}), 401
    return None


# =============================================================================
# Error Handlers
# =============================================================================

@api.app_errorhandler(ValidationError)
def handle_validation_error(error: ValidationError):
    return jsonify({"error": str(error), "fields": error.fields}), 400


@api.app_errorhandler(NotFoundError)
def handle_not_found(error: NotFoundError):
    return jsonify({"error": str(error)}), 404


@api.app_errorhandler(RateLimitError)
def handle_rate_limit(error: RateLimitError):
    logger.warning("Rate limited by AI service: %s", error)
    return jsonify({"error": user_message(error)}), 429


@api.app_errorhandler(UpstreamError)
def handle_upstream_error(error: UpstreamError):
    logger.error("AI service error: %s", error)
    return jsonify({"error": str(error)}), 500


@api.app_errorhandler(MalformedResponseError)
def handle_malformed_response(error: MalformedResponseError):
    logger.error("Unparsable AI response: %s", error.raw_prefix)
    return jsonify({"error": user_message(error)}), 500


@api.app_errorhandler(StoreError)
def handle_store_error(error: StoreError):
    logger.error("Record store error: %s", error)
    return jsonify({"error": user_message(error)}), 500


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON object body required")
    return data


def _choice_arg(name: str, choices) -> Optional[str]:
    """Read an optional query parameter that must be one of `choices`."""
    value = request.args.get(name, "").strip()
    if not value:
        return None
    if value not in choices:
        raise ValidationError(f"{name} must be one of {', '.join(choices)}", fields=[name])
    return value


# =============================================================================
# Routes
# =============================================================================

@api.route("/health")
def health():
    """Unauthenticated liveness check."""
    workflow = get_workflow()
    return jsonify({
        "status": "ok",
        "storage": workflow.storage.name,
        "ai_available": workflow.normalizer.is_available(),
    })


@api.route("/categories", methods=["GET"])
def list_categories():
    categories = get_workflow().list_categories()
    return jsonify([category.to_dict() for category in categories])


@api.route("/categories", methods=["POST"])
def create_category():
    data = _json_body()
    category = get_workflow().accept_category(data.get("name") or "")
    return jsonify(category.to_dict()), 201


@api.route("/categories/<category_id>", methods=["DELETE"])
def delete_category(category_id):
    get_workflow().delete_category(category_id)
    return "", 204


@api.route("/ideas", methods=["GET"])
def list_ideas():
    """
    List ideas.

    Query parameters: category, status, priority, sort (newest|oldest|priority)
    and q for free-text search over title, summary and tags.
    """
    filters = ViewFilters(
        category=request.args.get("category", "").strip() or None,
        status=_choice_arg("status", STATUSES),
        priority=_choice_arg("priority", PRIORITIES),
        sort=_choice_arg("sort", SORT_ORDERS) or "newest",
    )
    ideas = get_workflow().list_ideas(filters)

    search = request.args.get("q", "")
    if search.strip():
        # Structured filters already applied by the store
        ideas = derive_view(ideas, ViewFilters(status=None, sort=filters.sort), search)

    return jsonify([idea.to_dict() for idea in ideas])


@api.route("/ideas", methods=["POST"])
def create_idea():
    data = _json_body()
    idea = get_workflow().confirm_idea(data)
    return jsonify(idea.to_dict()), 201


@api.route("/ideas/process", methods=["POST"])
def process_idea():
    """Run the normalizer on raw text and return the suggestion for review."""
    data = _json_body()
    raw_input = data.get("rawInput")
    if not isinstance(raw_input, str) or not raw_input.strip():
        raise ValidationError("rawInput is required", fields=["rawInput"])

    draft = get_workflow().create_draft(raw_input)
    return jsonify(draft.result.to_dict())


@api.route("/ideas/<idea_id>", methods=["PATCH"])
def update_idea(idea_id):
    data = _json_body()
    idea = get_workflow().edit_idea(idea_id, data)
    return jsonify(idea.to_dict())


@api.route("/ideas/<idea_id>", methods=["DELETE"])
def delete_idea(idea_id):
    get_workflow().delete_idea(idea_id)
    return "", 204


# =============================================================================
# Application Factory
# =============================================================================

def create_app(
    storage: Optional[Storage] = None,
    normalizer: Optional[IdeaNormalizer] = None,
    allowed_user: Optional[str] = None,
    auth_header: Optional[str] = None,
) -> Flask:
    """
    Build the Flask application.

    The store and normalizer are constructed once here (or injected, for
    tests) and shared by every request.
    """
    app = Flask(__name__)
    app.config["SPARKS_ALLOWED_USER"] = allowed_user if allowed_user is not None else ALLOWED_USERNAME
    app.config["SPARKS_AUTH_HEADER"] = auth_header or AUTH_HEADER

    if storage is None:
        storage = build_storage()
    if normalizer is None:
        normalizer = IdeaNormalizer(CompletionClient())

    app.extensions["sparks.workflow"] = CaptureWorkflow(storage, normalizer)
    app.register_blueprint(api)

    logger.info("Sparks API ready (storage=%s, ai=%s)", storage.name, normalizer.is_available())
    return app


if __name__ == "__main__":
    configure_logging()
    print("=" * 50)
    print("Sparks API")
    print("=" * 50)
    print("Listening on http://localhost:5001")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    create_app().run(debug=DEBUG, port=5001)
