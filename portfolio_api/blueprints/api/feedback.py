from flask import current_app, jsonify, request
from pymongo.errors import PyMongoError

from portfolio_api.extensions import limiter
from portfolio_api.services import feedback_service
from portfolio_api.services.feedback import InvalidFeedbackId
from portfolio_api.utils.helpers import client_ip
from portfolio_api.utils.validators import FeedbackValidationError, validate_feedback_payload
from . import bp


def _server_error(message: str):
    return jsonify({"success": False, "error": "Internal Server Error", "message": message}), 500


def _feedback_rate_limit():
    return current_app.config.get("FEEDBACK_RATE_LIMIT") or "30 per minute"


@bp.get("/feedback")
def feedback_list():
    """Feedback for one page, newest first (max 150)."""
    slug = request.args.get("slug") or ""
    if not slug:
        return jsonify({
            "success": False,
            "error": "Missing slug parameter",
            "example": "/api/feedback?slug=/feedback",
        }), 400

    try:
        items = feedback_service().list_by_slug(slug)
    except PyMongoError:
        current_app.logger.exception("GET /api/feedback failed")
        return _server_error("Failed to load feedback.")

    expose_ip = bool(current_app.config.get("FEEDBACK_EXPOSE_CLIENT_IP"))
    data = [fb.to_dict(include_client_ip=expose_ip) for fb in items]
    current_app.logger.debug(
        "feedback_listed", extra={"event": "feedback_listed", "slug": slug, "count": len(data)}
    )
    return jsonify({"success": True, "data": data, "count": len(data)}), 200


@bp.post("/feedback")
@limiter.limit(_feedback_rate_limit)
def feedback_create():
    """Accept feedback as JSON (or a plain form post)."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form.to_dict()

    try:
        data = validate_feedback_payload(payload, default_name=current_app.config["FEEDBACK_DEFAULT_NAME"])
    except FeedbackValidationError as e:
        return jsonify({
            "success": False,
            "error": "Invalid input",
            "details": e.details,
            "message": "The submitted feedback is not valid.",
        }), 400

    # Honeypot: pretend success, store nothing
    if data.is_bot:
        current_app.logger.info("feedback_honeypot", extra={"event": "feedback_honeypot", "slug": data.slug})
        return jsonify({"success": True, "message": "Feedback submitted."}), 201

    try:
        new_id = feedback_service().insert(data, client_ip())
    except PyMongoError:
        current_app.logger.exception("POST /api/feedback failed")
        return _server_error("Failed to save feedback.")

    return jsonify({"success": True, "message": "Feedback submitted.", "id": new_id}), 201


@bp.delete("/feedback/<feedback_id>")
def feedback_delete(feedback_id):
    try:
        deleted = feedback_service().delete_by_id(feedback_id)
    except InvalidFeedbackId:
        return jsonify({
            "success": False,
            "error": "Invalid ID format",
            "message": "The feedback id is not valid.",
        }), 400
    except PyMongoError:
        current_app.logger.exception("DELETE /api/feedback/%s failed", feedback_id)
        return _server_error("Failed to delete feedback.")

    if not deleted:
        return jsonify({
            "success": False,
            "error": "Feedback not found",
            "message": "No feedback exists with that id.",
        }), 404

    return jsonify({"success": True, "message": "Feedback deleted."}), 200
