from flask import current_app, request
from flask_socketio import emit
from pymongo.errors import PyMongoError

from portfolio_api.extensions import socketio
from portfolio_api.services import feedback_service
from portfolio_api.utils.helpers import client_ip
from portfolio_api.utils.validators import FeedbackValidationError, validate_feedback_payload

SEND_EVENT = "chat:send"
NEW_MESSAGE_EVENT = "chat:newMessage"
ERROR_EVENT = "chat:error"


@socketio.on("connect")
def on_connect(auth=None):
    current_app.logger.info(
        "socket_connected", extra={"event": "socket_connected", "sid": request.sid, "client": client_ip()}
    )


@socketio.on("disconnect")
def on_disconnect(*args):
    current_app.logger.info("socket_disconnected", extra={"event": "socket_disconnected", "sid": request.sid})


@socketio.on(SEND_EVENT)
def on_chat_send(data=None):
    """
    Validate like POST /api/feedback, persist, then fan the stored record out
    to every connection (sender included). Store failures are logged only.
    """
    try:
        payload = validate_feedback_payload(data, default_name=current_app.config["FEEDBACK_DEFAULT_NAME"])
    except FeedbackValidationError as e:
        emit(ERROR_EVENT, {"success": False, "error": "Invalid input", "details": e.details})
        return

    if payload.is_bot:
        current_app.logger.info("chat_honeypot", extra={"event": "chat_honeypot", "sid": request.sid})
        return

    try:
        feedback = feedback_service().create(payload, client_ip())
    except PyMongoError:
        current_app.logger.exception("chat:send insert failed", extra={"event": "chat_insert_failed", "sid": request.sid})
        return

    expose_ip = bool(current_app.config.get("FEEDBACK_EXPOSE_CLIENT_IP"))
    emit(NEW_MESSAGE_EVENT, feedback.to_dict(include_client_ip=expose_ip), broadcast=True)
