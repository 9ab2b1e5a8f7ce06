from flask import current_app

from .feedback import FeedbackService


def feedback_service() -> FeedbackService:
    """FeedbackService bound to the current app's MongoGateway."""
    return FeedbackService(current_app.extensions["mongo"])
