from .feedback import Feedback, COLLECTION as FEEDBACK_COLLECTION

__all__ = ["Feedback", "FEEDBACK_COLLECTION"]
