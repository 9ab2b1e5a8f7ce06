from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import List

import pymongo
from bson import ObjectId
from pymongo.collection import Collection

from portfolio_api.database import MongoGateway
from portfolio_api.models.feedback import COLLECTION, Feedback
from portfolio_api.utils.validators import FeedbackPayload

logger = logging.getLogger(__name__)

LIST_CAP = 150
SLUG_CREATED_INDEX = [("slug", pymongo.ASCENDING), ("createdAt", pymongo.DESCENDING)]

_OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


class InvalidFeedbackId(ValueError):
    """The id is not a 24-hex ObjectId (distinct from 'not found')."""


def _utcnow():
    return datetime.now(timezone.utc)


def parse_feedback_id(value: str) -> ObjectId:
    if not isinstance(value, str) or not _OBJECT_ID_RE.match(value):
        raise InvalidFeedbackId(f"Invalid feedback id: {value!r}")
    return ObjectId(value)


class FeedbackService:
    """List / insert / delete against the single `feedback` collection. No caching, no retries."""

    def __init__(self, gateway: MongoGateway):
        self.gateway = gateway

    @property
    def collection(self) -> Collection:
        return self.gateway.db[COLLECTION]

    def ensure_indexes(self) -> str:
        # create_index is a no-op when the index already exists
        return self.collection.create_index(SLUG_CREATED_INDEX)

    def list_by_slug(self, slug: str, limit: int = LIST_CAP) -> List[Feedback]:
        """Newest first, never more than LIST_CAP records."""
        if not slug:
            raise ValueError("slug is required")
        limit = max(1, min(int(limit or LIST_CAP), LIST_CAP))

        self.ensure_indexes()
        cursor = (
            self.collection.find({"slug": slug})
            .sort([("createdAt", pymongo.DESCENDING), ("_id", pymongo.DESCENDING)])
            .limit(limit)
        )
        return [Feedback.from_document(doc) for doc in cursor]

    def create(self, payload: FeedbackPayload, client_ip: str) -> Feedback:
        """Persist a validated payload; createdAt always comes from the server clock."""
        feedback = Feedback(
            slug=payload.slug,
            name=payload.name,
            message=payload.message,
            email=payload.email,
            client_ip=client_ip,
            created_at=_utcnow(),
        )
        result = self.collection.insert_one(feedback.to_document())
        feedback.id = result.inserted_id
        logger.info(
            "feedback_created",
            extra={"event": "feedback_created", "id": str(feedback.id), "slug": feedback.slug},
        )
        return feedback

    def insert(self, payload: FeedbackPayload, client_ip: str) -> str:
        return str(self.create(payload, client_ip).id)

    def delete_by_id(self, feedback_id: str) -> bool:
        oid = parse_feedback_id(feedback_id)
        result = self.collection.delete_one({"_id": oid})
        deleted = result.deleted_count > 0
        if deleted:
            logger.info("feedback_deleted", extra={"event": "feedback_deleted", "id": feedback_id})
        return deleted
