from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId

from portfolio_api.utils.helpers import isoformat_utc

COLLECTION = "feedback"


@dataclass
class Feedback:
    """A visitor comment on one page. Inserted or deleted, never updated."""

    slug: str
    name: str
    message: str
    client_ip: str
    created_at: datetime
    email: Optional[str] = None
    id: Optional[ObjectId] = field(default=None)

    def to_document(self) -> Dict[str, Any]:
        doc = {
            "slug": self.slug,
            "name": self.name,
            "message": self.message,
            "clientIp": self.client_ip,
            "createdAt": self.created_at,
        }
        # Optional fields are omitted rather than stored as null
        if self.email:
            doc["email"] = self.email
        if self.id is not None:
            doc["_id"] = self.id
        return doc

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Feedback":
        return cls(
            id=doc.get("_id"),
            slug=doc.get("slug", ""),
            name=doc.get("name", ""),
            message=doc.get("message", ""),
            email=doc.get("email"),
            client_ip=doc.get("clientIp", "unknown"),
            created_at=doc.get("createdAt"),
        )

    def to_dict(self, include_client_ip: bool = False) -> Dict[str, Any]:
        """Public JSON shape. Email is never exposed."""
        out = {
            "_id": str(self.id) if self.id is not None else None,
            "slug": self.slug,
            "name": self.name,
            "message": self.message,
            "createdAt": isoformat_utc(self.created_at),
        }
        if include_client_ip:
            out["clientIp"] = self.client_ip
        return out
