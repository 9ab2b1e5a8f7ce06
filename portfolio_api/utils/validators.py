import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

# Simple, pragmatic pattern
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

SLUG_MAX = 200
NAME_MAX = 40
MESSAGE_MAX = 1000


class FeedbackValidationError(ValueError):
    """Raised with field-level details when a feedback payload is rejected."""

    def __init__(self, details: List[Dict[str, str]]):
        super().__init__("; ".join(f"{d['field']}: {d['message']}" for d in details))
        self.details = details


@dataclass(frozen=True)
class FeedbackPayload:
    slug: str
    name: str
    message: str
    email: Optional[str] = None
    hp: Optional[str] = None

    @property
    def is_bot(self) -> bool:
        """Honeypot filled in: legitimate visitors never see the field."""
        return bool(self.hp and self.hp.strip())


def is_valid_email(val: str | None) -> bool:
    if not val:
        return True
    return bool(_EMAIL_RE.match(val))


def _check_length(errors, field, value, max_len):
    if len(value) < 1:
        errors.append({"field": field, "message": "must not be empty"})
    elif len(value) > max_len:
        errors.append({"field": field, "message": f"must be at most {max_len} characters"})


def validate_feedback_payload(payload: Any, default_name: str = "익명") -> FeedbackPayload:
    """
    Validate and normalize an inbound feedback body.

    Rules:
      - slug: required string, 1-200 chars (kept as sent)
      - name: optional string, trimmed, 1-40 chars; absent/null -> default_name
      - message: required string, trimmed, 1-1000 chars
      - email: optional; "" means none, anything else must look like an email
      - hp: optional honeypot string; checked by callers via FeedbackPayload.is_bot
    Unknown keys are ignored. Raises FeedbackValidationError listing every bad field.
    """
    if not isinstance(payload, dict):
        raise FeedbackValidationError([{"field": "body", "message": "must be a JSON object"}])

    errors: List[Dict[str, str]] = []

    slug = payload.get("slug")
    if not isinstance(slug, str):
        errors.append({"field": "slug", "message": "required string"})
    else:
        _check_length(errors, "slug", slug, SLUG_MAX)

    name = payload.get("name")
    if name is None:
        name = default_name
    elif not isinstance(name, str):
        errors.append({"field": "name", "message": "must be a string"})
    else:
        name = name.strip()
        _check_length(errors, "name", name, NAME_MAX)

    message = payload.get("message")
    if not isinstance(message, str):
        errors.append({"field": "message", "message": "required string"})
    else:
        message = message.strip()
        _check_length(errors, "message", message, MESSAGE_MAX)

    email = payload.get("email")
    if email is not None:
        if not isinstance(email, str):
            errors.append({"field": "email", "message": "must be a string"})
        elif email and not is_valid_email(email):
            errors.append({"field": "email", "message": "invalid email address"})

    hp = payload.get("hp")
    if hp is not None and not isinstance(hp, str):
        errors.append({"field": "hp", "message": "must be a string"})

    if errors:
        raise FeedbackValidationError(errors)

    return FeedbackPayload(
        slug=slug,
        name=name,
        message=message,
        email=email or None,
        hp=hp,
    )
