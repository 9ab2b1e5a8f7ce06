import pytest

from portfolio_api.utils.validators import (
    FeedbackValidationError,
    is_valid_email,
    validate_feedback_payload,
)


def _fields(exc_info):
    return {d["field"] for d in exc_info.value.details}


def test_minimal_payload_gets_default_name():
    p = validate_feedback_payload({"slug": "/home", "message": "hello"})
    assert p.slug == "/home"
    assert p.name == "익명"
    assert p.message == "hello"
    assert p.email is None
    assert p.is_bot is False


def test_name_and_message_are_trimmed():
    p = validate_feedback_payload({"slug": "/a", "name": "  Kim  ", "message": "  hi there \n"})
    assert p.name == "Kim"
    assert p.message == "hi there"


def test_null_name_falls_back_to_default():
    p = validate_feedback_payload({"slug": "/a", "name": None, "message": "x"}, default_name="anon")
    assert p.name == "anon"


def test_missing_slug_and_message_reported_together():
    with pytest.raises(FeedbackValidationError) as exc:
        validate_feedback_payload({})
    assert _fields(exc) == {"slug", "message"}


@pytest.mark.parametrize("payload,field", [
    ({"slug": "", "message": "x"}, "slug"),
    ({"slug": "s" * 201, "message": "x"}, "slug"),
    ({"slug": "/a", "message": "   "}, "message"),
    ({"slug": "/a", "message": "m" * 1001}, "message"),
    ({"slug": "/a", "message": "x", "name": "   "}, "name"),
    ({"slug": "/a", "message": "x", "name": "n" * 41}, "name"),
    ({"slug": "/a", "message": "x", "email": "not-an-email"}, "email"),
    ({"slug": "/a", "message": "x", "hp": 5}, "hp"),
    ({"slug": 12, "message": "x"}, "slug"),
])
def test_field_rules(payload, field):
    with pytest.raises(FeedbackValidationError) as exc:
        validate_feedback_payload(payload)
    assert _fields(exc) == {field}


def test_length_boundaries_accepted():
    p = validate_feedback_payload({"slug": "s" * 200, "name": "n" * 40, "message": "m" * 1000})
    assert len(p.slug) == 200 and len(p.name) == 40 and len(p.message) == 1000


def test_empty_email_is_allowed_and_dropped():
    p = validate_feedback_payload({"slug": "/a", "message": "x", "email": ""})
    assert p.email is None


def test_valid_email_kept():
    p = validate_feedback_payload({"slug": "/a", "message": "x", "email": "me@example.com"})
    assert p.email == "me@example.com"


def test_unknown_keys_ignored():
    p = validate_feedback_payload({"slug": "/a", "message": "x", "clientId": "abc", "extra": 1})
    assert p.message == "x"


def test_non_object_body_rejected():
    with pytest.raises(FeedbackValidationError) as exc:
        validate_feedback_payload(["slug", "message"])
    assert _fields(exc) == {"body"}


def test_honeypot_detection():
    assert validate_feedback_payload({"slug": "/a", "message": "x", "hp": "buy now"}).is_bot is True
    assert validate_feedback_payload({"slug": "/a", "message": "x", "hp": "   "}).is_bot is False
    assert validate_feedback_payload({"slug": "/a", "message": "x", "hp": ""}).is_bot is False


def test_is_valid_email():
    assert is_valid_email("a@b.co")
    assert is_valid_email("")
    assert not is_valid_email("a@b")
    assert not is_valid_email("a b@c.de")
