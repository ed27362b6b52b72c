import json
import logging
import re

from pydantic import ValidationError

from ..schemas import CleanSubmission, ContactSubmission


logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

REQUIRED_FIELDS_MESSAGE = "Name, email, and message are required fields."
INVALID_EMAIL_MESSAGE = "Please enter a valid email address."
EMPTY_BODY_MESSAGE = "No data received. Please try again."
BODY_TOO_LARGE_MESSAGE = "Request body too large."


class ValidationFailed(Exception):
    """Submission rejected before reaching the database (HTTP 400)."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PayloadTooLarge(ValidationFailed):
    status_code = 413

    def __init__(self, limit: int):
        super().__init__(BODY_TOO_LARGE_MESSAGE)
        self.limit = limit


class PayloadDecodeError(Exception):
    """Request body could not be decoded into a ContactSubmission."""


def decode_submission(body: bytes) -> ContactSubmission:
    try:
        raw = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PayloadDecodeError(f"Body is not valid UTF-8: {e}") from e

    if not raw.strip():
        raise ValidationFailed(EMPTY_BODY_MESSAGE)

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PayloadDecodeError(f"Malformed JSON body: {e}") from e

    if not isinstance(data, dict):
        raise PayloadDecodeError(f"Expected a JSON object, got {type(data).__name__}")

    try:
        return ContactSubmission.model_validate(data)
    except ValidationError as e:
        raise PayloadDecodeError(f"Invalid submission fields: {e.error_count()} error(s)") from e


def validate_submission(submission: ContactSubmission) -> CleanSubmission:
    name = (submission.name or "").strip()
    email = (submission.email or "").strip()
    message = (submission.message or "").strip()

    if not name or not email or not message:
        raise ValidationFailed(REQUIRED_FIELDS_MESSAGE)

    # Shape is checked on the value as sent, so padded addresses are rejected
    if not EMAIL_PATTERN.fullmatch(submission.email):
        raise ValidationFailed(INVALID_EMAIL_MESSAGE)

    phone = (submission.phone or "").strip() or None

    return CleanSubmission(name=name, email=email.lower(), phone=phone, message=message)
