import logging
from typing import Optional

from sqlalchemy import insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from ..schemas import ContactResponse
from .tables import contacts


logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

SUCCESS_MESSAGE = "Thank you! Your message has been sent successfully."
DUPLICATE_EMAIL_MESSAGE = "This email address has already been used. Please use a different email."
DUPLICATE_PHONE_MESSAGE = "This phone number has already been used. Please use a different number."
GENERIC_ERROR_MESSAGE = "Something went wrong while saving your contact. Please try again later."


def _is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION:
        return True
    return "unique constraint" in str(exc.orig).lower()


def _constraint_name(exc: IntegrityError) -> str:
    """Best-effort name of the violated constraint.

    psycopg2 exposes it on diag; other drivers only put it in the message.
    """
    diag = getattr(exc.orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name
    return str(exc.orig)


class ContactRepository:
    """Writes contact submissions to the contacts table."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def save(self, name: str, email: str, phone: Optional[str], message: str) -> ContactResponse:
        """Insert one submission and report the outcome.

        Never raises: database errors are logged and turned into an error
        response the page can show as-is.
        """
        logger.info(f"Attempting to save contact: name={name!r} email={email!r} phone={phone or 'N/A'}")

        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    insert(contacts).values(
                        name=name,
                        email=email,
                        phone=phone or None,
                        message=message,
                    )
                )
                contact_id = result.inserted_primary_key[0]
        except IntegrityError as e:
            logger.error(f"Integrity error saving contact: {e.orig}")
            if _is_unique_violation(e):
                constraint = _constraint_name(e).lower()
                if "email" in constraint:
                    return ContactResponse(status="error", message=DUPLICATE_EMAIL_MESSAGE)
                if "phone" in constraint:
                    return ContactResponse(status="error", message=DUPLICATE_PHONE_MESSAGE)
            return ContactResponse(status="error", message=GENERIC_ERROR_MESSAGE)
        except Exception as e:
            logger.error(f"Error saving contact: {e}", exc_info=True)
            return ContactResponse(status="error", message=GENERIC_ERROR_MESSAGE)

        logger.info(f"Contact saved successfully with ID: {contact_id}")
        return ContactResponse(status="success", message=SUCCESS_MESSAGE, id=contact_id)
