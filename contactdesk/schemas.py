from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict


class ContactSubmission(BaseModel):
    """Raw contact form payload as sent by the page.

    Every field is optional here; presence rules live in the validator so that
    an empty object gets the same message as a blank field.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None


class CleanSubmission(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    message: str


class ContactResponse(BaseModel):
    status: Literal["success", "error"]
    message: str
    id: Optional[int] = None

    def to_content(self) -> dict:
        return self.model_dump(exclude_none=True)
