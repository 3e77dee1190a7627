from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic_core import PydanticCustomError


HONEYPOT_FIELD = "website"
RECAPTCHA_FIELD = "g-recaptcha-response"
MIN_PHONE_DIGITS = 10
MAX_EMAIL_LENGTH = 300


def normalize_phone(raw: str | None) -> str:
    """
    Keep only digits and a single leading `+`.

    Returns the empty string if fewer than `MIN_PHONE_DIGITS` digits remain.
    """

    if not raw or not raw.strip():
        return ""

    normalized = ""
    for char in raw.strip():
        if char.isdigit():
            normalized += char
        elif char == "+" and not normalized:
            normalized = "+"

    if sum(char.isdigit() for char in normalized) < MIN_PHONE_DIGITS:
        return ""
    return normalized


class ContactForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200, description="Full name of the visitor")
    email: EmailStr = Field(description="Email of the visitor")
    phone: str = Field(min_length=1, max_length=30, description="Phone number of the visitor")
    subject: str = Field("General Inquiry", min_length=1, max_length=200, description="Subject of the message")
    message: str = Field(min_length=1, max_length=5000, description="Content of the message")

    @field_validator("name")
    @classmethod
    def _fold_name(cls, value: str) -> str:
        return value.replace("\r", " ").replace("\n", " ")

    @field_validator("phone")
    @classmethod
    def _normalize_phone(cls, value: str) -> str:
        if not (phone := normalize_phone(value)):
            raise PydanticCustomError("phone_invalid", "Please enter a valid phone number.")
        return phone

    @field_validator("email", mode="before")
    @classmethod
    def _check_email_length(cls, value: str) -> str:
        if isinstance(value, str) and len(value.strip()) > MAX_EMAIL_LENGTH:
            raise PydanticCustomError(
                "email_too_long", "Email must be at most {max_length} characters.", {"max_length": MAX_EMAIL_LENGTH}
            )
        return value


class ContactRequest(ContactForm):
    website: str = Field("", description="Honeypot field, must be left empty")
    recaptcha_response: str | None = Field(None, description="Recaptcha response")
