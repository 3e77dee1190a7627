import os
from email.message import Message


os.environ.update(
    {
        "ENVIRONMENT": "production",
        "LOG_LEVEL": "DEBUG",
        "SMTP__HOST": "smtp.example.com",
        "SMTP__PORT": "587",
        "SMTP__USER": "mailer",
        "SMTP__PASSWORD": "mailer-password",
        "SMTP__FROM_EMAIL": "website@rsi-xray.com",
        "SMTP__DEFAULT_TO": "",
        "RECAPTCHA__SITEKEY": "test-sitekey",
        "RECAPTCHA__SECRET": "test-secret",
    }
)

import pytest  # noqa: E402

from rsi_web.schemas.contact import ContactForm  # noqa: E402
from rsi_web.settings import SMTPConfig  # noqa: E402


class MemoryTransport:
    def __init__(self, error: Exception | None = None) -> None:
        self.messages: list[Message] = []
        self.error = error

    async def send(self, message: Message) -> None:
        if self.error:
            raise self.error
        self.messages.append(message)


@pytest.fixture
def transport() -> MemoryTransport:
    return MemoryTransport()


@pytest.fixture
def smtp_config() -> SMTPConfig:
    return SMTPConfig(
        host="smtp.example.com",
        user="mailer",
        password="mailer-password",
        from_email="website@rsi-xray.com",
        from_name="RSI Website",
        default_to="sales@rsi-xray.com",
    )


@pytest.fixture
def contact_form() -> ContactForm:
    return ContactForm(
        name="Jane Doe",
        email="jane@example.com",
        phone="(555) 123-4567",
        subject="General Inquiry",
        message="Hello",
    )


def get_parts(message: Message) -> list[tuple[str, str]]:
    return [
        (part.get_content_type(), part.get_payload(decode=True).decode())  # type: ignore[union-attr]
        for part in message.get_payload()  # type: ignore[union-attr]
    ]
