from dataclasses import asdict, dataclass
from email.message import Message
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from pathlib import Path
from typing import Protocol

import aiosmtplib
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from ..exceptions.contact import DeliveryError
from ..logger import get_logger
from ..settings import SMTPConfig


logger = get_logger(__name__)


def nl2br(value: str | None) -> Markup:
    if not value or not value.strip():
        return Markup("")
    safe = str(escape(value)).replace("\r\n", "\n").replace("\r", "\n")
    return Markup(safe.replace("\n", "<br>"))


env = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "../templates/email"),
    autoescape=select_autoescape(["html"], default_for_string=False),
    keep_trailing_newline=True,
)
env.filters["nl2br"] = nl2br


@dataclass(frozen=True)
class EmailContext:
    name: str
    email: str
    phone: str
    subject: str
    message: str
    site_name: str
    year: int
    submitted_at: str
    from_email: str


@dataclass(frozen=True)
class EmailBody:
    text: str
    html: str


def render_email(template: str, context: EmailContext) -> EmailBody:
    """Render `<template>.txt` (raw values) and `<template>.html` (escaped values)."""

    values = asdict(context)
    return EmailBody(
        text=env.get_template(f"{template}.txt").render(**values),
        html=env.get_template(f"{template}.html").render(**values),
    )


def sanitize_subject(subject: str | None, max_length: int = 120) -> str:
    if not subject or not subject.strip():
        return "Website Contact"
    subject = subject.replace("\r", " ").replace("\n", " ").strip()
    return subject[:max_length]


def compose_message(
    sender: tuple[str, str],
    recipient: tuple[str, str],
    subject: str,
    body: EmailBody,
    *,
    reply_to: tuple[str, str] | None = None,
    bcc: str | None = None,
) -> MIMEMultipart:
    message = MIMEMultipart("alternative")
    message["From"] = formataddr(sender)
    message["To"] = formataddr(recipient)
    message["Subject"] = subject
    if reply_to:
        message["Reply-To"] = formataddr(reply_to)
    if bcc:
        message["Bcc"] = bcc

    message.attach(MIMEText(body.text, "plain", "utf-8"))
    message.attach(MIMEText(body.html, "html", "utf-8"))
    return message


class MailTransport(Protocol):
    async def send(self, message: Message) -> None:
        ...


class SMTPTransport:
    """Deliver each message over a fresh SMTP connection."""

    def __init__(self, config: SMTPConfig) -> None:
        self.config = config

    async def send(self, message: Message) -> None:
        logger.info(f"[SMTP SEND] host={self.config.host}:{self.config.port} tls={self.config.tls}")

        try:
            await aiosmtplib.send(
                message,
                hostname=self.config.host,
                port=self.config.port,
                username=self.config.user or None,
                password=self.config.password or None,
                use_tls=self.config.tls,
                start_tls=self.config.starttls and not self.config.tls,
                timeout=self.config.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"Could not deliver message via {self.config.host}:{self.config.port}") from e
