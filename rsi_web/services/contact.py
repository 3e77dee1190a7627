from ..exceptions.contact import ConfigurationError
from ..logger import get_logger
from ..schemas.contact import ContactForm
from ..settings import ExecutionMode, SMTPConfig
from ..utils.email import EmailContext, MailTransport, compose_message, render_email, sanitize_subject
from ..utils.utc import utcnow


logger = get_logger(__name__)


FALLBACK_FROM_EMAIL = "no-reply@rsi-xray.com"
FALLBACK_FROM_NAME = "RSI Website"


class EmailDispatcher:
    """Compose and deliver the internal notification and the visitor confirmation of a contact submission."""

    def __init__(self, smtp: SMTPConfig, mode: ExecutionMode, transport: MailTransport, site_name: str = "RSI"):
        self.smtp = smtp
        self.mode = mode
        self.transport = transport
        self.site_name = site_name

    @property
    def subject_prefix(self) -> str:
        return "[DEV] " if self.mode == ExecutionMode.DEVELOPMENT else ""

    @property
    def sender(self) -> tuple[str, str]:
        return self.smtp.from_name.strip() or FALLBACK_FROM_NAME, self.smtp.from_email.strip() or FALLBACK_FROM_EMAIL

    def resolve_internal_recipient(self) -> str:
        default_to = self.smtp.default_to.strip()
        if self.mode == ExecutionMode.DEVELOPMENT:
            if not default_to:
                raise ConfigurationError("No default recipient configured for development")
            return default_to

        if recipient := default_to or self.smtp.from_email.strip():
            return recipient
        raise ConfigurationError("No internal recipient configured")

    def _context(self, data: ContactForm) -> EmailContext:
        now = utcnow()
        return EmailContext(
            name=data.name,
            email=data.email,
            phone=data.phone,
            subject=data.subject,
            message=data.message,
            site_name=self.site_name,
            year=now.year,
            submitted_at=now.strftime("%Y-%m-%d %H:%M:%S"),
            from_email=self.sender[1],
        )

    async def send_internal_notice(self, data: ContactForm) -> None:
        subject = f"{self.subject_prefix}[{self.site_name} Contact] {sanitize_subject(data.subject)}"
        body = render_email("internal_notification", self._context(data))

        message = compose_message(
            self.sender,
            ("", self.resolve_internal_recipient()),
            subject,
            body,
            reply_to=(data.name, data.email) if data.email else None,
        )
        logger.debug("Sending internal contact notification")
        await self.transport.send(message)

    async def send_visitor_confirmation(self, data: ContactForm) -> None:
        if not data.email or not data.email.strip():
            return
        if not self.smtp.from_email.strip() or not self.smtp.host.strip():
            raise ConfigurationError("SMTP not configured for confirmation email")

        subject = f"{self.subject_prefix}We've received your message - {self.site_name}"
        body = render_email("visitor_confirmation", self._context(data))

        bcc = None
        if self.mode == ExecutionMode.DEVELOPMENT and self.smtp.default_to.strip():
            bcc = self.smtp.default_to.strip()

        message = compose_message(self.sender, (data.name, data.email), subject, body, bcc=bcc)
        logger.debug("Sending visitor confirmation")
        await self.transport.send(message)
