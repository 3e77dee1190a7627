from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Awaitable, Callable, Mapping

from pydantic import ValidationError

from .contact import EmailDispatcher
from ..exceptions.contact import (
    ContactError,
    DeliveryError,
    InvalidSubmissionError,
    RecaptchaFailedError,
    SpamDetectedError,
)
from ..logger import get_logger
from ..schemas.contact import HONEYPOT_FIELD, RECAPTCHA_FIELD, ContactForm
from ..settings import settings
from ..utils.email import SMTPTransport
from ..utils.recaptcha import check_recaptcha


logger = get_logger(__name__)

RecaptchaCheck = Callable[[str | None, str | None], Awaitable[bool]]

FORM_FIELDS = list(ContactForm.model_fields)


@dataclass
class Outcome:
    success: bool
    error: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)
    form: dict[str, str] = field(default_factory=dict)


def _field_message(error: Any) -> str:
    if error["type"] == "missing" or (error["type"] == "string_too_short" and error["ctx"]["min_length"] == 1):
        return "This field is required."
    return str(error["msg"])


def validate_form(raw_form: Mapping[str, Any]) -> ContactForm:
    values = {key: raw_form[key] for key in FORM_FIELDS if isinstance(raw_form.get(key), str)}
    try:
        return ContactForm.model_validate(values)
    except ValidationError as e:
        field_errors: dict[str, str] = {}
        for error in e.errors():
            field_errors.setdefault(str(error["loc"][0]), _field_message(error))
        raise InvalidSubmissionError(field_errors) from e


class SubmissionHandler:
    """
    Process a posted contact form.

    The gates run strictly in order (validation, honeypot, recaptcha, delivery) and the first failing one
    ends the submission.
    """

    def __init__(self, dispatcher: EmailDispatcher, check_captcha: RecaptchaCheck = check_recaptcha):
        self.dispatcher = dispatcher
        self.check_captcha = check_captcha

    async def submit(
        self, data: ContactForm, *, honeypot: str | None, recaptcha_response: str | None, remote_address: str | None
    ) -> None:
        if honeypot:
            raise SpamDetectedError

        if not await self.check_captcha(recaptcha_response, remote_address):
            raise RecaptchaFailedError

        try:
            await self.dispatcher.send_internal_notice(data)
            await self.dispatcher.send_visitor_confirmation(data)
        except ContactError as e:
            cause = f" ({type(e.__cause__).__name__})" if e.__cause__ else ""
            logger.warning(f"[SMTP ERROR] while sending contact form: {e}{cause}")
            raise
        except Exception as e:
            logger.warning(f"[ERROR] while sending contact form: {type(e).__name__}")
            raise DeliveryError from e

    async def handle(self, raw_form: Mapping[str, Any], remote_address: str | None) -> Outcome:
        form = {key: value for key in FORM_FIELDS if isinstance(value := raw_form.get(key), str)}

        try:
            data = validate_form(raw_form)
            honeypot = raw_form.get(HONEYPOT_FIELD)
            recaptcha_response = raw_form.get(RECAPTCHA_FIELD)
            await self.submit(
                data,
                honeypot=honeypot if isinstance(honeypot, str) else None,
                recaptcha_response=recaptcha_response if isinstance(recaptcha_response, str) else None,
                remote_address=remote_address,
            )
        except InvalidSubmissionError as e:
            return Outcome(False, e.message, e.field_errors, form)
        except ContactError as e:
            return Outcome(False, e.message, form=form)

        return Outcome(True)


@lru_cache
def get_submission_handler() -> SubmissionHandler:
    dispatcher = EmailDispatcher(settings.smtp, settings.environment, SMTPTransport(settings.smtp), settings.site_name)
    return SubmissionHandler(dispatcher)
