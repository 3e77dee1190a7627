"""Endpoints for the contact form"""

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..exceptions.contact import (
    ContactError,
    CouldNotSendMessageError,
    RecaptchaError,
    RecaptchaFailedError,
    SpamDetectedError,
    SpamRejectedError,
    TooManyRequestsError,
)
from ..schemas.contact import HONEYPOT_FIELD, ContactRequest
from ..services.submission import SubmissionHandler, get_submission_handler
from ..settings import settings
from ..utils.docs import responses


router = APIRouter(tags=["contact"])

templates = Jinja2Templates(directory=Path(__file__).parent / "../templates/pages")

limiter = Limiter(key_func=get_remote_address)
contact_limit = limiter.shared_limit(
    f"{settings.contact_rate_limit} per {settings.contact_rate_window} seconds", scope="contact"
)


def client_address(request: Request) -> str | None:
    return request.client.host if request.client else None


def render_form(
    request: Request,
    *,
    form: dict[str, str] | None = None,
    error: str | None = None,
    field_errors: dict[str, str] | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "contact.html",
        {
            "site_name": settings.site_name,
            "form": {"subject": "General Inquiry", **(form or {})},
            "error": error,
            "field_errors": field_errors or {},
            "recaptcha_sitekey": settings.recaptcha.sitekey,
            "honeypot_field": HONEYPOT_FIELD,
        },
        status_code=status_code,
    )


@router.get("/contact", response_class=HTMLResponse)
async def contact_page(request: Request, subject: str | None = Query(None, max_length=200)) -> Any:
    """Render the contact form, optionally pre-filling the subject."""

    return render_form(request, form={"subject": subject} if subject and subject.strip() else None)


@router.post("/contact", response_class=HTMLResponse)
@contact_limit
async def submit_contact_form(request: Request, handler: SubmissionHandler = Depends(get_submission_handler)) -> Any:
    """
    Submit the contact form.

    On success the client is redirected to `GET /contact/thanks`, otherwise the form is rendered again with
    an error message.
    """

    outcome = await handler.handle(await request.form(), client_address(request))
    if not outcome.success:
        return render_form(
            request, form=outcome.form, error=outcome.error, field_errors=outcome.field_errors, status_code=400
        )

    return RedirectResponse(request.url_for("contact_thanks"), status_code=303)


@router.get("/contact/thanks", response_class=HTMLResponse, name="contact_thanks")
async def contact_thanks(request: Request) -> Response:
    """Render the thank-you page shown after a successful submission."""

    return templates.TemplateResponse(request, "contact_thanks.html", {"site_name": settings.site_name})


@router.post(
    "/api/contact",
    responses=responses(bool, SpamRejectedError, RecaptchaError, CouldNotSendMessageError, TooManyRequestsError),
)
@contact_limit
async def send_message(
    data: ContactRequest, request: Request, handler: SubmissionHandler = Depends(get_submission_handler)
) -> Any:
    """
    Send a message to the team.

    A recaptcha response is required (see `GET /recaptcha`).
    """

    try:
        await handler.submit(
            data,
            honeypot=data.website,
            recaptcha_response=data.recaptcha_response,
            remote_address=client_address(request),
        )
    except SpamDetectedError:
        raise SpamRejectedError
    except RecaptchaFailedError:
        raise RecaptchaError
    except ContactError:
        raise CouldNotSendMessageError

    return True
