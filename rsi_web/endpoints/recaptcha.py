"""Endpoints for recaptcha"""

from typing import Any

from fastapi import APIRouter

from ..settings import settings
from ..utils.docs import responses


router = APIRouter(tags=["recaptcha"])


@router.get("/recaptcha", responses=responses(str))
async def get_recaptcha_sitekey() -> Any:
    """Return the public recaptcha sitekey to be used by the contact form."""

    return settings.recaptcha.sitekey
