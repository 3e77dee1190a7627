from typing import Any

from httpx import AsyncClient, HTTPError

from ..logger import get_logger
from ..settings import settings


logger = get_logger(__name__)


def parse_recaptcha_response(data: Any) -> bool:
    """Return the `success` flag of a siteverify answer, matching keys case-insensitively."""

    if not isinstance(data, dict):
        return False
    fields = {str(key).lower(): value for key, value in data.items()}
    return fields.get("success") is True


async def check_recaptcha(response: str | None, remote_ip: str | None = None) -> bool:
    secret = settings.recaptcha.secret
    if not response or not response.strip() or not secret or not secret.strip():
        return False

    try:
        async with AsyncClient(timeout=10) as client:
            resp = await client.post(
                settings.recaptcha.verify_url,
                data={"secret": secret, "response": response, "remoteip": remote_ip or ""},
            )
    except HTTPError as e:
        logger.warning(f"Recaptcha verification request failed: {e!r}")
        return False

    if not resp.is_success:
        logger.warning(f"Recaptcha verification returned status {resp.status_code}")
        return False

    try:
        data = resp.json()
    except ValueError:
        logger.warning("Recaptcha verification returned an invalid body")
        return False

    logger.debug(f"Recaptcha response: {data}")
    return parse_recaptcha_response(data)
