"""FastAPI dependencies for platform access and host authentication."""

from typing import Generator

from fastapi import Header, HTTPException

from submission_relay.core.config import settings
from submission_relay.core.security import verify_secret
from submission_relay.services.gravity_forms_client import GravityFormsClient
from submission_relay.services.submission_hooks import SubmissionHooks


INTERNAL_SECRET_HEADER = "X-Internal-Secret"


def get_hooks() -> Generator[SubmissionHooks, None, None]:
    """
    SubmissionHooks bound to the Gravity Forms REST API.

    The HTTP client is closed after the request.
    """
    client = GravityFormsClient.from_settings()
    try:
        yield SubmissionHooks(client, client, client, client)
    finally:
        client.close()


def require_internal_secret(
    x_internal_secret: str | None = Header(None, alias=INTERNAL_SECRET_HEADER),
) -> None:
    """Only the host site (holding INTERNAL_SECRET) may fire lifecycle events."""
    if not verify_secret(settings.INTERNAL_SECRET, x_internal_secret):
        raise HTTPException(status_code=403, detail="Invalid internal secret")
