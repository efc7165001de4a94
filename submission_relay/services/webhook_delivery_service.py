"""Outbound webhook delivery with retry/backoff."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable
from urllib.parse import urlsplit

import httpx

from submission_relay.core.config import settings
from submission_relay.core.url_validation import validate_outbound_webhook_url

logger = logging.getLogger(__name__)

RETRY_STATUSES = {429, 500, 502, 503, 504}
WEBHOOK_TOKEN_HEADER = "X-Webhook-Token"


class WebhookDeliveryError(Exception):
    """The webhook receiver could not be reached or rejected the payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def safe_url(url: str | None) -> str:
    """URL without query string (edit tokens travel in query params)."""
    if not url:
        return ""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}{parts.path}"


def _backoff_delay(attempt: int, base_delay: float, max_delay: float) -> float:
    delay = min(max_delay, base_delay * (2**attempt))
    if delay:
        delay += random.uniform(0, delay / 2)
    return delay


async def _post_with_retries(
    send: Callable[[], Awaitable[httpx.Response]],
    *,
    max_attempts: int,
    base_delay: float,
    max_delay: float,
) -> httpx.Response:
    attempts = max(1, max_attempts)
    for attempt in range(attempts):
        last_attempt = attempt >= attempts - 1
        try:
            response = await send()
        except httpx.RequestError as exc:
            if last_attempt:
                raise
            logger.warning("Webhook request failed (attempt %s), retrying", attempt + 1, exc_info=exc)
        else:
            if response.status_code not in RETRY_STATUSES or last_attempt:
                return response
            logger.warning(
                "Webhook returned %s (attempt %s), retrying", response.status_code, attempt + 1
            )

        delay = _backoff_delay(attempt, base_delay, max_delay)
        if delay:
            await asyncio.sleep(delay)

    raise RuntimeError("unreachable")


async def deliver_payload(
    payload: dict[str, Any],
    *,
    url: str | None = None,
    secret: str | None = None,
    client: httpx.AsyncClient | None = None,
    max_attempts: int | None = None,
    base_delay: float = 0.5,
    max_delay: float = 4.0,
) -> httpx.Response:
    """
    POST a submission payload as JSON to the webhook receiver.

    Raises WebhookDeliveryError for a missing/disallowed URL, transport
    failure after retries, or a non-2xx final response.
    """
    target = url if url is not None else settings.WEBHOOK_URL
    try:
        target = validate_outbound_webhook_url(target)
    except ValueError as exc:
        raise WebhookDeliveryError(str(exc)) from exc

    headers: dict[str, str] = {}
    token = secret if secret is not None else settings.WEBHOOK_SECRET
    if token:
        headers[WEBHOOK_TOKEN_HEADER] = token

    attempts = max_attempts or settings.WEBHOOK_MAX_ATTEMPTS
    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=settings.WEBHOOK_TIMEOUT_SECONDS)
    try:
        response = await _post_with_retries(
            lambda: http.post(target, json=payload, headers=headers),
            max_attempts=attempts,
            base_delay=base_delay,
            max_delay=max_delay,
        )
    except httpx.RequestError as exc:
        raise WebhookDeliveryError(f"Webhook request failed: {exc}") from exc
    finally:
        if owns_client:
            await http.aclose()

    if not response.is_success:
        raise WebhookDeliveryError(
            f"Webhook returned {response.status_code}", status_code=response.status_code
        )
    logger.info("Webhook payload delivered: %s", safe_url(target))
    return response
