"""Lifecycle event endpoints called by the host site, plus the public edit check."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.concurrency import run_in_threadpool

from submission_relay.core.deps import get_hooks, require_internal_secret
from submission_relay.core.structured_logging import build_log_context
from submission_relay.schemas.events import (
    EditAccessResponse,
    EntryEventRequest,
    EntryFinalizedResponse,
    NotificationRequest,
    WebhookPayloadRequest,
    WebhookPayloadResponse,
)
from submission_relay.schemas.forms import Notification, SubmissionEntry
from submission_relay.services import webhook_delivery_service
from submission_relay.services.ports import FormsBackendError
from submission_relay.services.submission_hooks import SubmissionHooks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"], dependencies=[Depends(require_internal_secret)])
public_router = APIRouter(tags=["edit"])


def _load_entry(hooks: SubmissionHooks, entry_id: int | str) -> SubmissionEntry:
    try:
        entry = hooks.get_entry(entry_id)
    except FormsBackendError as exc:
        logger.warning("Entry lookup failed: %s", exc, extra=build_log_context(entry_id=entry_id))
        raise HTTPException(status_code=502, detail="Forms backend unavailable")
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@router.post("/entry-finalized", response_model=EntryFinalizedResponse)
def entry_finalized(data: EntryEventRequest, hooks: SubmissionHooks = Depends(get_hooks)):
    entry = _load_entry(hooks, data.entry_id)
    try:
        hooks.on_entry_finalized(entry)
    except FormsBackendError as exc:
        logger.warning("Edit token write failed: %s", exc, extra=build_log_context(entry_id=entry.id))
        raise HTTPException(status_code=502, detail="Forms backend unavailable")
    return EntryFinalizedResponse(entry_id=entry.id, token_issued=True)


@router.post("/webhook-payload", response_model=WebhookPayloadResponse)
async def webhook_payload(data: WebhookPayloadRequest, hooks: SubmissionHooks = Depends(get_hooks)):
    entry = await run_in_threadpool(_load_entry, hooks, data.entry_id)
    payload = await run_in_threadpool(
        hooks.build_webhook_payload, entry, None, data.request_data
    )

    if not data.deliver:
        return WebhookPayloadResponse(payload=payload)

    try:
        await webhook_delivery_service.deliver_payload(payload)
    except webhook_delivery_service.WebhookDeliveryError as exc:
        logger.warning(
            "Webhook delivery failed: %s",
            exc,
            extra=build_log_context(entry_id=entry.id, form_id=entry.form_id),
        )
        raise HTTPException(status_code=502, detail="Webhook delivery failed")
    return WebhookPayloadResponse(payload=payload, delivered=True)


@router.post("/notification", response_model=Notification)
def notification(data: NotificationRequest, hooks: SubmissionHooks = Depends(get_hooks)):
    entry = _load_entry(hooks, data.entry_id)
    return hooks.on_notification(data.notification, entry)


@public_router.get("/edit", response_model=EditAccessResponse)
def edit_access(
    gform_update: str | None = Query(None),
    token: str | None = Query(None),
    hooks: SubmissionHooks = Depends(get_hooks),
):
    """
    Resolve an edit link. Any failure renders as a plain "not editable"
    answer so the page falls back to its normal content.
    """
    if not gform_update or not token:
        return EditAccessResponse(editable=False)

    context = hooks.resolve_edit_request(gform_update.strip(), token.strip())
    if context is None:
        return EditAccessResponse(editable=False)

    return EditAccessResponse(
        editable=True,
        entry_id=context.entry_id,
        form_id=context.form_id,
        form_title=context.form_title,
        editor_shortcode=context.editor_shortcode,
        field_labels=context.field_labels,
    )
