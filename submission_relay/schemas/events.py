"""Request/response schemas for host event endpoints."""

from typing import Any

from pydantic import BaseModel, Field

from submission_relay.schemas.forms import Notification


class EntryEventRequest(BaseModel):
    entry_id: int | str


class EntryFinalizedResponse(BaseModel):
    entry_id: str
    token_issued: bool


class WebhookPayloadRequest(EntryEventRequest):
    deliver: bool = False
    request_data: dict[str, Any] | None = None


class WebhookPayloadResponse(BaseModel):
    payload: dict[str, Any]
    delivered: bool = False


class NotificationRequest(EntryEventRequest):
    notification: Notification


class EditAccessResponse(BaseModel):
    editable: bool
    entry_id: str | None = None
    form_id: str | None = None
    form_title: str | None = None
    editor_shortcode: str | None = None
    field_labels: dict[str, str] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    status: str
    version: str
