"""Entry points the host site calls on its form lifecycle events."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from submission_relay.core.config import settings
from submission_relay.schemas.forms import FormSchema, Notification, SubmissionEntry
from submission_relay.services import edit_token_service, notification_service
from submission_relay.services.field_resolution import (
    NestedEntryResolver,
    ResolutionFailurePolicy,
    build_field_label_map,
)
from submission_relay.services.ports import (
    EntryMetaStore,
    EntryStore,
    FormsBackendError,
    FormStore,
    UserDirectory,
)
from submission_relay.services.webhook_payload_service import (
    SubmissionPayloadBuilder,
    build_legacy_payload,
)

logger = logging.getLogger(__name__)


@dataclass
class EditContext:
    """A verified edit request, ready for the host's entry editor."""

    entry_id: str
    form_id: str
    form_title: str
    editor_shortcode: str
    field_labels: dict[str, str] = field(default_factory=dict)


def build_editor_shortcode(form_id: int | str, entry_id: int | str) -> str:
    return f'[gravityform id="{form_id}" entry="{entry_id}" mode="edit"]'


class SubmissionHooks:
    """
    Wires the token issuer, payload builder and notification helper to the
    platform stores. One instance per request; holds no state of its own.
    """

    def __init__(
        self,
        forms: FormStore,
        entries: EntryStore,
        meta: EntryMetaStore,
        users: UserDirectory | None = None,
        *,
        policy: ResolutionFailurePolicy = ResolutionFailurePolicy.SKIP,
        max_depth: int | None = None,
        fetch_concurrency: int | None = None,
        legacy_payload: bool | None = None,
        edit_debug: bool | None = None,
    ):
        self.forms = forms
        self.entries = entries
        self.meta = meta
        self.users = users
        self.legacy_payload = settings.legacy_payload if legacy_payload is None else legacy_payload
        self.edit_debug = settings.EDIT_DEBUG if edit_debug is None else edit_debug
        self.nested = NestedEntryResolver(
            forms,
            entries,
            policy=policy,
            max_depth=settings.NESTED_MAX_DEPTH if max_depth is None else max_depth,
            fetch_concurrency=(
                settings.NESTED_FETCH_CONCURRENCY if fetch_concurrency is None else fetch_concurrency
            ),
        )
        self.payload_builder = SubmissionPayloadBuilder(self.nested)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_entry(self, entry_id: int | str) -> SubmissionEntry | None:
        return self.entries.get_entry(entry_id)

    def _get_form(self, form_id: int | str) -> FormSchema | None:
        try:
            return self.forms.get_form(form_id)
        except FormsBackendError as exc:
            logger.warning("Form %s lookup failed: %s", form_id, exc)
            return None

    def _get_edit_link(self, entry_id: int | str) -> edit_token_service.EditLink | None:
        try:
            return edit_token_service.get_edit_link(self.meta, entry_id)
        except FormsBackendError as exc:
            logger.warning("Edit token lookup failed for entry %s: %s", entry_id, exc)
            return None

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on_entry_finalized(self, entry: SubmissionEntry) -> str:
        """Issue and store the entry's edit token."""
        return edit_token_service.issue_edit_token(self.meta, entry)

    def build_webhook_payload(
        self,
        entry: SubmissionEntry,
        form: FormSchema | None = None,
        request_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Payload for the outbound webhook, including edit link metadata if issued."""
        form = form or self._get_form(entry.form_id)
        edit_link = self._get_edit_link(entry.id)

        if form is None:
            logger.warning("Form %s missing for entry %s, sending empty data", entry.form_id, entry.id)
            form = FormSchema(id=entry.form_id)

        if self.legacy_payload:
            user = None
            if entry.created_by and self.users is not None:
                try:
                    user = self.users.get_user(entry.created_by)
                except FormsBackendError as exc:
                    logger.warning("User %s lookup failed: %s", entry.created_by, exc)
            return build_legacy_payload(request_data, form, entry, edit_link=edit_link, user=user)

        payload = self.payload_builder.build(form, entry, edit_link=edit_link)
        if edit_link is not None:
            logger.info("Added edit token to webhook for entry %s", entry.id)
        return payload

    def on_notification(self, notification: Notification, entry: SubmissionEntry) -> Notification:
        """Append the edit link to an outbound notification when a token exists."""
        edit_link = self._get_edit_link(entry.id)
        if edit_link is None:
            return notification
        logger.info("Added edit link to notification for entry %s", entry.id)
        return notification_service.append_edit_link(notification, edit_link.url)

    def resolve_edit_request(self, entry_id: int | str, token: str | None) -> EditContext | None:
        """
        Verify an edit page request.

        None covers a wrong token, a missing entry and a missing form alike.
        """
        if not edit_token_service.verify_edit_token(self.meta, entry_id, token):
            return None

        try:
            entry = self.entries.get_entry(entry_id)
        except FormsBackendError as exc:
            logger.warning("Entry %s lookup failed: %s", entry_id, exc)
            return None
        if entry is None:
            return None

        form = self._get_form(entry.form_id)
        if form is None:
            return None

        logger.info("Using entry editor for entry %s", entry.id)
        return EditContext(
            entry_id=entry.id,
            form_id=str(form.id),
            form_title=form.title,
            editor_shortcode=build_editor_shortcode(form.id, entry.id),
            field_labels=build_field_label_map(form) if self.edit_debug else {},
        )
