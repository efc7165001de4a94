"""Webhook payload assembly for form submissions."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from submission_relay.schemas.forms import FormSchema, SubmissionEntry, UserInfo
from submission_relay.services.edit_token_service import EditLink
from submission_relay.services.field_resolution import NestedEntryResolver

logger = logging.getLogger(__name__)

SUBMISSION_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class SubmissionPayloadBuilder:
    """
    Turns an entry into a slug-keyed payload decoupled from numeric field ids.

    Pure over its inputs; nested child lookups go through the resolver's
    injected stores.
    """

    def __init__(self, nested: NestedEntryResolver):
        self.nested = nested

    def build_submission_data(self, form: FormSchema, entry: SubmissionEntry) -> dict[str, Any]:
        return self.nested.resolve_fields(form.fields, entry)

    def build(
        self,
        form: FormSchema,
        entry: SubmissionEntry,
        *,
        edit_link: EditLink | None = None,
    ) -> dict[str, Any]:
        """
        Final webhook body.

        With an edit link: edit_token, edit_url, entry_id, submission_data.
        Without: submission_data only.
        """
        submission_data = self.build_submission_data(form, entry)
        if edit_link is None:
            return {"submission_data": submission_data}
        return {
            "edit_token": edit_link.token,
            "edit_url": edit_link.url,
            "entry_id": edit_link.entry_id,
            "submission_data": submission_data,
        }


def format_submission_time(date_created: str | None) -> str | None:
    """Reformat a stored timestamp as YYYY-MM-DD HH:MM:SS; None if unparseable."""
    if not date_created:
        return None
    try:
        parsed = datetime.fromisoformat(date_created.strip().replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Unparseable entry timestamp: %s", date_created)
        return None
    return parsed.strftime(SUBMISSION_TIME_FORMAT)


def build_legacy_payload(
    request_data: dict[str, Any] | None,
    form: FormSchema,
    entry: SubmissionEntry,
    *,
    edit_link: EditLink | None = None,
    user: UserInfo | None = None,
) -> dict[str, Any]:
    """
    Id-keyed payload: the host's request data (or raw entry values) with
    token, form, submission time and creator blocks added.
    """
    payload: dict[str, Any] = dict(request_data) if request_data else dict(entry.values)

    if edit_link is not None:
        payload["edit_token"] = edit_link.token
        payload["edit_url"] = edit_link.url
        payload["entry_id"] = edit_link.entry_id

    payload["form_info"] = {
        "form_id": form.id,
        "form_title": form.title,
        "form_description": form.description,
    }
    payload["submission_time"] = {
        "timestamp": entry.date_created,
        "formatted": format_submission_time(entry.date_created),
    }

    if entry.created_by and user is not None:
        payload["user_info"] = {
            "user_id": entry.created_by,
            "user_email": user.email,
            "user_name": user.display_name,
        }

    return payload
