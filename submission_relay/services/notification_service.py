"""Notification email helpers."""

from __future__ import annotations

from submission_relay.schemas.forms import Notification


def build_edit_link_footer(edit_url: str) -> str:
    return (
        "\n\n---\n"
        f"You can edit your submission by clicking this link: {edit_url}\n"
        "This link is secure and will expire when you close your browser.\n"
    )


def append_edit_link(notification: Notification, edit_url: str | None) -> Notification:
    """Return a copy of the notification with the edit link footer appended."""
    if not edit_url:
        return notification
    message = (notification.message or "") + build_edit_link_footer(edit_url)
    return notification.model_copy(update={"message": message})
