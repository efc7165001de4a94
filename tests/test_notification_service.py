"""Tests for the notification edit-link footer."""

from submission_relay.schemas.forms import Notification
from submission_relay.services.notification_service import append_edit_link


def test_append_edit_link_adds_footer():
    notification = Notification(to="ada@example.com", subject="Thanks", message="Hello")

    updated = append_edit_link(notification, "https://forms.example.org/edit/?token=x")

    assert updated.message == (
        "Hello\n\n---\n"
        "You can edit your submission by clicking this link: https://forms.example.org/edit/?token=x\n"
        "This link is secure and will expire when you close your browser.\n"
    )
    assert updated.subject == "Thanks"
    assert notification.message == "Hello"


def test_append_edit_link_without_url_is_noop():
    notification = Notification(message="Hello")

    assert append_edit_link(notification, None) is notification


def test_notification_keeps_platform_specific_keys():
    notification = Notification.model_validate({"message": "Hi", "toType": "field", "isActive": True})

    updated = append_edit_link(notification, "https://x")

    dumped = updated.model_dump()
    assert dumped["toType"] == "field"
    assert dumped["isActive"] is True


def test_hooks_on_notification_uses_stored_token(hooks, white_paper):
    notification = Notification(message="Body")
    assert hooks.on_notification(notification, white_paper).message == "Body"

    token = hooks.on_entry_finalized(white_paper)
    updated = hooks.on_notification(notification, white_paper)

    assert f"?gform_update=42&token={token}" in updated.message
    assert updated.message.startswith("Body\n\n---\n")
