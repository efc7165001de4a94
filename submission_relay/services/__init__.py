"""Service layer modules."""

from submission_relay.services.edit_token_service import (
    EditLink,
    build_edit_url,
    issue_edit_token,
    verify_edit_token,
)
from submission_relay.services.field_resolution import (
    NestedEntryResolver,
    ResolutionFailurePolicy,
    compose_name,
    resolve_field_value,
)
from submission_relay.services.submission_hooks import EditContext, SubmissionHooks
from submission_relay.services.webhook_payload_service import SubmissionPayloadBuilder

__all__ = [
    "EditContext",
    "EditLink",
    "NestedEntryResolver",
    "ResolutionFailurePolicy",
    "SubmissionHooks",
    "SubmissionPayloadBuilder",
    "build_edit_url",
    "compose_name",
    "issue_edit_token",
    "resolve_field_value",
    "verify_edit_token",
]
