"""Pydantic schemas for forms, entries and event endpoints."""

from submission_relay.schemas.forms import (
    FieldDescriptor,
    FormSchema,
    GenericField,
    InputDescriptor,
    NameField,
    NestedFormField,
    Notification,
    OtherField,
    SubmissionEntry,
    UserInfo,
)

__all__ = [
    "FieldDescriptor",
    "FormSchema",
    "GenericField",
    "InputDescriptor",
    "NameField",
    "NestedFormField",
    "Notification",
    "OtherField",
    "SubmissionEntry",
    "UserInfo",
]
