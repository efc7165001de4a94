"""Interfaces to the form-management platform.

The host environment supplies implementations (see GravityFormsClient);
services receive them through their constructors.
"""

from __future__ import annotations

from typing import Protocol

from submission_relay.schemas.forms import FormSchema, SubmissionEntry, UserInfo


class FormsBackendError(Exception):
    """The forms platform could not answer a lookup (transport or server error)."""


class FormStore(Protocol):
    def get_form(self, form_id: int | str) -> FormSchema | None:
        """Return the form schema, or None if it does not exist."""


class EntryStore(Protocol):
    def get_entry(self, entry_id: int | str) -> SubmissionEntry | None:
        """Return the entry, or None if it does not exist."""


class EntryMetaStore(Protocol):
    def get_entry_meta(self, entry_id: int | str, key: str) -> str | None:
        """Return a meta value attached to an entry, or None."""

    def set_entry_meta(self, entry_id: int | str, key: str, value: str) -> None:
        """Create or replace a meta value attached to an entry."""


class UserDirectory(Protocol):
    def get_user(self, user_id: int | str) -> UserInfo | None:
        """Return the site user, or None."""
