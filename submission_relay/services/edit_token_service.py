"""Edit token issuing, verification, and edit link helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

from submission_relay.core.config import settings
from submission_relay.core.security import keyed_hash, mask_token, verify_secret
from submission_relay.schemas.forms import SubmissionEntry
from submission_relay.services.ports import EntryMetaStore, FormsBackendError

logger = logging.getLogger(__name__)

ENTRY_ID_PARAM = "gform_update"
TOKEN_PARAM = "token"


@dataclass(frozen=True)
class EditLink:
    entry_id: str
    token: str
    url: str


def generate_edit_token(entry: SubmissionEntry, *, secret: str | None = None) -> str:
    """Keyed hash bound to the entry id and its creation time."""
    return keyed_hash(f"{entry.id}{entry.date_created}", secret or settings.EDIT_TOKEN_SECRET)


def issue_edit_token(
    meta: EntryMetaStore,
    entry: SubmissionEntry,
    *,
    secret: str | None = None,
    meta_key: str | None = None,
) -> str:
    """Generate the entry's edit token and store it (create-or-replace)."""
    token = generate_edit_token(entry, secret=secret)
    meta.set_entry_meta(entry.id, meta_key or settings.EDIT_TOKEN_META_KEY, token)
    logger.info("Generated edit token for entry %s: %s", entry.id, mask_token(token))
    return token


def get_edit_token(
    meta: EntryMetaStore, entry_id: int | str, *, meta_key: str | None = None
) -> str | None:
    stored = meta.get_entry_meta(entry_id, meta_key or settings.EDIT_TOKEN_META_KEY)
    return stored or None


def verify_edit_token(
    meta: EntryMetaStore,
    entry_id: int | str,
    token: str | None,
    *,
    meta_key: str | None = None,
) -> bool:
    """
    Check a presented token against the one stored for the entry.

    Never raises. Entries without a stored token never verify.
    """
    try:
        stored = get_edit_token(meta, entry_id, meta_key=meta_key)
    except FormsBackendError as exc:
        logger.warning("Edit token lookup failed for entry %s: %s", entry_id, exc)
        return False
    return verify_secret(stored, token)


def build_edit_url(
    entry_id: int | str, token: str, *, base_url: str | None = None
) -> str:
    """Absolute edit page URL carrying the entry id and token as query params."""
    base = base_url or settings.edit_page_url
    query = urlencode({ENTRY_ID_PARAM: str(entry_id), TOKEN_PARAM: token})
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{query}"


def get_edit_link(
    meta: EntryMetaStore,
    entry_id: int | str,
    *,
    base_url: str | None = None,
    meta_key: str | None = None,
) -> EditLink | None:
    """Edit link for an entry, or None if no token was ever issued."""
    token = get_edit_token(meta, entry_id, meta_key=meta_key)
    if not token:
        return None
    return EditLink(
        entry_id=str(entry_id),
        token=token,
        url=build_edit_url(entry_id, token, base_url=base_url),
    )
