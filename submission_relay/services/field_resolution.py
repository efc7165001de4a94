"""Field value resolution for submission payloads.

Walks a form's fields against one entry and produces slug-keyed values:
- name fields are composed from their inputs ("Ada Lovelace")
- nested-form fields expand into one mapping per child entry
- everything else is read from the field's own id
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any

from submission_relay.schemas.forms import (
    BaseField,
    FormSchema,
    GenericField,
    InputDescriptor,
    NameField,
    NestedFormField,
    OtherField,
    SubmissionEntry,
)
from submission_relay.services.ports import EntryStore, FormsBackendError, FormStore
from submission_relay.utils.normalization import (
    normalize_name_part,
    sanitize_title,
    slugify_label,
    split_identifier_list,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 5


class ResolutionFailurePolicy(str, Enum):
    """
    What to do when a nested child entry cannot be resolved.

    - SKIP: omit the child and keep going (production behavior)
    - STRICT: raise NestedEntryResolutionError (diagnostics)
    """

    SKIP = "skip"
    STRICT = "strict"


class NestedEntryResolutionError(Exception):
    """A nested child entry or its form could not be loaded (STRICT policy only)."""

    def __init__(self, entry_id: str, reason: str):
        super().__init__(f"Nested entry {entry_id} could not be resolved: {reason}")
        self.entry_id = entry_id
        self.reason = reason


def compose_name(inputs: Sequence[InputDescriptor], entry: SubmissionEntry) -> str:
    """Join non-empty name parts in declared input order with single spaces."""
    parts: list[str] = []
    for input_descriptor in inputs:
        part = normalize_name_part(entry.value_for(input_descriptor.id))
        if part:
            parts.append(part)
    return " ".join(parts)


def read_field_value(field: BaseField, entry: SubmissionEntry) -> Any | None:
    """
    Value stored under the field's own id.

    Sub-inputs of composite fields are not merged here; a composite field
    whose data only lives under input ids (e.g. "4.1", "4.3") reads as None.
    """
    return entry.value_for(field.key)


class NestedEntryResolver:
    """Expands nested-form values (child entry id lists) into child mappings."""

    def __init__(
        self,
        forms: FormStore,
        entries: EntryStore,
        *,
        policy: ResolutionFailurePolicy = ResolutionFailurePolicy.SKIP,
        max_depth: int = DEFAULT_MAX_DEPTH,
        fetch_concurrency: int = 1,
    ):
        self.forms = forms
        self.entries = entries
        self.policy = policy
        self.max_depth = max_depth
        self.fetch_concurrency = max(1, fetch_concurrency)

    # ------------------------------------------------------------------
    # Field walking
    # ------------------------------------------------------------------

    def resolve_fields(
        self, fields: Iterable[BaseField], entry: SubmissionEntry, *, depth: int = 0
    ) -> dict[str, Any]:
        """
        Build the slug -> value mapping for one entry.

        Fields are visited in declared order. Empty slugs are skipped and a
        later field with the same slug overwrites the earlier one.
        """
        resolved: dict[str, Any] = {}
        for field in fields:
            slug = slugify_label(field.label)
            if not slug:
                continue
            resolved[slug] = self.resolve_value(field, entry, depth=depth)
        return resolved

    def resolve_value(self, field: BaseField, entry: SubmissionEntry, *, depth: int = 0) -> Any:
        match field:
            case NameField():
                return compose_name(field.inputs, entry)
            case NestedFormField():
                return self.resolve(entry.value_for(field.key), depth=depth + 1)
            case GenericField() | OtherField():
                return read_field_value(field, entry)
            case _:
                raise TypeError(f"Unsupported field variant: {type(field).__name__}")

    # ------------------------------------------------------------------
    # Nested entries
    # ------------------------------------------------------------------

    def resolve(self, raw_value: Any, *, depth: int = 1) -> list[dict[str, Any]]:
        """
        Resolve a comma-separated child id list into ordered child mappings.

        Children that cannot be loaded are omitted under the SKIP policy.
        """
        entry_ids = split_identifier_list(raw_value)
        if not entry_ids:
            return []
        if depth > self.max_depth:
            logger.warning(
                "Nested form depth %s exceeds limit %s, skipping %s child entries",
                depth,
                self.max_depth,
                len(entry_ids),
            )
            return []

        form_cache: dict[str, FormSchema | None] = {}
        if self.fetch_concurrency > 1 and len(entry_ids) > 1:
            workers = min(self.fetch_concurrency, len(entry_ids))
            with ThreadPoolExecutor(max_workers=workers) as pool:
                # map() yields in submission order regardless of completion order
                loaded = list(pool.map(lambda eid: self._load_child(eid, form_cache), entry_ids))
        else:
            loaded = [self._load_child(entry_id, form_cache) for entry_id in entry_ids]

        children: list[dict[str, Any]] = []
        for child in loaded:
            if child is None:
                continue
            child_entry, child_form = child
            children.append(self.resolve_fields(child_form.fields, child_entry, depth=depth))
        return children

    def _load_child(
        self, entry_id: str, form_cache: dict[str, FormSchema | None]
    ) -> tuple[SubmissionEntry, FormSchema] | None:
        try:
            child_entry = self.entries.get_entry(entry_id)
        except FormsBackendError as exc:
            return self._skip(entry_id, f"entry lookup failed: {exc}")
        if child_entry is None:
            return self._skip(entry_id, "entry not found")

        form_key = child_entry.form_id
        if form_key not in form_cache:
            try:
                form_cache[form_key] = self.forms.get_form(form_key)
            except FormsBackendError as exc:
                return self._skip(entry_id, f"form {form_key} lookup failed: {exc}")
        child_form = form_cache[form_key]
        if child_form is None:
            return self._skip(entry_id, f"form {form_key} not found")

        return child_entry, child_form

    def _skip(self, entry_id: str, reason: str) -> None:
        if self.policy is ResolutionFailurePolicy.STRICT:
            raise NestedEntryResolutionError(entry_id, reason)
        logger.info("Skipping nested entry %s: %s", entry_id, reason)
        return None


def resolve_field_value(
    field: BaseField, entry: SubmissionEntry, nested: NestedEntryResolver
) -> Any:
    """Resolve one top-level field of `entry` (see NestedEntryResolver.resolve_value)."""
    return nested.resolve_value(field, entry)


def build_field_label_map(form: FormSchema | None) -> dict[str, str]:
    """
    Map field and input ids to readable slugs for the edit-page debug view.

    Fields map to "company-name"; labelled inputs map to "contact - first".
    Input ids may overwrite a field id with the same value (e.g. email).
    """
    if form is None:
        return {}
    label_map: dict[str, str] = {}
    for field in form.fields:
        field_slug = sanitize_title(field.label)
        if field_slug:
            label_map[field.key] = field_slug
        for input_descriptor in field.inputs or []:
            input_slug = sanitize_title(input_descriptor.label)
            if input_slug:
                label_map[input_descriptor.id] = f"{field_slug} - {input_slug}"
    return label_map
