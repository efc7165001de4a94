"""Gravity Forms / WordPress REST adapter for the platform ports."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from submission_relay.core.config import settings
from submission_relay.schemas.forms import FormSchema, SubmissionEntry, UserInfo
from submission_relay.services.ports import FormsBackendError

logger = logging.getLogger(__name__)


class GravityFormsClient:
    """
    Implements FormStore, EntryStore, EntryMetaStore and UserDirectory over
    the REST API (gf/v2 for forms/entries, wp/v2 for users).

    404 responses map to None; every other failure raises FormsBackendError.
    """

    def __init__(
        self,
        base_url: str,
        *,
        consumer_key: str = "",
        consumer_secret: str = "",
        timeout: float = 15.0,
        transport: httpx.BaseTransport | None = None,
    ):
        auth = (consumer_key, consumer_secret) if consumer_key and consumer_secret else None
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls) -> "GravityFormsClient":
        if not settings.gf_configured:
            logger.warning("Gravity Forms REST credentials are not configured")
        return cls(
            settings.rest_base_url,
            consumer_key=settings.GF_CONSUMER_KEY,
            consumer_secret=settings.GF_CONSUMER_SECRET,
            timeout=settings.GF_TIMEOUT_SECONDS,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "GravityFormsClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any] | None:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise FormsBackendError(f"{method} {path} failed: {exc}") from exc

        if response.status_code == 404:
            return None
        if not response.is_success:
            raise FormsBackendError(f"{method} {path} returned {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise FormsBackendError(f"{method} {path} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise FormsBackendError(f"{method} {path} returned unexpected body")
        return data

    def _get_raw_entry(self, entry_id: int | str) -> dict[str, Any] | None:
        return self._request("GET", f"/gf/v2/entries/{entry_id}")

    # ------------------------------------------------------------------
    # Ports
    # ------------------------------------------------------------------

    def get_form(self, form_id: int | str) -> FormSchema | None:
        data = self._request("GET", f"/gf/v2/forms/{form_id}")
        if data is None:
            return None
        return FormSchema.model_validate(data)

    def get_entry(self, entry_id: int | str) -> SubmissionEntry | None:
        data = self._get_raw_entry(entry_id)
        if data is None:
            return None
        return SubmissionEntry.from_api(data)

    def get_entry_meta(self, entry_id: int | str, key: str) -> str | None:
        data = self._get_raw_entry(entry_id)
        if data is None:
            return None
        value = data.get(key)
        return str(value) if value not in (None, "") else None

    def set_entry_meta(self, entry_id: int | str, key: str, value: str) -> None:
        # gf/v2 updates replace the whole entry, so write back the full object
        data = self._get_raw_entry(entry_id)
        if data is None:
            raise FormsBackendError(f"Entry {entry_id} not found")
        data[key] = value
        self._request("PUT", f"/gf/v2/entries/{entry_id}", json=data)

    def get_user(self, user_id: int | str) -> UserInfo | None:
        data = self._request("GET", f"/wp/v2/users/{user_id}", params={"context": "edit"})
        if data is None:
            return None
        return UserInfo(
            id=data.get("id", user_id),
            email=data.get("email"),
            display_name=data.get("name"),
        )
