"""
Test configuration and fixtures.

Provides:
- In-memory forms backend implementing the platform ports
- SubmissionHooks bound to that backend
- HTTPX AsyncClient with the hooks dependency overridden
"""
from typing import Any, AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from submission_relay.core.config import settings
from submission_relay.core.deps import INTERNAL_SECRET_HEADER, get_hooks
from submission_relay.main import app
from submission_relay.schemas.forms import FormSchema, SubmissionEntry, UserInfo
from submission_relay.services.ports import FormsBackendError
from submission_relay.services.submission_hooks import SubmissionHooks


TEST_INTERNAL_SECRET = "test-internal-secret"
TEST_TOKEN_SECRET = "test-token-secret"
TEST_SITE_URL = "https://forms.example.org"


# =============================================================================
# In-memory backend
# =============================================================================

class InMemoryFormsBackend:
    """Forms, entries, entry meta and users held in dicts."""

    def __init__(self):
        self.forms: dict[str, FormSchema] = {}
        self.entries: dict[str, SubmissionEntry] = {}
        self.meta: dict[tuple[str, str], str] = {}
        self.users: dict[str, UserInfo] = {}
        self.failing_entries: set[str] = set()
        self.failing_forms: set[str] = set()
        self.entry_lookups: list[str] = []

    def add_form(self, form_id: int | str, fields: list[dict[str, Any]], **extra: Any) -> FormSchema:
        form = FormSchema.model_validate({"id": form_id, "fields": fields, **extra})
        self.forms[str(form_id)] = form
        return form

    def add_entry(
        self,
        entry_id: int | str,
        form_id: int | str,
        values: dict[Any, Any],
        *,
        date_created: str = "2024-05-01 12:30:00",
        created_by: str | None = None,
    ) -> SubmissionEntry:
        entry = SubmissionEntry(
            id=entry_id,
            form_id=form_id,
            date_created=date_created,
            created_by=created_by,
            values=values,
        )
        self.entries[str(entry_id)] = entry
        return entry

    def get_form(self, form_id: int | str) -> FormSchema | None:
        if str(form_id) in self.failing_forms:
            raise FormsBackendError(f"form {form_id} unavailable")
        return self.forms.get(str(form_id))

    def get_entry(self, entry_id: int | str) -> SubmissionEntry | None:
        self.entry_lookups.append(str(entry_id))
        if str(entry_id) in self.failing_entries:
            raise FormsBackendError(f"entry {entry_id} unavailable")
        return self.entries.get(str(entry_id))

    def get_entry_meta(self, entry_id: int | str, key: str) -> str | None:
        return self.meta.get((str(entry_id), key))

    def set_entry_meta(self, entry_id: int | str, key: str, value: str) -> None:
        self.meta[(str(entry_id), key)] = value

    def get_user(self, user_id: int | str) -> UserInfo | None:
        return self.users.get(str(user_id))


# =============================================================================
# Settings
# =============================================================================

@pytest.fixture(autouse=True)
def test_settings(monkeypatch: pytest.MonkeyPatch):
    """Pin settings that tokens, URLs and endpoint auth depend on."""
    monkeypatch.setattr(settings, "EDIT_TOKEN_SECRET", TEST_TOKEN_SECRET)
    monkeypatch.setattr(settings, "SITE_URL", TEST_SITE_URL)
    monkeypatch.setattr(settings, "EDIT_PAGE_PATH", "/form-test-edit/")
    monkeypatch.setattr(settings, "INTERNAL_SECRET", TEST_INTERNAL_SECRET)
    monkeypatch.setattr(settings, "WEBHOOK_URL", "")
    monkeypatch.setattr(settings, "WEBHOOK_SECRET", "")
    monkeypatch.setattr(settings, "WEBHOOK_PAYLOAD_FORMAT", "structured")
    monkeypatch.setattr(settings, "EDIT_DEBUG", False)
    monkeypatch.setattr(settings, "NESTED_MAX_DEPTH", 5)
    monkeypatch.setattr(settings, "NESTED_FETCH_CONCURRENCY", 1)
    return settings


# =============================================================================
# Backend Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def backend() -> InMemoryFormsBackend:
    return InMemoryFormsBackend()


@pytest.fixture(scope="function")
def white_paper(backend: InMemoryFormsBackend) -> SubmissionEntry:
    """
    Parent form with a generic field, a name field and a nested author form.

    Child entry 101 belongs to form 2 ("Name" field).
    """
    backend.add_form(
        1,
        [
            {"id": 1, "label": "Company Name", "type": "generic"},
            {
                "id": 2,
                "label": "Contact",
                "type": "name",
                "inputs": [{"id": "2.3", "label": "First"}, {"id": "2.6", "label": "Last"}],
            },
            {"id": 3, "label": "Authors", "type": "form", "gpnfForm": 2},
        ],
        title="White Paper Submission",
        description="Submit a white paper",
    )
    backend.add_form(2, [{"id": 1, "label": "Name", "type": "generic"}], title="Author")
    backend.add_entry(101, 2, {1: "Grace"})
    return backend.add_entry(
        42,
        1,
        {1: "Acme", "2.3": "Ada", "2.6": "Lovelace", 3: "101"},
        created_by="7",
    )


@pytest.fixture(scope="function")
def hooks(backend: InMemoryFormsBackend) -> SubmissionHooks:
    return SubmissionHooks(backend, backend, backend, backend)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(hooks: SubmissionHooks) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient for public endpoints (no internal secret)."""
    app.dependency_overrides[get_hooks] = lambda: hooks

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def host_client(hooks: SubmissionHooks) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient acting as the host site (sends the internal secret)."""
    app.dependency_overrides[get_hooks] = lambda: hooks

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={INTERNAL_SECRET_HEADER: TEST_INTERNAL_SECRET},
    ) as c:
        yield c

    app.dependency_overrides.clear()
