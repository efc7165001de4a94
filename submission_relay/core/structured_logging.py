"""Structured logging helpers (token-safe)."""

from typing import Any


def build_log_context(
    *,
    entry_id: str | int | None = None,
    form_id: str | int | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict. Token values never belong here."""
    context: dict[str, Any] = {}
    if entry_id:
        context["entry_id"] = str(entry_id)
    if form_id:
        context["form_id"] = str(form_id)
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context
