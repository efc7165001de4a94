"""FastAPI application entry point."""
import logging

from fastapi import FastAPI

from submission_relay.core.config import settings
from submission_relay.routers import events
from submission_relay.schemas.events import HealthResponse

logging.basicConfig(
    level=logging.DEBUG if settings.ENV == "dev" else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Submission Relay",
    description="Edit links and webhook payloads for form submissions",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url=None,
)

app.include_router(events.router)
app.include_router(events.public_router)


@app.get("/health", response_model=HealthResponse, tags=["health"])
def health():
    return HealthResponse(status="ok", version=settings.VERSION)
