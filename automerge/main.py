"""Auto-merge FastAPI application."""

import logging

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from automerge.auth import verify_signature
from automerge.config import Settings, get_settings
from automerge.errors import ConfigurationError, EventPayloadError, ProviderError
from automerge.handlers import EVENT_HANDLERS

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Auto-merge", description="Merges pull requests that opted in once they are green.")


@app.get("/healthz")
async def healthz() -> JSONResponse:
    return JSONResponse({"ok": True})


@app.post("/events/{event}")
async def handle_event(
    event: str,
    request: Request,
    x_hub_signature_256: str = Header(default=""),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """Receive a build, review or pull-request event and evaluate the pull request.

    Provider failures answer 502 so the sender's redelivery can retry; every
    other outcome, including "not merged", is a 200.
    """
    handler = EVENT_HANDLERS.get(event)
    if handler is None:
        raise HTTPException(status_code=404, detail=f"Unknown event {event!r}.")

    body = await request.body()
    if settings.webhook_secret is not None and settings.webhook_secret.get_secret_value():
        if not verify_signature(body, x_hub_signature_256, settings.webhook_secret.get_secret_value()):
            raise HTTPException(status_code=401, detail="Invalid webhook signature.")

    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body.")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Event body must be a JSON object.")

    try:
        result = await handler(payload, settings)
    except EventPayloadError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except ConfigurationError as exc:
        logger.error("Cannot handle %s event: %s", event, exc.message)
        raise HTTPException(status_code=500, detail=exc.message)
    except ProviderError as exc:
        logger.warning("Provider call failed while handling %s event: %s", event, exc.message)
        raise HTTPException(status_code=502, detail=exc.message)

    return JSONResponse(
        {"ok": True, "outcome": result.outcome.value, "reason": result.reason, "pr": result.pr_number}
    )


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
