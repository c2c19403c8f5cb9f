"""
FastAPI endpoint wrapping TicketExtractor.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request

import ticket_assistant.api.models as api_models
from ticket_assistant import models
from ticket_assistant.api import web_logger
from ticket_assistant.config import Settings
from ticket_assistant.core import build_extractor

logger = web_logger.get_web_logger("logs/api.log")
uvicorn_logger = web_logger.get_uvicorn_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings.from_env()
    app.state.settings = settings
    app.state.extractor = build_extractor(settings)
    uvicorn_logger.info(
        f"Ticket extractor ready ({settings.backend} backend, model {settings.model})."
    )

    yield  # API runs here

    del app.state.extractor


app = FastAPI(title="IT Ticket Assistant", lifespan=lifespan)


@app.get("/health", response_model=api_models.HealthResponse)
async def health(request: Request) -> api_models.HealthResponse:
    settings: Settings = request.app.state.settings
    return api_models.HealthResponse(
        status="ok", backend=settings.backend, model=settings.model
    )


@app.post(
    "/tickets/extract",
    response_model=api_models.TicketResponse,
    response_model_by_alias=True,
)
async def extract_ticket(
    body: api_models.ExtractRequest, request: Request
) -> api_models.TicketResponse:
    """
    Turn free-text notes into a structured ticket.
    Only accepts JSON input matching {"input_text": "notes"}.
    """
    if not body.input_text.strip():
        raise HTTPException(status_code=400, detail="Empty input text")

    extractor = request.app.state.extractor
    outcome = await extractor.extract(body.input_text)

    if outcome is None:
        raise HTTPException(
            status_code=409, detail="An extraction is already in progress"
        )

    if isinstance(outcome, models.ExtractionFailure):
        logger.warning(f"Extraction failed with kind {outcome.kind.value}")
        raise HTTPException(status_code=502, detail=outcome.message)

    ticket = outcome.ticket
    return api_models.TicketResponse(
        title=ticket.title,
        category=ticket.category,
        ci_type=ticket.ci_type,
        symptoms=ticket.symptoms,
        missing_info_questions=ticket.missing_info_questions,
        clipboard_text=ticket.to_clipboard_text(),
    )


def main():
    """Entry point for the ticket-assistant-api command."""
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
