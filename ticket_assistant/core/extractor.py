"""
Ticket extraction: build the request, call the generator, interpret the answer.

``TicketExtractor.extract`` is the single entry point used by the session,
the API and the CLI. It never raises: every failure is returned as an
``ExtractionFailure`` carrying one fixed operator-facing message, while the
structured cause is logged.
"""

from typing import Protocol

from ticket_assistant import models
from ticket_assistant.config import Settings
from ticket_assistant.core import prompt_builder, response_parser
from ticket_assistant.errors import TicketAssistantError
from ticket_assistant.utils import logging_helper

logger = logging_helper.get_logger(__name__)


class TicketGenerator(Protocol):
    async def generate(self, request: models.ExtractionRequest) -> str | None: ...


class TicketExtractor:
    """
    Turns free-text notes into a Ticket via a generator backend.

    At most one extraction runs per extractor; a call made while another is
    in flight is inert and returns None, as does a call with blank input.

    Attributes:
        generator: Backend answering ExtractionRequests with raw JSON text
        model: Model identifier placed in every request
    """

    def __init__(self, generator: TicketGenerator, model: str) -> None:
        self.generator = generator
        self.model = model
        self._in_flight = False

    @property
    def busy(self) -> bool:
        return self._in_flight

    async def extract(self, input_text: str) -> models.ExtractionOutcome | None:
        if not input_text or not input_text.strip():
            logger.debug("Blank input, extraction not started")
            return None

        if self._in_flight:
            logger.warning("Extraction already in progress, ignoring new request")
            return None

        # Set before the first await so a concurrent caller sees it
        self._in_flight = True
        try:
            return await self._run(input_text)
        finally:
            self._in_flight = False

    async def _run(self, input_text: str) -> models.ExtractionOutcome:
        try:
            request = prompt_builder.build_extraction_request(input_text, self.model)
            raw_output = await self.generator.generate(request)
            ticket = response_parser.parse_ticket_payload(raw_output)
        except TicketAssistantError as e:
            return self._failure(e.kind, e)
        except Exception as e:
            return self._failure(models.ErrorKind.TRANSPORT, e)

        logger.info(
            f"Ticket extracted: {ticket.title!r} "
            f"({len(ticket.missing_info_questions)} follow-up questions)"
        )
        return models.ExtractionSuccess(ticket=ticket)

    @staticmethod
    def _failure(kind: models.ErrorKind, error: Exception) -> models.ExtractionFailure:
        detail = f"{type(error).__name__}: {error}"
        logger.error(f"Ticket extraction failed [{kind.value}] {detail}")
        return models.ExtractionFailure(kind=kind, detail=detail)


def build_generator(settings: Settings) -> TicketGenerator:
    """Create the generator backend selected by the settings."""
    settings.validate()

    if settings.backend == "llama":
        # Imported lazily: loading llama.cpp is only needed for local models
        from ticket_assistant.core.llm_wrapper import LLMWrapper

        return LLMWrapper(
            model_path=settings.model_path,
            repo_id=settings.model_repo,
            filename=settings.model_filename,
            n_gpu_layers=settings.n_gpu_layers,
        )

    from ticket_assistant.core.openai_client import OpenAIChatClient

    return OpenAIChatClient(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.request_timeout,
    )


def build_extractor(settings: Settings) -> TicketExtractor:
    """Create an extractor wired to the configured backend and model."""
    return TicketExtractor(generator=build_generator(settings), model=settings.model)
