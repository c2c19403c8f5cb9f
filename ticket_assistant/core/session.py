"""
Operator session around a TicketExtractor.

Holds what a single help-desk operator sees: the notes being edited, the
latest ticket, the error banner and whether a submission is running. The
states are explicit so that "a failed attempt keeps the previous ticket on
screen" is a defined transition.
"""

from enum import Enum
from typing import Callable

from ticket_assistant import models
from ticket_assistant.core.extractor import TicketExtractor
from ticket_assistant.utils import logging_helper

logger = logging_helper.get_logger(__name__)


class SessionState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"


class TicketSession:
    """
    Single-operator interaction state.

    Transitions:
        IDLE/EDITING/SUCCESS/FAILURE --edit--> EDITING (IDLE when blank)
        EDITING/SUCCESS/FAILURE --submit--> SUBMITTING
        SUBMITTING --success--> SUCCESS (ticket replaced, banner cleared)
        SUBMITTING --failure--> FAILURE (banner set, previous ticket kept)
    """

    def __init__(
        self,
        extractor: TicketExtractor,
        clipboard: Callable[[str], None] | None = None,
    ) -> None:
        self.extractor = extractor
        self.clipboard = clipboard
        self.state = SessionState.IDLE
        self.input_text = ""
        self.ticket: models.Ticket | None = None
        self.error: str | None = None
        self.last_failure: models.ExtractionFailure | None = None

    @property
    def busy(self) -> bool:
        return self.state is SessionState.SUBMITTING

    @property
    def can_submit(self) -> bool:
        return not self.busy and bool(self.input_text.strip())

    def edit(self, text: str) -> None:
        if self.busy:
            logger.debug("Input locked while submitting")
            return
        self.input_text = text
        self.state = SessionState.EDITING if text.strip() else SessionState.IDLE

    async def submit(self) -> models.ExtractionOutcome | None:
        if not self.can_submit:
            return None

        previous_state = self.state
        previous_error = self.error
        self.state = SessionState.SUBMITTING
        self.error = None
        try:
            outcome = await self.extractor.extract(self.input_text)
        finally:
            if self.state is SessionState.SUBMITTING:
                self.state = previous_state
                self.error = previous_error

        if isinstance(outcome, models.ExtractionSuccess):
            self.ticket = outcome.ticket
            self.last_failure = None
            self.state = SessionState.SUCCESS
        elif isinstance(outcome, models.ExtractionFailure):
            self.error = outcome.message
            self.last_failure = outcome
            self.state = SessionState.FAILURE

        return outcome

    def copy_field(self, name: str) -> None:
        if self.ticket is None:
            return
        try:
            text = self.ticket.field_text(name)
        except KeyError:
            logger.warning(f"Nothing to copy: unknown ticket field {name!r}")
            return
        self._write_clipboard(text)

    def copy_question(self, index: int) -> None:
        if self.ticket is None:
            return
        questions = self.ticket.missing_info_questions
        if not 0 <= index < len(questions):
            logger.warning(f"Nothing to copy: no follow-up question #{index}")
            return
        self._write_clipboard(questions[index])

    def copy_all(self) -> None:
        if self.ticket is not None:
            self._write_clipboard(self.ticket.to_clipboard_text())

    def _write_clipboard(self, text: str) -> None:
        if self.clipboard is None:
            logger.debug("No clipboard available")
            return
        try:
            self.clipboard(text)
        except Exception as e:
            logger.warning(f"Clipboard write failed: {e}")
