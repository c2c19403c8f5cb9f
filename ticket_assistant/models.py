from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

JSON_MIME_TYPE = "application/json"
TEXT_MIME_TYPE = "text/plain"

GENERIC_FAILURE_MESSAGE = (
    "Fehler bei der Ticket-Generierung. Bitte versuchen Sie es erneut."
)

# Labels used for the bulk-copy block, in output order
CLIPBOARD_LABELS = {
    "title": "Titel",
    "category": "Kategorie",
    "ci_type": "CI Typ",
    "symptoms": "Symptome",
}


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    INVALID_CREDENTIAL = "invalid_credential"
    PARSE = "parse"
    EMPTY_RESPONSE = "empty_response"


class Ticket(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str
    category: str
    ci_type: str = Field(alias="ciType")
    symptoms: str
    missing_info_questions: list[str] = Field(alias="missingInfoQuestions")

    @property
    def has_missing_info(self) -> bool:
        return len(self.missing_info_questions) > 0

    def field_text(self, name: str) -> str:
        """Text of a single scalar field, addressed by attribute or wire name."""
        for attr, field in type(self).model_fields.items():
            if name in (attr, field.alias) and attr != "missing_info_questions":
                return getattr(self, attr)
        raise KeyError(f"Unknown ticket field: {name}")

    def to_clipboard_text(self) -> str:
        # Follow-up questions are left out of the bulk copy
        return "\n".join(
            f"{label}: {getattr(self, attr)}" for attr, label in CLIPBOARD_LABELS.items()
        )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ExtractionRequest(BaseModel):
    """Everything sent to the generator for one extraction."""

    model_config = ConfigDict(frozen=True)

    model: str
    prompt: str
    system_instruction: str
    # JSON asks the backend for schema-constrained output
    response_mime_type: Literal["application/json", "text/plain"] = JSON_MIME_TYPE
    response_schema: dict[str, Any]


class ExtractionSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    ticket: Ticket


class ExtractionFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    kind: ErrorKind
    message: str = GENERIC_FAILURE_MESSAGE
    # Diagnostic cause; logged, never shown to the operator
    detail: str = Field(default="", repr=False)


ExtractionOutcome = ExtractionSuccess | ExtractionFailure
