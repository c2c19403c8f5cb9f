from pydantic import BaseModel, ConfigDict, Field


class ExtractRequest(BaseModel):
    input_text: str


class TicketResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    category: str
    ci_type: str = Field(alias="ciType")
    symptoms: str
    missing_info_questions: list[str] = Field(alias="missingInfoQuestions")
    clipboard_text: str = Field(alias="clipboardText")


class HealthResponse(BaseModel):
    status: str
    backend: str
    model: str
