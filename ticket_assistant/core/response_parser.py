"""
Turns the generator's raw text into a validated Ticket.

The generator is asked for a schema-conforming JSON object; anything else
(no content, broken JSON, a non-object, missing or mistyped members) is
rejected as a whole. There is no partial ticket.
"""

import json
from typing import Any

from pydantic import ValidationError

from ticket_assistant import models
from ticket_assistant.errors import EmptyResponseError, PayloadParseError
from ticket_assistant.utils import json_schemas, logging_helper

logger = logging_helper.get_logger(__name__)


def _load_json_object(output: str) -> dict[str, Any]:
    """
    Parse the single JSON object contained in the generator output.

    Output that is not valid JSON as a whole (e.g. wrapped in markdown code
    fences) is cut from the first '{' to the last '}' and parsed again.

    Raises:
        PayloadParseError: If no JSON object is found or parsing fails.
    """
    try:
        parsed = json.loads(output)
    except json.JSONDecodeError:
        start = output.find("{")
        end = output.rfind("}")

        if start == -1 or end < start:
            raise PayloadParseError(
                f"No JSON object found in output: {output[:200]!r}"
            ) from None

        try:
            parsed = json.loads(output[start : end + 1])
        except json.JSONDecodeError as e:
            raise PayloadParseError(f"Invalid JSON output from generator: {e}") from e

    if not isinstance(parsed, dict):
        raise PayloadParseError(
            f"Expected a JSON object, got {type(parsed).__name__}"
        )

    return parsed


def parse_ticket_payload(raw: str | None) -> models.Ticket:
    """
    Parse and validate a raw generator payload.

    Args:
        raw: Text returned by the generator, possibly None.

    Returns:
        The Ticket with fields copied verbatim from the payload.

    Raises:
        EmptyResponseError: If the payload is absent or blank.
        PayloadParseError: If the payload is not a complete ticket object.
    """
    if raw is None or not raw.strip():
        raise EmptyResponseError("Generator returned an empty payload")

    parsed = _load_json_object(raw.strip())

    missing = json_schemas.missing_keys(parsed)
    if missing:
        raise PayloadParseError(f"Payload is missing required keys: {missing}")

    try:
        return models.Ticket.model_validate(parsed)
    except ValidationError as e:
        raise PayloadParseError(
            f"Payload does not match the ticket schema: {e.error_count()} error(s): "
            f"{e.errors(include_url=False)}"
        ) from e
