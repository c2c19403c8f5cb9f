"""JSON schema the generator must honor for an IT ticket."""

from typing import Any

REQUIRED_KEYS = ("title", "category", "ciType", "symptoms", "missingInfoQuestions")

TOP_LEVEL_CATEGORIES = ("Hardware", "Software", "Netzwerk")

TICKET_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "Ein prägnanter, professioneller Titel für das Ticket.",
        },
        "category": {
            "type": "string",
            "description": "Die ITSM-Kategorie des Falls.",
        },
        "ciType": {
            "type": "string",
            "description": "Der Typ des betroffenen Configuration Items.",
        },
        "symptoms": {
            "type": "string",
            "description": "Eine detaillierte Beschreibung der Symptome.",
        },
        "missingInfoQuestions": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "Liste von konkreten Rückfragen zu fehlenden Informationen "
                "(Wer, Wo, Was, Wie viele, Warum)."
            ),
        },
    },
    "required": list(REQUIRED_KEYS),
    "additionalProperties": False,
}


def ticket_response_schema() -> dict[str, Any]:
    """Return a deep copy of the ticket schema so callers cannot mutate the shared one."""
    properties = {
        key: dict(value) for key, value in TICKET_RESPONSE_SCHEMA["properties"].items()
    }
    properties["missingInfoQuestions"]["items"] = dict(
        TICKET_RESPONSE_SCHEMA["properties"]["missingInfoQuestions"]["items"]
    )
    return {
        **TICKET_RESPONSE_SCHEMA,
        "properties": properties,
        "required": list(REQUIRED_KEYS),
    }


def missing_keys(parsed: dict[str, Any]) -> list[str]:
    """
    List the required ticket keys absent from a parsed payload.

    Args:
        parsed: dict parsed from the generator's JSON output.

    Returns:
        Missing key names in schema order; empty when the payload is complete.
    """
    return [key for key in REQUIRED_KEYS if key not in parsed]
