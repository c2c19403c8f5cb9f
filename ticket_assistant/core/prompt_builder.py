"""
Prompt builder for IT ticket extraction.

Wraps the operator's raw notes in a fixed analysis prompt and attaches the
service-desk policy (completeness rubric, language, CI and category rules)
plus the JSON schema the generator has to answer with.
"""

from typing import Any

from jinja2 import Template, TemplateError

from ticket_assistant import models
from ticket_assistant.utils import json_schemas, logging_helper

logger = logging_helper.get_logger(__name__)

DEFAULT_PROMPT_TEMPLATE = (
    "Analysiere folgende Problembeschreibung und erstelle ein strukturiertes "
    'IT-Ticket: "{{ input_text }}"'
)

# (question, definition) pairs of the five-question completeness rubric
COMPLETENESS_RUBRIC = [
    ("WER ist betroffen?", "Nutzer/Abteilung"),
    ("WO tritt das Problem auf?", "Ort/Gebäude/Systemumgebung"),
    ("WAS ist genau das Problem?", "Detaillierte Fehlerbeschreibung"),
    ("WIE VIELE sind betroffen?", "Einzelner Nutzer vs. ganze Abteilung"),
    ("WARUM/WANN ist es passiert?", "Auslöser oder Zeitpunkt"),
]

OUTPUT_LANGUAGE = "Deutsch"

DEFAULT_SYSTEM_TEMPLATE = """
Du bist ein erfahrener IT-Service-Desk-Mitarbeiter. Erstelle aus unstrukturierten Nutzereingaben professionelle Tickets.

DEINE ZUSATZAUFGABE:
Prüfe die Eingabe auf Vollständigkeit basierend auf den {{ rubric | length }} W-Fragen:
{% for question, definition in rubric %}
{{ loop.index }}. {{ question }} ({{ definition }})
{% endfor %}

Falls Informationen fehlen, generiere konkrete, freundliche Rückfragen für das Feld 'missingInfoQuestions'.
Ist die Eingabe vollständig, bleibt 'missingInfoQuestions' eine leere Liste.
Die Sprache ist {{ language }}.
Der CI-Typ sollte spezifisch sein (z.B. Laptop, Drucker, Software-Name).
Die Kategorie sollte in das Schema '{{ categories | join("/") }} > Sub-Kategorie' passen.
"""


def render_template(template_str: str, default_template: str, **context: Any) -> str:
    """
    Render a Jinja2 template, falling back to the default when none is given.

    Raises:
        TemplateError: If the template cannot be rendered
    """
    template_source = template_str.strip() or default_template

    try:
        template = Template(template_source, trim_blocks=True)
        return template.render(**context).strip()
    except TemplateError as e:
        raise TemplateError(f"Failed to render prompt template: {e}") from e


def build_system_instruction(template_str: str = "") -> str:
    """Render the service-desk policy block sent as the system instruction."""
    return render_template(
        template_str,
        DEFAULT_SYSTEM_TEMPLATE,
        rubric=COMPLETENESS_RUBRIC,
        language=OUTPUT_LANGUAGE,
        categories=json_schemas.TOP_LEVEL_CATEGORIES,
    )


def build_extraction_request(
    input_text: str,
    model: str,
    prompt_template: str = "",
    system_template: str = "",
) -> models.ExtractionRequest:
    """
    Build the request for one ticket extraction.

    Args:
        input_text: The operator's raw notes, embedded verbatim.
        model: Model identifier forwarded to the generator.
        prompt_template: Optional custom prompt template (uses ``input_text``).
        system_template: Optional custom system instruction template.

    Returns:
        A fresh, immutable ExtractionRequest.
    """
    if not input_text.strip():
        raise ValueError("Input text cannot be empty")

    prompt = render_template(
        prompt_template, DEFAULT_PROMPT_TEMPLATE, input_text=input_text
    )
    logger.debug(f"Built extraction prompt ({len(prompt)} chars) for model {model}")

    return models.ExtractionRequest(
        model=model,
        prompt=prompt,
        system_instruction=build_system_instruction(system_template),
        response_schema=json_schemas.ticket_response_schema(),
    )
