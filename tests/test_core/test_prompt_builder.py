"""
Focused test suite for prompt_builder.py
Tests build_extraction_request and the policy block it attaches
"""

import pytest
from jinja2 import TemplateError
from pydantic import ValidationError

from ticket_assistant.core.prompt_builder import (
    build_extraction_request,
    build_system_instruction,
)

NOTES = 'Drucker "HP-2OG" im Büro 2.14 druckt nicht, Fehler 0x50'


class TestBuildExtractionRequest:
    """Test the request builder"""

    def test_prompt_wraps_input_verbatim(self):
        request = build_extraction_request(NOTES, "test-model")

        assert (
            request.prompt
            == "Analysiere folgende Problembeschreibung und erstelle ein "
            f'strukturiertes IT-Ticket: "{NOTES}"'
        )

    def test_input_with_template_syntax_is_not_rendered(self):
        """Jinja markers in operator notes must reach the model untouched"""
        notes = "Fehlermeldung zeigt {{ user }} und <b>HTML</b>"

        request = build_extraction_request(notes, "test-model")

        assert notes in request.prompt

    def test_model_and_format(self):
        request = build_extraction_request(NOTES, "gpt-4o-mini")

        assert request.model == "gpt-4o-mini"
        assert request.response_mime_type == "application/json"

    def test_schema_requires_all_five_members(self):
        schema = build_extraction_request(NOTES, "m").response_schema

        assert schema["type"] == "object"
        assert set(schema["required"]) == {
            "title",
            "category",
            "ciType",
            "symptoms",
            "missingInfoQuestions",
        }
        assert set(schema["properties"]) == set(schema["required"])
        assert schema["properties"]["missingInfoQuestions"]["type"] == "array"
        assert schema["properties"]["missingInfoQuestions"]["items"] == {
            "type": "string"
        }
        for key in ("title", "category", "ciType", "symptoms"):
            assert schema["properties"][key]["type"] == "string"

    def test_empty_input_raises_error(self):
        with pytest.raises(ValueError, match="Input text cannot be empty"):
            build_extraction_request("", "m")

        with pytest.raises(ValueError, match="Input text cannot be empty"):
            build_extraction_request("  \n\t ", "m")

    def test_request_is_immutable(self):
        request = build_extraction_request(NOTES, "m")

        with pytest.raises(ValidationError):
            request.prompt = "changed"

    def test_each_request_gets_its_own_schema(self):
        first = build_extraction_request(NOTES, "m")
        first.response_schema["required"].append("extra")

        second = build_extraction_request(NOTES, "m")

        assert "extra" not in second.response_schema["required"]

    def test_custom_prompt_template(self):
        request = build_extraction_request(
            NOTES, "m", prompt_template="Notiz: {{ input_text }}"
        )

        assert request.prompt == f"Notiz: {NOTES}"

    def test_invalid_template_raises_error(self):
        bad_template = "{{ input_text.nonexistent_method() }}"

        with pytest.raises(TemplateError, match="Failed to render prompt template"):
            build_extraction_request(NOTES, "m", prompt_template=bad_template)


class TestSystemInstruction:
    """Test the service-desk policy block"""

    def test_contains_five_question_rubric(self):
        instruction = build_system_instruction()

        assert "5 W-Fragen" in instruction
        for line in (
            "1. WER ist betroffen? (Nutzer/Abteilung)",
            "2. WO tritt das Problem auf? (Ort/Gebäude/Systemumgebung)",
            "3. WAS ist genau das Problem? (Detaillierte Fehlerbeschreibung)",
            "4. WIE VIELE sind betroffen? (Einzelner Nutzer vs. ganze Abteilung)",
            "5. WARUM/WANN ist es passiert? (Auslöser oder Zeitpunkt)",
        ):
            assert line in instruction

    def test_contains_output_rules(self):
        instruction = build_system_instruction()

        assert "'missingInfoQuestions'" in instruction
        assert "Die Sprache ist Deutsch." in instruction
        assert "Der CI-Typ sollte spezifisch sein" in instruction
        assert "'Hardware/Software/Netzwerk > Sub-Kategorie'" in instruction

    def test_empty_template_uses_default(self):
        assert build_system_instruction("   ") == build_system_instruction()

    def test_custom_system_template(self):
        instruction = build_system_instruction("Sprache: {{ language }}")

        assert instruction == "Sprache: Deutsch"
