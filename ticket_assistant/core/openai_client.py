"""
Hosted generator backend on the OpenAI chat completions API.

The API key is handed in by the caller (see ``config.Settings``); it is not
read from the environment here and not validated locally. The SDK client is
created on the first request, so a missing key is reported by that request
as ``InvalidCredentialError``, the same as a key the service rejects.
"""

from typing import Any

import openai
from openai import AsyncOpenAI

from ticket_assistant import models
from ticket_assistant.errors import InvalidCredentialError, TransportError
from ticket_assistant.utils import llm_helper, logging_helper

logger = logging_helper.get_logger(__name__)

SCHEMA_NAME = "it_ticket"
TEMPERATURE_DEFAULT = 0.2


class OpenAIChatClient:
    """Async client that asks an OpenAI-compatible model for a ticket object."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        timeout: float | None = None,
        temperature: float = TEMPERATURE_DEFAULT,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.temperature = temperature
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        """
        Return the SDK client, creating it on first use.

        Raises:
            InvalidCredentialError: If the SDK refuses to build a client,
                e.g. because no API key is configured.
        """
        if self._client is None:
            try:
                # max_retries=0: a failed call is reported, never retried
                self._client = AsyncOpenAI(
                    api_key=self.api_key or "",
                    base_url=self.base_url,
                    timeout=self.timeout,
                    max_retries=0,
                )
            except openai.OpenAIError as e:
                raise InvalidCredentialError(f"Cannot create API client: {e}") from e
        return self._client

    @staticmethod
    def _response_format(request: models.ExtractionRequest) -> dict[str, Any] | None:
        if request.response_mime_type != models.JSON_MIME_TYPE:
            return None
        return {
            "type": "json_schema",
            "json_schema": {
                "name": SCHEMA_NAME,
                "strict": True,
                "schema": request.response_schema,
            },
        }

    async def generate(self, request: models.ExtractionRequest) -> str | None:
        """
        Request one structured completion.

        Returns:
            Raw JSON text of the first choice, or None if it had no content.

        Raises:
            InvalidCredentialError: If no key is configured or the service rejects it.
            TransportError: For any other API or connection failure.
        """
        client = self._get_client()

        kwargs: dict[str, Any] = {
            "model": request.model,
            "messages": [
                {"role": "system", "content": request.system_instruction},
                {"role": "user", "content": request.prompt},
            ],
            "temperature": self.temperature,
        }
        response_format = self._response_format(request)
        if response_format is not None:
            kwargs["response_format"] = response_format

        try:
            completion = await client.chat.completions.create(**kwargs)
        except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
            raise InvalidCredentialError(f"API key rejected: {e}") from e
        except openai.OpenAIError as e:
            raise TransportError(f"OpenAI request failed: {e}") from e

        choice = completion.choices[0].message if completion.choices else None
        if choice is not None and getattr(choice, "refusal", None):
            logger.warning(f"Model refused to answer: {choice.refusal}")

        return llm_helper.extract_message_text(completion)
