from typing import Any


def extract_message_text(response: Any) -> str | None:
    """
    Pull the assistant message text out of a chat-completion response.

    Accepts both the dict shape returned by llama-cpp-python and the object
    shape returned by the openai SDK. Returns None when the response carries
    no choices or no content.
    """
    if not response:
        return None

    if isinstance(response, dict):
        choices = response.get("choices") or []
        if not choices:
            return None
        message = choices[0].get("message") or {}
        return message.get("content")

    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)
