"""
Exception hierarchy for ticket extraction.

Every error carries an ``ErrorKind`` so the extractor can log a structured
cause while the operator only ever sees one generic message.
"""

from ticket_assistant.models import ErrorKind


class TicketAssistantError(Exception):
    """Base class for errors raised while producing a ticket."""

    kind: ErrorKind = ErrorKind.TRANSPORT


class TransportError(TicketAssistantError):
    """The generator service could not be reached or answered with an error."""

    kind = ErrorKind.TRANSPORT


class InvalidCredentialError(TicketAssistantError):
    """The generator service rejected the configured API key."""

    kind = ErrorKind.INVALID_CREDENTIAL


class PayloadParseError(TicketAssistantError):
    """The generator answered, but not with a usable ticket object."""

    kind = ErrorKind.PARSE


class EmptyResponseError(PayloadParseError):
    """The generator answered with no content at all."""

    kind = ErrorKind.EMPTY_RESPONSE


class ConfigurationError(ValueError):
    """Settings are inconsistent or incomplete."""
