"""Core module for ticket extraction."""

from .extractor import TicketExtractor, build_extractor, build_generator
from .session import SessionState, TicketSession

__all__ = [
    "TicketExtractor",
    "build_extractor",
    "build_generator",
    "SessionState",
    "TicketSession",
]
