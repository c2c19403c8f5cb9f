from .config import Settings
from .core.extractor import TicketExtractor, build_extractor
from .core.session import SessionState, TicketSession
from .models import ExtractionFailure, ExtractionSuccess, Ticket
from .utils import logging_helper

__all__ = [
    "Settings",
    "TicketExtractor",
    "build_extractor",
    "SessionState",
    "TicketSession",
    "ExtractionFailure",
    "ExtractionSuccess",
    "Ticket",
    "logging_helper",
]
