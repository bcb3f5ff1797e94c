"""Shared utilities: telemetry (logging) and id generation.

Used by domain, application, and infrastructure. No business logic.
"""

from campus.shared.telemetry import get_logger, setup_logging
from campus.shared.utils import generate_cuid

__all__ = [
    "generate_cuid",
    "get_logger",
    "setup_logging",
]
