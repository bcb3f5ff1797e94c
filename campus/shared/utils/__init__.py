"""Shared utilities: generators."""

from campus.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
]
