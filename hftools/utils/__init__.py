"""
Utilities package for HFTools.

Cross-cutting helpers only; keep this package free of ORM logic.
"""

from hftools.utils.logging import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
