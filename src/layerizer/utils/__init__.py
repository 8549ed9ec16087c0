"""Utility functions for layerizer.

This module provides utility functions including:

- Logging setup and configuration
- Processing statistics
"""

from layerizer.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
