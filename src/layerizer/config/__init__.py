"""Configuration management for layerizer.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- SlicingConfig: Per-object slicing parameters (perimeters, density, ...)
- FlowConfig: Extrusion widths used to derive flows
- GeometryConfig: Tolerances and safety margins
- ProcessingConfig: Parallel processing settings
- LoggingConfig: Logging settings
- LayerizerSettings: Main application settings
"""

from layerizer.config.settings import (
    FlowConfig,
    GeometryConfig,
    LayerizerSettings,
    LoggingConfig,
    ProcessingConfig,
    SlicingConfig,
    get_default_settings,
)

__all__ = [
    "FlowConfig",
    "GeometryConfig",
    "LayerizerSettings",
    "LoggingConfig",
    "ProcessingConfig",
    "SlicingConfig",
    "get_default_settings",
]
