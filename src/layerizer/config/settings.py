"""Configuration settings for Layerizer."""

from pathlib import Path

from pydantic import BaseModel, Field


class SlicingConfig(BaseModel):
    """Per-object slicing parameters consumed by the layer pipeline."""

    perimeters: int = Field(
        default=3,
        ge=0,
        le=50,
        description="Number of perimeter loops per island",
    )
    thin_walls: bool = Field(
        default=True,
        description="Detect walls too thin for a full perimeter loop",
    )
    gap_fill_speed: float = Field(
        default=20.0,
        ge=0.0,
        description="Gap fill speed in mm/s (0 disables gap fill)",
    )
    fill_density: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Sparse infill density (0-1)",
    )
    fill_angle: float = Field(
        default=45.0,
        ge=0.0,
        lt=360.0,
        description="Base infill angle in degrees",
    )
    top_solid_layers: int = Field(
        default=3,
        ge=0,
        description="Number of solid layers below top surfaces",
    )
    bottom_solid_layers: int = Field(
        default=3,
        ge=0,
        description="Number of solid layers above bottom surfaces",
    )
    solid_infill_below_area: float = Field(
        default=70.0,
        ge=0.0,
        description="Force solid infill for internal regions below this area (mm²)",
    )
    external_perimeters_first: bool = Field(
        default=False,
        description="Print external perimeters before internal ones",
    )
    brim_width: float = Field(
        default=0.0,
        ge=0.0,
        description="Brim width in mm (reverses first layer perimeter order)",
    )


class FlowConfig(BaseModel):
    """Extrusion widths used to derive per-role flows.

    Role widths left as None fall back to ``extrusion_width``.
    """

    extrusion_width: float = Field(
        default=0.5,
        gt=0.0,
        description="Default extrusion width in mm",
    )
    perimeter_extrusion_width: float | None = Field(default=None, gt=0.0)
    infill_extrusion_width: float | None = Field(default=None, gt=0.0)
    solid_infill_extrusion_width: float | None = Field(default=None, gt=0.0)
    top_infill_extrusion_width: float | None = Field(default=None, gt=0.0)
    first_layer_extrusion_width: float | None = Field(
        default=None,
        gt=0.0,
        description="Extrusion width for all roles on the first layer",
    )


class GeometryConfig(BaseModel):
    """Tolerances and safety margins, in millimetres unless noted."""

    resolution: float = Field(
        default=0.0125,
        gt=0.0,
        le=1.0,
        description="Simplification tolerance for fill boundaries",
    )
    safety_offset: float = Field(
        default=0.05,
        gt=0.0,
        le=1.0,
        description="Temporary outward offset used while merging raw loops",
    )
    gap_clip_margin: int = Field(
        default=2,
        ge=0,
        description="Extra clip offset for gap detection (scaled units)",
    )
    external_margin: float = Field(
        default=3.0,
        gt=0.0,
        description="Growth of top/bottom surfaces (must exceed perimeter thickness)",
    )
    bridge_angle_step: float = Field(
        default=5.0,
        gt=0.0,
        le=90.0,
        description="Angle increment for the bridge direction search (degrees)",
    )


class ProcessingConfig(BaseModel):
    """Configuration for layer processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto, 1 = in-process)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class LayerizerSettings(BaseModel):
    """Main application settings."""

    slicing: SlicingConfig = Field(default_factory=SlicingConfig)
    flow: FlowConfig = Field(default_factory=FlowConfig)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> LayerizerSettings:
    """Get default application settings."""
    return LayerizerSettings()
