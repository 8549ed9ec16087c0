"""Fixed-point coordinate space.

All slice geometry is stored as integers so that boolean and offset
operations are exact. One scaled unit is ``SCALING_FACTOR`` millimetres.
Areas live in the square of that space, so an area in mm² must be scaled
twice: ``scale(scale(area))``.
"""

SCALING_FACTOR = 0.000001

# Default simplification tolerance for fill boundaries, in mm
RESOLUTION = 0.0125


def scale(value: float) -> float:
    """Convert millimetres into scaled units."""
    return value / SCALING_FACTOR


def unscale(value: float) -> float:
    """Convert scaled units back into millimetres."""
    return value * SCALING_FACTOR


SCALED_RESOLUTION = scale(RESOLUTION)
