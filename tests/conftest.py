"""Shared fixtures for layerizer tests."""

from collections.abc import Callable

import pytest

from layerizer.config import LayerizerSettings, get_default_settings
from layerizer.domain import LayerRegion, Point, Polygon, Region
from layerizer.units import scale


def _rect(x0: float, y0: float, x1: float, y1: float) -> Polygon:
    """Counter-clockwise rectangle given in millimetres."""
    return Polygon(
        points=[
            Point.from_xy(scale(x0), scale(y0)),
            Point.from_xy(scale(x1), scale(y0)),
            Point.from_xy(scale(x1), scale(y1)),
            Point.from_xy(scale(x0), scale(y1)),
        ]
    )


def _hole(x0: float, y0: float, x1: float, y1: float) -> Polygon:
    """Clockwise rectangle given in millimetres."""
    return _rect(x0, y0, x1, y1).reversed()


@pytest.fixture
def rect() -> Callable[..., Polygon]:
    return _rect


@pytest.fixture
def hole() -> Callable[..., Polygon]:
    return _hole


@pytest.fixture
def settings() -> LayerizerSettings:
    """Default settings."""
    return get_default_settings()


@pytest.fixture
def make_region(settings: LayerizerSettings) -> Callable[..., LayerRegion]:
    """Factory for layer regions holding raw loops."""

    def factory(
        loops: list[Polygon],
        layer_id: int = 1,
        layer_height: float = 0.2,
        config: LayerizerSettings | None = None,
    ) -> LayerRegion:
        region = Region.from_config(0, (config or settings).flow)
        return LayerRegion(
            region=region,
            layer_id=layer_id,
            layer_height=layer_height,
            raw_loops=loops,
        )

    return factory
