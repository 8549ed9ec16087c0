"""Core processing algorithms for layerizer.

This module contains the layer pipeline and the geometry it is built on:

- Loop merging (raw slicer loops into islands, thin wall detection)
- Perimeter generation (nested loops, gaps, fill boundaries, print order)
- Gap filling (zigzag fill of decreasing width)
- Surface typing, classification and top/bottom expansion
- Bridge direction detection

All pipeline components take explicit settings and are safe for use in
worker processes.

Key classes:
- LoopMerger: Builds island surfaces from raw loops
- PerimeterGenerator: Generates ordered perimeter loops
- GapFiller: Fills gaps between perimeter loops
- SurfaceTypeDetector: Types surfaces against adjacent layers
- SurfaceClassifier: Reclassifies fill surfaces
- ExternalSurfaceProcessor: Expands top/bottom surfaces
- BridgeDetector: Finds bridge angles for bottom surfaces
- RectilinearFiller: Parallel-line fill pattern
- SliceProcessor: Orchestrates the pipeline over all layers
"""

from layerizer.core.bridge import BridgeDetector
from layerizer.core.classifier import SurfaceClassifier
from layerizer.core.detect import SurfaceTypeDetector
from layerizer.core.external import ExternalSurfaceProcessor
from layerizer.core.fill import FillParams, RectilinearFiller, adjust_solid_spacing
from layerizer.core.gap_fill import GapFiller, GapFillResult
from layerizer.core.merger import LoopMerger
from layerizer.core.perimeters import PerimeterGenerator
from layerizer.core.processor import SliceProcessor, process_region

__all__ = [
    # Pipeline stages
    "BridgeDetector",
    "ExternalSurfaceProcessor",
    "GapFillResult",
    "GapFiller",
    "LoopMerger",
    "PerimeterGenerator",
    "SurfaceClassifier",
    "SurfaceTypeDetector",
    # Fill
    "FillParams",
    "RectilinearFiller",
    "adjust_solid_spacing",
    # Processor
    "SliceProcessor",
    "process_region",
]
