"""Layerizer - Turn sliced layer contours into printable layer descriptions.

Layerizer takes the raw closed loops produced by slicing a mesh at a given
height and converts them into nested perimeter loops with extrusion roles,
gap fill, classified infill surfaces and bridge directions.

Example:
    $ layerizer part-slices.json

This will create part-slices-layers.json with perimeters, gap fill and
fill surfaces for every layer region.
"""

__version__ = "0.1.0"
__author__ = "Dimosthenis Kaponis"

__all__ = ["__author__", "__version__"]
