"""Slice file I/O layer for layerizer.

This module handles reading slice files and writing processed layers as
JSON. It provides a clean abstraction layer between file formats and the
domain models.

Key responsibilities:
- Validate slice documents with pydantic schemas
- Convert millimetre coordinates into scaled domain geometry
- Write perimeters, gap fills and fill surfaces back in millimetres

Key classes:
- SliceReader: Load slice files into layers
- ResultWriter: Save processed layers
"""

from layerizer.io.reader import SliceReader
from layerizer.io.writer import ResultWriter

__all__ = [
    "SliceReader",
    "ResultWriter",
]
