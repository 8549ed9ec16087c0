"""Slice file reader.

This module provides the SliceReader class for loading slice files and
converting them into layers of the domain model.
"""

import json
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from layerizer.config.settings import FlowConfig
from layerizer.domain import Layer
from layerizer.exceptions import GeometryError, SliceLoadError
from layerizer.io.converter import schema_to_layers
from layerizer.io.schema import SliceFileSchema


class SliceReader:
    """Loads slice files into layers.

    Example:
        reader = SliceReader(Path("part.json"))
        reader.load()
        for layer in reader.iter_layers():
            print(layer.id)
    """

    def __init__(self, path: Path, flow_config: FlowConfig | None = None) -> None:
        """Initialize the slice reader.

        Args:
            path: Path to the JSON slice file
            flow_config: Flow configuration for the regions (defaults apply if None)
        """
        self._path = path
        self._flow_config = flow_config or FlowConfig()
        self._layers: list[Layer] | None = None

    def load(self) -> None:
        """Load and validate the slice file.

        Raises:
            SliceLoadError: If the file is missing, not JSON or not a valid
                slice document
        """
        if not self._path.exists():
            raise SliceLoadError(str(self._path), "file not found")

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise SliceLoadError(str(self._path), str(e)) from e

        try:
            document = SliceFileSchema.model_validate(data)
        except ValidationError as e:
            raise SliceLoadError(str(self._path), f"invalid slice document: {e}") from e

        try:
            self._layers = schema_to_layers(document, self._flow_config)
        except GeometryError as e:
            raise SliceLoadError(str(self._path), str(e)) from e

    @property
    def layers(self) -> list[Layer]:
        """Return loaded layers.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        if self._layers is None:
            raise RuntimeError("Slices not loaded. Call load() first.")
        return self._layers

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @property
    def region_count(self) -> int:
        return sum(len(layer.regions) for layer in self.layers)

    def iter_layers(self) -> Iterator[Layer]:
        yield from self.layers

    def __enter__(self) -> "SliceReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self._layers = None
