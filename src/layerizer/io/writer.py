"""Result writer for processed layers.

This module provides the ResultWriter class, which saves perimeters, gap
fills and classified fill surfaces as JSON in millimetres.
"""

import json
from pathlib import Path

from layerizer.domain import Layer
from layerizer.exceptions import SliceSaveError
from layerizer.io.converter import layers_to_mm


class ResultWriter:
    """Writes processed layers to a JSON result file.

    Example:
        writer = ResultWriter(Path("part-layers.json"))
        writer.write(layers)
    """

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path

    @property
    def output_path(self) -> Path:
        return self._output_path

    def write(self, layers: list[Layer]) -> None:
        """Save layers to the output path.

        Raises:
            SliceSaveError: If the file cannot be written
        """
        document = layers_to_mm(layers)
        try:
            self._output_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        except OSError as e:
            raise SliceSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_output_path(input_path: Path) -> Path:
        """Generate the default result path for an input file.

        Converts: part.json -> part-layers.json
        """
        return input_path.parent / f"{input_path.stem}-layers.json"
