"""Exception hierarchy for Layerizer."""


class LayerizerError(Exception):
    """Base exception for all Layerizer errors."""

    pass


class SliceFileError(LayerizerError):
    """Errors related to loading or saving slice files."""

    pass


class SliceLoadError(SliceFileError):
    """Error loading a slice file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load slices '{path}': {reason}")


class SliceSaveError(SliceFileError):
    """Error saving a layer result file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save layers '{path}': {reason}")


class GeometryError(LayerizerError):
    """Errors in geometric calculations."""

    pass


class TopologyError(GeometryError):
    """Input loops violate the contour/hole nesting precondition.

    Raised when a hole loop is not enclosed by any contour, which points to
    a bug in the upstream slicer rather than to noisy geometry.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)


class GeometryProcessingError(LayerizerError):
    """A pipeline stage failed for one layer region."""

    def __init__(self, layer_id: int, region_id: int, stage: str, reason: str) -> None:
        self.layer_id = layer_id
        self.region_id = region_id
        self.stage = stage
        self.reason = reason
        super().__init__(
            f"layer {layer_id} region {region_id}: geometry processing failed "
            f"in {stage}: {reason}"
        )
