"""Parallel processing orchestration for the layer pipeline.

This module coordinates the full workflow. Per-region stages (loop
merging, perimeters, gap fill) only depend on the region itself and run in
parallel using ProcessPoolExecutor. Cross-layer stages (surface types,
classification, external surfaces, bridges) read neighbouring layers and
run afterwards in increasing layer order, so the layer below is always
complete before a layer reads it.

Key components:
- process_region: Top-level picklable function for parallel execution
- SliceProcessor: Main orchestrator class
"""

import time
import traceback
from collections.abc import Callable
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any

import structlog

from layerizer.config import LayerizerSettings
from layerizer.core.classifier import SurfaceClassifier
from layerizer.core.clipper import union_ex
from layerizer.core.detect import SurfaceTypeDetector
from layerizer.core.external import ExternalSurfaceProcessor
from layerizer.core.gap_fill import GapFiller
from layerizer.core.merger import LoopMerger
from layerizer.core.perimeters import PerimeterGenerator
from layerizer.domain import ExPolygon, ExtrusionLoop, Layer, LayerRegion, polygons_of
from layerizer.exceptions import GeometryProcessingError
from layerizer.io import ResultWriter, SliceReader
from layerizer.utils import ProcessingLogger, ProcessingStats, configure_logging

ProgressCallback = Callable[[int, int, str, bool], None]


def process_region(region: LayerRegion, config_dict: dict[str, Any]) -> dict[str, Any]:
    """Run the per-region stages on one layer region.

    Top-level function designed to be picklable for use with
    ProcessPoolExecutor.

    Args:
        region: Layer region holding its raw loops
        config_dict: Serialized settings (from LayerizerSettings.model_dump())

    Returns:
        Dictionary containing either:
        - Success: {"region": LayerRegion, "perimeters": int, "gap_fills": int,
          "duration_ms": float}
        - Error: {"error": str, "stage": str, "layer_id": int, "region_id": int,
          "traceback": str, "duration_ms": float}
    """
    start_time = time.time()
    stage = "loop merging"

    try:
        config = LayerizerSettings.model_validate(config_dict)

        LoopMerger(config).make_surfaces(region)

        stage = "perimeter generation"
        gaps = PerimeterGenerator(config).make_perimeters(region)

        stage = "gap fill"
        GapFiller(config).fill_gaps(region, gaps)

        duration_ms = (time.time() - start_time) * 1000
        return {
            "region": region,
            "perimeters": sum(1 for e in region.perimeters if isinstance(e, ExtrusionLoop)),
            "gap_fills": len(region.thin_fills),
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        error = GeometryProcessingError(region.layer_id, region.region_id, stage, str(e))
        return {
            "error": str(error),
            "stage": stage,
            "layer_id": region.layer_id,
            "region_id": region.region_id,
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


class SliceProcessor:
    """Orchestrates layer processing.

    Manages the complete workflow:
    1. Load the slice file
    2. Run per-region stages in parallel worker processes
    3. Merge region slices into layer slices
    4. Run cross-layer stages layer by layer, bottom to top
    5. Save the results

    Example:
        settings = LayerizerSettings()
        processor = SliceProcessor(settings)
        stats = processor.process(
            input_path=Path("part.json"),
            output_path=Path("part-layers.json"),
            max_workers=4
        )
    """

    def __init__(
        self,
        config: LayerizerSettings,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the processor with configuration.

        Args:
            config: Layerizer settings
            logger: Logger to use (configured from settings if None)
        """
        self.config = config
        if logger is None:
            logger = configure_logging(
                log_file=config.logging.log_file,
                console_level=config.logging.log_level,
                file_level=config.logging.file_log_level,
                quiet=False,
            )
        self.logger = logger
        self.processing_logger = ProcessingLogger(self.logger)
        self.type_detector = SurfaceTypeDetector()
        self.classifier = SurfaceClassifier(config)
        self.external = ExternalSurfaceProcessor(config)

    def process(
        self,
        input_path: Path,
        output_path: Path | None = None,
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> ProcessingStats:
        """Process a slice file and save the results.

        Args:
            input_path: Path to the JSON slice file
            output_path: Path for results (auto-generated if None)
            max_workers: Maximum worker processes (None = config default)
            progress_callback: Optional callback(completed, total, label, success)

        Returns:
            ProcessingStats with counts, timing, and error details

        Raises:
            SliceLoadError: If the slice file cannot be loaded
            SliceSaveError: If the results cannot be saved
            KeyboardInterrupt: If processing is cancelled by user
        """
        if output_path is None:
            output_path = ResultWriter.get_output_path(input_path)

        self.logger.info(
            "Starting slice processing",
            input=str(input_path),
            output=str(output_path),
        )

        reader = SliceReader(input_path, self.config.flow)
        reader.load()
        self.logger.info(
            "Slices loaded",
            layer_count=reader.layer_count,
            region_count=reader.region_count,
        )

        stats = self.process_layers(reader.layers, max_workers, progress_callback)

        ResultWriter(output_path).write(reader.layers)
        self.logger.info("Results saved", output=str(output_path))

        return stats

    def process_layers(
        self,
        layers: list[Layer],
        max_workers: int | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> ProcessingStats:
        """Run the whole pipeline over layers, updating them in place.

        Failed regions are logged and recorded in the stats; processing
        continues with the remaining regions.

        Args:
            layers: Layers sorted by id, with raw loops in their regions
            max_workers: Maximum worker processes (1 = in-process)
            progress_callback: Optional callback(completed, total, label, success)

        Returns:
            ProcessingStats for this run
        """
        self.processing_logger = ProcessingLogger(self.logger)
        stats = self.processing_logger.stats
        stats.start_time = time.time()
        stats.layer_count = len(layers)

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        self._process_regions(layers, max_workers, stats, progress_callback)

        for layer in layers:
            layer.slices = union_ex(
                polygons_of(e for region in layer.regions for e in region.slice_expolygons())
            )

        for index, layer in enumerate(layers):
            lower = layers[index - 1].slices if index > 0 else None
            upper = layers[index + 1].slices if index + 1 < len(layers) else None
            for region in layer.regions:
                self._process_surfaces(region, lower, upper)

        stats.end_time = time.time()
        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            errors=stats.error_count,
            perimeters=stats.perimeter_count,
            bridges=stats.bridge_count,
            duration_seconds=round(stats.duration_seconds, 2),
        )
        return stats

    def _process_surfaces(
        self,
        region: LayerRegion,
        lower: list[ExPolygon] | None,
        upper: list[ExPolygon] | None,
    ) -> None:
        """Run the cross-layer stages on one region."""
        stage = "surface type detection"
        try:
            self.type_detector.detect_surfaces_type(region, lower, upper)

            stage = "surface classification"
            self.classifier.prepare_fill_surfaces(region)

            stage = "external surfaces"
            angles = self.external.process_external_surfaces(region, lower)
            for angle in angles:
                self.processing_logger.log_bridge_detected(
                    region.layer_id, region.region_id, angle
                )

        except Exception as e:
            # partially typed surfaces are not written out
            region.fill_surfaces = []
            error = GeometryProcessingError(region.layer_id, region.region_id, stage, str(e))
            self.processing_logger.log_region_error(
                layer_id=region.layer_id,
                region_id=region.region_id,
                stage=stage,
                error=error,
                traceback=traceback.format_exc(),
            )

    def _handle_result(
        self,
        layer: Layer,
        index: int,
        result: dict[str, Any],
        stats: ProcessingStats,
    ) -> bool:
        """Store a worker result in its layer. Returns True on success."""
        if "error" in result:
            self.processing_logger.log_region_error(
                layer_id=result["layer_id"],
                region_id=result["region_id"],
                stage=result["stage"],
                error=Exception(result["error"]),
                traceback=result.get("traceback"),
            )
            return False

        region: LayerRegion = result["region"]
        layer.regions[index] = region
        duration_ms = result.get("duration_ms", 0.0)
        self.processing_logger.log_region_complete(
            layer_id=region.layer_id,
            region_id=region.region_id,
            perimeters=result["perimeters"],
            gap_fills=result["gap_fills"],
            duration_ms=duration_ms,
        )
        stats.region_timings_ms.append(duration_ms)
        return True

    def _process_regions(
        self,
        layers: list[Layer],
        max_workers: int | None,
        stats: ProcessingStats,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """Run per-region stages, in parallel unless max_workers is 1."""
        config_dict = self.config.model_dump()
        tasks = [
            (layer, index, region)
            for layer in layers
            for index, region in enumerate(layer.regions)
        ]
        total = len(tasks)

        self.logger.info("Starting region processing", region_count=total, max_workers=max_workers)

        if max_workers == 1:
            for completed, (layer, index, region) in enumerate(tasks, start=1):
                self.processing_logger.log_region_start(region.layer_id, region.region_id)
                result = process_region(region, config_dict)
                success = self._handle_result(layer, index, result, stats)
                if progress_callback is not None:
                    progress_callback(completed, total, _label(region), success)
            return

        completed = 0
        pending_futures: dict = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for layer, index, region in tasks:
                future = executor.submit(process_region, region, config_dict)
                pending_futures[future] = (layer, index, region)

            try:
                for future in as_completed(pending_futures):
                    layer, index, region = pending_futures.pop(future)
                    success = False

                    try:
                        success = self._handle_result(layer, index, future.result(), stats)
                    except Exception as e:
                        # Executor-level error
                        self.processing_logger.log_region_error(
                            layer_id=region.layer_id,
                            region_id=region.region_id,
                            stage="worker",
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, _label(region), success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)
                executor.shutdown(wait=True, cancel_futures=True)
                raise


def _label(region: LayerRegion) -> str:
    return f"layer {region.layer_id} region {region.region_id}"
