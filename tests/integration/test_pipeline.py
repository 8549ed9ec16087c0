"""End-to-end tests running slice files through the whole layer pipeline."""

import json
from pathlib import Path
from unittest.mock import Mock

import pytest

from layerizer.config import LayerizerSettings
from layerizer.core.processor import SliceProcessor
from layerizer.io import SliceReader
from layerizer.io.converter import layers_to_mm


def square(x0: float, y0: float, x1: float, y1: float) -> list[list[float]]:
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1]]


def layer(layer_id: int, *loops: list[list[float]], region_id: int = 0) -> dict:
    return {
        "id": layer_id,
        "print_z": round(0.2 * (layer_id + 1), 2),
        "height": 0.2,
        "regions": [{"region_id": region_id, "loops": list(loops)}],
    }


@pytest.fixture
def bridge_file(tmp_path: Path) -> Path:
    """Two pillars carrying a slab, which bridges the span between them."""
    path = tmp_path / "bridge.json"
    document = {
        "layers": [
            layer(0, square(0, 0, 5, 20), square(15, 0, 20, 20)),
            layer(1, square(0, 0, 20, 20)),
        ]
    }
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def processor() -> SliceProcessor:
    return SliceProcessor(LayerizerSettings(), logger=Mock())


def load_result(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


class TestBridgePipeline:
    """A slab spanning two pillars."""

    def test_stats(self, processor: SliceProcessor, bridge_file: Path) -> None:
        stats = processor.process(bridge_file, max_workers=1)

        assert stats.processed_count == 2
        assert stats.error_count == 0
        assert stats.bridge_count == 1
        # 3 loops around each pillar, 3 around the slab
        assert stats.perimeter_count == 9

    def test_slab_bridges_between_pillars(
        self, processor: SliceProcessor, bridge_file: Path
    ) -> None:
        processor.process(bridge_file, max_workers=1)

        document = load_result(bridge_file.parent / "bridge-layers.json")
        slab = document["layers"][1]["regions"][0]
        bottoms = [s for s in slab["fill_surfaces"] if s["type"] == "bottom"]
        tops = [s for s in slab["fill_surfaces"] if s["type"] == "top"]

        assert len(bottoms) == 1
        assert bottoms[0]["bridge_angle"] == pytest.approx(0.0, abs=1e-6)
        assert tops
        assert all(s["bridge_angle"] is None for s in tops)

    def test_first_layer_is_not_bridged(
        self, processor: SliceProcessor, bridge_file: Path
    ) -> None:
        processor.process(bridge_file, max_workers=1)

        document = load_result(bridge_file.parent / "bridge-layers.json")
        pillars = document["layers"][0]["regions"][0]
        assert len(pillars["slices"]) == 2
        assert {s["type"] for s in pillars["fill_surfaces"]} == {"bottom"}
        assert all(s["bridge_angle"] is None for s in pillars["fill_surfaces"])

    def test_perimeters_in_print_order(
        self, processor: SliceProcessor, bridge_file: Path
    ) -> None:
        processor.process(bridge_file, max_workers=1)

        document = load_result(bridge_file.parent / "bridge-layers.json")
        slab = document["layers"][1]["regions"][0]
        roles = [p["role"] for p in slab["perimeters"]]
        assert [p["kind"] for p in slab["perimeters"]] == ["loop"] * 3
        assert roles[-1] == "external-perimeter"


class TestPipelineErrors:
    """Failures in one region are reported and do not stop the run."""

    def test_stray_hole(self, processor: SliceProcessor, tmp_path: Path) -> None:
        path = tmp_path / "stray.json"
        stray_hole = list(reversed(square(30, 30, 40, 40)))
        document = {
            "layers": [
                layer(0, square(0, 0, 20, 20)),
                layer(1, square(0, 0, 20, 20), stray_hole),
                layer(2, square(0, 0, 20, 20)),
            ]
        }
        path.write_text(json.dumps(document), encoding="utf-8")

        stats = processor.process(path, tmp_path / "out.json", max_workers=1)

        assert stats.processed_count == 2
        assert stats.error_count == 1
        assert stats.errors[0][0] == "layer 1 region 0"
        result = load_result(tmp_path / "out.json")
        assert result["layers"][1]["regions"][0]["perimeters"] == []
        # the layer above the failed one sees no support and becomes bottom
        assert {s["type"] for s in result["layers"][2]["regions"][0]["fill_surfaces"]} == {
            "bottom"
        }


class TestParallelProcessing:
    """Worker processes produce the same layers as in-process runs."""

    def test_parallel_matches_in_process(self, bridge_file: Path) -> None:
        sequential = SliceReader(bridge_file)
        sequential.load()
        parallel = SliceReader(bridge_file)
        parallel.load()

        SliceProcessor(LayerizerSettings(), logger=Mock()).process_layers(
            sequential.layers, max_workers=1
        )
        stats = SliceProcessor(LayerizerSettings(), logger=Mock()).process_layers(
            parallel.layers, max_workers=2
        )

        assert stats.processed_count == 2
        assert layers_to_mm(parallel.layers) == layers_to_mm(sequential.layers)
