"""Layers, regions and the per-(layer, region) working set.

A Region describes one material/settings region of the object and owns the
flows derived from configuration. A LayerRegion is the slice of a Region at
one layer: it holds the raw loops coming from the slicer and everything the
pipeline derives from them. It refers to its layer by id and height only;
the layer stack is owned by whoever drives the pipeline.
"""

from dataclasses import dataclass, field

from layerizer.config.settings import FlowConfig
from layerizer.domain.extrusion import Extrusion, ExtrusionPath
from layerizer.domain.flow import Flow, FlowRole
from layerizer.domain.polygon import ExPolygon, Polygon, Polyline
from layerizer.domain.surface import Surface
from layerizer.exceptions import GeometryError


@dataclass
class Region:
    """A material/settings region of the printed object.

    Attributes:
        region_id: Region index within the object
        widths: Extrusion width (mm) per flow role
        first_layer_widths: Width overrides (mm) for the first layer
    """

    region_id: int
    widths: dict[FlowRole, float]
    first_layer_widths: dict[FlowRole, float] = field(default_factory=dict)

    @classmethod
    def from_config(cls, region_id: int, config: FlowConfig) -> "Region":
        """Derive per-role widths from flow configuration."""
        widths = {
            FlowRole.PERIMETER: config.perimeter_extrusion_width or config.extrusion_width,
            FlowRole.INFILL: config.infill_extrusion_width or config.extrusion_width,
            FlowRole.SOLID_INFILL: config.solid_infill_extrusion_width
            or config.extrusion_width,
            FlowRole.TOP_INFILL: config.top_infill_extrusion_width or config.extrusion_width,
        }
        first_layer: dict[FlowRole, float] = {}
        if config.first_layer_extrusion_width is not None:
            first_layer = dict.fromkeys(FlowRole, config.first_layer_extrusion_width)
        return cls(region_id=region_id, widths=widths, first_layer_widths=first_layer)

    def flow(self, role: FlowRole, layer_height: float, first_layer: bool = False) -> Flow:
        width = self.widths[role]
        if first_layer:
            width = self.first_layer_widths.get(role, width)
        return Flow(width=width, layer_height=layer_height)


@dataclass
class LayerRegion:
    """Pipeline state for one region at one layer.

    Attributes:
        region: Region this slice belongs to
        layer_id: Index of the owning layer
        layer_height: Height of the owning layer in mm
        raw_loops: Unordered closed loops from the mesh slicer
        slices: Islands produced by loop merging (immutable afterwards)
        thin_walls: Skeleton paths of walls too thin for a perimeter loop
        thin_fills: Gap fill paths
        fill_surfaces: Surfaces awaiting infill
        perimeters: Ordered perimeter loops and thin wall collections
        fills: Infill extrusions (produced downstream)
    """

    region: Region
    layer_id: int = 0
    layer_height: float = 0.2
    raw_loops: list[Polygon] = field(default_factory=list)
    slices: list[Surface] = field(default_factory=list)
    thin_walls: list[Polyline] = field(default_factory=list)
    thin_fills: list[ExtrusionPath] = field(default_factory=list)
    fill_surfaces: list[Surface] = field(default_factory=list)
    perimeters: list[Extrusion] = field(default_factory=list)
    fills: list[Extrusion] = field(default_factory=list)
    flows: dict[FlowRole, Flow] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.flows = self._derive_flows(self.layer_id, self.layer_height)

    def attach(self, layer_id: int, layer_height: float) -> None:
        """Move this region to another layer and recompute its flows.

        Raises:
            GeometryError: If a flow is too narrow for the layer height; the
                region is left unchanged
        """
        flows = self._derive_flows(layer_id, layer_height)
        self.layer_id = layer_id
        self.layer_height = layer_height
        self.flows = flows

    def _derive_flows(self, layer_id: int, layer_height: float) -> dict[FlowRole, Flow]:
        flows = {
            role: self.region.flow(role, layer_height, first_layer=layer_id == 0)
            for role in FlowRole
        }
        for role, flow in flows.items():
            if flow.spacing <= 0:
                raise GeometryError(
                    f"{role.value} extrusion width {flow.width} mm is too narrow "
                    f"for layer height {layer_height} mm"
                )
        return flows

    @property
    def region_id(self) -> int:
        return self.region.region_id

    @property
    def perimeter_flow(self) -> Flow:
        return self.flows[FlowRole.PERIMETER]

    @property
    def infill_flow(self) -> Flow:
        return self.flows[FlowRole.INFILL]

    @property
    def solid_infill_flow(self) -> Flow:
        return self.flows[FlowRole.SOLID_INFILL]

    @property
    def top_infill_flow(self) -> Flow:
        return self.flows[FlowRole.TOP_INFILL]

    def slice_expolygons(self) -> list[ExPolygon]:
        return [surface.expolygon for surface in self.slices]


@dataclass
class Layer:
    """One horizontal layer of the object.

    Attributes:
        id: Layer index, 0 for the first layer
        print_z: Top of the layer in mm
        height: Layer thickness in mm
        regions: Regions present in this layer
        slices: Union of all region slices, set once loop merging finished
    """

    id: int
    print_z: float
    height: float
    regions: list[LayerRegion] = field(default_factory=list)
    slices: list[ExPolygon] = field(default_factory=list)

    def add_region(self, region: Region, loops: list[Polygon]) -> LayerRegion:
        layerm = LayerRegion(
            region=region,
            layer_id=self.id,
            layer_height=self.height,
            raw_loops=loops,
        )
        self.regions.append(layerm)
        return layerm
