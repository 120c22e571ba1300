"""
Conductor model: wire sizing, drawing length and metal weight per core.

A core of total area A made of n wires is drawn as n wires of area A/n.
Every strand consumes one cable length of drawn wire, so the drawing
length is n × cable length (a 1:1 model, no lay-length correction).
"""

import math

from ..config import settings
from ..geometry import diameter_from_area, material_weight_kg


def wire_dimensions(total_core_area: float, wire_count: int) -> dict:
    """Area and diameter of one wire. wire_count must be >= 1."""
    area_per_wire = total_core_area / wire_count
    return {
        "area_per_wire": area_per_wire,
        "diameter_per_wire": diameter_from_area(area_per_wire),
    }


def drawing_length(wire_count: int, cable_length: float) -> float:
    """Metres of drawn wire needed for `cable_length` metres of core."""
    if wire_count == 1:
        return cable_length
    return wire_count * cable_length


def core_diameter(wire_diameter: float, wire_count: int) -> float:
    """
    Stranded core diameter.
    sqrt(n) × d / 2, a packing approximation, not exact circle packing.
    """
    if wire_count == 1:
        return wire_diameter
    return math.sqrt(wire_count) * wire_diameter / 2


def _density(core) -> float:
    return core.material_density or settings.DEFAULT_CONDUCTOR_DENSITY


def rod_price_per_kg(core) -> float:
    """Average price of the selected rod, 0 when no rod is selected."""
    if core.selected_rod is None:
        return 0.0
    return core.selected_rod.avg_price_per_kg or 0.0


def conductor_weight_kg(core, cable_length: float) -> float:
    """Metal weight for one core including wastage."""
    dims = wire_dimensions(core.total_core_area, core.wire_count)
    length = drawing_length(core.wire_count, cable_length)
    return material_weight_kg(
        dims["area_per_wire"], length, _density(core), core.wastage_percent,
    )


def conductor_layer(core, cable_length: float) -> dict:
    """Full conductor breakdown for one core: geometry, weight and cost."""
    dims = wire_dimensions(core.total_core_area, core.wire_count)
    length = drawing_length(core.wire_count, cable_length)
    weight = material_weight_kg(
        dims["area_per_wire"], length, _density(core), core.wastage_percent,
    )
    price = rod_price_per_kg(core)
    return {
        "area_per_wire": dims["area_per_wire"],
        "diameter_per_wire": dims["diameter_per_wire"],
        "drawing_length": length,
        "core_diameter": core_diameter(dims["diameter_per_wire"], core.wire_count),
        "weight": weight,
        "price_per_kg": price,
        "cost": weight * price,
        "priced": core.selected_rod is not None,
    }
