"""
Geometry and conductor tests.

Tests:
1-4.   Circle area / diameter helpers
5-7.   Material and layer weights (unit conventions)
8-9.   CR-value area calculator
10-14. Wire sizing, drawing length, stranded core diameter
15-17. Conductor layer cost
"""

import math

import pytest

from cablecost.calculators.conductor import (
    conductor_layer, conductor_weight_kg, core_diameter, drawing_length, wire_dimensions,
)
from cablecost.geometry import (
    annular_volume_cm3, area_from_diameter, area_from_resistance, diameter_from_area,
    layer_weight_kg, material_weight_kg,
)
from cablecost.schemas import Core


# ============================================================
# Circle helpers
# ============================================================

def test_diameter_from_area_unit_circle():
    assert diameter_from_area(math.pi / 4) == pytest.approx(1.0)


def test_area_from_diameter_8mm_rod():
    assert area_from_diameter(8) == pytest.approx(50.265, abs=1e-3)


def test_area_diameter_inverse():
    for area in (0.5, 8.0, 95.0, 400.0):
        assert area_from_diameter(diameter_from_area(area)) == pytest.approx(area)


def test_annular_volume_is_ring_times_length():
    # ring between 2 mm and 3 mm, 100 m: π(1.5² − 1²) × 100 cm³
    assert annular_volume_cm3(2, 3, 100) == pytest.approx(math.pi * 1.25 * 100)


# ============================================================
# Weights
# ============================================================

def test_material_weight_8mm_copper_rod_100m():
    """50.27 mm² × 100 m of copper is about 45.04 kg."""
    assert material_weight_kg(50.27, 100, 8.96) == pytest.approx(45.04, abs=0.01)


def test_material_weight_wastage_scales():
    base = material_weight_kg(10, 100, 8.96)
    assert material_weight_kg(10, 100, 8.96, 5) == pytest.approx(base * 1.05)


def test_layer_weight_cm3_to_kg():
    # 1000 cm³ at 1.4 g/cm³ is 1.4 kg; 70% of it is 0.98 kg
    assert layer_weight_kg(1000, 70, 1.4) == pytest.approx(0.98)


# ============================================================
# CR-value area calculator
# ============================================================

def test_area_from_resistance():
    assert area_from_resistance(2.8264, 28.264) == pytest.approx(10.0)


def test_area_from_resistance_needs_positive_cr():
    assert area_from_resistance(0, 28.264) is None
    assert area_from_resistance(-1, 28.264) is None


# ============================================================
# Wire sizing
# ============================================================

def test_wire_dimensions_split_area():
    dims = wire_dimensions(8.0, 16)
    assert dims["area_per_wire"] == pytest.approx(0.5)
    assert dims["diameter_per_wire"] == pytest.approx(math.sqrt(2 / math.pi))


def test_drawing_length_multi_wire():
    assert drawing_length(7, 100) == 700


def test_drawing_length_single_wire():
    assert drawing_length(1, 250) == 250


def test_core_diameter_single_wire_is_wire_diameter():
    assert core_diameter(1.78, 1) == 1.78


def test_core_diameter_grows_with_wire_count():
    diameters = [core_diameter(0.5, n) for n in (2, 7, 19, 37, 61)]
    assert diameters == sorted(diameters)
    assert len(set(diameters)) == len(diameters)


# ============================================================
# Conductor layer
# ============================================================

def test_conductor_layer_scenario(priced_core):
    layer = conductor_layer(priced_core, 100)
    assert layer["drawing_length"] == 1600
    # 0.5 mm² × 1600 m × 8.96 × 1.05
    assert layer["weight"] == pytest.approx(7.5264)
    assert layer["price_per_kg"] == 800
    assert layer["cost"] == pytest.approx(7.5264 * 800)
    assert layer["priced"] is True


def test_conductor_without_rod_costs_nothing():
    layer = conductor_layer(Core(id=1), 100)
    assert layer["weight"] > 0
    assert layer["cost"] == 0
    assert layer["priced"] is False


def test_conductor_weight_uses_default_density_when_unset():
    core = Core(id=1, material_density=0)
    assert conductor_weight_kg(core, 100) == pytest.approx(conductor_weight_kg(Core(id=2), 100))
