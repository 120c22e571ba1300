"""
Insulation tests.

Tests:
1-2.  Reprocess price fallback
3-5.  Insulation layer weights and costs
6-7.  Insulated core geometry
"""

import math

import pytest

from cablecost.calculators.insulation import (
    effective_reprocess_price, insulated_core, insulation_layer, layer_costing,
)
from cablecost.schemas import Core, Insulation


def test_reprocess_price_defaults_to_70_percent_of_fresh():
    assert effective_reprocess_price(100, 0) == pytest.approx(70)
    assert effective_reprocess_price(100, None) == pytest.approx(70)


def test_reprocess_price_uses_lot_price_when_set():
    assert effective_reprocess_price(100, 45) == 45


def test_insulation_layer_weights_and_costs():
    layer = insulation_layer(2.0, 0.5, 100, 70, 30, 100, 0, 1.4)
    volume = math.pi * 1.25 * 100
    assert layer["insulated_diameter"] == pytest.approx(3.0)
    assert layer["volume_cm3"] == pytest.approx(volume)
    assert layer["fresh_weight"] == pytest.approx(volume * 0.7 * 1.4 / 1000)
    assert layer["reprocess_weight"] == pytest.approx(volume * 0.3 * 1.4 / 1000)
    assert layer["reprocess_price_per_kg"] == pytest.approx(70)
    assert layer["fresh_cost"] == pytest.approx(layer["fresh_weight"] * 100)
    assert layer["reprocess_cost"] == pytest.approx(layer["reprocess_weight"] * 70)
    assert layer["total_cost"] == pytest.approx(layer["fresh_cost"] + layer["reprocess_cost"])


def test_reprocess_density_applies_to_reprocess_portion():
    same = layer_costing(2, 3, 100, 50, 50, 100, 0, 1.4)
    lighter = layer_costing(2, 3, 100, 50, 50, 100, 0, 1.4, reprocess_density=0.935)
    assert lighter["fresh_weight"] == pytest.approx(same["fresh_weight"])
    assert lighter["reprocess_weight"] == pytest.approx(same["reprocess_weight"] * 0.935 / 1.4)


def test_percentages_are_not_normalised():
    layer = layer_costing(2, 3, 100, 80, 40, 100, 0, 1.4)
    volume = math.pi * 1.25 * 100
    assert layer["total_weight"] == pytest.approx(volume * 1.2 * 1.4 / 1000)


def test_insulated_diameter_adds_twice_thickness():
    for thickness in (0.3, 0.5, 1.0, 2.4):
        core = Core(id=1, insulation=Insulation(thickness=thickness))
        dims = insulated_core(core, 100)
        assert math.isclose(dims["outer_diameter"] - dims["core_diameter"], 2 * thickness,
                            rel_tol=1e-9)


def test_insulated_core_outer_area_matches_outer_diameter():
    dims = insulated_core(Core(id=1), 100)
    assert dims["outer_area"] == pytest.approx(math.pi * dims["outer_diameter"] ** 2 / 4)
