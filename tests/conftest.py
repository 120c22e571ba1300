"""
Shared test fixtures: test client and sample cable constructions.
"""

import pytest
from fastapi.testclient import TestClient

from cablecost.main import app
from cablecost.schemas import Core, Insulation, Quote, RawMaterial, SheathGroup


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def copper_rod():
    return RawMaterial(
        id="copper_rod_8mm",
        name="Copper rod 8 mm",
        material_type_id="copper",
        diameter=8,
        cross_section=50.27,
        avg_price_per_kg=800,
        last_price_per_kg=800,
    )


@pytest.fixture
def priced_core(copper_rod):
    """8 mm² copper core, 16 wires, 5% wastage, rod at 800/kg, no insulation material."""
    return Core(
        id=1,
        material_type_id="copper",
        material_density=8.96,
        total_core_area=8.0,
        wire_count=16,
        wastage_percent=5.0,
        selected_rod=copper_rod,
    )


@pytest.fixture
def pvc_insulation():
    return Insulation(
        material_type_id="pvc",
        material_type_name="PVC",
        density=1.4,
        thickness=0.5,
        fresh_percent=70,
        reprocess_percent=30,
        fresh_price_per_kg=120,
    )


@pytest.fixture
def three_core_quote(copper_rod, pvc_insulation):
    """Three insulated cores under one PVC sheath."""
    cores = [
        Core(id=i, material_type_id="copper", selected_rod=copper_rod,
             insulation=pvc_insulation)
        for i in (1, 2, 3)
    ]
    sheath = SheathGroup(
        id=1,
        core_ids={1, 2, 3},
        material="PVC",
        material_type_id="pvc",
        thickness=1.2,
        fresh_price_per_kg=110,
    )
    return Quote(cable_length=100, cores=cores, sheath_groups=[sheath])
