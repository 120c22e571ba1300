# Cross-section and weight math for round conductors and annular layers.
# Units: diameters and areas in mm / mm², lengths in metres, densities in g/cm³.

import math

# Material densities (g/cm³). 1 g/cm³ = 1000 kg/m³
MATERIAL_DENSITIES = {
    "copper": 8.96,
    "aluminium": 2.7,
    "alloy": 2.85,
}

INSULATION_DENSITIES = {
    "pvc": 1.4,
    "xlpe": 0.935,
}


def diameter_from_area(area: float) -> float:
    """Diameter (mm) of a circle with the given cross-section (mm²)."""
    return math.sqrt((area * 4) / math.pi)


def area_from_diameter(diameter: float) -> float:
    """Cross-section (mm²) of a circle with the given diameter (mm)."""
    return (math.pi * diameter * diameter) / 4


def annular_volume_cm3(inner_diameter: float, outer_diameter: float, length_m: float) -> float:
    """
    Volume of a ring-shaped layer between two diameters over a length.

    mm² × m is numerically cm³ (1 mm² × 1000 mm = 1000 mm³ = 1 cm³),
    so no scaling is applied.
    """
    outer_radius = outer_diameter / 2
    inner_radius = inner_diameter / 2
    return math.pi * (outer_radius ** 2 - inner_radius ** 2) * length_m


def material_weight_kg(
    cross_section_mm2: float,
    length_m: float,
    density: float,
    wastage_percent: float = 0.0,
) -> float:
    """
    Weight in kg of a solid section drawn to a length, plus wastage.

    mm² × mm → mm³ → m³, × density in kg/m³, × (1 + wastage/100).
    """
    length_mm = length_m * 1000
    volume_m3 = (cross_section_mm2 * length_mm) / 1_000_000_000
    density_kg_per_m3 = density * 1000
    return volume_m3 * density_kg_per_m3 * (1 + wastage_percent / 100.0)


def layer_weight_kg(volume_cm3: float, percent: float, density: float) -> float:
    """Weight in kg of one stock portion (fresh or reprocess) of a layer."""
    return (volume_cm3 * (percent / 100.0) * density) / 1000


def area_from_resistance(cr_value: float, resistivity: float, length_m: float = 1.0):
    """
    Conductor area (mm²) needed to hit a CR (conductor resistance) value.
    Returns None when no positive CR value is given.
    """
    if not cr_value or cr_value <= 0:
        return None
    return (resistivity * length_m) / cr_value
