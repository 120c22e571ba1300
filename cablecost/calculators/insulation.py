"""
Insulation model: one annular polymer layer around a core.

The layer is split into a fresh and a reprocess portion. Each portion has
its own density and price; the two percentages are used exactly as given
and are not normalised to 100.
"""

from ..config import settings
from ..geometry import annular_volume_cm3, area_from_diameter, layer_weight_kg
from .conductor import conductor_layer


def effective_reprocess_price(fresh_price: float, reprocess_price,
                              factor: float = settings.REPROCESS_PRICE_FACTOR) -> float:
    """The lot's reprocess price, or `factor` × fresh price when none is set."""
    if reprocess_price is not None and reprocess_price > 0:
        return reprocess_price
    return fresh_price * factor


def layer_costing(inner_diameter, outer_diameter, length_m,
                  fresh_percent, reprocess_percent,
                  fresh_price, reprocess_price,
                  fresh_density, reprocess_density=None,
                  reprocess_factor=settings.REPROCESS_PRICE_FACTOR):
    # type: (...) -> dict
    """Weights and costs of a fresh/reprocess layer between two diameters."""
    volume_cm3 = annular_volume_cm3(inner_diameter, outer_diameter, length_m)
    reprocess_density = reprocess_density or fresh_density

    fresh_weight = layer_weight_kg(volume_cm3, fresh_percent, fresh_density)
    reprocess_weight = layer_weight_kg(volume_cm3, reprocess_percent, reprocess_density)

    fresh_price = fresh_price or 0.0
    reprocess_unit_price = effective_reprocess_price(fresh_price, reprocess_price, reprocess_factor)
    fresh_cost = fresh_weight * fresh_price
    reprocess_cost = reprocess_weight * reprocess_unit_price

    return {
        "volume_cm3": volume_cm3,
        "fresh_weight": fresh_weight,
        "reprocess_weight": reprocess_weight,
        "total_weight": fresh_weight + reprocess_weight,
        "reprocess_price_per_kg": reprocess_unit_price,
        "fresh_cost": fresh_cost,
        "reprocess_cost": reprocess_cost,
        "total_cost": fresh_cost + reprocess_cost,
    }


def insulation_layer(core_diameter, thickness, length_m,
                     fresh_percent, reprocess_percent,
                     fresh_price_per_kg, reprocess_price_per_kg,
                     fresh_density, reprocess_density=None,
                     reprocess_factor=settings.REPROCESS_PRICE_FACTOR):
    # type: (...) -> dict
    """
    Insulation around a core of `core_diameter` mm.

    Returns insulated_diameter plus the weights and costs from
    layer_costing().
    """
    insulated_diameter = core_diameter + (2 * thickness)
    result = layer_costing(
        core_diameter, insulated_diameter, length_m,
        fresh_percent, reprocess_percent,
        fresh_price_per_kg, reprocess_price_per_kg,
        fresh_density, reprocess_density,
        reprocess_factor,
    )
    result["insulated_diameter"] = insulated_diameter
    return result


def insulated_core(core, cable_length: float,
                   reprocess_factor: float = settings.REPROCESS_PRICE_FACTOR) -> dict:
    """
    Conductor and insulation geometry for one core.

    This is what a sheath sees: the insulated outer diameter and the
    cross-section it occupies in the bundle.
    """
    conductor = conductor_layer(core, cable_length)
    ins = core.insulation
    insulation = insulation_layer(
        conductor["core_diameter"],
        ins.thickness,
        cable_length,
        ins.fresh_percent,
        ins.reprocess_percent,
        ins.fresh_price_per_kg,
        ins.reprocess_price_per_kg,
        ins.density or settings.DEFAULT_INSULATION_DENSITY,
        ins.reprocess_density,
        reprocess_factor,
    )
    return {
        "core_id": core.id,
        "conductor": conductor,
        "insulation": insulation,
        "core_diameter": conductor["core_diameter"],
        "outer_diameter": insulation["insulated_diameter"],
        "outer_area": area_from_diameter(insulation["insulated_diameter"]),
    }
