"""
Material catalog: read-only lookup of material types and raw-material lots.

The caller owns the real catalog (database, API, fixture file) and hands it
to the engine as a MaterialCatalog. When nothing is supplied the built-in
defaults below are used: standard conductor metals, PVC/XLPE compounds and
the stock copper / aluminium / alloy rod sizes.

Prices are ₹ per kg.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..geometry import INSULATION_DENSITIES, MATERIAL_DENSITIES
from ..schemas import MaterialType, RawMaterial

logger = logging.getLogger(__name__)

DEFAULT_MATERIAL_TYPES = [
    MaterialType(id="copper", name="Copper", category="conductor-metal",
                 density=MATERIAL_DENSITIES["copper"]),
    MaterialType(id="aluminium", name="Aluminium", category="conductor-metal",
                 density=MATERIAL_DENSITIES["aluminium"]),
    MaterialType(id="alloy", name="Alloy", category="conductor-metal",
                 density=MATERIAL_DENSITIES["alloy"]),
    MaterialType(id="pvc", name="PVC", category="insulation-polymer",
                 density=INSULATION_DENSITIES["pvc"]),
    MaterialType(id="xlpe", name="XLPE", category="insulation-polymer",
                 density=INSULATION_DENSITIES["xlpe"]),
]

# (diameter mm, cross-section mm², price per kg)
_ROD_SIZES = {
    "copper": [(8, 50.27, 800), (9.5, 70.88, 805), (12, 113.10, 810),
               (16, 201.06, 815), (20, 314.16, 820)],
    "aluminium": [(9.5, 70.88, 250), (12, 113.10, 255), (16, 201.06, 260),
                  (20, 314.16, 265)],
    "alloy": [(9.5, 70.88, 300), (12, 113.10, 305), (16, 201.06, 310),
              (20, 314.16, 315)],
}

# Compound lots: fresh avg price, reprocess price
_COMPOUND_PRICES = {
    "pvc": (120.0, 0.0),
    "xlpe": (180.0, 0.0),
}


def _default_raw_materials() -> List[RawMaterial]:
    lots = []
    for metal, sizes in _ROD_SIZES.items():
        for diameter, cross_section, price in sizes:
            lots.append(RawMaterial(
                id=f"{metal}_rod_{diameter}mm",
                name=f"{metal.title()} rod {diameter} mm",
                material_type_id=metal,
                diameter=diameter,
                cross_section=cross_section,
                avg_price_per_kg=price,
                last_price_per_kg=price,
            ))
    for compound, (fresh, reprocess) in _COMPOUND_PRICES.items():
        lots.append(RawMaterial(
            id=f"{compound}_compound",
            name=f"{compound.upper()} compound",
            material_type_id=compound,
            avg_price_per_kg=fresh,
            last_price_per_kg=fresh,
            reprocess_price_per_kg=reprocess,
        ))
    return lots


class MaterialCatalog:
    """Lookup of material types and raw-material lots by id."""

    def __init__(self, material_types: Iterable[MaterialType] = (),
                 raw_materials: Iterable[RawMaterial] = ()):
        self._types: Dict[str, MaterialType] = {t.id: t for t in material_types}
        self._raw: Dict[str, RawMaterial] = {m.id: m for m in raw_materials}

    @classmethod
    def default(cls) -> "MaterialCatalog":
        return cls(DEFAULT_MATERIAL_TYPES, _default_raw_materials())

    def get_material_type(self, type_id: Optional[str]) -> Optional[MaterialType]:
        if not type_id:
            return None
        return self._types.get(type_id)

    def material_name(self, type_id: Optional[str], default: str = "") -> str:
        material_type = self.get_material_type(type_id)
        return material_type.name if material_type else default

    def density_for(self, type_id: Optional[str], default: float) -> float:
        """Catalog density for a type, or the default when unknown or unset."""
        material_type = self.get_material_type(type_id)
        if material_type is None or not material_type.density:
            return default
        return material_type.density

    def types_in_category(self, category: str) -> List[MaterialType]:
        return [t for t in self._types.values() if t.category == category]

    def get_raw_material(self, raw_id: Optional[str]) -> Optional[RawMaterial]:
        if not raw_id:
            return None
        return self._raw.get(raw_id)

    def raw_materials_for(self, type_id: Optional[str]) -> List[RawMaterial]:
        """All lots of a material type, i.e. the rod choices for a conductor metal."""
        return [m for m in self._raw.values() if m.material_type_id == type_id]

    def lot_prices(self, type_id: Optional[str]):
        """
        (fresh price, reprocess price) for a compound, from the first lot of
        that material type. (0, 0) when the type has no lots.
        """
        lots = self.raw_materials_for(type_id)
        if not lots:
            logger.debug("No raw-material lot for material type %s", type_id)
            return 0.0, 0.0
        lot = lots[0]
        return lot.avg_price_per_kg or 0.0, lot.reprocess_price_per_kg or 0.0
