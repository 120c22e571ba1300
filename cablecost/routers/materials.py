from fastapi import APIRouter

from ..calculators.material_catalog import DEFAULT_MATERIAL_TYPES, MaterialCatalog
from ..config import settings
from ..geometry import area_from_resistance

router = APIRouter(prefix="/materials", tags=["materials"])


@router.get("/defaults")
def list_default_materials():
    """Built-in material types and rod / compound lots."""
    catalog = MaterialCatalog.default()
    return {
        "material_types": [t.model_dump() for t in DEFAULT_MATERIAL_TYPES],
        "raw_materials": [
            m.model_dump()
            for t in DEFAULT_MATERIAL_TYPES
            for m in catalog.raw_materials_for(t.id)
        ],
    }


@router.get("/area-from-cr")
def area_from_cr(cr_value: float, length_m: float = 1.0):
    """Wire area (mm²) for a target CR value, aluminium resistivity."""
    return {
        "cr_value": cr_value,
        "resistivity": settings.ALUMINIUM_RESISTIVITY,
        "area": area_from_resistance(cr_value, settings.ALUMINIUM_RESISTIVITY, length_m),
    }
