from enum import Enum
from typing import List, Optional, Set, Union

from pydantic import BaseModel, Field

from .config import settings


class VariableSource(str, Enum):
    MANUAL = "manual"
    CABLE_LENGTH = "cableLength"
    CORE_COUNT = "coreCount"
    TOTAL_WIRE_COUNT = "totalWireCount"
    TOTAL_DRAWING_LENGTH = "totalDrawingLength"
    TOTAL_MATERIAL_WEIGHT = "totalMaterialWeight"
    TOTAL_CORE_AREA = "totalCoreArea"


class ProcessCategory(str, Enum):
    CONDUCTOR = "conductor"
    INSULATION = "insulation"
    SHEATHING = "sheathing"
    GENERAL = "general"


# --- Reference data (owned by the caller) ---

class MaterialType(BaseModel):
    id: str
    name: str
    category: str = "conductor-metal"   # 'conductor-metal' | 'insulation-polymer' | ...
    density: float


class RawMaterial(BaseModel):
    """A purchasable lot: a conductor rod or an insulation compound."""
    id: str
    name: str = ""
    material_type_id: Optional[str] = None
    diameter: Optional[float] = None
    cross_section: Optional[float] = None
    avg_price_per_kg: float = 0.0
    last_price_per_kg: float = 0.0
    reprocess_price_per_kg: float = 0.0


# --- Cable construction ---

class Insulation(BaseModel):
    material_type_id: Optional[str] = None
    material_type_name: str = ""
    density: float = settings.DEFAULT_INSULATION_DENSITY
    thickness: float = 0.5
    fresh_percent: float = 70.0
    reprocess_percent: float = 30.0
    fresh_price_per_kg: float = 0.0
    reprocess_material_type_id: Optional[str] = None
    reprocess_material_type_name: str = ""
    reprocess_density: Optional[float] = None   # None = same as fresh
    reprocess_price_per_kg: float = 0.0         # 0 = derive from fresh price


class Core(BaseModel):
    id: int
    material_type_id: Optional[str] = None
    material_density: float = settings.DEFAULT_CONDUCTOR_DENSITY
    total_core_area: float = 8.0
    wire_count: int = 16
    wastage_percent: float = 5.0
    has_annealing: bool = False
    selected_rod: Optional[RawMaterial] = None
    insulation: Insulation = Field(default_factory=Insulation)


class SheathGroup(BaseModel):
    id: int
    core_ids: Set[int] = Field(default_factory=set)
    sheath_ids: Set[int] = Field(default_factory=set)
    material: str = ""
    material_type_id: Optional[str] = None
    density: float = settings.DEFAULT_INSULATION_DENSITY
    thickness: float = 1.0
    fresh_percent: float = 60.0
    reprocess_percent: float = 40.0
    fresh_price_per_kg: float = 0.0
    reprocess_material_type_id: Optional[str] = None
    reprocess_material_type_name: str = ""
    reprocess_density: Optional[float] = None
    reprocess_price_per_kg: float = 0.0


# --- Manufacturing processes ---

class ProcessVariableDefinition(BaseModel):
    name: str
    label: str = ""
    unit: str = ""
    source: VariableSource = VariableSource.MANUAL
    default_value: Union[float, str, None] = 0.0


class ProcessVariable(ProcessVariableDefinition):
    value: Union[float, str, None] = 0.0


class ProcessMasterDefinition(BaseModel):
    id: str
    name: str
    description: str = ""
    category: ProcessCategory = ProcessCategory.GENERAL
    formula: str = ""
    formula_note: str = ""
    variables: List[ProcessVariableDefinition] = []
    is_active: bool = True


class ProcessEntry(BaseModel):
    id: str
    process_id: str
    process_name: str
    category: ProcessCategory = ProcessCategory.GENERAL
    formula: str = ""
    formula_note: str = ""
    variables: List[ProcessVariable] = []


class QuoteContext(BaseModel):
    cable_length: float = 0.0
    core_count: int = 0
    total_wire_count: int = 0
    total_drawing_length: float = 0.0
    total_material_weight: float = 0.0
    total_core_area: float = 0.0


class Quote(BaseModel):
    cable_length: float = settings.DEFAULT_CABLE_LENGTH
    cores: List[Core] = []
    sheath_groups: List[SheathGroup] = []
    quote_processes: List[ProcessEntry] = []
    profit_margin_percent: float = 0.0


# --- API request bodies ---

class CatalogPayload(BaseModel):
    material_types: List[MaterialType] = []
    raw_materials: List[RawMaterial] = []


class PriceQuoteRequest(BaseModel):
    quote: Quote
    catalog: Optional[CatalogPayload] = None


class MarginRequest(BaseModel):
    priced_quote: dict
    profit_margin_percent: float


class BuildEntryRequest(BaseModel):
    master: ProcessMasterDefinition
    quote: Optional[Quote] = None
