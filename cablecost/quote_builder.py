"""
Quote editing operations.

Every operation takes a Quote and returns a new Quote; the input is never
mutated. These mirror what a quote editor does when the user adds or
removes cores and sheaths, picks materials, or edits process variables.

Sheath membership exclusivity is not enforced here. Offer only
available_cores() / available_sheaths() to the user before calling
toggle_sheath_core() / toggle_sheath_nested().
"""

import logging
from typing import List, Optional

from .calculators.material_catalog import MaterialCatalog
from .calculators.processes import (
    build_process_entry, build_quote_context, remove_process_entry, update_process_variable,
)
from .config import settings
from .schemas import Core, Insulation, ProcessMasterDefinition, Quote, SheathGroup
from .validation import validate_construction

logger = logging.getLogger(__name__)


def _next_id(items) -> int:
    return max((item.id for item in items), default=0) + 1


def _replace(items, item_id, **changes):
    """
    Copy of `items` with one record's fields changed. The edited record is
    re-validated, so unknown field names and badly typed values raise.
    """
    updated = []
    for item in items:
        if item.id == item_id:
            model = type(item)
            unknown = set(changes) - set(model.model_fields)
            if unknown:
                raise ValueError(f"Unknown {model.__name__} field(s): {', '.join(sorted(unknown))}")
            item = model.model_validate({**dict(item), **changes})
        updated.append(item)
    return updated


def _find(items, item_id):
    for item in items:
        if item.id == item_id:
            return item
    raise KeyError(item_id)


# --- Cores ---

def add_core(quote: Quote) -> Quote:
    core = Core(id=_next_id(quote.cores))
    return quote.model_copy(update={"cores": quote.cores + [core]})


def update_core(quote: Quote, core_id: int, field: str, value) -> Quote:
    """Set one core field. Changing the metal type drops the selected rod."""
    core = _find(quote.cores, core_id)
    changes = {field: value}
    if field == "material_type_id" and value != core.material_type_id:
        changes["selected_rod"] = None
    return quote.model_copy(update={"cores": _replace(quote.cores, core_id, **changes)})


def delete_core(quote: Quote, core_id: int) -> Quote:
    """Remove a core and take it out of every sheath group."""
    cores = [c for c in quote.cores if c.id != core_id]
    groups = [
        sg.model_copy(update={"core_ids": sg.core_ids - {core_id}})
        for sg in quote.sheath_groups
    ]
    return quote.model_copy(update={"cores": cores, "sheath_groups": groups})


def select_core_material(quote: Quote, core_id: int, type_id: Optional[str],
                         catalog: MaterialCatalog) -> Quote:
    """Pick a conductor metal; density follows the catalog, the rod is cleared."""
    if not type_id:
        quote = update_core(quote, core_id, "material_type_id", None)
        return update_core(quote, core_id, "material_density", settings.DEFAULT_CONDUCTOR_DENSITY)
    if catalog.get_material_type(type_id) is None:
        logger.warning("Unknown conductor material type %s", type_id)
        return quote
    quote = update_core(quote, core_id, "material_type_id", type_id)
    return update_core(quote, core_id, "material_density",
                       catalog.density_for(type_id, settings.DEFAULT_CONDUCTOR_DENSITY))


def select_rod(quote: Quote, core_id: int, rod_id: Optional[str], catalog: MaterialCatalog) -> Quote:
    return update_core(quote, core_id, "selected_rod", catalog.get_raw_material(rod_id))


def _update_insulation(quote: Quote, core_id: int, **changes) -> Quote:
    core = _find(quote.cores, core_id)
    insulation = core.insulation.model_copy(update=changes)
    return update_core(quote, core_id, "insulation", insulation)


def select_insulation_material(quote: Quote, core_id: int, type_id: Optional[str],
                               catalog: MaterialCatalog) -> Quote:
    """Pick the fresh insulation compound; density and lot prices come along."""
    if not type_id:
        return _update_insulation(
            quote, core_id,
            material_type_id=None,
            material_type_name="",
            density=settings.DEFAULT_INSULATION_DENSITY,
            fresh_price_per_kg=0.0,
            reprocess_price_per_kg=0.0,
        )
    material_type = catalog.get_material_type(type_id)
    if material_type is None:
        logger.warning("Unknown insulation material type %s", type_id)
        return quote
    fresh_price, reprocess_price = catalog.lot_prices(type_id)
    return _update_insulation(
        quote, core_id,
        material_type_id=type_id,
        material_type_name=material_type.name,
        density=material_type.density or settings.DEFAULT_INSULATION_DENSITY,
        fresh_price_per_kg=fresh_price,
        reprocess_price_per_kg=reprocess_price,
    )


def select_reprocess_material(quote: Quote, core_id: int, type_id: Optional[str],
                              catalog: MaterialCatalog) -> Quote:
    """Use a different compound for the reprocess portion, or clear it."""
    if not type_id:
        return _update_insulation(
            quote, core_id,
            reprocess_material_type_id=None,
            reprocess_material_type_name="",
            reprocess_density=None,
            reprocess_price_per_kg=0.0,
        )
    material_type = catalog.get_material_type(type_id)
    if material_type is None:
        logger.warning("Unknown reprocess material type %s", type_id)
        return quote
    _, reprocess_price = catalog.lot_prices(type_id)
    return _update_insulation(
        quote, core_id,
        reprocess_material_type_id=type_id,
        reprocess_material_type_name=material_type.name,
        reprocess_density=material_type.density or None,
        reprocess_price_per_kg=reprocess_price,
    )


# --- Sheath groups ---

def add_sheath_group(quote: Quote) -> Quote:
    group = SheathGroup(id=_next_id(quote.sheath_groups))
    return quote.model_copy(update={"sheath_groups": quote.sheath_groups + [group]})


def update_sheath_group(quote: Quote, sheath_id: int, field: str, value) -> Quote:
    return _update_sheath_fields(quote, sheath_id, **{field: value})


def _update_sheath_fields(quote: Quote, sheath_id: int, **changes) -> Quote:
    _find(quote.sheath_groups, sheath_id)
    return quote.model_copy(
        update={"sheath_groups": _replace(quote.sheath_groups, sheath_id, **changes)}
    )


def select_sheath_material(quote: Quote, sheath_id: int, type_id: Optional[str],
                           catalog: MaterialCatalog) -> Quote:
    """Pick the fresh sheath compound; density and lot prices come along."""
    if not type_id:
        return _update_sheath_fields(
            quote, sheath_id,
            material_type_id=None,
            material="",
            density=settings.DEFAULT_INSULATION_DENSITY,
            fresh_price_per_kg=0.0,
            reprocess_price_per_kg=0.0,
        )
    material_type = catalog.get_material_type(type_id)
    if material_type is None:
        logger.warning("Unknown sheath material type %s", type_id)
        return quote
    fresh_price, reprocess_price = catalog.lot_prices(type_id)
    return _update_sheath_fields(
        quote, sheath_id,
        material_type_id=type_id,
        material=material_type.name,
        density=material_type.density or settings.DEFAULT_INSULATION_DENSITY,
        fresh_price_per_kg=fresh_price,
        reprocess_price_per_kg=reprocess_price,
    )


def select_sheath_reprocess_material(quote: Quote, sheath_id: int, type_id: Optional[str],
                                     catalog: MaterialCatalog) -> Quote:
    if not type_id:
        return _update_sheath_fields(
            quote, sheath_id,
            reprocess_material_type_id=None,
            reprocess_material_type_name="",
            reprocess_density=None,
            reprocess_price_per_kg=0.0,
        )
    material_type = catalog.get_material_type(type_id)
    if material_type is None:
        logger.warning("Unknown reprocess material type %s", type_id)
        return quote
    _, reprocess_price = catalog.lot_prices(type_id)
    return _update_sheath_fields(
        quote, sheath_id,
        reprocess_material_type_id=type_id,
        reprocess_material_type_name=material_type.name,
        reprocess_density=material_type.density or None,
        reprocess_price_per_kg=reprocess_price,
    )


def delete_sheath_group(quote: Quote, sheath_id: int) -> Quote:
    """
    Remove a group. Its cores become available again; groups it contained
    are kept. References to it from other groups are dropped.
    """
    groups = [
        sg.model_copy(update={"sheath_ids": sg.sheath_ids - {sheath_id}})
        for sg in quote.sheath_groups
        if sg.id != sheath_id
    ]
    return quote.model_copy(update={"sheath_groups": groups})


def toggle_sheath_core(quote: Quote, sheath_id: int, core_id: int) -> Quote:
    group = _find(quote.sheath_groups, sheath_id)
    core_ids = group.core_ids ^ {core_id}
    return update_sheath_group(quote, sheath_id, "core_ids", core_ids)


def toggle_sheath_nested(quote: Quote, sheath_id: int, nested_id: int) -> Quote:
    if nested_id == sheath_id:
        logger.warning("Sheath group %s cannot contain itself", sheath_id)
        return quote
    group = _find(quote.sheath_groups, sheath_id)
    sheath_ids = group.sheath_ids ^ {nested_id}
    return update_sheath_group(quote, sheath_id, "sheath_ids", sheath_ids)


# --- Processes ---

def add_process(quote: Quote, master: ProcessMasterDefinition,
                entry_id: Optional[str] = None) -> Quote:
    """Raises QuoteValidationError when the construction cannot be measured."""
    validate_construction(quote.cores, quote.sheath_groups, quote.cable_length)
    context = build_quote_context(quote.cores, quote.cable_length)
    entry = build_process_entry(master, context, entry_id)
    return quote.model_copy(update={"quote_processes": quote.quote_processes + [entry]})


def remove_process(quote: Quote, entry_id: str) -> Quote:
    return quote.model_copy(
        update={"quote_processes": remove_process_entry(quote.quote_processes, entry_id)}
    )


def set_process_variable(quote: Quote, entry_id: str, name: str, value) -> Quote:
    return quote.model_copy(
        update={"quote_processes": update_process_variable(quote.quote_processes, entry_id, name, value)}
    )


def new_quote(core_count: int = 1, cable_length: Optional[float] = None) -> Quote:
    """A starting quote: default cores and one empty sheath group."""
    cores: List[Core] = [Core(id=i + 1, insulation=Insulation()) for i in range(core_count)]
    return Quote(
        cable_length=cable_length or settings.DEFAULT_CABLE_LENGTH,
        cores=cores,
        sheath_groups=[SheathGroup(id=1)],
    )
