"""
Cable quote API: stateless calculation endpoints.

POST /api/cable-quotes/calculate                   price a full quote
POST /api/cable-quotes/context                     quote context for process variables
POST /api/cable-quotes/cores/{core_id}/dimensions  geometry of one core
POST /api/cable-quotes/sheaths/{sheath_id}         resolve one sheath + selectable contents
POST /api/cable-quotes/margin                      re-price with a new profit margin

Requests carry the whole quote; nothing is stored.
"""

from fastapi import APIRouter, HTTPException

from ..calculators.insulation import insulated_core
from ..calculators.material_catalog import MaterialCatalog
from ..calculators.processes import build_quote_context
from ..calculators.sheath import available_cores, available_sheaths, resolve_sheath
from ..pricing_engine import CablePricingEngine
from ..schemas import MarginRequest, PriceQuoteRequest, Quote
from ..validation import QuoteValidationError, validate_quote

router = APIRouter(prefix="/cable-quotes", tags=["cable-quotes"])


def _engine_for(request: PriceQuoteRequest) -> CablePricingEngine:
    if request.catalog is None:
        return CablePricingEngine()
    catalog = MaterialCatalog(request.catalog.material_types, request.catalog.raw_materials)
    return CablePricingEngine(catalog=catalog)


def _validated(quote: Quote) -> Quote:
    try:
        validate_quote(quote)
    except QuoteValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)
    return quote


@router.post("/calculate")
def calculate_quote(request: PriceQuoteRequest):
    engine = _engine_for(request)
    try:
        return engine.build_priced_quote(request.quote)
    except QuoteValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)


@router.post("/context")
def quote_context(quote: Quote):
    _validated(quote)
    return build_quote_context(quote.cores, quote.cable_length).model_dump()


@router.post("/cores/{core_id}/dimensions")
def core_dimensions(core_id: int, quote: Quote):
    _validated(quote)
    core = next((c for c in quote.cores if c.id == core_id), None)
    if core is None:
        raise HTTPException(status_code=404, detail=f"Core {core_id} not in quote")
    return insulated_core(core, quote.cable_length)


@router.post("/sheaths/{sheath_id}")
def sheath_summary(sheath_id: int, quote: Quote):
    """
    Resolved sheath (or null when it has nothing inside yet) plus the cores
    and sheath groups the user may still add to it.
    """
    _validated(quote)
    group = next((sg for sg in quote.sheath_groups if sg.id == sheath_id), None)
    if group is None:
        raise HTTPException(status_code=404, detail=f"Sheath group {sheath_id} not in quote")
    return {
        "sheath_id": sheath_id,
        "calculation": resolve_sheath(group, quote.cores, quote.sheath_groups, quote.cable_length),
        "available_core_ids": [c.id for c in available_cores(quote.cores, quote.sheath_groups, sheath_id)],
        "available_sheath_ids": [sg.id for sg in available_sheaths(quote.sheath_groups, sheath_id)],
    }


@router.post("/margin")
def recalculate_margin(request: MarginRequest):
    if request.profit_margin_percent < 0:
        raise HTTPException(status_code=422, detail=["profit_margin_percent must be >= 0"])
    engine = CablePricingEngine()
    return engine.recalculate_with_margin(request.priced_quote, request.profit_margin_percent)
