"""
Process API: turn master process definitions into quote entries.

POST /api/processes/entry    snapshot a master into a ProcessEntry
POST /api/processes/preview  evaluate a master formula with default values
"""

from fastapi import APIRouter, HTTPException

from ..calculators.formula import names_in, preview_formula, FormulaError
from ..calculators.processes import build_process_entry, build_quote_context
from ..schemas import BuildEntryRequest, ProcessMasterDefinition, QuoteContext
from ..validation import QuoteValidationError, validate_quote

router = APIRouter(prefix="/processes", tags=["processes"])


@router.post("/entry")
def build_entry(request: BuildEntryRequest):
    """
    Auto variables are filled from the quote when one is sent, else from
    an empty context (all zeros).
    """
    if request.quote is not None:
        try:
            validate_quote(request.quote)
        except QuoteValidationError as e:
            raise HTTPException(status_code=422, detail=e.errors)
        context = build_quote_context(request.quote.cores, request.quote.cable_length)
    else:
        context = QuoteContext()
    return build_process_entry(request.master, context).model_dump(mode="json")


@router.post("/preview")
def preview(master: ProcessMasterDefinition):
    value, error = preview_formula(master.formula, master.variables)
    declared = {v.name for v in master.variables}
    try:
        undeclared = sorted(names_in(master.formula) - declared)
    except FormulaError:
        undeclared = []
    return {
        "value": value,
        "error": error,
        "undeclared_variables": undeclared,
    }
