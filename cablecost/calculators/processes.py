"""
Process ledger: manufacturing-process line items of a quote.

A ProcessEntry is a snapshot of a ProcessMasterDefinition taken when the
process is added to the quote. Its variables come in two kinds:

    manual  the user types the value; it stays until changed
    auto    bound to a QuoteContext field (cable length, wire totals, ...)
            and re-read from the live context on every evaluation

The entry's cost is its formula evaluated over those variables.
"""

import logging
import uuid
from typing import List, Optional

from ..schemas import (
    ProcessEntry, ProcessMasterDefinition, ProcessVariable, QuoteContext, VariableSource,
)
from .conductor import conductor_weight_kg, drawing_length
from .formula import evaluate_formula

logger = logging.getLogger(__name__)

# VariableSource → QuoteContext attribute
CONTEXT_FIELDS = {
    VariableSource.CABLE_LENGTH: "cable_length",
    VariableSource.CORE_COUNT: "core_count",
    VariableSource.TOTAL_WIRE_COUNT: "total_wire_count",
    VariableSource.TOTAL_DRAWING_LENGTH: "total_drawing_length",
    VariableSource.TOTAL_MATERIAL_WEIGHT: "total_material_weight",
    VariableSource.TOTAL_CORE_AREA: "total_core_area",
}


def build_quote_context(cores, cable_length: float) -> QuoteContext:
    """Quote-wide totals that auto variables can bind to."""
    return QuoteContext(
        cable_length=cable_length,
        core_count=len(cores),
        total_wire_count=sum(c.wire_count or 0 for c in cores),
        total_drawing_length=sum(drawing_length(c.wire_count, cable_length) for c in cores),
        total_material_weight=sum(conductor_weight_kg(c, cable_length) for c in cores),
        total_core_area=sum(c.total_core_area or 0 for c in cores),
    )


def context_value(context: QuoteContext, source: VariableSource) -> float:
    field = CONTEXT_FIELDS.get(source)
    if field is None:
        return 0.0
    return getattr(context, field) or 0


def build_process_entry(master: ProcessMasterDefinition, context: QuoteContext,
                        entry_id: Optional[str] = None) -> ProcessEntry:
    """Snapshot a master process into a new quote entry."""
    variables = []
    for v in master.variables:
        if v.source != VariableSource.MANUAL:
            value = context_value(context, v.source)
        else:
            value = v.default_value or 0
        variables.append(ProcessVariable(
            name=v.name,
            label=v.label,
            unit=v.unit,
            source=v.source,
            default_value=v.default_value,
            value=value,
        ))
    return ProcessEntry(
        id=entry_id or uuid.uuid4().hex,
        process_id=master.id,
        process_name=master.name,
        category=master.category,
        formula=master.formula,
        formula_note=master.formula_note,
        variables=variables,
    )


def bind_variables(entry: ProcessEntry, context: QuoteContext) -> ProcessEntry:
    """Copy of the entry with every auto variable re-read from the context."""
    variables = [
        v if v.source == VariableSource.MANUAL
        else v.model_copy(update={"value": context_value(context, v.source)})
        for v in entry.variables
    ]
    return entry.model_copy(update={"variables": variables})


def remove_process_entry(entries: List[ProcessEntry], entry_id: str) -> List[ProcessEntry]:
    return [e for e in entries if e.id != entry_id]


def update_process_variable(entries: List[ProcessEntry], entry_id: str,
                            name: str, value) -> List[ProcessEntry]:
    """
    Set a manual variable on one entry. Auto variables are read-only and
    are left untouched.
    """
    updated = []
    for entry in entries:
        if entry.id != entry_id:
            updated.append(entry)
            continue
        variables = []
        for v in entry.variables:
            if v.name == name:
                if v.source != VariableSource.MANUAL:
                    logger.debug("Ignoring write to auto variable %s on %s", name, entry_id)
                else:
                    v = v.model_copy(update={"value": value})
            variables.append(v)
        updated.append(entry.model_copy(update={"variables": variables}))
    return updated


def evaluate_entry(entry: ProcessEntry, context: QuoteContext) -> dict:
    """
    Cost of one process entry against the live context.

    Returns a row with the evaluator result; `cost` is 0 when the formula
    fails so the entry can still be summed.
    """
    bound = bind_variables(entry, context)
    result = evaluate_formula(bound.formula, bound.variables)
    if not result["ok"]:
        logger.debug("Process %s (%s) formula error: %s",
                       entry.process_name, entry.id, result["error"])
    return {
        "id": entry.id,
        "process_id": entry.process_id,
        "process_name": entry.process_name,
        "category": entry.category.value,
        "formula": entry.formula,
        "formula_note": entry.formula_note,
        "variables": [v.model_dump(mode="json") for v in bound.variables],
        "result": result,
        "cost": result["value"] if result["ok"] else 0.0,
    }
