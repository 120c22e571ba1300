"""
Process ledger tests.

Tests:
1-2.  Quote context totals
3-5.  Building entries from masters (manual / auto variables)
6-8.  Editing variables and removing entries
9-10. Evaluating entries against a live context
"""

import pytest

from cablecost.calculators.conductor import conductor_weight_kg
from cablecost.calculators.processes import (
    bind_variables, build_process_entry, build_quote_context, evaluate_entry,
    remove_process_entry, update_process_variable,
)
from cablecost.schemas import (
    Core, ProcessCategory, ProcessMasterDefinition, ProcessVariableDefinition, QuoteContext,
    VariableSource,
)


def _wire_drawing_master():
    """Drawing cost per metre of drawn wire."""
    return ProcessMasterDefinition(
        id="wire-drawing",
        name="Wire drawing",
        category=ProcessCategory.CONDUCTOR,
        formula="drawingLength * rate",
        variables=[
            ProcessVariableDefinition(name="drawingLength", unit="m",
                                      source=VariableSource.TOTAL_DRAWING_LENGTH),
            ProcessVariableDefinition(name="rate", unit="₹/m", default_value=0.25),
        ],
    )


def _cores():
    return [Core(id=1, wire_count=16), Core(id=2, wire_count=7, total_core_area=4.0)]


# ============================================================
# Context
# ============================================================

def test_quote_context_totals():
    cores = _cores()
    ctx = build_quote_context(cores, 100)
    assert ctx.cable_length == 100
    assert ctx.core_count == 2
    assert ctx.total_wire_count == 23
    assert ctx.total_drawing_length == 2300
    assert ctx.total_core_area == 12.0
    assert ctx.total_material_weight == pytest.approx(
        sum(conductor_weight_kg(c, 100) for c in cores)
    )


def test_empty_quote_context():
    ctx = build_quote_context([], 100)
    assert ctx.core_count == 0
    assert ctx.total_drawing_length == 0


# ============================================================
# Entries
# ============================================================

def test_build_entry_snapshots_master():
    entry = build_process_entry(_wire_drawing_master(), build_quote_context(_cores(), 100))
    assert entry.process_id == "wire-drawing"
    assert entry.process_name == "Wire drawing"
    assert entry.category == ProcessCategory.CONDUCTOR
    assert entry.formula == "drawingLength * rate"
    assert entry.id


def test_build_entry_fills_auto_and_manual_values():
    entry = build_process_entry(_wire_drawing_master(), build_quote_context(_cores(), 100))
    values = {v.name: v.value for v in entry.variables}
    assert values == {"drawingLength": 2300, "rate": 0.25}


def test_entries_get_distinct_ids():
    ctx = QuoteContext()
    a = build_process_entry(_wire_drawing_master(), ctx)
    b = build_process_entry(_wire_drawing_master(), ctx)
    assert a.id != b.id


def test_update_manual_variable():
    entry = build_process_entry(_wire_drawing_master(), QuoteContext(), entry_id="e1")
    [updated] = update_process_variable([entry], "e1", "rate", 0.5)
    assert {v.name: v.value for v in updated.variables}["rate"] == 0.5
    assert {v.name: v.value for v in entry.variables}["rate"] == 0.25


def test_auto_variable_is_read_only():
    ctx = build_quote_context(_cores(), 100)
    entry = build_process_entry(_wire_drawing_master(), ctx, entry_id="e1")
    [updated] = update_process_variable([entry], "e1", "drawingLength", 1)
    assert {v.name: v.value for v in updated.variables}["drawingLength"] == 2300


def test_remove_process_entry():
    ctx = QuoteContext()
    entries = [build_process_entry(_wire_drawing_master(), ctx, entry_id=i) for i in ("a", "b")]
    assert [e.id for e in remove_process_entry(entries, "a")] == ["b"]


# ============================================================
# Evaluation
# ============================================================

def test_auto_variables_follow_live_context():
    entry = build_process_entry(_wire_drawing_master(), build_quote_context(_cores(), 100))
    longer = build_quote_context(_cores(), 200)

    bound = bind_variables(entry, longer)
    assert {v.name: v.value for v in bound.variables}["drawingLength"] == 4600

    row = evaluate_entry(entry, longer)
    assert row["cost"] == pytest.approx(4600 * 0.25)
    assert row["category"] == "conductor"


def test_failing_formula_costs_zero():
    master = _wire_drawing_master().model_copy(update={"formula": "drawingLength * missing"})
    row = evaluate_entry(build_process_entry(master, QuoteContext()), QuoteContext())
    assert row["result"]["ok"] is False
    assert row["cost"] == 0


def test_formula_error_is_not_logged_as_warning(caplog):
    master = _wire_drawing_master().model_copy(update={"formula": "rate *"})
    entry = build_process_entry(master, QuoteContext())
    with caplog.at_level("WARNING"):
        evaluate_entry(entry, QuoteContext())
    assert caplog.records == []
