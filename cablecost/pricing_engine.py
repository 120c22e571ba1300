"""
Cable quote pricing.

Rolls conductor, insulation, sheath and process costs into the priced
quote: material cost, process cost, grand total, profit and final price,
plus the per-component detail rows used for the summary report.

Pure math. Reference data comes in through a MaterialCatalog.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .calculators.insulation import insulated_core
from .calculators.material_catalog import MaterialCatalog
from .calculators.processes import build_quote_context, evaluate_entry
from .calculators.sheath import resolve_sheath
from .config import settings
from .schemas import Quote, QuoteContext
from .validation import validate_construction, validate_quote

logger = logging.getLogger(__name__)


class CablePricingEngine:
    """Builds priced cable quotes from a Quote and a material catalog."""

    def __init__(self, catalog: Optional[MaterialCatalog] = None,
                 reprocess_factor: float = settings.REPROCESS_PRICE_FACTOR,
                 margin_options: Optional[List[int]] = None):
        self.catalog = catalog or MaterialCatalog.default()
        self.reprocess_factor = reprocess_factor
        self.margin_options = list(margin_options or settings.PROFIT_MARGIN_OPTIONS)

    # --- Material costs ---

    def calculate_totals(self, cores, sheath_groups, cable_length) -> dict:
        """
        Material cost of the construction.

        Returns {"total_cost": float, "details": [...]} where details holds
        one conductor row per core, one insulation row per core with an
        insulation material set, and one row per sheath group that
        resolves. total_cost is the sum of the detail costs.
        """
        validate_construction(cores, sheath_groups, cable_length)

        details = []
        for idx, core in enumerate(cores):
            dims = insulated_core(core, cable_length, self.reprocess_factor)
            details.append(self._make_conductor_detail(idx, core, dims["conductor"]))
            if self._has_insulation_material(core):
                details.append(self._make_insulation_detail(idx, core, dims["insulation"]))

        for idx, group in enumerate(sheath_groups):
            calc = resolve_sheath(group, cores, sheath_groups, cable_length, self.reprocess_factor)
            if calc is None:
                continue
            details.append(self._make_sheath_detail(idx, group, calc))

        total_cost = sum(d["cost"] for d in details)
        return {"total_cost": total_cost, "details": details}

    def _has_insulation_material(self, core) -> bool:
        ins = core.insulation
        return bool(ins.material_type_id or ins.material_type_name)

    def _make_conductor_detail(self, idx, core, conductor) -> dict:
        return {
            "type": "conductor",
            "core_index": idx,
            "core_id": core.id,
            "material_type_id": core.material_type_id,
            "name": self.catalog.material_name(core.material_type_id, "Metal"),
            "weight": conductor["weight"],
            "price_per_kg": conductor["price_per_kg"],
            "cost": conductor["cost"],
            "priced": conductor["priced"],
        }

    def _make_insulation_detail(self, idx, core, insulation) -> dict:
        ins = core.insulation
        name = ins.material_type_name or self.catalog.material_name(ins.material_type_id)
        reprocess_id = ins.reprocess_material_type_id or ins.material_type_id
        reprocess_name = (ins.reprocess_material_type_name
                          or self.catalog.material_name(ins.reprocess_material_type_id)
                          or name)
        return {
            "type": "insulation",
            "core_index": idx,
            "core_id": core.id,
            "material_type_id": ins.material_type_id,
            "name": name,
            "reprocess_material_type_id": reprocess_id,
            "reprocess_name": reprocess_name,
            "fresh_weight": insulation["fresh_weight"],
            "reprocess_weight": insulation["reprocess_weight"],
            "fresh_cost": insulation["fresh_cost"],
            "reprocess_cost": insulation["reprocess_cost"],
            "cost": insulation["total_cost"],
        }

    def _make_sheath_detail(self, idx, group, calc) -> dict:
        name = (self.catalog.material_name(group.material_type_id)
                or group.material
                or f"Sheath {idx + 1}")
        reprocess_id = group.reprocess_material_type_id or group.material_type_id
        reprocess_name = (group.reprocess_material_type_name
                          or self.catalog.material_name(group.reprocess_material_type_id)
                          or name)
        return {
            "type": "sheath",
            "sheath_index": idx,
            "sheath_id": group.id,
            "material_type_id": group.material_type_id,
            "name": name,
            "reprocess_material_type_id": reprocess_id,
            "reprocess_name": reprocess_name,
            "fresh_weight": calc["fresh_weight"],
            "reprocess_weight": calc["reprocess_weight"],
            "fresh_cost": calc["fresh_cost"],
            "reprocess_cost": calc["reprocess_cost"],
            "cost": calc["total_cost"],
            "bundle_diameter": calc["bundle_diameter"],
            "sheath_outer_diameter": calc["sheath_outer_diameter"],
        }

    # --- Process costs and final price ---

    def price_quote(self, material_cost: float, process_entries, profit_margin_percent: float,
                    context: QuoteContext) -> dict:
        """
        processCost = sum of process formulas (a failing formula adds 0),
        grandTotal = material + process, finalPrice = grandTotal + profit.
        """
        processes = [evaluate_entry(entry, context) for entry in process_entries]
        process_cost = sum(p["cost"] for p in processes)
        grand_total = material_cost + process_cost
        profit_amount = grand_total * (profit_margin_percent / 100.0)
        return {
            "material_cost": material_cost,
            "process_cost": process_cost,
            "grand_total": grand_total,
            "profit_margin_percent": profit_margin_percent,
            "profit_amount": profit_amount,
            "final_price": grand_total + profit_amount,
            "processes": processes,
        }

    def build_priced_quote(self, quote: Quote) -> dict:
        """
        Validate the quote and price it end to end.

        Raises QuoteValidationError before any math when inputs are out of
        range. Formula errors do not raise; they show up in
        processes[].result and in the assumptions.
        """
        validate_quote(quote)

        context = build_quote_context(quote.cores, quote.cable_length)
        totals = self.calculate_totals(quote.cores, quote.sheath_groups, quote.cable_length)
        priced = self.price_quote(
            totals["total_cost"], quote.quote_processes, quote.profit_margin_percent, context,
        )
        details = totals["details"]

        priced.update({
            "cable_length": quote.cable_length,
            "context": context.model_dump(),
            "details": details,
            "material_requirements": self.material_requirements(details),
            "core_breakdown": self._group_by_core(details),
            "sheath_breakdown": [d for d in details if d["type"] == "sheath"],
            "margin_options": self._build_margin_options(priced["grand_total"]),
            "assumptions": self._build_assumptions(quote, details, priced["processes"]),
        })
        logger.info(
            "Priced cable quote: %d cores, %d sheaths, %d processes, final %.2f",
            len(quote.cores), len(quote.sheath_groups), len(quote.quote_processes),
            priced["final_price"],
        )
        return priced

    def recalculate_with_margin(self, priced_quote: dict, profit_margin_percent: float) -> dict:
        """Re-apply a new profit margin to an already priced quote."""
        grand_total = priced_quote.get("grand_total", 0)
        profit_amount = grand_total * (profit_margin_percent / 100.0)
        priced_quote["profit_margin_percent"] = profit_margin_percent
        priced_quote["profit_amount"] = profit_amount
        priced_quote["final_price"] = grand_total + profit_amount
        return priced_quote

    def _build_margin_options(self, grand_total: float) -> dict:
        """{"0": total, "5": total*1.05, ...} for the margin picker."""
        return {
            str(pct): round(grand_total * (1 + pct / 100.0), 2)
            for pct in self.margin_options
        }

    # --- Report helpers ---

    def material_requirements(self, details: List[dict]) -> List[dict]:
        """
        Total weight and cost per material, keyed by (type, material id).

        Reprocess stock of a different material gets its own row. Rows
        without a material id fall back to the display name.
        """
        rows: Dict[Tuple[str, str], dict] = {}

        def add(kind, material_id, name, weight, cost):
            key = (kind, material_id or name)
            if key not in rows:
                rows[key] = {
                    "type": kind,
                    "material_type_id": material_id,
                    "name": name,
                    "total_weight": 0.0,
                    "cost": 0.0,
                }
            rows[key]["total_weight"] += weight
            rows[key]["cost"] += cost

        for d in details:
            if d["type"] == "conductor":
                add("conductor", d["material_type_id"], d["name"], d["weight"], d["cost"])
                continue
            add(d["type"], d["material_type_id"], d["name"], d["fresh_weight"], d["fresh_cost"])
            add(d["type"], d["reprocess_material_type_id"], d["reprocess_name"],
                d["reprocess_weight"], d["reprocess_cost"])

        return [
            dict(row, total_weight=round(row["total_weight"], 4), cost=round(row["cost"], 2))
            for row in rows.values()
        ]

    def _group_by_core(self, details: List[dict]) -> Dict[int, List[dict]]:
        groups: Dict[int, List[dict]] = {}
        for d in details:
            if "core_index" in d:
                groups.setdefault(d["core_index"], []).append(d)
        return groups

    def _build_assumptions(self, quote: Quote, details: List[dict], processes: List[dict]) -> List[str]:
        assumptions = []

        for d in details:
            if d["type"] == "conductor" and not d["priced"]:
                assumptions.append(
                    f"Core {d['core_index'] + 1}: no rod selected, conductor cost not included."
                )

        resolved_sheaths = {d["sheath_index"] for d in details if d["type"] == "sheath"}

        defaulted = [
            f"core {idx + 1}" for idx, core in enumerate(quote.cores)
            if self._has_insulation_material(core)
            and core.insulation.reprocess_percent > 0
            and not core.insulation.reprocess_price_per_kg
        ] + [
            f"sheath {idx + 1}" for idx, sg in enumerate(quote.sheath_groups)
            if idx in resolved_sheaths
            and sg.reprocess_percent > 0
            and not sg.reprocess_price_per_kg
        ]
        if defaulted:
            assumptions.append(
                f"Reprocess material priced at {self.reprocess_factor:.0%} of fresh price for: "
                f"{', '.join(defaulted)}."
            )

        unbalanced = [
            f"core {idx + 1}" for idx, core in enumerate(quote.cores)
            if self._has_insulation_material(core)
            and core.insulation.fresh_percent + core.insulation.reprocess_percent != 100
        ] + [
            f"sheath {idx + 1}" for idx, sg in enumerate(quote.sheath_groups)
            if idx in resolved_sheaths
            and sg.fresh_percent + sg.reprocess_percent != 100
        ]
        if unbalanced:
            assumptions.append(
                f"Fresh + reprocess does not add up to 100% for: {', '.join(unbalanced)}. "
                f"Weights use the percentages as entered."
            )

        for p in processes:
            if not p["result"]["ok"]:
                assumptions.append(
                    f"Process '{p['process_name']}' formula error ({p['result']['error']}), "
                    f"counted as 0."
                )

        return assumptions
