"""
Input checks run before any quote math.

The calculators trust their inputs, so a zero wire count or cable length
would turn into inf/NaN costs. validate_quote() collects every problem and
raises once, so the caller gets the full list and no totals at all.
"""

from typing import List


class QuoteValidationError(ValueError):
    """One or more quote inputs are out of range."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def _positive(value) -> bool:
    return value is not None and value > 0


def _non_negative(value) -> bool:
    return value is not None and value >= 0


def _check(errors: List[str], ok: bool, msg: str) -> None:
    if not ok:
        errors.append(msg)


def core_errors(core) -> List[str]:
    errors: List[str] = []
    label = f"core {core.id}"
    _check(errors, _positive(core.total_core_area), f"{label}: total_core_area must be > 0")
    _check(errors, core.wire_count is not None and core.wire_count >= 1,
           f"{label}: wire_count must be >= 1")
    _check(errors, _non_negative(core.wastage_percent), f"{label}: wastage_percent must be >= 0")
    _check(errors, _non_negative(core.material_density), f"{label}: material_density must be >= 0")
    if core.selected_rod is not None:
        _check(errors, _non_negative(core.selected_rod.avg_price_per_kg),
               f"{label}: rod price must be >= 0")

    ins = core.insulation
    _check(errors, _non_negative(ins.thickness), f"{label}: insulation thickness must be >= 0")
    _check(errors, _non_negative(ins.density), f"{label}: insulation density must be >= 0")
    _check(errors, _non_negative(ins.fresh_percent), f"{label}: insulation fresh_percent must be >= 0")
    _check(errors, _non_negative(ins.reprocess_percent),
           f"{label}: insulation reprocess_percent must be >= 0")
    _check(errors, _non_negative(ins.fresh_price_per_kg),
           f"{label}: insulation fresh_price_per_kg must be >= 0")
    _check(errors, _non_negative(ins.reprocess_price_per_kg),
           f"{label}: insulation reprocess_price_per_kg must be >= 0")
    if ins.reprocess_density is not None:
        _check(errors, _non_negative(ins.reprocess_density),
               f"{label}: insulation reprocess_density must be >= 0")
    return errors


def sheath_errors(group) -> List[str]:
    errors: List[str] = []
    label = f"sheath group {group.id}"
    _check(errors, _non_negative(group.thickness), f"{label}: thickness must be >= 0")
    _check(errors, _non_negative(group.density), f"{label}: density must be >= 0")
    _check(errors, _non_negative(group.fresh_percent), f"{label}: fresh_percent must be >= 0")
    _check(errors, _non_negative(group.reprocess_percent), f"{label}: reprocess_percent must be >= 0")
    _check(errors, _non_negative(group.fresh_price_per_kg),
           f"{label}: fresh_price_per_kg must be >= 0")
    _check(errors, _non_negative(group.reprocess_price_per_kg),
           f"{label}: reprocess_price_per_kg must be >= 0")
    if group.reprocess_density is not None:
        _check(errors, _non_negative(group.reprocess_density),
               f"{label}: reprocess_density must be >= 0")
    return errors


def validate_construction(cores, sheath_groups, cable_length) -> None:
    """Raise QuoteValidationError unless cable length, cores and sheaths are in range."""
    errors: List[str] = []
    _check(errors, _positive(cable_length), "cable_length must be > 0")
    for core in cores:
        errors.extend(core_errors(core))
    for group in sheath_groups:
        errors.extend(sheath_errors(group))
    if errors:
        raise QuoteValidationError(errors)


def validate_quote(quote) -> None:
    """validate_construction() plus the profit margin."""
    errors: List[str] = []
    try:
        validate_construction(quote.cores, quote.sheath_groups, quote.cable_length)
    except QuoteValidationError as e:
        errors.extend(e.errors)
    _check(errors, _non_negative(quote.profit_margin_percent), "profit_margin_percent must be >= 0")
    if errors:
        raise QuoteValidationError(errors)
