"""
Sheath resolver: outer layers around bundles of cores and other sheaths.

A sheath group wraps any mix of cores and nested sheath groups. The bundle
underneath is modelled as one circle whose area is the sum of the
contents' outer areas; the sheath is an annular layer of `thickness` on
top of it, costed like insulation.

Groups are looked up by id. Resolution carries the set of group ids on the
current path, so a group that (directly or through others) contains
itself resolves that branch to None instead of recursing forever.
"""

import logging
from typing import Dict, FrozenSet, List, Optional

from ..config import settings
from ..geometry import area_from_diameter, diameter_from_area
from .insulation import insulated_core, layer_costing

logger = logging.getLogger(__name__)


def _index(items) -> Dict[int, object]:
    return {item.id: item for item in items}


def resolve_sheath(group, cores, sheath_groups, cable_length,
                   reprocess_factor=settings.REPROCESS_PRICE_FACTOR,
                   _path=frozenset()):
    # type: (...) -> Optional[dict]
    """
    Resolve one sheath group to its dimensions, weights and cost.

    Returns None when the group has nothing inside it: no cores, no
    nested groups, or only nested groups that themselves resolve to None
    (empty, or part of a cycle). Unknown ids are skipped.

    Cores referenced by two groups are counted in both; exclusivity is
    the job of available_cores() / available_sheaths().
    """
    if group.id in _path:
        logger.warning("Sheath group %s contains itself, skipping cyclic branch", group.id)
        return None
    if not group.core_ids and not group.sheath_ids:
        return None

    path: FrozenSet[int] = _path | {group.id}
    cores_by_id = _index(cores)
    groups_by_id = _index(sheath_groups)

    inner_areas: List[float] = []
    length_total = 0.0

    for core_id in sorted(group.core_ids):
        core = cores_by_id.get(core_id)
        if core is None:
            continue
        dims = insulated_core(core, cable_length, reprocess_factor)
        inner_areas.append(dims["outer_area"])
        length_total += cable_length

    for sheath_id in sorted(group.sheath_ids):
        nested = groups_by_id.get(sheath_id)
        if nested is None:
            continue
        nested_calc = resolve_sheath(
            nested, cores, sheath_groups, cable_length, reprocess_factor, path,
        )
        if nested_calc is None:
            continue
        inner_areas.append(nested_calc["outer_area"])
        length_total += nested_calc["avg_length"]

    if not inner_areas:
        return None

    avg_length = length_total / len(inner_areas)
    total_inner_area = sum(inner_areas)
    bundle_diameter = diameter_from_area(total_inner_area)
    outer_diameter = bundle_diameter + (2 * group.thickness)

    result = layer_costing(
        bundle_diameter, outer_diameter, avg_length,
        group.fresh_percent, group.reprocess_percent,
        group.fresh_price_per_kg, group.reprocess_price_per_kg,
        group.density or settings.DEFAULT_INSULATION_DENSITY,
        group.reprocess_density,
        reprocess_factor,
    )
    result.update({
        "sheath_id": group.id,
        "item_count": len(inner_areas),
        "total_inner_area": total_inner_area,
        "bundle_diameter": bundle_diameter,
        "sheath_outer_diameter": outer_diameter,
        "outer_area": area_from_diameter(outer_diameter),
        "avg_length": avg_length,
    })
    return result


def sheath_outer_dimensions(sheath_id, cores, sheath_groups, cable_length):
    # type: (int, list, list, float) -> dict
    """Outer diameter and area of a group; zeros when it does not resolve."""
    group = _index(sheath_groups).get(sheath_id)
    calc = resolve_sheath(group, cores, sheath_groups, cable_length) if group else None
    if calc is None:
        return {"diameter": 0.0, "area": 0.0}
    return {"diameter": calc["sheath_outer_diameter"], "area": calc["outer_area"]}


def available_cores(cores, sheath_groups, exclude_sheath_id=None):
    # type: (list, list, Optional[int]) -> list
    """Cores not already wrapped by a sheath group other than `exclude_sheath_id`."""
    used = set()
    for sg in sheath_groups:
        if sg.id != exclude_sheath_id:
            used.update(sg.core_ids)
    return [c for c in cores if c.id not in used]


def available_sheaths(sheath_groups, exclude_sheath_id=None):
    # type: (list, Optional[int]) -> list
    """
    Sheath groups that `exclude_sheath_id` may nest: not itself, not already
    nested in another group, and with something inside.
    """
    used = set()
    for sg in sheath_groups:
        if sg.id != exclude_sheath_id:
            used.update(sg.sheath_ids)
    return [
        sg for sg in sheath_groups
        if sg.id != exclude_sheath_id
        and sg.id not in used
        and (sg.core_ids or sg.sheath_ids)
    ]
