"""
Filter compatibility rules built on context-aware counts.

An option is compatible when choosing it, together with the other active
filters, still yields at least one photo.
"""

from typing import List, Optional, Tuple

from app.core.enums import FacetKey, PillState
from app.domain.facets import FacetCatalog, FilterCounts, default_catalog
from app.domain.selection import Selection

# (facet key, values that were cleared)
Cleared = Tuple[FacetKey, List[str]]


def count_for(key, value: str, counts: FilterCounts) -> int:
    for fv in counts.get(FacetKey(key), []):
        if fv.value == value:
            return fv.count
    return 0


def is_compatible(key, value: str, counts: FilterCounts) -> bool:
    return count_for(key, value, counts) > 0


def pill_state(selected: bool, compatible: bool) -> PillState:
    if selected:
        return PillState.active
    if not compatible:
        return PillState.disabled
    return PillState.available


def display_count(key, value: str, counts: FilterCounts) -> Optional[int]:
    """Count to show on a pill badge; None hides the badge."""
    count = count_for(key, value, counts)
    return count if count > 0 else None


def prune_incompatible(selection: Selection, counts: FilterCounts,
                       catalog: FacetCatalog = default_catalog,
                       keep: Optional[FacetKey] = None) -> Tuple[Selection, List[Cleared]]:
    """Drop active values whose context-aware count is zero.

    keep names the facet the user just changed; it is never pruned.
    """
    pruned = selection
    cleared: List[Cleared] = []
    for facet in catalog:
        if facet.key == keep or not selection.is_active(facet.key):
            continue
        dead = [v for v in facet.order(selection.values_for(facet.key))
                if not is_compatible(facet.key, v, counts)]
        if not dead:
            continue
        for value in dead:
            pruned = pruned.without_value(facet, value)
        cleared.append((facet.key, dead))
    return pruned, cleared


def describe_cleared(cleared: List[Cleared], catalog: FacetCatalog = default_catalog) -> List[str]:
    labels = []
    for key, values in cleared:
        facet = catalog[key]
        if facet.is_multi:
            labels.append(f"{facet.label} ({', '.join(values)})")
        else:
            labels.append(f"{facet.label}: {values[0]}")
    return labels
