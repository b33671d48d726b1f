"""
Selection state: the facet values currently chosen by the user.

A Selection is derived from URL query parameters and is never mutated in
place; toggling a value returns a new Selection. Only active facets are
stored: a single-valued facet maps to a string, a multi-valued facet to a
non-empty frozenset.
"""

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Tuple, Union
from urllib.parse import urlencode

from app.core.enums import FacetKey
from app.domain.facets import Facet, FacetCatalog, default_catalog

SelectionValue = Union[str, frozenset]


class Selection(Mapping):
    """Immutable mapping of FacetKey -> selected value(s)."""

    def __init__(self, values: Mapping = None, catalog: FacetCatalog = default_catalog):
        """Normalize values against catalog.

        Unknown facets and values outside a facet's allowed values are dropped.
        Multi-valued facets hold a frozenset; single-valued facets hold one
        string, and a collection given for one keeps its first allowed value in
        catalog order.
        """
        self._catalog = catalog
        self._values: Dict[FacetKey, SelectionValue] = {}
        for key, value in (values or {}).items():
            facet = catalog.get(key)
            if facet is None or value is None:
                continue
            chosen = facet.order([value] if isinstance(value, str) else value)
            if not chosen:
                continue
            self._values[facet.key] = frozenset(chosen) if facet.is_multi else chosen[0]

    def __getitem__(self, key) -> SelectionValue:
        try:
            return self._values[FacetKey(key)]
        except ValueError:
            raise KeyError(key) from None

    def __iter__(self) -> Iterator[FacetKey]:
        # Canonical facet order regardless of insertion order
        return (k for k in FacetKey if k in self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        inner = ", ".join(
            f"{k.value}={sorted(v) if isinstance(v, frozenset) else v!r}" for k, v in self.items()
        )
        return f"Selection({inner})"

    def is_active(self, key) -> bool:
        return FacetKey(key) in self._values

    def values_for(self, key) -> frozenset:
        """Selected values for a facet as a set, empty when inactive."""
        value = self._values.get(FacetKey(key))
        if value is None:
            return frozenset()
        if isinstance(value, frozenset):
            return value
        return frozenset([value])

    @property
    def has_active_filters(self) -> bool:
        return bool(self._values)

    @property
    def active_filter_count(self) -> int:
        """Number of selected values; a multi-valued facet counts each value."""
        return sum(len(self.values_for(k)) for k in self._values)

    # Copy-on-write operations

    def without(self, key) -> "Selection":
        values = dict(self._values)
        values.pop(FacetKey(key), None)
        return Selection(values, self._catalog)

    def with_value(self, facet: Facet, value: str) -> "Selection":
        """Select value for facet; multi facets add it to the existing set."""
        if not facet.allows(value):
            return self
        values = dict(self._values)
        if facet.is_multi:
            values[facet.key] = self.values_for(facet.key) | {value}
        else:
            values[facet.key] = value
        return Selection(values, self._catalog)

    def without_value(self, facet: Facet, value: str) -> "Selection":
        if value not in self.values_for(facet.key):
            return self
        if not facet.is_multi:
            return self.without(facet.key)
        values = dict(self._values)
        values[facet.key] = self.values_for(facet.key) - {value}
        return Selection(values, self._catalog)

    def toggle(self, facet: Facet, value: str) -> "Selection":
        """Select value if not selected, otherwise deselect it."""
        if value in self.values_for(facet.key):
            return self.without_value(facet, value)
        return self.with_value(facet, value)


def _iter_pairs(params) -> List[Tuple[str, str]]:
    """Normalize QueryParams, mapping-of-lists or pair iterables into (key, value) pairs."""
    if params is None:
        return []
    if hasattr(params, "multi_items"):
        return list(params.multi_items())
    if isinstance(params, Mapping):
        pairs = []
        for key, value in params.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple, set, frozenset)):
                pairs.extend((key, v) for v in value)
            else:
                pairs.append((key, value))
        return pairs
    return list(params)


def parse_selection(params, catalog: FacetCatalog = default_catalog) -> Selection:
    """Build a Selection from query parameters.

    Unknown keys and values outside a facet's allowed values are dropped.
    Only the first value given for a single-valued facet is considered, so an
    invalid first value leaves that facet inactive. Multi-valued facets keep
    every valid value and stay inactive if none survive.
    """
    values: Dict[FacetKey, SelectionValue] = {}
    multi: Dict[FacetKey, set] = {}
    seen = set()
    for key, raw in _iter_pairs(params):
        facet = catalog.get(key)
        if facet is None or not isinstance(raw, str):
            continue
        if not facet.is_multi:
            if facet.key in seen:
                continue
            seen.add(facet.key)
        value = raw.strip()
        if not facet.allows(value):
            continue
        if facet.is_multi:
            multi.setdefault(facet.key, set()).add(value)
        else:
            values[facet.key] = value
    for key, chosen in multi.items():
        values[key] = frozenset(chosen)
    return Selection(values, catalog)


def serialize_selection(selection: Selection, catalog: FacetCatalog = default_catalog) -> List[Tuple[str, str]]:
    """Inverse of parse_selection: one pair per selected value, in canonical order."""
    pairs: List[Tuple[str, str]] = []
    for facet in catalog:
        if not selection.is_active(facet.key):
            continue
        for value in facet.order(selection.values_for(facet.key)):
            pairs.append((facet.key.value, value))
    return pairs


def to_query_string(selection: Selection, catalog: FacetCatalog = default_catalog,
                    extra: Iterable[Tuple[str, str]] = ()) -> str:
    return urlencode(serialize_selection(selection, catalog) + list(extra))
