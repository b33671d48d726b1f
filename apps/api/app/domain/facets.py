"""
Domain model for facets - the filterable dimensions of the photo gallery.

Every facet is described once here; the query composer and the context-aware
counter are generic over the catalog rather than special-casing each filter.
"""

from typing import Dict, Iterator, List, Optional, Tuple
from dataclasses import dataclass

from app.core.enums import Cardinality, FacetKey


@dataclass(frozen=True)
class Facet:
    """A filter dimension with its allowed values, in display order."""
    key: FacetKey
    allowed_values: Tuple[str, ...]
    cardinality: Cardinality = Cardinality.single
    label: str = ""

    @property
    def column(self) -> str:
        return self.key.column

    @property
    def is_multi(self) -> bool:
        return self.cardinality == Cardinality.multi

    def allows(self, value: str) -> bool:
        return value in self.allowed_values

    def order(self, values) -> List[str]:
        """Sort values by their position in allowed_values, dropping unknown ones."""
        wanted = set(values)
        return [v for v in self.allowed_values if v in wanted]


@dataclass(frozen=True)
class FacetValue:
    """A single facet value with its count."""
    value: str
    count: int


# Mapping of facet key -> counts in catalog value order
FilterCounts = Dict[FacetKey, List[FacetValue]]


class FacetCatalog:
    """Registry of all facets, iterated in canonical FacetKey order."""

    def __init__(self):
        self._facets: Dict[FacetKey, Facet] = {}

    def register(self, facet: Facet):
        self._facets[facet.key] = facet

    def get(self, key) -> Optional[Facet]:
        """Get a facet by key or by its query-parameter name."""
        try:
            return self._facets.get(FacetKey(key))
        except ValueError:
            return None

    def __getitem__(self, key) -> Facet:
        facet = self.get(key)
        if facet is None:
            raise KeyError(key)
        return facet

    def __contains__(self, key) -> bool:
        return self.get(key) is not None

    def __iter__(self) -> Iterator[Facet]:
        for key in FacetKey:
            if key in self._facets:
                yield self._facets[key]

    def __len__(self) -> int:
        return len(self._facets)

    def keys(self) -> List[FacetKey]:
        return [f.key for f in self]


def build_default_catalog() -> FacetCatalog:
    """The gallery's user-facing filters."""
    catalog = FacetCatalog()
    catalog.register(Facet(
        FacetKey.sport,
        ("volleyball", "basketball", "soccer", "softball", "football", "baseball", "track", "portrait"),
        label="Sport",
    ))
    catalog.register(Facet(
        FacetKey.category,
        ("action", "celebration", "candid", "portrait", "warmup", "ceremony"),
        label="Category",
    ))
    catalog.register(Facet(
        FacetKey.play_type,
        ("attack", "block", "dig", "set", "serve", "celebration", "transition"),
        label="Play Type",
    ))
    catalog.register(Facet(
        FacetKey.intensity,
        ("low", "medium", "high", "peak"),
        label="Intensity",
    ))
    catalog.register(Facet(
        FacetKey.lighting,
        ("natural", "backlit", "dramatic", "soft", "artificial"),
        cardinality=Cardinality.multi,
        label="Lighting",
    ))
    catalog.register(Facet(
        FacetKey.color_temp,
        ("warm", "cool", "neutral"),
        label="Color Temperature",
    ))
    catalog.register(Facet(
        FacetKey.time_of_day,
        ("golden_hour", "midday", "evening", "blue_hour", "night", "dawn"),
        label="Time of Day",
    ))
    catalog.register(Facet(
        FacetKey.composition,
        ("rule_of_thirds", "leading_lines", "centered", "symmetry", "frame_within_frame"),
        label="Composition",
    ))
    return catalog


# Global catalog instance; static after import
default_catalog = build_default_catalog()
