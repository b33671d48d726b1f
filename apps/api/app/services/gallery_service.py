import logging
from typing import Dict, List, Optional

from app.core.cache import TTLCache
from app.core.enums import FacetKey
from app.core.pagination import total_pages
from app.domain.facets import FacetCatalog, FilterCounts, default_catalog
from app.domain.selection import Selection, to_query_string
from app.schemas.gallery_request import BrowseRequest
from app.schemas.gallery_response import (
    CatalogResponse, Distribution, DistributionsResponse, FacetDescription, FacetOption,
    FilterCountsResponse, GalleryResponse, Hits, PhotoHit, ToggleResponse,
)
from app.repositories.photos_repo import PhotosRepository
from app.services.compatibility import (
    describe_cleared, display_count, is_compatible, pill_state, prune_incompatible,
)

logger = logging.getLogger(__name__)

SPORTS_KEY = "sports"
CATEGORIES_KEY = "categories"
BASE_COUNTS_KEY = "base_filter_counts"

class GalleryService:
    def __init__(self, repo: PhotosRepository, cache: TTLCache,
                 catalog: FacetCatalog = default_catalog):
        self.repo = repo
        self.cache = cache
        self.catalog = catalog

    def browse(self, selection: Selection, req: BrowseRequest) -> GalleryResponse:
        """One gallery page plus context-aware filter counts for the selection."""
        items, total = self.repo.search_photos(
            selection,
            sort=req.sort,
            page=req.page.page,
            page_size=req.page.page_size,
            album_key=req.album,
        )
        counts = self.repo.compute_facet_counts(selection, req.album)
        sports, categories = self.distributions()

        return GalleryResponse(
            hits=Hits(
                total=total,
                page=req.page.page,
                page_size=req.page.page_size,
                total_pages=total_pages(total, req.page.page_size),
                items=[PhotoHit(**item) for item in items],
            ),
            filter_counts=self.format_counts(counts, selection),
            selection=self.format_selection(selection),
            query_string=to_query_string(selection, self.catalog),
            active_filter_count=selection.active_filter_count,
            sports=sports,
            categories=categories,
        )

    def counts(self, selection: Selection, album_key: Optional[str] = None) -> FilterCountsResponse:
        counts = self.repo.compute_facet_counts(selection, album_key)
        return FilterCountsResponse(
            filter_counts=self.format_counts(counts, selection),
            selection=self.format_selection(selection),
            total=self.repo.count_photos(selection, album_key),
        )

    def toggle(self, selection: Selection, key: str, value: str,
               album_key: Optional[str] = None) -> ToggleResponse:
        """Toggle one value and clear other filters that would now match nothing."""
        facet = self.catalog.get(key)
        cleared = []
        if facet is not None and facet.allows(value):
            selection = selection.toggle(facet, value)
            counts = self.repo.compute_facet_counts(selection, album_key)
            selection, cleared = prune_incompatible(selection, counts, self.catalog, keep=facet.key)
            if cleared:
                logger.info("Cleared incompatible filters after toggling %s=%s: %s", key, value, cleared)
        return ToggleResponse(
            selection=self.format_selection(selection),
            query_string=to_query_string(selection, self.catalog),
            cleared={k.value: values for k, values in cleared},
            cleared_labels=describe_cleared(cleared, self.catalog),
        )

    def catalog_description(self) -> CatalogResponse:
        return CatalogResponse(facets=[
            FacetDescription(key=f.key.value, label=f.label, cardinality=f.cardinality,
                             values=list(f.allowed_values))
            for f in self.catalog
        ])

    def distributions(self) -> tuple[List[Distribution], List[Distribution]]:
        sports = self.cache.get_or_compute(SPORTS_KEY, lambda: self.repo.distribution(FacetKey.sport))
        categories = self.cache.get_or_compute(CATEGORIES_KEY, lambda: self.repo.distribution(FacetKey.category))
        return [Distribution(**d) for d in sports], [Distribution(**d) for d in categories]

    def base_counts(self) -> FilterCounts:
        """Counts with no filters applied, shared by every visitor."""
        return self.cache.get_or_compute(BASE_COUNTS_KEY, lambda: self.repo.compute_facet_counts(Selection()))

    def overview(self) -> DistributionsResponse:
        sports, categories = self.distributions()
        return DistributionsResponse(
            sports=sports,
            categories=categories,
            base_filter_counts=self.format_counts(self.base_counts(), Selection()),
        )

    def format_counts(self, counts: FilterCounts, selection: Selection) -> Dict[str, List[FacetOption]]:
        formatted = {}
        for facet in self.catalog:
            chosen = selection.values_for(facet.key)
            formatted[facet.key.value] = [
                FacetOption(
                    value=fv.value,
                    count=fv.count,
                    state=pill_state(fv.value in chosen, is_compatible(facet.key, fv.value, counts)),
                    badge=display_count(facet.key, fv.value, counts),
                )
                for fv in counts.get(facet.key, [])
            ]
        return formatted

    def format_selection(self, selection: Selection) -> Dict[str, List[str]]:
        return {
            facet.key.value: facet.order(selection.values_for(facet.key))
            for facet in self.catalog if selection.is_active(facet.key)
        }
