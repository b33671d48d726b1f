from typing import List, Dict, Any, Optional, Tuple
from sqlalchemy import Table, select, func
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from app.core.enums import FacetKey, SortMode
from app.core.pagination import iso_utc, page_bounds
from app.domain.facets import FacetCatalog, FilterCounts, default_catalog
from app.domain.selection import Selection
from app.repositories.facets import context_counts, distribution
from app.repositories.query_builder import (
    apply_pagination, apply_sorting, build_base_query, compose_query,
)
from app.repositories.schema import photo_metadata


class PhotosRepository:
    def __init__(self, db: Session, catalog: FacetCatalog = default_catalog,
                 photos: Table = photo_metadata):
        self.db = db
        self.catalog = catalog
        self.photos = photos

    def search_photos(self, selection: Selection, sort: SortMode = SortMode.newest,
                      page: int = 1, page_size: int = 24,
                      album_key: Optional[str] = None) -> Tuple[List[Dict[str, Any]], int]:
        """
        Fetch one page of photos matching the full selection.
        Returns: (items, total_count)
        """
        query = self._build_search_query(selection, album_key)

        # Total before pagination
        total_count = self._count_total(query)

        # Pagination is applied last, after sorting
        offset, limit = page_bounds(page, page_size)
        query = apply_sorting(query, self.photos, sort)
        query = apply_pagination(query, offset, limit)

        rows = list(self.db.execute(query).all())
        return self._hydrate_items(rows), total_count

    def count_photos(self, selection: Selection, album_key: Optional[str] = None) -> int:
        return self._count_total(self._build_search_query(selection, album_key))

    def compute_facet_counts(self, selection: Selection, album_key: Optional[str] = None) -> FilterCounts:
        """Context-aware counts for every facet in the catalog."""
        return context_counts(self.db, self.photos, selection, self.catalog, album_key)

    def distribution(self, key: FacetKey) -> List[Dict[str, Any]]:
        return distribution(self.db, self.photos, key)

    def _build_search_query(self, selection: Selection, album_key: Optional[str] = None) -> Select:
        base = build_base_query(self.photos, album_key=album_key)
        return compose_query(base, self.photos, selection, self.catalog)

    def _count_total(self, query: Select) -> int:
        """Count total results for a query."""
        count_query = select(func.count()).select_from(query.subquery())
        return int(self.db.execute(count_query).scalar_one())

    def _hydrate_items(self, rows: List[Row]) -> List[Dict[str, Any]]:
        items = []
        for r in rows:
            item = dict(r._mapping)
            item["upload_date"] = iso_utc(r.upload_date) if r.upload_date else None
            items.append(item)
        return items
