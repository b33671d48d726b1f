"""
Tests for composing gallery queries from a Selection.
"""

import pytest
from sqlalchemy import func, select

from app.core.enums import FacetKey, SortMode
from app.domain.selection import Selection
from app.repositories.query_builder import (
    apply_pagination, apply_sorting, build_base_query, compose_filters, compose_query, facet_predicate,
)
from app.repositories.schema import photo_metadata as photos
from app.domain.facets import default_catalog


def _ids(db, query):
    return [r.photo_id for r in db.execute(query).all()]


def _count(db, query):
    return db.execute(select(func.count()).select_from(query.subquery())).scalar_one()


class TestComposeFilters:
    def test_given_empty_selection_when_composing_then_returns_base_query_unchanged(self):
        """
        Given: A selection with no active facets
        When: Composing the query
        Then: The base query object is returned as is
        """
        # Given
        base = build_base_query(photos)

        # When
        composed = compose_query(base, photos, Selection())

        # Then
        assert composed is base

    def test_given_active_facets_when_composing_filters_then_one_predicate_each_in_canonical_order(self):
        selection = Selection({
            FacetKey.composition: "centered",
            FacetKey.lighting: {"natural"},
            FacetKey.sport: "volleyball",
        })

        where = compose_filters(photos, selection)

        rendered = [str(w) for w in where]
        assert len(rendered) == 3
        assert "sport_type" in rendered[0]
        assert "lighting" in rendered[1] and "IN" in rendered[1]
        assert "composition" in rendered[2]

    def test_given_excluded_facet_when_composing_filters_then_its_predicate_is_skipped(self):
        selection = Selection({FacetKey.sport: "volleyball", FacetKey.lighting: {"natural"}})

        where = compose_filters(photos, selection, exclude=FacetKey.lighting)

        assert len(where) == 1
        assert "sport_type" in str(where[0])

    def test_given_single_facet_when_building_predicate_then_uses_equality(self):
        predicate = facet_predicate(photos, default_catalog[FacetKey.sport], "volleyball")
        assert str(predicate) == "photo_metadata.sport_type = :sport_type_1"

    def test_given_multi_facet_when_building_predicate_then_uses_in(self):
        predicate = facet_predicate(photos, default_catalog[FacetKey.lighting], frozenset({"natural", "backlit"}))
        assert "photo_metadata.lighting IN" in str(predicate)


class TestComposedQueryResults:
    def test_given_library_when_running_base_query_then_excludes_unenriched_photos(self, db, library):
        """Photos without sharpness are not part of the gallery."""
        assert _count(db, build_base_query(photos)) == 60

    def test_given_album_scope_when_running_base_query_then_limits_to_album(self, db, library):
        assert _count(db, build_base_query(photos, album_key="bb-2024")) == 20

    def test_given_volleyball_and_two_lightings_when_composing_then_returns_35(self, db, library):
        """sport=volleyball AND lighting IN (natural, backlit) -> 25 + 10."""
        selection = Selection({FacetKey.sport: "volleyball", FacetKey.lighting: {"natural", "backlit"}})

        query = compose_query(build_base_query(photos), photos, selection)

        assert _count(db, query) == 35

    def test_given_selection_when_removing_all_predicates_then_matches_base_result(self, db, library):
        """Composing with a selection and then with the empty selection gives the base result set."""
        base = build_base_query(photos)
        filtered = compose_query(base, photos, Selection({FacetKey.sport: "basketball"}))
        assert _count(db, filtered) == 20

        unfiltered = compose_query(base, photos, Selection())

        assert sorted(_ids(db, unfiltered)) == sorted(_ids(db, base))

    def test_given_set_for_single_facet_when_composing_then_filters_by_equality(self, db, library):
        """A one-element set for sport is stored as a string and composes like a parsed selection."""
        selection = Selection({FacetKey.sport: {"volleyball"}})

        where = compose_filters(photos, selection)
        query = compose_query(build_base_query(photos), photos, selection)

        assert "sport_type = " in str(where[0])
        assert _count(db, query) == 40

    def test_given_disallowed_value_when_composing_then_no_predicate_is_added(self, db, library):
        selection = Selection({FacetKey.sport: "chess"})

        assert compose_filters(photos, selection) == []
        assert _count(db, compose_query(build_base_query(photos), photos, selection)) == 60

    def test_given_contradictory_facets_when_composing_then_returns_nothing(self, db, library):
        selection = Selection({FacetKey.sport: "basketball", FacetKey.time_of_day: "evening"})
        assert _count(db, compose_query(build_base_query(photos), photos, selection)) == 0


class TestSortingAndPagination:
    def test_given_newest_sort_when_querying_then_latest_upload_first(self, db, library):
        rows = db.execute(apply_sorting(build_base_query(photos), photos, SortMode.newest)).all()
        dates = [r.upload_date for r in rows]
        assert dates == sorted(dates, reverse=True)

    def test_given_oldest_sort_when_querying_then_earliest_upload_first(self, db, library):
        rows = db.execute(apply_sorting(build_base_query(photos), photos, SortMode.oldest)).all()
        dates = [r.upload_date for r in rows]
        assert dates == sorted(dates)

    def test_given_intensity_sort_when_querying_then_peak_before_low(self, db, library):
        rows = db.execute(apply_sorting(build_base_query(photos), photos, SortMode.intensity)).all()
        levels = [r.action_intensity for r in rows]
        rank = {"peak": 0, "high": 1, "medium": 2, "low": 3}
        assert [rank[l] for l in levels] == sorted(rank[l] for l in levels)

    def test_given_action_sort_when_querying_then_play_types_grouped_with_nulls_last(self, db, library):
        rows = db.execute(apply_sorting(build_base_query(photos), photos, SortMode.action)).all()
        play_types = [r.play_type for r in rows]
        named = [p for p in play_types if p is not None]
        assert play_types[:len(named)] == sorted(named)
        assert all(p is None for p in play_types[len(named):])

    def test_given_offset_and_limit_when_paginating_then_pages_do_not_overlap(self, db, library):
        ordered = apply_sorting(build_base_query(photos), photos, SortMode.newest)

        first = _ids(db, apply_pagination(ordered, 0, 24))
        second = _ids(db, apply_pagination(ordered, 24, 24))
        third = _ids(db, apply_pagination(ordered, 48, 24))

        assert len(first) == 24 and len(second) == 24 and len(third) == 12
        assert set(first).isdisjoint(second)
        assert set(second).isdisjoint(third)
