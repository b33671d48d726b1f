# features/steps/gallery_steps.py
from urllib.parse import parse_qsl

import parse
from behave import given, register_type, when, then


@parse.with_pattern(r'\[.*\]')  # matches a list-like string
def _parse_list(s: str):
    """Convert comma separated string in brackets to list of strings."""
    s = s.strip()[1:-1]
    return [item.strip() for item in s.split(",")]

register_type(List=_parse_list)


def _counts(data, facet):
    return {o["value"]: o["count"] for o in data["filter_counts"][facet]}


# ---------------- Background ----------------
@given('a gallery of enriched sports photos') # type: ignore[no-untyped-def]
def step_seeded(ctx):
    # environment.py already seeded the in-memory DB
    assert ctx.client is not None


# ---------------- Browsing ----------------
@when('I open the gallery with "{query}"') # type: ignore[no-untyped-def]
def step_open_gallery(ctx, query):
    ctx.last_response = ctx.client.get(f"{ctx.gallery_url}?{query}")
    assert ctx.last_response.status_code == 200

@when('I open the gallery with ""') # type: ignore[no-untyped-def]
def step_open_gallery_unfiltered(ctx):
    ctx.last_response = ctx.client.get(ctx.gallery_url)
    assert ctx.last_response.status_code == 200

@then('the gallery total is {total:d}') # type: ignore[no-untyped-def]
def step_total(ctx, total):
    assert ctx.last_response.json()["hits"]["total"] == total

@then('the lighting counts add up to {total:d}') # type: ignore[no-untyped-def]
def step_lighting_sum(ctx, total):
    assert sum(_counts(ctx.last_response.json(), "lighting").values()) == total

@then('every hit has sport "{sport}"') # type: ignore[no-untyped-def]
def step_hits_sport(ctx, sport):
    for h in ctx.last_response.json()["hits"]["items"]:
        assert h["sport_type"] == sport

@then('every hit has lighting in {values:List}') # type: ignore[no-untyped-def]
def step_hits_lighting(ctx, values):
    for h in ctx.last_response.json()["hits"]["items"]:
        assert h["lighting"] in values

@then('the lighting counts are') # type: ignore[no-untyped-def]
def step_lighting_counts(ctx):
    expected = {row["value"]: int(row["count"]) for row in ctx.table}
    assert _counts(ctx.last_response.json(), "lighting") == expected

@then('the selection is "{query}"') # type: ignore[no-untyped-def]
def step_selection(ctx, query):
    data = ctx.last_response.json()
    assert sorted(parse_qsl(data["query_string"])) == sorted(parse_qsl(query))


# ---------------- Pagination ----------------
@when('I open pages 1 and 2 of the gallery with "{query}" and page size {size:d}') # type: ignore[no-untyped-def]
def step_two_pages(ctx, query, size):
    ctx.pages = []
    for page in (1, 2):
        response = ctx.client.get(f"{ctx.gallery_url}?{query}&page={page}&page_size={size}")
        assert response.status_code == 200
        ctx.pages.append([h["photo_id"] for h in response.json()["hits"]["items"]])

@then('the pages share no photos') # type: ignore[no-untyped-def]
def step_pages_disjoint(ctx):
    assert set(ctx.pages[0]).isdisjoint(ctx.pages[1])

@then('together they hold {total:d} photos') # type: ignore[no-untyped-def]
def step_pages_total(ctx, total):
    assert len(ctx.pages[0]) + len(ctx.pages[1]) == total
