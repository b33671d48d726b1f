# features/steps/filter_steps.py
from urllib.parse import parse_qsl

from behave import when, then

from app.core.enums import FacetKey
from app.domain.selection import parse_selection


def _matches(row, selection, skip=None):
    if row["sharpness"] is None:
        return False
    for key in selection:
        if key != skip and row[key.column] not in selection.values_for(key):
            return False
    return True


@when('I request filter counts with "{query}"')
def step_request_counts(ctx, query):
    ctx.last_response = ctx.client.get(f"/api/v1/filters/counts?{query}")
    assert ctx.last_response.status_code == 200

@when('I request filter counts with ""')
def step_request_counts_unfiltered(ctx):
    ctx.last_response = ctx.client.get("/api/v1/filters/counts")
    assert ctx.last_response.status_code == 200

def _assert_counts_match(ctx, query):
    """Count for value v of facet F == photos matching every other filter plus F = v."""
    selection = parse_selection(parse_qsl(query))
    data = ctx.last_response.json()
    for key in data["filter_counts"]:
        for option in data["filter_counts"][key]:
            expected = sum(
                1 for row in ctx.rows
                if _matches(row, selection, skip=key) and row[FacetKey(key).column] == option["value"]
            )
            assert option["count"] == expected, (key, option, expected)

@then('every facet count matches a direct computation for "{query}"')
def step_counts_match(ctx, query):
    _assert_counts_match(ctx, query)

@then('every facet count matches a direct computation for ""')
def step_counts_match_unfiltered(ctx):
    _assert_counts_match(ctx, "")

@then('option "{option}" is "{state}"')
def step_option_state(ctx, option, state):
    facet, value = option.split("=", 1)
    options = {o["value"]: o["state"] for o in ctx.last_response.json()["filter_counts"][facet]}
    assert options[value] == state, options

@when('I toggle "{option}" on "{query}"')
def step_toggle(ctx, option, query):
    facet, value = option.split("=", 1)
    ctx.last_response = ctx.client.get(f"/api/v1/filters/toggle?facet={facet}&value={value}&{query}")
    assert ctx.last_response.status_code == 200

@then('the cleared filters are reported as "{label}"')
def step_cleared(ctx, label):
    assert ctx.last_response.json()["cleared_labels"] == [label]
