import pytest
from pydantic import ValidationError

from filters import compile_filters
from models import SortKey
from query_state import CLIENT_PAGE_LIMIT, QueryState


def test_default_params():
    assert QueryState().to_params() == {
        "sortBy": "ranking",
        "sortOrder": "asc",
        "page": "1",
        "limit": str(CLIENT_PAGE_LIMIT),
    }


def test_states_are_immutable():
    state = QueryState()
    with pytest.raises(ValidationError):
        state.search = "oxford"


def test_with_changes_returns_new_state_on_first_page():
    state = QueryState(page=4)
    changed = state.with_changes(countries="USA,UK")

    assert state.countries == "" and state.page == 4
    assert changed.countries == "USA,UK"
    assert changed.page == 1


def test_page_change_is_kept():
    assert QueryState().with_changes(page=3).page == 3


def test_toggle_adds_and_removes_values():
    state = QueryState().toggle("affordability", "budget").toggle("affordability", "premium")
    assert state.affordability == ("budget", "premium")
    assert state.toggle("affordability", "budget").affordability == ("premium",)

    with pytest.raises(ValueError):
        state.toggle("countries", "USA")


def test_reset():
    state = QueryState(search="tech", value_for_money=True, page=2)
    assert state.reset() == QueryState()


def test_full_params():
    state = QueryState(
        search="tech",
        countries="USA",
        region="europe",
        min_tuition=20000,
        max_tuition=35000.5,
        top_tier=100,
        affordability=("budget", "moderate"),
        institution_age=("ancient",),
        value_for_money=True,
        sort_by=SortKey.TUITION_FEE,
        sort_order="desc",
        page=2,
    )
    assert state.to_params() == {
        "search": "tech",
        "countries": "USA",
        "region": "europe",
        "minTuition": "20000",
        "maxTuition": "35000.5",
        "topTier": "100",
        "affordability": "budget,moderate",
        "institutionAge": "ancient",
        "valueForMoney": "true",
        "sortBy": "tuitionFee",
        "sortOrder": "desc",
        "page": "2",
        "limit": "20",
    }


def test_params_compile_on_the_server_side():
    state = QueryState(countries="USA", min_tuition=20000, affordability=("luxury",), page=2)
    query = compile_filters(state.to_params())

    assert query.predicate == {"country": {"$in": ["USA"]}, "tuitionFee": {"$gte": 20000.0}}
    assert len(query.post_filters) == 1
    assert (query.page, query.limit) == (2, CLIENT_PAGE_LIMIT)
    assert query.sort_key == SortKey.RANKING


def test_search_changed():
    state = QueryState(search="a")
    assert state.search_changed(QueryState())
    assert not state.with_changes(region="europe").search_changed(state)
