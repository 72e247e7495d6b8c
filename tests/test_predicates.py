from core.models import ALL, Advice, Baby, QueryState
from core.profiles import (
    ADVICES,
    AUTHORIZATION_FILTER,
    BABIES,
    CATEGORY_FILTER,
    HEALTH_FILTER,
    STATUS_FILTER,
    TAB_REST,
    TAB_SIX_TO_NINE,
)
from core.services.predicates import in_day_window, matches, matches_search


def _visible(records, query, profile):
    return [r.id for r in records if matches(r, query, profile.search_fields, profile.filters, profile.tabs)]


def test_search_is_case_insensitive_substring():
    fields = ADVICES.search_fields

    assert matches_search(Advice(id="1", title="Bonjour"), "bo", fields)
    assert not matches_search(Advice(id="2", title="Avion"), "bo", fields)
    assert matches_search(Advice(id="3", title="Avion"), "", fields)


def test_search_term_is_literal():
    assert not matches_search(Advice(id="1", title="Bonjour"), "b.*r", ADVICES.search_fields)


def test_day_window_accepts_single_day_or_whole_range():
    assert in_day_window(Advice(id="1", day=180))
    assert in_day_window(Advice(id="2", day=270))
    assert in_day_window(Advice(id="3", min_day=190, max_day=260))
    assert not in_day_window(Advice(id="4", min_day=100, max_day=300))
    assert not in_day_window(Advice(id="5", day=271))
    assert not in_day_window(Advice(id="6"))


def test_status_filter_reads_missing_flag_as_active(advices):
    query = QueryState().with_filter(STATUS_FILTER, "active")

    assert _visible(advices, query, ADVICES) == ["a1", "a3", "a4", "a5", "a6"]
    inactive = QueryState().with_filter(STATUS_FILTER, "inactive")
    assert _visible(advices, inactive, ADVICES) == ["a2"]


def test_category_filter_matches_resolved_and_unresolved(advices):
    query = QueryState().with_filter(CATEGORY_FILTER, "c-repas")

    assert _visible(advices, query, ADVICES) == ["a2", "a4", "a5"]


def test_tabs_partition_the_filtered_set(advices):
    rest = _visible(advices, QueryState(active_tab=TAB_REST), ADVICES)
    window = _visible(advices, QueryState(active_tab=TAB_SIX_TO_NINE), ADVICES)

    assert set(rest).isdisjoint(window)
    assert set(rest) | set(window) == {a.id for a in advices}
    assert window == ["a1", "a3", "a5"]


def test_unknown_tab_fails_open(advices):
    assert len(_visible(advices, QueryState(active_tab="nope"), ADVICES)) == len(advices)


def test_authorization_filter_excludes_unset_flag(babies):
    yes = QueryState().with_filter(AUTHORIZATION_FILTER, "true")
    no = QueryState().with_filter(AUTHORIZATION_FILTER, "false")

    assert _visible(babies, yes, BABIES) == ["b1"]
    assert _visible(babies, no, BABIES) == ["b2"]


def test_health_filter_matches_allergy_or_disease(babies):
    query = QueryState().with_filter(HEALTH_FILTER, "asthme")

    assert _visible(babies, query, BABIES) == ["b3"]


def test_baby_search_covers_owner(babies):
    query = QueryState(search_term="claire")

    assert _visible(babies, query, BABIES) == ["b1", "b2"]


def test_all_sentinel_removes_filter():
    query = QueryState().with_filter(STATUS_FILTER, "active").with_filter(STATUS_FILTER, ALL)

    assert query.filters == ()
    assert query.filter_value(STATUS_FILTER) == ALL


def test_filters_compose_with_and():
    records = [
        Baby(id="1", gender="Male", autorisation=True),
        Baby(id="2", gender="Female", autorisation=True),
        Baby(id="3", gender="Male", autorisation=False),
    ]
    query = QueryState().with_filter(AUTHORIZATION_FILTER, "true").with_filter("gender", "Male")

    assert _visible(records, query, BABIES) == ["1"]
