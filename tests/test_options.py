from core.models import Advice, Ingredient, QueryState, Recipe, UnresolvedCategory
from core.profiles import BABIES, CITY_FILTER, DOCTORS, HEALTH_FILTER, SPECIALTY_FILTER
from core.services.options import (
    categories_in_use,
    category_options,
    city_options,
    derive_options,
    health_issue_options,
    ingredient_options,
    source_options,
    specialty_options,
)
from core.services.view_reducer import derive_view


def test_city_options_are_distinct_and_collated(doctors):
    assert city_options(doctors) == ["Angers", "Évry", "Lyon", "lyon"]


def test_specialties_are_trimmed_and_empty_values_dropped(doctors):
    assert specialty_options(doctors) == ["Pédiatre", "Sage-femme"]


def test_health_options_skip_placeholders(babies):
    assert health_issue_options(babies) == ["Arachide", "Asthme", "Lait"]


def test_sources_are_uppercased():
    records = [Advice(id="1", sources=[" oms ", "HAS"]), Advice(id="2", sources=["Oms"])]

    assert source_options(records) == ["HAS", "OMS"]


def test_ingredient_names():
    recipes = [
        Recipe(id="1", ingredients=[Ingredient("Carotte", 2), Ingredient(" Lait ", 1)]),
        Recipe(id="2", ingredients=[Ingredient("carotte", 1)]),
    ]

    assert ingredient_options(recipes) == ["Carotte", "carotte", "Lait"]


def test_options_never_offer_absent_values():
    assert derive_options([], lambda r: r.city) == []


def test_categories_in_use(advices):
    assert categories_in_use(advices) == [("c-repas", "Repas"), ("c-sommeil", "Sommeil")]


def test_unresolved_category_is_labelled_by_id():
    records = [Advice(id="1", category=UnresolvedCategory("c9"))]

    assert categories_in_use(records) == [("c9", "c9")]


def test_category_options_filter_by_content_type(categories):
    assert category_options(categories, "recipe") == [("c-repas", "Repas")]
    assert category_options(categories, "article") == [("c-sommeil", "Sommeil"), ("c-sante", "Santé")]


def _selects(records, profile, filter_name, value):
    return derive_view(records, QueryState().with_filter(filter_name, value), profile).total_count


def test_every_derived_doctor_option_selects_a_record(doctors):
    for value in specialty_options(doctors):
        assert _selects(doctors, DOCTORS, SPECIALTY_FILTER, value) > 0, value
    for value in city_options(doctors):
        assert _selects(doctors, DOCTORS, CITY_FILTER, value) > 0, value


def test_every_health_issue_option_selects_a_baby(babies):
    for value in health_issue_options(babies):
        assert _selects(babies, BABIES, HEALTH_FILTER, value) > 0, value


def test_trimmed_specialty_selects_padded_record(doctors):
    view = derive_view(doctors, QueryState().with_filter(SPECIALTY_FILTER, "Sage-femme"), DOCTORS)

    assert [r.id for r in view.rows] == ["d2"]
