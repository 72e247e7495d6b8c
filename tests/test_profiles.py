import pytest

from core.errors import ServerError, UnknownError, ValidationError, normalize_error
from core.models import EntityKind, SortDirection, SortKey
from core.profiles import PROFILES, get_profile, parse_sort_option


def test_every_entity_has_a_profile():
    assert set(PROFILES) == set(EntityKind)
    assert get_profile("advices") is PROFILES[EntityKind.ADVICES]


@pytest.mark.parametrize(
    "option, expected",
    [
        ("createdAt-desc", (SortKey.CREATED_AT, SortDirection.DESC)),
        ("userId.name-asc", (SortKey.OWNER_NAME, SortDirection.ASC)),
        ("day-asc", (SortKey.DAY, SortDirection.ASC)),
    ],
)
def test_parse_sort_option(option, expected):
    assert parse_sort_option(option) == expected


@pytest.mark.parametrize("option", ["createdAt", "colour-asc", "title-up"])
def test_parse_sort_option_rejects_garbage(option):
    with pytest.raises(ValueError):
        parse_sort_option(option)


def test_filter_names_are_unique_per_profile():
    for profile in PROFILES.values():
        assert len(set(profile.filter_names)) == len(profile.filter_names)


def test_normalize_error():
    server = ServerError(500, "x")
    validation = ValidationError("y")

    assert normalize_error(server) is server
    assert normalize_error(validation) is validation
    assert isinstance(normalize_error(KeyError("z")), UnknownError)
