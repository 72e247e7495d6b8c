"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.models import (
    Advice,
    Article,
    Baby,
    Category,
    Doctor,
    PopulatedUser,
    Recipe,
    ResolvedCategory,
    UnresolvedCategory,
)


def ts(day: int, month: int = 1, year: int = 2024) -> datetime:
    return datetime(year, month, day, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def categories():
    return [
        Category(id="c-sommeil", name="Sommeil", content_types=["advice", "article"]),
        Category(id="c-repas", name="Repas", content_types=["advice", "recipe"]),
        Category(id="c-sante", name="Santé", content_types=["article"]),
    ]


@pytest.fixture
def advices(categories):
    sommeil = ResolvedCategory(categories[0])
    repas = ResolvedCategory(categories[1])
    return [
        Advice(id="a1", title="Bonjour bébé", category=sommeil, day=200, viewers=["u1", "u2"], created_at=ts(1)),
        Advice(id="a2", title="Avion en papier", category=repas, day=30, is_active=False, created_at=ts(2)),
        Advice(id="a3", title="Éveil musical", category=sommeil, min_day=190, max_day=260, created_at=ts(3)),
        Advice(id="a4", title="école maternelle", category=UnresolvedCategory("c-repas"), created_at=ts(4)),
        Advice(id="a5", title="Dodo", category=repas, day=270, likes=["u1"], is_active=True, created_at=ts(5)),
        Advice(id="a6", title="Zèbre et girafe", min_day=100, max_day=300, created_at=ts(6)),
    ]


@pytest.fixture
def articles():
    return [
        Article(id="ar1", title="Allaitement", is_active=True, scheduled_at=ts(10), created_at=ts(1)),
        Article(id="ar2", title="biberon", is_active=False, created_at=ts(3)),
        Article(id="ar3", title="Couches", created_at=ts(2)),
    ]


@pytest.fixture
def doctors():
    return [
        Doctor(id="d1", name="Dr Martin", specialty="Pédiatre", city="Lyon", rating=4.5),
        Doctor(id="d2", name="Dr Bernard", specialty=" Sage-femme ", city="Évry", rating=3.0),
        Doctor(id="d3", name="dr Aubert", specialty="Pédiatre", city="lyon", rating=None),
        Doctor(id="d4", name="Dr Petit", specialty="", city="Angers", rating=5.0),
    ]


@pytest.fixture
def babies():
    owner = PopulatedUser(id="u1", name="Claire Dupont", email="claire@example.fr")
    return [
        Baby(id="b1", name="Léo", gender="Male", autorisation=True, allergy="Arachide", disease="aucune", user=owner),
        Baby(id="b2", name="Inès", gender="Female", autorisation=False, allergy=" Lait ", user=owner),
        Baby(id="b3", name="Noé", gender="Male", disease="Asthme"),
    ]


@pytest.fixture
def recipes():
    return [
        Recipe(id="r1", title="Purée de carottes", city="Paris", rating=4.0, created_at=ts(1)),
        Recipe(id="r2", title="Compote", city="Nice", created_at=ts(2)),
    ]
