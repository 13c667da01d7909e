import pytest

from natal_api.astro_core.aspects import (
    Aspect,
    all_pairwise_aspects,
    aspect_between,
    calculate_aspect,
    match_aspect,
)
from natal_api.astro_core.constants import ASPECTS, AspectDefinition, Nature


def test_exact_square():
    aspect = calculate_aspect(0.0, 90.0)
    assert aspect.name == "square"
    assert aspect.orb == 0.0
    assert aspect.exact is True
    assert aspect.nature == "challenging"
    assert aspect.symbol == "□"


def test_square_just_outside_orb_is_rejected():
    assert calculate_aspect(10.0, 108.5) is None


def test_orb_boundary_is_inclusive():
    aspect = calculate_aspect(0.0, 98.0)
    assert aspect.name == "square"
    assert aspect.orb == 8.0
    assert aspect.exact is False


def test_exact_flag_threshold():
    assert calculate_aspect(0.0, 90.99).exact is True
    assert calculate_aspect(0.0, 91.0).exact is False


@pytest.mark.parametrize(
    "lon1,lon2,name,nature",
    [
        (358.0, 2.0, "conjunction", "neutral"),
        (0.0, 66.0, "sextile", "harmonious"),
        (0.0, 120.0, "trine", "harmonious"),
        (10.0, 190.0, "opposition", "challenging"),
        (355.0, 3.0, "conjunction", "neutral"),
    ],
)
def test_aspect_kinds(lon1, lon2, name, nature):
    aspect = calculate_aspect(lon1, lon2)
    assert aspect.name == name
    assert aspect.nature == nature


def test_sextile_orb_is_tighter():
    assert calculate_aspect(0.0, 66.5) is None


@pytest.mark.parametrize(
    "a,b",
    [(0.0, 90.0), (358.0, 2.0), (10.0, 190.0), (123.4, 7.8), (300.0, 61.0), (45.0, 140.0)],
)
def test_aspect_is_symmetric(a, b):
    assert calculate_aspect(a, b) == calculate_aspect(b, a)


def test_table_order_breaks_ties():
    table = (
        AspectDefinition("first", 0.0, 50.0, "", Nature.NEUTRAL),
        AspectDefinition("second", 30.0, 50.0, "", Nature.NEUTRAL),
    )
    assert match_aspect(20.0, table).name == "first"
    assert [d.name for d in ASPECTS] == ["conjunction", "sextile", "square", "trine", "opposition"]


def test_aspect_between_names_points():
    aspect = aspect_between("sun", 10.0, "moon", 100.0)
    assert isinstance(aspect, Aspect)
    assert (aspect.first, aspect.second) == ("sun", "moon")
    assert aspect.description == "Sun □ Moon"
    assert aspect.involves("moon")
    assert not aspect.involves("mars")
    assert aspect.to_json()["description"] == "Sun □ Moon"
    assert aspect_between("sun", 10.0, "moon", 40.0) is None


def test_all_pairwise_aspects_in_input_order():
    aspects = all_pairwise_aspects([("sun", 0.0), ("moon", 90.0), ("mars", 180.0)])
    assert [(a.first, a.second, a.name) for a in aspects] == [
        ("sun", "moon", "square"),
        ("sun", "mars", "opposition"),
        ("moon", "mars", "square"),
    ]
