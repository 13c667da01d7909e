import pytest

from natal_api.astro_core.aspects import calculate_aspect
from natal_api.astro_core.chart import GeoCoordinate, build_natal_chart
from natal_api.astro_core.constants import (
    ASCENDANT,
    MIDHEAVEN,
    PERSONAL_POINTS,
    SIGNIFICANT_TRANSIT_BODIES,
    TRACKED_BODIES,
)
from natal_api.astro_core.settings import Settings
from natal_api.astro_core.timeconv import julian_day
from natal_api.astro_core.transits import (
    TransitAspect,
    analyze_transits_to_natal,
    calculate_12_month_transits,
    calculate_transits,
    key_transits,
    next_month,
    significant_transits,
    transit_house_placements,
)


@pytest.fixture(scope="module")
def natal():
    return build_natal_chart(
        1985, 3, 20, 9, 15, 0,
        location=GeoCoordinate(latitude=51.5074, longitude=-0.1278),
        settings=Settings(),
    )


@pytest.fixture(scope="module")
def months(natal):
    return calculate_12_month_transits(2024, 11, natal, months=12)


def test_next_month_rolls_over_year():
    assert next_month(2024, 11) == (2024, 12)
    assert next_month(2024, 12) == (2025, 1)


def test_twelve_months_with_rollover(months):
    assert len(months) == 12
    assert [(m.year, m.month) for m in months[:3]] == [(2024, 11), (2024, 12), (2025, 1)]
    assert (months[-1].year, months[-1].month) == (2025, 10)
    assert [m.month_index for m in months] == list(range(12))
    assert months[2].month_name == "January"


def test_samples_are_first_and_fifteenth_at_noon(months):
    for m in months:
        assert (m.start.day, m.mid.day) == (1, 15)
        assert m.start.jd == julian_day(m.year, m.month, 1, 12.0)
        assert m.mid.jd == julian_day(m.year, m.month, 15, 12.0)
        assert len(m.mid.positions) == len(TRACKED_BODIES)


def test_month_count_from_settings(natal):
    assert len(calculate_12_month_transits(2024, 1, natal, settings=Settings(transit_months=3))) == 3


def test_transit_aspects_use_mid_month_sample(natal, months):
    for m in months:
        assert list(m.aspects) == analyze_transits_to_natal(natal, m.mid)


def test_transit_aspect_matrix_is_complete(natal, months):
    mid = months[0].mid
    expected = []
    for t in mid.positions:
        for name, lon in natal.points():
            match = calculate_aspect(t.longitude, lon)
            if match is not None:
                expected.append((t.body, name, match.name))
    assert [(a.first, a.second, a.name) for a in months[0].aspects] == expected


def test_transit_aspects_include_angles(natal):
    sample = calculate_transits(2024, 11, 15)
    asc = natal.ascendant.longitude
    hits = [a for a in analyze_transits_to_natal(natal, sample) if a.second == ASCENDANT]
    for t in sample.positions:
        expected = calculate_aspect(t.longitude, asc)
        found = [a for a in hits if a.first == t.body]
        assert len(found) == (0 if expected is None else 1)


def test_house_placements_against_natal_frame(natal, months):
    m = months[0]
    placements = m.placements_by_body()
    assert set(placements) == {p.body for p in m.mid.positions}
    for p in m.mid.positions:
        assert placements[p.body].house == natal.houses.house_of(p.longitude)
    assert transit_house_placements(natal, m.mid) == placements


def test_samples_are_independent(months):
    again = calculate_transits(months[5].year, months[5].month, 15)
    assert again == months[5].mid


def test_unknown_transit_body_is_omitted(natal):
    sample = calculate_transits(2025, 1, 1, bodies=("sun", "vulcan"))
    assert [p.body for p in sample.positions] == ["sun"]
    assert [f.body for f in sample.omitted] == ["vulcan"]


def _hit(first, second, orb, exact=False, name="square"):
    return TransitAspect(
        first=first, second=second, name=name, angle=90.0, separation=90.0 + orb,
        orb=orb, symbol="□", nature="challenging", exact=exact,
    )


def test_transit_aspect_description():
    assert _hit("saturn", "sun", 0.5).description == "Transiting Saturn □ Natal Sun"
    assert _hit("saturn", ASCENDANT, 0.5).description == "Transiting Saturn □ Ascendant"
    assert _hit("true_node", MIDHEAVEN, 0.5).description == "Transiting True node □ Midheaven"


def test_significant_transits_filter():
    hits = [
        _hit("saturn", "sun", 3.0),
        _hit("sun", "sun", 3.0),
        _hit("pluto", ASCENDANT, 3.0),
        _hit("jupiter", "saturn", 3.0),
    ]
    kept = significant_transits(hits)
    assert [(h.first, h.second) for h in kept] == [("saturn", "sun"), ("pluto", ASCENDANT)]
    for h in kept:
        assert h.first in SIGNIFICANT_TRANSIT_BODIES
        assert h.second in PERSONAL_POINTS


def test_key_transits_filter_and_limit():
    hits = [_hit("mars", "sun", 0.5, exact=True)] + [_hit("venus", "moon", 1.5)] * 6 + [_hit("sun", "moon", 5.0)]
    kept = key_transits(hits)
    assert len(kept) == 5
    assert kept[0].first == "mars"
    assert all(h.orb < 2.0 for h in kept)
    assert key_transits([_hit("sun", "moon", 5.0)]) == []


def test_to_json(months):
    data = months[0].to_json()
    assert data["month_name"] == "November"
    assert data["transits_mid"]["date"] == {"year": 2024, "month": 11, "day": 15}
    assert set(data["house_placements"]) == {b.value for b in TRACKED_BODIES}
    for a in data["aspects"]:
        assert a["description"].startswith("Transiting ")
