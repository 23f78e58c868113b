"""Tests pour la roue des 64 Gene Keys.

Ce module teste la projection longitude -> segment, la recherche inverse par numéro, la partition
de l'écliptique et la sensibilité aux frontières de segment.
"""

from __future__ import annotations

import math

import pytest

from backend.domain.errors import ErrorCodes, InternalInvariantError, InvalidInputError, NotFoundError
from backend.domain.wheel import (
    GENE_KEY_WHEEL,
    SEGMENT_WIDTH,
    ZodiacWheel,
    check_gene_key_number,
    normalize_degrees,
    zodiac_sign,
)

LAST_INDEX = 63


def test_zero_longitude_maps_to_first_segment(wheel: ZodiacWheel) -> None:
    """Teste que 0° Bélier tombe dans le segment 0, Gene Key 13."""
    segment = wheel.segment_for_longitude(0.0)
    assert segment.index == 0
    assert segment.gene_key == 13


def test_end_of_wheel_maps_to_last_segment(wheel: ZodiacWheel) -> None:
    """Teste que 359.99° tombe dans le segment 63, Gene Key 19."""
    segment = wheel.segment_for_longitude(359.99)
    assert segment.index == LAST_INDEX
    assert segment.gene_key == 19


def test_just_below_360_never_overflows(wheel: ZodiacWheel) -> None:
    """Teste qu'une longitude juste sous 360° ne produit jamais l'index 64."""
    assert wheel.segment_for_longitude(math.nextafter(360.0, 0.0)).index == LAST_INDEX
    assert wheel.segment_for_longitude(-1e-15).index == 0


def test_longitude_is_normalized(wheel: ZodiacWheel) -> None:
    """Teste la normalisation des longitudes négatives ou supérieures à 360°."""
    assert normalize_degrees(-10.0) == 350.0
    assert wheel.segment_for_longitude(-10.0) == wheel.segment_for_longitude(350.0)
    assert wheel.segment_for_longitude(360.0).index == 0
    assert wheel.segment_for_longitude(720.5) == wheel.segment_for_longitude(0.5)


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_non_finite_longitude_rejected(wheel: ZodiacWheel, value: float) -> None:
    """Teste le rejet des longitudes non finies."""
    with pytest.raises(InvalidInputError) as exc:
        wheel.segment_for_longitude(value)
    assert exc.value.code == ErrorCodes.INVALID_LONGITUDE


def test_segments_partition_the_ecliptic(wheel: ZodiacWheel) -> None:
    """Teste que les 64 segments couvrent [0, 360) sans trou ni recouvrement."""
    segments = wheel.all_segments()
    assert len(segments) == 64
    assert [s.index for s in segments] == list(range(64))
    assert segments[0].start_degree == 0.0
    assert segments[-1].end_degree == 360.0
    for previous, current in zip(segments, segments[1:]):
        assert previous.end_degree == current.start_degree
    for segment in segments:
        assert segment.end_degree - segment.start_degree == SEGMENT_WIDTH == 5.625


def test_wheel_is_a_permutation(wheel: ZodiacWheel) -> None:
    """Teste que la roue contient chaque Gene Key exactement une fois."""
    assert sorted(s.gene_key for s in wheel.all_segments()) == list(range(1, 65))
    assert tuple(s.gene_key for s in wheel.all_segments()) == GENE_KEY_WHEEL


def test_all_segments_is_deterministic(wheel: ZodiacWheel) -> None:
    """Teste que l'énumération de la roue est rejouable et stable."""
    assert list(wheel.all_segments()) == list(wheel.all_segments())
    assert ZodiacWheel().all_segments() == wheel.all_segments()


def test_range_contains_every_sampled_longitude(wheel: ZodiacWheel) -> None:
    """Teste que l'intervalle de la Gene Key trouvée contient toujours la longitude."""
    for i in range(3600):
        longitude = i * 0.1 + 0.03
        segment = wheel.segment_for_longitude(longitude)
        start, end = wheel.range_for_gene_key(segment.gene_key)
        assert start <= longitude < end
        assert segment.contains(longitude)


def test_range_for_gene_key(wheel: ZodiacWheel) -> None:
    """Teste la recherche inverse d'une Gene Key sur la roue."""
    assert wheel.range_for_gene_key(13) == (0.0, 5.625)
    assert wheel.range_for_gene_key(19) == (354.375, 360.0)
    assert wheel.range_for_gene_key(1) == (48 * 5.625, 49 * 5.625)


@pytest.mark.parametrize("number", [0, 65, -1, True, "13", 13.0, None])
def test_range_for_invalid_gene_key(wheel: ZodiacWheel, number) -> None:
    """Teste qu'un numéro hors 1..64 lève NotFoundError plutôt qu'une valeur par défaut."""
    with pytest.raises(NotFoundError) as exc:
        wheel.range_for_gene_key(number)
    assert exc.value.code == ErrorCodes.GENE_KEY_NOT_FOUND


def test_corrupted_table_fails_loudly() -> None:
    """Teste qu'une table qui n'est pas une permutation de 1..64 est refusée."""
    with pytest.raises(InternalInvariantError):
        ZodiacWheel(order=(1,) * 64)
    with pytest.raises(InternalInvariantError):
        ZodiacWheel(order=GENE_KEY_WHEEL[:-1])


def test_boundary_sensitivity(wheel: ZodiacWheel) -> None:
    """Teste qu'un écart de 0.01° autour d'une frontière change la Gene Key.

    Deux éphémérides de précisions différentes peuvent donc donner deux Gene Keys pour une même
    naissance proche d'une frontière: c'est inhérent au domaine.
    """
    assert wheel.gene_key_for_longitude(5.62) == 13
    assert wheel.gene_key_for_longitude(5.63) == 49


@pytest.mark.parametrize(
    ("longitude", "sign"),
    [
        (0.0, "Aries"),
        (29.999, "Aries"),
        (30.0, "Taurus"),
        (280.37, "Capricorn"),
        (359.99, "Pisces"),
        (-0.5, "Pisces"),
    ],
)
def test_zodiac_sign(longitude: float, sign: str) -> None:
    """Teste le signe tropical déduit de la longitude (Bélier = 0)."""
    assert zodiac_sign(longitude) == sign


def test_check_gene_key_number() -> None:
    """Teste la garde commune des numéros de Gene Key."""
    assert check_gene_key_number(1) == 1
    assert check_gene_key_number(64) == 64
    for number in (0, 65, False, "64"):
        with pytest.raises(NotFoundError):
            check_gene_key_number(number)
