"""
Roue des 64 Gene Keys.

La roue découpe l'écliptique en 64 segments égaux de 5.625° à partir de 0° Bélier. L'ordre des
Gene Keys le long de la roue est une permutation fixe de 1..64 (séquence du Yi King), définie une
seule fois ci-dessous et jamais modifiée.
"""

from __future__ import annotations

import math

import structlog

from backend.domain.entities import WheelSegment
from backend.domain.errors import ErrorCodes, InternalInvariantError, InvalidInputError, NotFoundError

log = structlog.get_logger(__name__)

SEGMENT_COUNT = 64
SEGMENT_WIDTH = 360.0 / SEGMENT_COUNT  # 5.625°

# Ordre des Gene Keys à partir de 0° Bélier, 8 segments (45°) par ligne.
GENE_KEY_WHEEL: tuple[int, ...] = (
    13, 49, 30, 55, 37, 63, 22, 36,
    25, 17, 21, 51, 42, 3, 27, 24,
    2, 23, 8, 20, 16, 35, 45, 12,
    15, 52, 39, 53, 62, 56, 31, 33,
    7, 4, 29, 59, 40, 64, 47, 6,
    46, 18, 48, 57, 32, 50, 28, 44,
    1, 43, 14, 34, 9, 5, 26, 11,
    10, 58, 38, 54, 61, 60, 41, 19,
)

ZODIAC_SIGNS: tuple[str, ...] = (
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
)


def normalize_degrees(value: float) -> float:
    """Ramène un angle dans `[0, 360)` (`-10 -> 350`)."""
    normalized = value % 360.0
    # -1e-15 % 360.0 == 360.0 en flottant
    return 0.0 if normalized >= 360.0 else normalized


def zodiac_sign(longitude: float) -> str:
    """Signe tropical (Bélier = 0) d'une longitude écliptique."""
    index = min(int(normalize_degrees(longitude) // 30.0), len(ZODIAC_SIGNS) - 1)
    return ZODIAC_SIGNS[index]


def check_gene_key_number(number) -> int:
    """Retourne `number` s'il s'agit d'un entier de 1..64 (bool exclus), sinon `NotFoundError`."""
    if isinstance(number, bool) or not isinstance(number, int) or not 1 <= number <= SEGMENT_COUNT:
        raise NotFoundError(
            "Gene Key number must be between 1 and 64",
            details={"gene_key": str(number)},
        )
    return number


class ZodiacWheel:
    """Table de correspondance longitude -> segment -> Gene Key.

    Construite une fois au démarrage à partir de `GENE_KEY_WHEEL`, en lecture seule ensuite.
    """

    def __init__(self, order: tuple[int, ...] = GENE_KEY_WHEEL):
        if len(order) != SEGMENT_COUNT or sorted(order) != list(range(1, SEGMENT_COUNT + 1)):
            log.error("wheel_table_corrupted", size=len(order))
            raise InternalInvariantError(
                "Gene Key wheel must be a permutation of 1..64",
                details={"size": len(order)},
            )
        self._segments = tuple(
            WheelSegment(
                index=i,
                gene_key=gk,
                start_degree=i * SEGMENT_WIDTH,
                end_degree=(i + 1) * SEGMENT_WIDTH,
            )
            for i, gk in enumerate(order)
        )
        self._by_gene_key = {s.gene_key: s for s in self._segments}

    def segment_for_longitude(self, longitude: float) -> WheelSegment:
        """Retourne le segment contenant la longitude (normalisée dans `[0, 360)`).

        Raises:
            InvalidInputError: longitude non finie.
        """
        if not math.isfinite(longitude):
            raise InvalidInputError(
                "Longitude must be a finite number",
                code=ErrorCodes.INVALID_LONGITUDE,
                details={"longitude": str(longitude)},
            )
        normalized = normalize_degrees(longitude)
        index = min(int(normalized // SEGMENT_WIDTH), SEGMENT_COUNT - 1)
        return self._segments[index]

    def gene_key_for_longitude(self, longitude: float) -> int:
        return self.segment_for_longitude(longitude).gene_key

    def range_for_gene_key(self, gene_key: int) -> tuple[float, float]:
        """Intervalle `[start, end)` occupé par une Gene Key sur la roue.

        Raises:
            NotFoundError: numéro hors de 1..64.
            InternalInvariantError: numéro valide absent de la table.
        """
        check_gene_key_number(gene_key)
        segment = self._by_gene_key.get(gene_key)
        if segment is None:
            log.error("wheel_gene_key_missing", gene_key=gene_key)
            raise InternalInvariantError(
                f"No wheel segment for Gene Key {gene_key}",
                details={"gene_key": gene_key},
            )
        return segment.start_degree, segment.end_degree

    def all_segments(self) -> tuple[WheelSegment, ...]:
        """Les 64 segments dans l'ordre de la roue (index 0..63)."""
        return self._segments
