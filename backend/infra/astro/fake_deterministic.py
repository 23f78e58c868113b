"""Éphéméride factice déterministe pour les tests et le développement.

Ce module implémente une éphéméride qui renvoie une longitude fixée à l'avance, pour placer un
calcul exactement sur une frontière de segment sans dépendre d'un instant réel.
"""

from datetime import datetime

from backend.domain.wheel import normalize_degrees
from backend.infra.astro.base import SolarEphemeris


class FakeFixedEphemeris(SolarEphemeris):
    """Éphéméride factice: longitude constante, quel que soit l'instant."""

    tier = "fixed"
    accuracy = "Fixed longitude (test double)"

    def __init__(self, longitude: float):
        self.longitude = longitude
        self.calls: list[datetime] = []

    def ecliptic_longitude(self, instant: datetime) -> float:
        self.calls.append(self.as_utc(instant))
        return normalize_degrees(self.longitude)
