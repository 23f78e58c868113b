"""
Éphéméride solaire interne (formule analytique basse précision).

Ce module implémente la longitude solaire par la longitude moyenne corrigée de l'équation du
centre (deux termes harmoniques), à partir du nombre de jours depuis J2000.0. Précision d'environ
0.01°: suffisant pour un usage symbolique, pas pour un travail d'éphéméride scientifique.
"""

import math
from datetime import datetime, timezone

from backend.domain.wheel import normalize_degrees
from backend.infra.astro.base import SolarEphemeris

J2000 = datetime(2000, 1, 1, 12, 0, tzinfo=timezone.utc)
SECONDS_PER_DAY = 86400.0


def days_since_j2000(instant: datetime) -> float:
    """Nombre de jours (fractionnaire) écoulés depuis J2000.0."""
    return (instant - J2000).total_seconds() / SECONDS_PER_DAY


class InternalSolarEphemeris(SolarEphemeris):
    """Longitude solaire analytique, sans dépendance externe."""

    tier = "analytic"
    accuracy = "Low precision (analytic, ~0.01°)"

    def ecliptic_longitude(self, instant: datetime) -> float:
        """
        Calculate the Sun's ecliptic longitude with the equation of center.

        Args:
            instant: Instant conscient du fuseau (converti en UTC).

        Returns:
            float: Longitude écliptique en degrés dans `[0, 360)`.
        """
        n = days_since_j2000(self.as_utc(instant))
        mean_longitude = normalize_degrees(280.460 + 0.9856474 * n)
        mean_anomaly = math.radians(normalize_degrees(357.528 + 0.9856003 * n))
        longitude = (
            mean_longitude
            + 1.915 * math.sin(mean_anomaly)
            + 0.020 * math.sin(2 * mean_anomaly)
        )
        return normalize_degrees(longitude)
