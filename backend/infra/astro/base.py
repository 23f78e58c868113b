"""
Interface de base pour les éphémérides solaires.

Ce module définit l'interface abstraite que doivent implémenter les différents niveaux de précision
du calcul de la longitude écliptique du Soleil.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from backend.domain.errors import ErrorCodes, InvalidInputError


class SolarEphemeris(ABC):
    """Interface abstraite: longitude écliptique apparente du Soleil pour un instant UTC."""

    tier: str = ""
    accuracy: str = ""

    @abstractmethod
    def ecliptic_longitude(self, instant: datetime) -> float:
        """Retourne la longitude écliptique du Soleil, en degrés dans `[0, 360)`."""
        ...

    @staticmethod
    def as_utc(instant: datetime) -> datetime:
        """Convertit un instant conscient du fuseau en UTC; refuse les datetimes naïfs."""
        if instant.tzinfo is None or instant.utcoffset() is None:
            raise InvalidInputError(
                "Instant must be timezone-aware",
                code=ErrorCodes.NAIVE_INSTANT,
                details={"instant": instant.isoformat()},
            )
        return instant.astimezone(timezone.utc)
