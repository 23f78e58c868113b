"""
Éphéméride solaire haute précision basée sur Swiss Ephemeris.

Sans fichiers `.se1`, Swiss Ephemeris utilise la théorie semi-analytique de Moshier intégrée
(précision de l'ordre de la seconde d'arc pour le Soleil). Avec un répertoire d'éphémérides, les
fichiers sont utilisés.
"""

from __future__ import annotations

from datetime import datetime

import structlog
import swisseph as swe

from backend.domain.errors import ErrorCodes, InvalidInputError
from backend.domain.wheel import normalize_degrees
from backend.infra.astro.base import SolarEphemeris

log = structlog.get_logger(__name__)


def julian_day_ut(instant: datetime) -> float:
    """Jour julien (UT) d'un instant UTC."""
    hour = (
        instant.hour
        + instant.minute / 60.0
        + (instant.second + instant.microsecond / 1_000_000) / 3600.0
    )
    return swe.julday(instant.year, instant.month, instant.day, hour)


class SwissSolarEphemeris(SolarEphemeris):
    """Longitude géocentrique apparente du Soleil via `pyswisseph`."""

    tier = "swisseph"

    def __init__(self, ephe_path: str | None = None):
        """
        Initialise l'éphéméride.

        Args:
            ephe_path: Répertoire des fichiers Swiss Ephemeris (optionnel). Sans répertoire, le
                modèle Moshier intégré est utilisé.
        """
        self.ephe_path = ephe_path
        if ephe_path:
            swe.set_ephe_path(ephe_path)
            self._flags = swe.FLG_SWIEPH
            self.accuracy = "High precision (Swiss Ephemeris)"
        else:
            self._flags = swe.FLG_MOSEPH
            self.accuracy = "High precision (Swiss Ephemeris, Moshier)"

    def ecliptic_longitude(self, instant: datetime) -> float:
        utc = self.as_utc(instant)
        jd = julian_day_ut(utc)
        try:
            pos, retflags = swe.calc_ut(jd, swe.SUN, self._flags)
        except swe.Error as err:
            # Moshier: environ -3000..+3000
            log.info("swisseph_out_of_range", jd=jd, error=str(err))
            raise InvalidInputError(
                "Date is outside the supported range",
                code=ErrorCodes.DATE_OUT_OF_RANGE,
                details={"instant": utc.isoformat()},
            ) from err
        if self._flags & swe.FLG_SWIEPH and not retflags & swe.FLG_SWIEPH:
            log.warning("swisseph_files_missing", ephe_path=self.ephe_path, jd=jd)
        return normalize_degrees(pos[0])
