"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, référentiel, éphéméride, roue, résolveurs) et expose
un singleton `container` utilisé par le reste de l'application. Un seul niveau d'éphéméride est
choisi par conteneur: la roue et le calcul unitaire ne peuvent pas diverger.
"""

import structlog

from backend.core.settings import Settings, get_settings
from backend.domain.civil_time import CivilTimeResolver
from backend.domain.services import GeneKeyResolver
from backend.domain.wheel import ZodiacWheel
from backend.infra.astro.base import SolarEphemeris
from backend.infra.astro.internal_astro import InternalSolarEphemeris
from backend.infra.astro.swiss_ephemeris import SwissSolarEphemeris
from backend.infra.content_repo import JSONGeneKeyRepository

log = structlog.get_logger(__name__)


def build_ephemeris(settings: Settings) -> SolarEphemeris:
    """Instancie l'éphéméride correspondant à `EPHEMERIS_TIER`."""
    if settings.EPHEMERIS_TIER == "analytic":
        return InternalSolarEphemeris()
    return SwissSolarEphemeris(ephe_path=settings.SWISSEPH_EPHE_PATH)


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.catalogue = JSONGeneKeyRepository(path=self.settings.GENE_KEYS_PATH)
        self.ephemeris = build_ephemeris(self.settings)
        self.wheel = ZodiacWheel()
        self.civil_time = CivilTimeResolver()
        self.resolver = GeneKeyResolver(
            ephemeris=self.ephemeris,
            catalogue=self.catalogue,
            wheel=self.wheel,
            civil_time=self.civil_time,
        )
        log.debug(
            "container_ready",
            ephemeris_tier=self.ephemeris.tier,
            catalogue=str(self.catalogue.path),
        )


container = Container()
