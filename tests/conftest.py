"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports backend en ajoutant la racine du projet au
sys.path, règle structlog pour des sorties discrètes et fournit les fixtures partagées.
"""

import logging
import os
import sys

import pytest
import structlog

# Ensure project root is on sys.path so that
# imports like `from backend...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from backend.domain.civil_time import CivilTimeResolver  # noqa: E402
from backend.domain.entities import GeographicLocation  # noqa: E402
from backend.domain.services import GeneKeyResolver  # noqa: E402
from backend.domain.wheel import ZodiacWheel  # noqa: E402
from backend.infra.astro.internal_astro import InternalSolarEphemeris  # noqa: E402
from backend.infra.astro.swiss_ephemeris import SwissSolarEphemeris  # noqa: E402
from backend.infra.content_repo import JSONGeneKeyRepository  # noqa: E402

# Logs de niveau warning+ uniquement, flux résolu à chaque appel (compatible capsys)
structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
    cache_logger_on_first_use=False,
)


@pytest.fixture(scope="session")
def catalogue() -> JSONGeneKeyRepository:
    """Référentiel livré avec le paquet."""
    return JSONGeneKeyRepository()


@pytest.fixture
def wheel() -> ZodiacWheel:
    return ZodiacWheel()


@pytest.fixture
def civil_time() -> CivilTimeResolver:
    return CivilTimeResolver()


@pytest.fixture
def resolver(catalogue) -> GeneKeyResolver:
    """Résolveur haute précision (Swiss Ephemeris / Moshier)."""
    return GeneKeyResolver(ephemeris=SwissSolarEphemeris(), catalogue=catalogue)


@pytest.fixture
def analytic_resolver(catalogue) -> GeneKeyResolver:
    """Résolveur basse précision (formule analytique)."""
    return GeneKeyResolver(ephemeris=InternalSolarEphemeris(), catalogue=catalogue)


@pytest.fixture
def paris() -> GeographicLocation:
    return GeographicLocation(
        city="Paris",
        country="France",
        latitude=48.8566,
        longitude=2.3522,
        timezone="Europe/Paris",
        source="cache",
    )


@pytest.fixture
def utc_location() -> GeographicLocation:
    return GeographicLocation(city="Greenwich", country="United Kingdom", timezone="UTC")
