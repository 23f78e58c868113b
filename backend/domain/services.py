from typing import Any

import structlog

from backend.domain.civil_time import CivilTimeResolver
from backend.domain.entities import (
    CalculationResult,
    GeneKeyRecord,
    GeographicLocation,
    WheelEntry,
)
from backend.domain.errors import InternalInvariantError
from backend.domain.wheel import ZodiacWheel, check_gene_key_number, zodiac_sign

log = structlog.get_logger(__name__)


class GeneKeyResolver:
    """Service métier du calcul de la Sun Key.

    Responsabilités:
    - Convertir l'heure civile de naissance en instant UTC via `civil_time`.
    - Calculer la longitude écliptique du Soleil via `ephemeris` (un seul niveau de précision
      pour toutes les opérations d'une même instance).
    - Projeter la longitude sur la roue (`wheel`) et joindre la fiche du référentiel (`catalogue`).
    """

    def __init__(self, ephemeris, catalogue, wheel: ZodiacWheel | None = None, civil_time=None):
        """Initialise le service avec ses dépendances.

        Paramètres:
        - ephemeris: éphéméride solaire (`SolarEphemeris`).
        - catalogue: dépôt des 64 fiches Gene Key.
        - wheel: roue des 64 segments (par défaut la roue standard).
        - civil_time: convertisseur heure civile -> UTC.
        """
        self.ephemeris = ephemeris
        self.catalogue = catalogue
        self.wheel = wheel or ZodiacWheel()
        self.civil_time = civil_time or CivilTimeResolver()

    def resolve(self, date: str, time: str, location: GeographicLocation) -> CalculationResult:
        """Calcule la Sun Key pour une naissance.

        Démarche:
        - Valide la saisie et résout l'instant UTC dans `location.timezone`.
        - Calcule la longitude solaire, en déduit le signe et le segment de roue.
        - Joint la triade Ombre/Don/Siddhi et l'hexagramme.

        La latitude et la longitude du lieu ne participent pas au calcul: elles sont seulement
        recopiées dans le résultat.

        Raises:
            InvalidInputError: date/heure invalide ou fuseau inconnu (propagée telle quelle).
            InternalInvariantError: Gene Key sans fiche de référence.
        """
        birth = self.civil_time.parse(date, time, location.timezone)
        resolution = self.civil_time.resolve_moment(birth)
        longitude = self.ephemeris.ecliptic_longitude(resolution.instant)
        segment = self.wheel.segment_for_longitude(longitude)
        record = self._record(segment.gene_key)
        log.debug(
            "gene_key_resolved",
            instant=resolution.instant.isoformat(),
            longitude=longitude,
            gene_key=segment.gene_key,
            tier=self.ephemeris.tier,
        )
        return CalculationResult(
            birth=birth,
            location=location,
            time=resolution,
            sun_longitude=longitude,
            zodiac_sign=zodiac_sign(longitude),
            segment=segment,
            gene_key=segment.gene_key,
            shadow=record.shadow,
            gift=record.gift,
            siddhi=record.siddhi,
            hexagram=record.hexagram,
            ephemeris_tier=self.ephemeris.tier,
            accuracy=self.ephemeris.accuracy,
        )

    def gene_key(self, number: Any) -> GeneKeyRecord:
        """Fiche d'une Gene Key par numéro (1..64), sinon `NotFoundError`."""
        return self._record(check_gene_key_number(number))

    def wheel_entries(self) -> list[WheelEntry]:
        """Les 64 segments de la roue joints à leur fiche, dans l'ordre de la roue."""
        return [
            WheelEntry(segment=segment, record=self._record(segment.gene_key))
            for segment in self.wheel.all_segments()
        ]

    def _record(self, number: int) -> GeneKeyRecord:
        record = self.catalogue.get(number)
        if record is None:
            log.error("gene_key_record_missing", gene_key=number)
            raise InternalInvariantError(
                f"No data found for Gene Key {number}", details={"gene_key": number}
            )
        return record
