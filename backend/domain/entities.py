"""
Entités du domaine métier.

Ce module définit les modèles de données (immutables) utilisés par le calcul des Gene Keys: roue
zodiacale, référentiel des 64 Gene Keys, lieu de naissance résolu et résultat de calcul.
"""

from datetime import datetime, timedelta
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

TimeAdjustment = Literal["exact", "ambiguous_earliest", "nonexistent_shifted"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class GeographicLocation(_Frozen):
    """Lieu de naissance déjà résolu par un service de géocodage externe."""

    city: str = ""
    country: str = ""
    latitude: float = Field(default=0.0, ge=-90.0, le=90.0)
    longitude: float = Field(default=0.0, ge=-180.0, le=180.0)
    timezone: str  # IANA TZ
    source: str = "unknown"

    @property
    def place(self) -> str:
        return ", ".join(p for p in (self.city, self.country) if p)


class BirthMoment(_Frozen):
    """Date et heure civiles de naissance dans un fuseau donné."""

    year: int
    month: int
    day: int
    hour: int
    minute: int
    timezone: str

    @property
    def date(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def time(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"

    def wall_clock(self) -> datetime:
        """Heure murale naïve (sans fuseau)."""
        return datetime(self.year, self.month, self.day, self.hour, self.minute)


class TimeResolution(_Frozen):
    """Instant UTC correspondant à une heure murale, avec le décalage appliqué."""

    instant: datetime
    utc_offset: timedelta
    adjustment: TimeAdjustment = "exact"

    @property
    def offset_string(self) -> str:
        minutes = int(self.utc_offset.total_seconds() // 60)
        sign = "+" if minutes >= 0 else "-"
        hours, mins = divmod(abs(minutes), 60)
        return f"{sign}{hours:02d}:{mins:02d}"

    @property
    def iso_utc(self) -> str:
        return self.instant.isoformat().replace("+00:00", "Z")


class WheelSegment(_Frozen):
    """Segment de 5.625° de la roue, intervalle semi-ouvert `[start_degree, end_degree)`."""

    index: int
    gene_key: int
    start_degree: float
    end_degree: float

    def contains(self, longitude: float) -> bool:
        return self.start_degree <= longitude < self.end_degree


class Hexagram(_Frozen):
    """Hexagramme du Yi King (numérotation King Wen).

    `lines` se lit de bas en haut: trigramme inférieur puis trigramme supérieur, `1` = yang.
    """

    number: int
    name: str
    upper_trigram: str
    lower_trigram: str
    lines: str
    glyph: str


class GeneKeyRecord(_Frozen):
    """Fiche de référence d'une Gene Key: triade Ombre/Don/Siddhi et hexagramme."""

    number: int
    shadow: str
    gift: str
    siddhi: str
    hexagram: Hexagram


class WheelEntry(_Frozen):
    """Segment de roue joint à sa fiche de référence (visualisation de la roue)."""

    segment: WheelSegment
    record: GeneKeyRecord

    def to_payload(self) -> dict[str, Any]:
        return {
            "index": self.segment.index,
            "geneKey": self.segment.gene_key,
            "start": self.segment.start_degree,
            "end": self.segment.end_degree,
            "shadow": self.record.shadow,
            "gift": self.record.gift,
            "siddhi": self.record.siddhi,
            "hexagram": _hexagram_payload(self.record.hexagram),
        }


class CalculationResult(_Frozen):
    """Résultat complet d'un calcul de Sun Key."""

    birth: BirthMoment
    location: GeographicLocation
    time: TimeResolution
    sun_longitude: float
    zodiac_sign: str
    segment: WheelSegment
    gene_key: int
    shadow: str
    gift: str
    siddhi: str
    hexagram: Hexagram
    ephemeris_tier: str
    accuracy: str

    @property
    def utc_datetime(self) -> datetime:
        return self.time.instant

    def to_payload(self) -> dict[str, Any]:
        """Sérialise le résultat au format JSON de l'API (longitude arrondie à 4 décimales)."""
        return {
            "birthDate": {
                "date": self.birth.date,
                "time": self.birth.time,
                "place": self.location.place,
                "timezone": self.location.timezone,
            },
            "location": {
                "city": self.location.city,
                "country": self.location.country,
                "latitude": self.location.latitude,
                "longitude": self.location.longitude,
                "timezone": self.location.timezone,
                "source": self.location.source,
            },
            "sunLongitude": round(self.sun_longitude, 4),
            "zodiacSign": self.zodiac_sign,
            "geneKey": self.gene_key,
            "shadow": self.shadow,
            "gift": self.gift,
            "siddhi": self.siddhi,
            "hexagram": _hexagram_payload(self.hexagram),
            "accuracy": self.accuracy,
            "ephemerisTier": self.ephemeris_tier,
            "utcOffset": self.time.offset_string,
            "timeAdjustment": self.time.adjustment,
            "utcDateTime": self.time.iso_utc,
        }


def _hexagram_payload(hexagram: Hexagram) -> dict[str, Any]:
    return {
        "number": hexagram.number,
        "name": hexagram.name,
        "lines": hexagram.lines,
        "glyph": hexagram.glyph,
    }
