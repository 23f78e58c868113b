"""
Conversion heure civile -> instant UTC.

Objectif du module
------------------
- Valider une date (`YYYY-MM-DD`) et une heure (`HH:mm`) saisies par l'utilisateur
- Répondre à la question "quel instant UTC correspond à cette heure murale dans ce fuseau ?"
  en appliquant le décalage en vigueur à ce moment précis (heure d'été comprise)

Le décalage est obtenu par point fixe: un instant UTC d'essai est rendu en heure murale dans le
fuseau (pytz), le décalage observé sert à corriger l'essai, jusqu'à stabilité. Les essais partent
de l'heure murale elle-même et d'un jour de part et d'autre, afin de découvrir les deux décalages
entourant une transition.

Politiques:
- heure ambiguë (heure répétée au retour à l'heure d'hiver): l'occurrence la plus tôt;
- heure inexistante (saut de printemps): décalage d'avant la transition, l'heure murale est donc
  avancée de la durée du saut (02:30 dans un saut 02:00 -> 03:00 devient 03:30).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date as _date
from datetime import datetime, timedelta, tzinfo

import pytz
import structlog

from backend.domain.entities import BirthMoment, TimeAdjustment, TimeResolution
from backend.domain.errors import ErrorCodes, InvalidInputError

log = structlog.get_logger(__name__)

_DATE_RE = re.compile(r"^\s*(\d{1,4})-(\d{1,2})-(\d{1,2})\s*$")
_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{1,2})\s*$")

_PROBE_SHIFTS = (timedelta(0), timedelta(days=-1), timedelta(days=1))
_MAX_SETTLE_STEPS = 4


@dataclass(frozen=True)
class ValidationOutcome:
    """Résultat de validation: `reason` est le message destiné à l'utilisateur."""

    valid: bool
    reason: str | None = None
    code: str | None = None


def _fail(code: str, reason: str) -> ValidationOutcome:
    return ValidationOutcome(valid=False, reason=reason, code=code)


def _render(instant_utc: datetime, zone: tzinfo) -> datetime:
    """Heure murale (naïve) d'un instant UTC dans le fuseau."""
    return instant_utc.astimezone(zone).replace(tzinfo=None)


def _offset_at(instant_utc: datetime, zone: tzinfo) -> timedelta:
    return instant_utc.astimezone(zone).utcoffset()


def _shift(value: datetime, delta: timedelta) -> datetime | None:
    try:
        return value + delta
    except OverflowError:
        return None


class CivilTimeResolver:
    """Résout (date, heure, fuseau IANA) en instant UTC non ambigu."""

    def validate(self, date: str | None, time: str | None) -> ValidationOutcome:
        """Valide la date et l'heure sans jamais lever pour une erreur de saisie."""
        date_match = _DATE_RE.match(date) if isinstance(date, str) else None
        time_match = _TIME_RE.match(time) if isinstance(time, str) else None
        if not date_match or not time_match:
            return _fail(ErrorCodes.INVALID_FORMAT, "Invalid date or time format")
        year, month, day = (int(g) for g in date_match.groups())
        hour, minute = (int(g) for g in time_match.groups())
        if year < 1:
            return _fail(ErrorCodes.INVALID_FORMAT, "Invalid date or time format")
        if not 1 <= month <= 12:
            return _fail(ErrorCodes.MONTH_OUT_OF_RANGE, "Month must be between 1 and 12")
        if not 1 <= day <= 31:
            return _fail(ErrorCodes.DAY_OUT_OF_RANGE, "Day must be between 1 and 31")
        if not 0 <= hour <= 23:
            return _fail(ErrorCodes.HOUR_OUT_OF_RANGE, "Hour must be between 0 and 23")
        if not 0 <= minute <= 59:
            return _fail(ErrorCodes.MINUTE_OUT_OF_RANGE, "Minute must be between 0 and 59")
        # 31 février -> 3 mars: le mois change à la construction
        constructed = _date(year, month, 1) + timedelta(days=day - 1)
        if constructed.month != month:
            return _fail(ErrorCodes.INVALID_DAY_FOR_MONTH, "Invalid day for the given month")
        return ValidationOutcome(valid=True)

    def zone(self, timezone_id: str | None) -> tzinfo:
        """Retourne le fuseau pytz, ou lève `InvalidInputError` s'il est inconnu."""
        if not isinstance(timezone_id, str) or not timezone_id.strip():
            raise InvalidInputError(
                "Timezone is required", code=ErrorCodes.UNKNOWN_TIMEZONE
            )
        try:
            return pytz.timezone(timezone_id.strip())
        except pytz.UnknownTimeZoneError as err:
            raise InvalidInputError(
                f"Unknown timezone: {timezone_id}",
                code=ErrorCodes.UNKNOWN_TIMEZONE,
                details={"timezone": timezone_id},
            ) from err

    def parse(self, date: str | None, time: str | None, timezone_id: str | None) -> BirthMoment:
        """Valide la saisie et construit le `BirthMoment` correspondant.

        Raises:
            InvalidInputError: date/heure invalide ou fuseau inconnu.
        """
        outcome = self.validate(date, time)
        if not outcome.valid:
            raise InvalidInputError(
                outcome.reason, code=outcome.code, details={"date": date, "time": time}
            )
        zone = self.zone(timezone_id)
        year, month, day = (int(g) for g in _DATE_RE.match(date).groups())
        hour, minute = (int(g) for g in _TIME_RE.match(time).groups())
        return BirthMoment(
            year=year, month=month, day=day, hour=hour, minute=minute, timezone=zone.zone
        )

    def resolve(self, date: str | None, time: str | None, timezone_id: str | None) -> TimeResolution:
        """Résout la saisie en instant UTC avec le décalage appliqué."""
        moment = self.parse(date, time, timezone_id)
        return self.resolve_moment(moment)

    def resolve_moment(self, moment: BirthMoment) -> TimeResolution:
        zone = self.zone(moment.timezone)
        wall = moment.wall_clock()
        try:
            instant, adjustment = self._solve(wall, zone)
            utc_offset = _offset_at(instant, zone)
        except OverflowError as err:
            raise InvalidInputError(
                "Date is outside the supported range",
                code=ErrorCodes.DATE_OUT_OF_RANGE,
                details={"date": moment.date, "time": moment.time},
            ) from err
        if adjustment != "exact":
            log.info(
                "civil_time_adjusted",
                adjustment=adjustment,
                wall_clock=wall.isoformat(),
                timezone=moment.timezone,
                instant=instant.isoformat(),
            )
        return TimeResolution(instant=instant, utc_offset=utc_offset, adjustment=adjustment)

    def to_utc(self, date: str | None, time: str | None, timezone_id: str | None) -> datetime:
        """Instant UTC (conscient du fuseau) correspondant à l'heure murale."""
        return self.resolve(date, time, timezone_id).instant

    def offset_for(self, date: str | None, time: str | None, timezone_id: str | None) -> str:
        """Décalage UTC (`±HH:MM`) en vigueur pour cette heure murale."""
        return self.resolve(date, time, timezone_id).offset_string

    def _solve(self, wall: datetime, zone: tzinfo) -> tuple[datetime, TimeAdjustment]:
        matches = sorted(
            {
                wall - offset
                for offset in self._candidate_offsets(wall, zone)
                if _render(pytz.utc.localize(wall - offset), zone) == wall
            }
        )
        if matches:
            adjustment: TimeAdjustment = "ambiguous_earliest" if len(matches) > 1 else "exact"
            return pytz.utc.localize(matches[0]), adjustment
        before = _shift(wall, timedelta(days=-1)) or wall
        naive_utc = wall - _offset_at(pytz.utc.localize(before), zone)
        return pytz.utc.localize(naive_utc), "nonexistent_shifted"

    def _candidate_offsets(self, wall: datetime, zone: tzinfo) -> set[timedelta]:
        offsets = set()
        for shift in _PROBE_SHIFTS:
            probe = _shift(wall, shift)
            if probe is None:
                continue
            offset = self._settle_offset(wall, zone, probe)
            if offset is not None:
                offsets.add(offset)
        return offsets

    @staticmethod
    def _settle_offset(wall: datetime, zone: tzinfo, probe: datetime) -> timedelta | None:
        """Itère `essai -> décalage observé -> wall - décalage` jusqu'à stabilité."""
        offset = None
        for _ in range(_MAX_SETTLE_STEPS):
            try:
                current = _offset_at(pytz.utc.localize(probe), zone)
            except OverflowError:
                return offset
            if current == offset:
                break
            offset = current
            next_probe = _shift(wall, -offset)
            if next_probe is None:
                break
            probe = next_probe
        return offset
