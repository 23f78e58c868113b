"""Taxonomie des erreurs du calcul des Gene Keys.

Ce module fournit des erreurs métier avec des enveloppes standardisées (`code`, `message`,
`details`) et des codes d'erreur cohérents, utilisables telles quelles par une couche API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ErrorEnvelope:
    """Standard error envelope."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorCodes:
    """Codes d'erreur standard."""

    # Saisie utilisateur
    INVALID_FORMAT = "INVALID_FORMAT"
    MONTH_OUT_OF_RANGE = "MONTH_OUT_OF_RANGE"
    DAY_OUT_OF_RANGE = "DAY_OUT_OF_RANGE"
    HOUR_OUT_OF_RANGE = "HOUR_OUT_OF_RANGE"
    MINUTE_OUT_OF_RANGE = "MINUTE_OUT_OF_RANGE"
    INVALID_DAY_FOR_MONTH = "INVALID_DAY_FOR_MONTH"
    UNKNOWN_TIMEZONE = "UNKNOWN_TIMEZONE"
    INVALID_LONGITUDE = "INVALID_LONGITUDE"
    NAIVE_INSTANT = "NAIVE_INSTANT"
    DATE_OUT_OF_RANGE = "DATE_OUT_OF_RANGE"

    # Référentiel
    GENE_KEY_NOT_FOUND = "GENE_KEY_NOT_FOUND"

    # Défauts internes
    INTERNAL_INVARIANT = "INTERNAL_INVARIANT"


class GeneKeyError(Exception):
    """Erreur de base avec enveloppe standard."""

    default_code = ErrorCodes.INTERNAL_INVARIANT

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.details = details

    def envelope(self) -> ErrorEnvelope:
        """Retourne l'enveloppe d'erreur associée."""
        return ErrorEnvelope(code=self.code, message=self.message, details=self.details)

    def to_dict(self) -> dict[str, Any]:
        """Sérialise l'erreur au format `{code, message, details?}`."""
        env = self.envelope()
        return {
            "code": env.code,
            "message": env.message,
            **({"details": env.details} if env.details else {}),
        }


class InvalidInputError(GeneKeyError, ValueError):
    """Saisie malformée ou impossible (corrigeable par l'utilisateur).

    `reason` est le message destiné à être affiché tel quel.
    """

    default_code = ErrorCodes.INVALID_FORMAT

    @property
    def reason(self) -> str:
        return self.message


class NotFoundError(GeneKeyError, LookupError):
    """Numéro de Gene Key hors de l'intervalle 1..64."""

    default_code = ErrorCodes.GENE_KEY_NOT_FOUND


class InternalInvariantError(GeneKeyError, RuntimeError):
    """Table statique corrompue: toujours un défaut, jamais une erreur utilisateur."""

    default_code = ErrorCodes.INTERNAL_INVARIANT
