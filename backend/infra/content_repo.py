"""Dépôt du référentiel des Gene Keys basé sur un fichier JSON.

Ce module charge, une seule fois, les 64 fiches de référence (Ombre/Don/Siddhi et hexagramme)
depuis `genekeys.json` et les expose en lecture seule.
"""

import json
from pathlib import Path

import structlog

from backend.domain.entities import GeneKeyRecord, Hexagram
from backend.domain.errors import InternalInvariantError

log = structlog.get_logger(__name__)

DEFAULT_PATH = Path(__file__).with_name("genekeys.json")

# Traits des trigrammes lus de bas en haut (1 = yang).
TRIGRAM_LINES = {
    "heaven": "111",
    "lake": "110",
    "fire": "101",
    "thunder": "100",
    "wind": "011",
    "water": "010",
    "mountain": "001",
    "earth": "000",
}

_HEXAGRAM_GLYPH_BASE = 0x4DC0


def build_hexagram(number: int, raw: dict) -> Hexagram:
    """Construit un hexagramme à partir de ses deux trigrammes."""
    upper = raw["upper"]
    lower = raw["lower"]
    return Hexagram(
        number=number,
        name=raw["name"],
        upper_trigram=upper,
        lower_trigram=lower,
        lines=TRIGRAM_LINES[lower] + TRIGRAM_LINES[upper],
        glyph=chr(_HEXAGRAM_GLYPH_BASE + number - 1),
    )


class JSONGeneKeyRepository:
    """Référentiel des 64 Gene Keys indexé par numéro.

    Le fichier est lu à la construction; toute incohérence (fiche manquante, trigramme inconnu)
    lève `InternalInvariantError`.
    """

    def __init__(self, path: str | Path | None = None):
        """Charge et valide le fichier JSON.

        Paramètres:
        - path: chemin du fichier JSON (par défaut `genekeys.json` à côté de ce module).
        """
        self.path = Path(path) if path else DEFAULT_PATH
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        try:
            records = {
                int(key): GeneKeyRecord(
                    number=int(key),
                    shadow=value["shadow"],
                    gift=value["gift"],
                    siddhi=value["siddhi"],
                    hexagram=build_hexagram(int(key), value["hexagram"]),
                )
                for key, value in data.items()
            }
        except (KeyError, TypeError, ValueError) as err:
            log.error("gene_key_catalogue_invalid", path=str(self.path), error=str(err))
            raise InternalInvariantError(
                "Gene Key catalogue is malformed", details={"path": str(self.path)}
            ) from err
        missing = sorted(set(range(1, 65)) - set(records))
        if missing or len(records) != 64:
            log.error("gene_key_catalogue_incomplete", path=str(self.path), missing=missing)
            raise InternalInvariantError(
                "Gene Key catalogue must hold exactly 64 records",
                details={"missing": missing, "size": len(records)},
            )
        self._records = records
        log.debug("gene_key_catalogue_loaded", path=str(self.path), size=len(records))

    def get(self, number: int) -> GeneKeyRecord | None:
        """Retourne la fiche d'une Gene Key, ou None si absente."""
        return self._records.get(number)

    def all(self) -> list[GeneKeyRecord]:
        """Les 64 fiches par numéro croissant."""
        return [self._records[n] for n in sorted(self._records)]
