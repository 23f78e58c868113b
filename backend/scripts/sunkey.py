"""Script de calcul de la Sun Key en ligne de commande.

Ce script résout une naissance (date, heure, fuseau et lieu déjà géocodé) et affiche le résultat au
format JSON de l'API, ou la roue complète avec `--wheel`.
"""

# ============================================================
# Script : backend/scripts/sunkey.py
# Objet  : Calcul de la Sun Key / export de la roue des 64 Gene Keys.
# Usage  : python -m backend.scripts.sunkey --date 1990-05-15 --time 14:30 --tz Europe/Paris
#          python -m backend.scripts.sunkey --wheel
# Sortie : JSON sur stdout; enveloppe d'erreur sur stderr (code retour 2)
# ============================================================

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from pydantic import ValidationError

# Allow running as a standalone script (python backend/scripts/sunkey.py)
SYS_ROOT = Path(__file__).resolve().parents[2]
if str(SYS_ROOT) not in sys.path:
    sys.path.append(str(SYS_ROOT))

from backend.core.container import Container  # noqa: E402
from backend.core.logging import setup_logging  # noqa: E402
from backend.core.settings import get_settings  # noqa: E402
from backend.domain.entities import GeographicLocation  # noqa: E402
from backend.domain.errors import InvalidInputError  # noqa: E402


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute the Sun Gene Key of a birth moment.")
    parser.add_argument("--date", type=str, help="YYYY-MM-DD")
    parser.add_argument("--time", type=str, help="HH:mm (24h)")
    parser.add_argument("--tz", type=str, default="UTC", help="IANA timezone")
    parser.add_argument("--city", type=str, default="")
    parser.add_argument("--country", type=str, default="")
    parser.add_argument("--lat", type=float, default=0.0)
    parser.add_argument("--lon", type=float, default=0.0)
    parser.add_argument("--source", type=str, default="cli")
    parser.add_argument("--tier", choices=["analytic", "swisseph"], default=None)
    parser.add_argument("--wheel", action="store_true", help="Print the 64 wheel segments")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Point d'entrée: retourne 0 en cas de succès, 2 pour une saisie invalide."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.tier:
        settings = settings.model_copy(update={"EPHEMERIS_TIER": args.tier})
    setup_logging(settings.LOG_LEVEL)

    resolver = Container(settings=settings).resolver

    if args.wheel:
        payload = {"segments": [entry.to_payload() for entry in resolver.wheel_entries()]}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    if not args.date or not args.time:
        parser.error("--date and --time are required (or use --wheel)")

    try:
        location = GeographicLocation(
            city=args.city,
            country=args.country,
            latitude=args.lat,
            longitude=args.lon,
            timezone=args.tz,
            source=args.source,
        )
    except ValidationError as err:
        parser.error(f"invalid location: {err.errors()[0]['msg']}")

    try:
        result = resolver.resolve(args.date, args.time, location)
    except InvalidInputError as err:
        print(json.dumps(err.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 2

    print(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
