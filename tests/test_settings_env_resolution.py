"""
Tests pour la résolution des variables d'environnement.

Ce module teste le chargement et la résolution des variables d'environnement à partir de fichiers
.env personnalisés dans les settings.
"""

from __future__ import annotations

import importlib
from pathlib import Path

import pytest
from pydantic import ValidationError


def _reload_settings():
    settings_mod = importlib.import_module("backend.core.settings")
    return importlib.reload(settings_mod)


def test_settings_reads_env_file(tmp_path: Path, monkeypatch) -> None:
    """
    Teste que les settings lisent correctement les fichiers d'environnement.

    Vérifie que les variables définies dans un fichier .env personnalisé (désigné par ENV_FILE)
    sont correctement chargées et appliquées aux settings.
    """
    env = tmp_path / ".env.custom"
    env.write_text("EPHEMERIS_TIER=analytic\nLOG_LEVEL=DEBUG\n", encoding="utf-8")
    monkeypatch.setenv("ENV_FILE", str(env))
    monkeypatch.delenv("EPHEMERIS_TIER", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    # Reload settings module to pick up new ENV_FILE
    s = _reload_settings().get_settings()
    assert s.EPHEMERIS_TIER == "analytic"
    assert s.LOG_LEVEL == "DEBUG"


def test_environment_overrides_env_file(tmp_path: Path, monkeypatch) -> None:
    """Teste que les variables d'environnement priment sur le fichier .env."""
    env = tmp_path / ".env.custom"
    env.write_text("EPHEMERIS_TIER=analytic\n", encoding="utf-8")
    monkeypatch.setenv("ENV_FILE", str(env))
    monkeypatch.setenv("EPHEMERIS_TIER", "swisseph")

    s = _reload_settings().get_settings()
    assert s.EPHEMERIS_TIER == "swisseph"


def test_app_env_specific_file(tmp_path: Path, monkeypatch) -> None:
    """Teste la sélection de `.env.{APP_ENV}` dans le répertoire courant."""
    (tmp_path / ".env.staging").write_text("APP_NAME=genekeys-staging\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ENV_FILE", raising=False)
    monkeypatch.delenv("APP_NAME", raising=False)
    monkeypatch.setenv("APP_ENV", "staging")

    s = _reload_settings().get_settings()
    assert s.APP_NAME == "genekeys-staging"


def test_defaults(tmp_path: Path, monkeypatch) -> None:
    """Teste les valeurs par défaut sans fichier .env."""
    monkeypatch.chdir(tmp_path)
    for key in ("ENV_FILE", "APP_ENV", "EPHEMERIS_TIER", "SWISSEPH_EPHE_PATH", "GENE_KEYS_PATH"):
        monkeypatch.delenv(key, raising=False)

    s = _reload_settings().get_settings()
    assert s.EPHEMERIS_TIER == "swisseph"
    assert s.SWISSEPH_EPHE_PATH is None
    assert s.GENE_KEYS_PATH is None


def test_invalid_tier_rejected(tmp_path: Path, monkeypatch) -> None:
    """Teste le refus d'un niveau d'éphéméride inconnu."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ENV_FILE", raising=False)
    monkeypatch.setenv("EPHEMERIS_TIER", "vsop2000")

    settings_mod = _reload_settings()
    with pytest.raises(ValidationError):
        settings_mod.get_settings()
