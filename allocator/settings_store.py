"""
allocator/settings_store.py
---------------------------
Persistent storage for the two optimiser knobs.

Design
------
* One JSON file, ``<directory>/portfolio_options.json``, holding::

      {"minAssets": 2, "maxAssetsPercentage": 20}

  (the same keys the web UI keeps in local storage, so exported settings
  round-trip).
* ``SettingsStore.load()`` never fails: a missing, unreadable or invalid file
  yields the defaults.  A single out-of-range field falls back to its own
  default and is logged.
* ``SettingsStore.save()`` validates first, then writes atomically via a temp
  file + rename so a crash mid-write never leaves a corrupt file behind.

The store is read by the *caller* once per run; the optimiser itself only
ever sees the resulting ``OptimizationConfig``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import replace
from pathlib import Path

from allocator.config import (
    DEFAULT_MAX_ASSETS_PERCENTAGE,
    DEFAULT_MIN_ASSETS,
    SETTINGS_FILENAME,
)
from allocator.errors import InvalidConfig
from allocator.models import OptimizationConfig
from allocator.validation import validate_config

logger = logging.getLogger(__name__)

_KEY_MIN_ASSETS = "minAssets"
_KEY_MAX_PCT    = "maxAssetsPercentage"


def _settings_path(base: Path) -> Path:
    return base / SETTINGS_FILENAME


class SettingsStore:
    """
    JSON-backed store for ``OptimizationConfig``.

    Usage
    -----
    ::

        store  = SettingsStore("~/.allocator")
        config = store.load()                  # defaults if nothing saved yet
        store.save(OptimizationConfig(min_assets=3, max_assets_percentage=25))
    """

    def __init__(self, directory: str | Path):
        self._base = Path(directory).expanduser()

    @property
    def path(self) -> Path:
        return _settings_path(self._base)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def load(self) -> OptimizationConfig:
        """Return the stored config, or the defaults when nothing usable is stored."""
        payload = self._read()
        if payload is None:
            return OptimizationConfig()

        config = OptimizationConfig()
        min_assets = payload.get(_KEY_MIN_ASSETS, DEFAULT_MIN_ASSETS)
        max_pct    = payload.get(_KEY_MAX_PCT, DEFAULT_MAX_ASSETS_PERCENTAGE)

        try:
            validate_config(replace(config, min_assets=min_assets))
            config = replace(config, min_assets=min_assets)
        except InvalidConfig as exc:
            logger.warning("Ignoring stored %s: %s", _KEY_MIN_ASSETS, exc)

        try:
            validate_config(replace(config, max_assets_percentage=max_pct))
            config = replace(config, max_assets_percentage=float(max_pct))
        except InvalidConfig as exc:
            logger.warning("Ignoring stored %s: %s", _KEY_MAX_PCT, exc)

        return config

    def save(self, config: OptimizationConfig) -> None:
        """
        Persist *config* (matrix mode is not stored).

        Raises
        ------
        InvalidConfig
            If *config* fails validation; nothing is written.
        OSError
            If the file cannot be written.
        """
        validate_config(config)
        self._base.mkdir(parents=True, exist_ok=True)

        p   = self.path
        tmp = p.with_suffix(".tmp")
        payload = {
            _KEY_MIN_ASSETS: int(config.min_assets),
            _KEY_MAX_PCT:    float(config.max_assets_percentage),
        }

        try:
            with open(tmp, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, allow_nan=False)
            os.replace(tmp, p)   # atomic on POSIX and Windows
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("Saved optimiser settings to %s", p)

    def exists(self) -> bool:
        """Return True if a settings file is present."""
        return self.path.exists()

    def reset(self) -> None:
        """Delete the stored settings so the next load returns defaults."""
        p = self.path
        if p.exists():
            p.unlink()

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _read(self) -> dict | None:
        p = self.path
        if not p.exists():
            return None

        try:
            with open(p, encoding="utf-8") as fh:
                payload = json.load(fh)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Could not read settings file %s (%s); using defaults.", p, exc)
            return None

        if not isinstance(payload, dict):
            logger.warning("Settings file %s is not a JSON object; using defaults.", p)
            return None
        return payload
