"""
Configuration management for the Riven Grader.
Handles catalog location, default roll parameters, known weapons and persistence.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from riven_grader.constants import (
    APP_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_BUFFS,
    DEFAULT_CURSES,
    DEFAULT_RANK,
    MAX_RANK,
    MAX_TOTAL_STATS,
    MIN_BUFFS,
    MIN_RANK,
)

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """
    Get the application config directory.

    Returns:
        Path to the config directory (~/.riven_grader/)
    """
    config_dir = Path.home() / APP_DIR_NAME
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


class Config:
    """
    Grader configuration with JSON persistence.

    Key ideas:
    - "catalog" points at an alternate stat catalog file (None = packaged one).
    - "grading" holds the roll parameters used when a caller leaves them out.
    - "weapons" maps weapon names to their category and disposition, so rolls
      can be graded by weapon name.
    """

    # NOTE: This structure is treated as immutable. Always use
    # _default_config_deepcopy() when you need a fresh copy of defaults.
    DEFAULT_CONFIG: Dict[str, Any] = {
        "catalog": {
            "path": None,
        },
        "grading": {
            "default_rank": DEFAULT_RANK,
            "default_buffs": DEFAULT_BUFFS,
            "default_curses": DEFAULT_CURSES,
        },
        "logging": {
            "debug": False,
        },
        # Example: {"Soma Prime": {"category": "rifle", "disposition": 0.5}}
        "weapons": {},
    }

    def __init__(self, config_file: Optional[Path] = None) -> None:
        """
        Initialize configuration.

        Args:
            config_file: Optional path to config JSON file. When omitted,
                         the default path under ~/.riven_grader/config.json
                         is used.
        """
        self.config_file: Path = self._resolve_config_path(config_file)
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        self.data: Dict[str, Any] = self._load()
        logger.info(f"Config loaded from {self.config_file}")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve_config_path(config_file: Optional[Path]) -> Path:
        if config_file is not None:
            return Path(config_file)
        return get_config_dir() / CONFIG_FILE_NAME

    def _load(self) -> Dict[str, Any]:
        """Load configuration from JSON file, merging with defaults."""
        if not self.config_file.exists():
            logger.info("No config file found, using defaults")
            return self._default_config_deepcopy()

        try:
            with self.config_file.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(f"Failed to load config: {exc}. Using defaults.")
            return self._default_config_deepcopy()

        if not isinstance(raw, dict):
            logger.error("Config file does not hold a JSON object. Using defaults.")
            return self._default_config_deepcopy()

        merged = self._merge_with_defaults(raw)
        logger.info("Configuration loaded successfully")
        return merged

    @classmethod
    def _default_config_deepcopy(cls) -> Dict[str, Any]:
        """Fresh copy of DEFAULT_CONFIG, so instances never share state."""
        return copy.deepcopy(cls.DEFAULT_CONFIG)

    def _merge_with_defaults(self, user_config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge user config with defaults to handle new keys.

        Nested sections are merged one level deep, so new keys under e.g.
        "grading" appear without discarding user-provided values.
        """
        merged = self._default_config_deepcopy()

        for key, value in user_config.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key].update(value)
            else:
                merged[key] = value

        return merged

    def _bounded_int(self, section: str, key: str, low: int, high: int) -> int:
        """Read an int setting, falling back to the default when invalid."""
        default = self.DEFAULT_CONFIG[section][key]
        value = self.data.get(section, {}).get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
            logger.warning(
                f"Invalid {section}.{key} in config: {value!r}; using {default}"
            )
            return default
        return value

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """Persist the current configuration to the config file."""
        try:
            with self.config_file.open("w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=2, ensure_ascii=False)
            logger.info("Configuration saved")
        except OSError as exc:
            logger.error(f"Failed to save config: {exc}")

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    @property
    def catalog_path(self) -> Optional[Path]:
        """Stat catalog file, or None for the catalog shipped with the package."""
        value = self.data.get("catalog", {}).get("path")
        if not value:
            return None
        return Path(value).expanduser()

    @catalog_path.setter
    def catalog_path(self, value: Optional[Path]) -> None:
        self.data.setdefault("catalog", {})["path"] = str(value) if value else None
        self.save()

    # ------------------------------------------------------------------
    # Grading defaults
    # ------------------------------------------------------------------

    @property
    def default_rank(self) -> int:
        """Rank used when a caller does not give one (0 to 8)."""
        return self._bounded_int("grading", "default_rank", MIN_RANK, MAX_RANK)

    @default_rank.setter
    def default_rank(self, value: int) -> None:
        """Set default rank with guardrails (0 to 8)."""
        self.data.setdefault("grading", {})["default_rank"] = max(MIN_RANK, min(MAX_RANK, int(value)))
        self.save()

    @property
    def default_buffs(self) -> int:
        """Buff count used when a caller does not give one."""
        return self._bounded_int("grading", "default_buffs", MIN_BUFFS, MAX_TOTAL_STATS)

    @default_buffs.setter
    def default_buffs(self, value: int) -> None:
        self.data.setdefault("grading", {})["default_buffs"] = max(MIN_BUFFS, min(MAX_TOTAL_STATS, int(value)))
        self.save()

    @property
    def default_curses(self) -> int:
        """Curse count used when a caller does not give one."""
        return self._bounded_int("grading", "default_curses", 0, MAX_TOTAL_STATS - MIN_BUFFS)

    @default_curses.setter
    def default_curses(self, value: int) -> None:
        self.data.setdefault("grading", {})["default_curses"] = max(0, min(MAX_TOTAL_STATS - MIN_BUFFS, int(value)))
        self.save()

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    @property
    def debug_logging(self) -> bool:
        """Whether to log range/quality traces at DEBUG level."""
        return bool(self.data.get("logging", {}).get("debug", False))

    @debug_logging.setter
    def debug_logging(self, value: bool) -> None:
        self.data.setdefault("logging", {})["debug"] = bool(value)
        self.save()

    # ------------------------------------------------------------------
    # Weapons
    # ------------------------------------------------------------------

    @property
    def weapons(self) -> Dict[str, Dict[str, Any]]:
        """Known weapons: name -> {"category": ..., "disposition": ...}."""
        weapons = self.data.get("weapons", {})
        return weapons if isinstance(weapons, dict) else {}

    def set_weapon(self, name: str, category: str, disposition: float) -> None:
        """Add or update a weapon entry and persist."""
        self.data.setdefault("weapons", {})[name] = {
            "category": category.lower(),
            "disposition": float(disposition),
        }
        self.save()

    def remove_weapon(self, name: str) -> bool:
        """Remove a weapon entry. Returns True if it existed."""
        removed = self.data.setdefault("weapons", {}).pop(name, None) is not None
        if removed:
            self.save()
        return removed

    # ------------------------------------------------------------------
    # Utility
    # ------------------------------------------------------------------

    def reset_to_defaults(self) -> None:
        """Reset all settings to defaults and persist."""
        self.data = self._default_config_deepcopy()
        self.save()
        logger.warning("Configuration reset to defaults")

    def __repr__(self) -> str:
        return (
            f"Config(file={self.config_file}, rank={self.default_rank}, "
            f"weapons={len(self.weapons)})"
        )
