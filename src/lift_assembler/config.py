"""
Configuration management for lift-assembler.

Loads configuration from lift_assembler.yaml, with environment variables as
overrides and built-in defaults as fallback.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .models.program import TrainingPhase
from .services.diff_patcher import DEFAULT_PERIODIZATION_MODEL, DEFAULT_PHASE_TABLE, PhasePolicy

log = logging.getLogger(__name__)

# Load .env file if it exists (for local development)
load_dotenv()

DEFAULT_CONFIG_FILE = "lift_assembler.yaml"

# Default configuration
DEFAULT_CONFIG: dict[str, Any] = {
    "data": {
        "dir": str(Path(__file__).parent.parent.parent / "data"),
    },
    "catalog": {
        "path": None,
    },
    "logging": {
        "level": "WARNING",
    },
    "assembly": {
        "periodization_model": DEFAULT_PERIODIZATION_MODEL,
        "default_phase": TrainingPhase.ACCUMULATION.value,
        "phase_tables": {
            DEFAULT_PERIODIZATION_MODEL: {
                week: phase.value for week, phase in DEFAULT_PHASE_TABLE.items()
            },
        },
        "strict_fingerprint": False,
        "weight_increment": 2.5,
    },
}


class Config:
    """
    Configuration for the assembler, CLI and web app.

    Loads configuration from:
    1. Built-in defaults
    2. A YAML file (explicit path, LIFT_ASSEMBLER_CONFIG, or ./lift_assembler.yaml)
    3. Environment variables (as override)

    Example:
        >>> config = Config()
        >>> config.get('assembly.weight_increment')
        2.5
        >>> policy = config.phase_policy()
    """

    def __init__(self, path: Path | str | None = None):
        self._config: dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._load_file(path)
        self._load_env_overrides()

    def _load_file(self, path: Path | str | None) -> None:
        """Merge a YAML config file into the defaults, if one exists."""
        if path is None:
            path = os.getenv("LIFT_ASSEMBLER_CONFIG", DEFAULT_CONFIG_FILE)
        config_path = Path(path)

        if not config_path.exists():
            log.debug("No config file at %s. Using defaults and environment variables.", config_path)
            return

        try:
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            log.warning("Failed to load %s: %s. Using defaults.", config_path, e)
            return

        if not yaml_config:
            return
        if not isinstance(yaml_config, dict):
            log.warning(
                "Ignoring %s: expected a mapping at the top level, got %s",
                config_path,
                type(yaml_config).__name__,
            )
            return

        self._merge_config(yaml_config)
        log.info("Loaded configuration from %s", config_path)

    def _merge_config(self, new_config: dict[str, Any]) -> None:
        """Recursively merge new config into existing config."""

        def merge(base: dict, update: dict) -> dict:
            for key, value in update.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    merge(base[key], value)
                else:
                    base[key] = value
            return base

        merge(self._config, new_config)

    def _load_env_overrides(self) -> None:
        """Load overrides from environment variables."""
        if data_dir := os.getenv("LIFT_ASSEMBLER_DATA_DIR"):
            self._config["data"]["dir"] = data_dir

        if level := os.getenv("LIFT_ASSEMBLER_LOG_LEVEL"):
            self._config["logging"]["level"] = level

        if catalog := os.getenv("LIFT_ASSEMBLER_CATALOG"):
            self._config["catalog"]["path"] = catalog

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        Example:
            >>> config.get('assembly.periodization_model')
            'default'
        """
        value: Any = self._config

        for key in key_path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_data_dir(self) -> Path:
        """Directory holding the database and catalog files."""
        return Path(self.get("data.dir"))

    def get_catalog_path(self) -> Path | None:
        """Default exercise catalog file, if configured."""
        path = self.get("catalog.path")
        return Path(path) if path else None

    def get_log_level(self) -> str:
        """Logging level name."""
        return str(self.get("logging.level", "WARNING")).upper()

    def get_periodization_model(self) -> str:
        """Name of the phase table to use."""
        return self.get("assembly.periodization_model", DEFAULT_PERIODIZATION_MODEL)

    def get_strict_fingerprint(self) -> bool:
        """Whether stale diffs abort assembly."""
        return bool(self.get("assembly.strict_fingerprint", False))

    def get_weight_increment(self) -> float:
        """Plate increment used when computing loads from 1RMs."""
        return float(self.get("assembly.weight_increment", 2.5))

    def phase_policy(self) -> PhasePolicy:
        """
        Build the phase policy from ``assembly.phase_tables``.

        Week keys may be written as integers or strings in YAML.

        Raises:
            ValueError: If the tables are not mappings of week to phase name
        """
        raw_tables = self.get("assembly.phase_tables") or {}
        if not isinstance(raw_tables, dict):
            raise ValueError("assembly.phase_tables must be a mapping of model to table")

        tables = {}
        for model, table in raw_tables.items():
            if not isinstance(table, dict):
                raise ValueError(f"Phase table {model!r} must map week numbers to phases")
            try:
                tables[model] = {int(week): TrainingPhase(phase) for week, phase in table.items()}
            except TypeError as e:
                raise ValueError(f"Phase table {model!r}: {e}") from e
        return PhasePolicy(
            tables=tables,
            default_phase=TrainingPhase(self.get("assembly.default_phase", "accumulation")),
        )

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        try:
            self.phase_policy()
        except ValueError as e:
            errors.append(f"Invalid phase tables: {e}")

        if not isinstance(logging.getLevelName(self.get_log_level()), int):
            errors.append(f"Invalid logging level: {self.get_log_level()}")

        try:
            if self.get_weight_increment() <= 0:
                errors.append("assembly.weight_increment must be positive")
        except (TypeError, ValueError):
            errors.append("assembly.weight_increment must be a number")

        return errors


def configure_logging(level: str) -> None:
    """Configure root logging for command line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)-7s] %(name)s: %(message)s",
    )
