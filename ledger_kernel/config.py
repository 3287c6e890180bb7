"""
Ledger Kernel Configuration.

Holds the handful of settings the kernel needs: the balance tolerance and
minimum line count used by entry validation, the journal entry numbering
scheme, the database URL and the log level.  Settings come from defaults,
a plain dict, or a YAML file.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from pathlib import Path
from typing import Any, Self

import yaml

from ledger_kernel.domain.ledger_validator import (
    DEFAULT_MINIMUM_LINES,
    DEFAULT_TOLERANCE,
    LedgerValidator,
)
from ledger_kernel.logging_config import get_logger

logger = get_logger("config")

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LedgerConfig:
    """
    Configuration schema for the ledger kernel.

    Controls entry validation, entry numbering and infrastructure wiring.
    """

    # Largest |debits - credits| still treated as balanced
    balance_tolerance: Decimal = DEFAULT_TOLERANCE

    # Minimum substantive lines per journal entry
    minimum_lines: int = DEFAULT_MINIMUM_LINES

    # Entry numbers look like JE001, JE002, ...
    entry_number_prefix: str = "JE"
    entry_number_width: int = 3

    # SQLAlchemy URL; the default is a private in-memory SQLite database
    database_url: str = "sqlite://"

    log_level: str = "INFO"

    def __post_init__(self):
        if not isinstance(self.balance_tolerance, Decimal):
            self.balance_tolerance = Decimal(str(self.balance_tolerance))
        if self.balance_tolerance < 0:
            raise ValueError("balance_tolerance cannot be negative")
        if self.minimum_lines < 2:
            raise ValueError("minimum_lines must be at least 2")
        if not self.entry_number_prefix:
            raise ValueError("entry_number_prefix cannot be empty")
        if self.entry_number_width < 1:
            raise ValueError("entry_number_width must be positive")
        self.log_level = self.log_level.upper()
        if self.log_level not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("ledger_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from a dictionary. Unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown ledger config keys: {unknown}")
        logger.info(
            "ledger_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Self:
        """
        Load config from a YAML file.

        The settings may sit at the top level or under a ``ledger:`` key.

        Raises:
            FileNotFoundError: if the file does not exist.
            yaml.YAMLError: if the file contains invalid YAML.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if "ledger" in data and isinstance(data["ledger"], dict):
            data = data["ledger"]
        logger.info("ledger_config_loaded_from_yaml", extra={"path": str(path)})
        return cls.from_dict(data)

    def validator(self) -> LedgerValidator:
        """Build the entry validator these settings describe."""
        return LedgerValidator(
            tolerance=self.balance_tolerance,
            minimum_lines=self.minimum_lines,
        )
