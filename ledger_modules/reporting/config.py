"""
Reporting Configuration Schema.

Defines report header and formatting options for the trial balance and
account type summary.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Self

from ledger_kernel.logging_config import get_logger

logger = get_logger("modules.reporting.config")


@dataclass
class ReportingConfig:
    """
    Configuration schema for the reporting module.

    Controls report headers, formatting and which rows are shown.
    """

    # Entity name shown on reports
    entity_name: str = "Company"

    # Default currency for reports
    default_currency: str = "USD"

    # Rounding precision for display and for the balanced check
    display_precision: int = 2

    # Whether to include accounts with zero balance in reports
    include_zero_balances: bool = False

    def __post_init__(self):
        if self.display_precision < 0:
            raise ValueError("display_precision cannot be negative")
        if len(self.default_currency) != 3:
            raise ValueError("default_currency must be a 3-letter ISO 4217 code")

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with standard defaults."""
        logger.info("reporting_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary. Unknown keys are rejected."""
        unknown = sorted(set(data) - {f.name for f in fields(cls)})
        if unknown:
            raise ValueError(f"Unknown reporting config keys: {unknown}")
        logger.info(
            "reporting_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)
