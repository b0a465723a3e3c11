"""Deployment configuration for projtrack.

Settings are resolved once per process from environment variables. The CLI
exposes the same values as global options (see projtrack.cli.main).
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from projtrack.domain.entities import CostTrackingMode
from projtrack.domain.errors import ValidationError
from projtrack.domain.validation import normalize_currency

ENV_DB_PATH = "PROJTRACK_DB_PATH"
ENV_COST_TRACKING_MODE = "PROJTRACK_COST_TRACKING_MODE"
ENV_DEFAULT_CURRENCY = "PROJTRACK_DEFAULT_CURRENCY"
ENV_REPAIR_INCONSISTENT = "PROJTRACK_REPAIR_INCONSISTENT"
ENV_LOG_LEVEL = "PROJTRACK_LOG_LEVEL"
ENV_LOG_FILE = "PROJTRACK_LOG_FILE"

DEFAULT_COST_TRACKING_MODE = CostTrackingMode.EXPENDITURES
DEFAULT_CURRENCY = "USD"
DEFAULT_LOG_LEVEL = "WARNING"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_cost_tracking_mode(value: str) -> CostTrackingMode:
    """Parse a cost tracking mode name.

    Accepts the enum value ("task_costs") or a dashed form ("task-costs").

    Raises:
        ValidationError: If the value names no known mode
    """
    normalized = value.strip().lower().replace("-", "_")
    try:
        return CostTrackingMode(normalized)
    except ValueError:
        choices = ", ".join(mode.value for mode in CostTrackingMode)
        raise ValidationError(
            f"Unknown cost tracking mode '{value}' (expected one of: {choices})"
        ) from None


def parse_log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in _LOG_LEVELS:
        raise ValidationError(f"Unknown log level '{value}'")
    return level


@dataclass(frozen=True)
class Settings:
    """Per-deployment settings."""

    database_path: Optional[str] = None
    cost_tracking_mode: CostTrackingMode = DEFAULT_COST_TRACKING_MODE
    default_currency: str = DEFAULT_CURRENCY
    repair_inconsistent_tasks: bool = False
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings instance

        Raises:
            ValidationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ

        mode = DEFAULT_COST_TRACKING_MODE
        if env.get(ENV_COST_TRACKING_MODE):
            mode = parse_cost_tracking_mode(env[ENV_COST_TRACKING_MODE])

        currency = DEFAULT_CURRENCY
        if env.get(ENV_DEFAULT_CURRENCY):
            currency = normalize_currency(env[ENV_DEFAULT_CURRENCY])

        log_level = DEFAULT_LOG_LEVEL
        if env.get(ENV_LOG_LEVEL):
            log_level = parse_log_level(env[ENV_LOG_LEVEL])

        return cls(
            database_path=env.get(ENV_DB_PATH) or None,
            cost_tracking_mode=mode,
            default_currency=currency,
            repair_inconsistent_tasks=(
                env.get(ENV_REPAIR_INCONSISTENT, "").strip().lower() in _TRUE_VALUES
            ),
            log_level=log_level,
            log_file=env.get(ENV_LOG_FILE) or None,
        )
