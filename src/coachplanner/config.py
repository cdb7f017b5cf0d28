"""Engine configuration.

Settings are read from environment variables with sensible defaults so the
engine can run without any configuration file. The loaded configuration is
cached; call ``reset_config()`` after changing the environment in tests.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "COACHPLANNER_"

DEFAULT_TIMEZONE = "America/Los_Angeles"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PASTE_HORIZON_DAYS = 14
DEFAULT_SCHEDULABLE_PROGRAMS = frozenset({"limitless", "new-options", "bridges"})
DEFAULT_SCHEDULABLE_COACH_TYPES = frozenset({"success"})


@dataclass(frozen=True)
class EngineConfig:
    """Runtime settings for the scheduling engine.

    Attributes:
        timezone: Civil timezone used to derive weekdays from aware datetimes
            and to compute "today".
        log_level: Default logging level for ``configure_logging``.
        paste_horizon_days: How many upcoming days are offered as paste targets.
        schedulable_programs: Program ids whose clients take part in scheduling.
        schedulable_coach_types: Coach types offered for client sessions.
    """

    timezone: str = DEFAULT_TIMEZONE
    log_level: str = DEFAULT_LOG_LEVEL
    paste_horizon_days: int = DEFAULT_PASTE_HORIZON_DAYS
    schedulable_programs: frozenset[str] = field(
        default_factory=lambda: DEFAULT_SCHEDULABLE_PROGRAMS
    )
    schedulable_coach_types: frozenset[str] = field(
        default_factory=lambda: DEFAULT_SCHEDULABLE_COACH_TYPES
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a configuration from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.
        """
        env = os.environ if environ is None else environ

        return cls(
            timezone=env.get(f"{ENV_PREFIX}TIMEZONE", DEFAULT_TIMEZONE),
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            paste_horizon_days=_get_int(
                env, f"{ENV_PREFIX}PASTE_HORIZON_DAYS", DEFAULT_PASTE_HORIZON_DAYS
            ),
            schedulable_programs=_get_set(
                env, f"{ENV_PREFIX}SCHEDULABLE_PROGRAMS", DEFAULT_SCHEDULABLE_PROGRAMS
            ),
            schedulable_coach_types=_get_set(
                env,
                f"{ENV_PREFIX}SCHEDULABLE_COACH_TYPES",
                DEFAULT_SCHEDULABLE_COACH_TYPES,
            ),
        )


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s: %r, using %d", key, raw, default)
        return default
    if value <= 0:
        logger.warning("Non-positive value for %s: %d, using %d", key, value, default)
        return default
    return value


def _get_set(env: Mapping[str, str], key: str, default: frozenset[str]) -> frozenset[str]:
    raw = env.get(key)
    if raw is None:
        return default
    values = frozenset(part.strip() for part in raw.split(",") if part.strip())
    return values or default


_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Return the cached engine configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next ``get_config`` reloads it."""
    global _config
    _config = None
