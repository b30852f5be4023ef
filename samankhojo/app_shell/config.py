import logging
import os
from pathlib import Path

from samankhojo.rules.models import Rules

logger = logging.getLogger(__name__)

REQUIRED_ENV_IN_PRODUCTION = ("SAMANKHOJO_SECRET_KEY",)


class ConfigError(Exception):
    """Raised when the runtime configuration cannot support startup."""


def validate_startup(rules: Rules, data_dir: Path, migrations_dir: Path) -> None:
    """
    Validate operational requirements before startup.

    Raises ConfigError listing every problem found.
    """
    problems: list[str] = []

    # 1. Data dir must exist or be creatable
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        problems.append(f"Data directory {data_dir} is not writable: {e}")

    # 2. Migrations
    if not migrations_dir.is_dir() or not any(migrations_dir.glob("*.sql")):
        problems.append(f"No migrations found in {migrations_dir}")

    # 3. Rules sanity beyond the schema
    for status, targets in rules.bookings.transitions.items():
        unknown = [t for t in targets if t not in rules.bookings.transitions]
        if unknown:
            problems.append(f"Booking status '{status}' transitions to unknown {unknown}")

    if rules.ratings.min >= rules.ratings.max:
        problems.append("ratings.min must be lower than ratings.max")

    # 4. Required env
    if os.environ.get("SAMANKHOJO_ENV") == "production":
        missing = [name for name in REQUIRED_ENV_IN_PRODUCTION if name not in os.environ]
        if missing:
            problems.append(f"Missing required environment variables: {', '.join(missing)}")

    if problems:
        raise ConfigError("; ".join(problems))

    logger.info("Configuration validated (rules version %s)", rules.project.rules_version)
