# ♥♥─── App Config ───────────────────────────────────────────────────────────────
from __future__ import annotations

from functools import cache

from pydantic import ValidationError

from questboard.custom_logger import log

from .app_config_model import ApplicationSettings


# ─── Loading ──────────────────────────────────────────────────────────────────
def _describe_errors(error: ValidationError) -> str:
    return "\n".join(f"  - {'.'.join(map(str, err['loc']))}: {err['msg']} (input was: {err.get('input', 'N/A')})" for err in error.errors())


@cache
def get_application_settings() -> ApplicationSettings:
    """Load the settings once per process from the environment and ``.env``.

    :returns: The shared :class:`ApplicationSettings` instance.
    :raises SystemExit: When a value fails validation, after logging every offending key.
    """
    try:
        settings = ApplicationSettings()
    except ValidationError as e:
        log.critical("Configuration is invalid. Check app_data/config/.env and the environment.")
        log.error("Offending values:\n{}", _describe_errors(e))
        message = "FATAL: invalid QuestBoard configuration."
        raise SystemExit(message) from e

    log.debug("Cache database: {}", settings.storage.get_database_url())
    log.debug("Remote state service: {}", settings.remote.base_url)
    if settings.session.user_id:
        log.debug("Configured user: {}...", settings.session.user_id[:8])
    return settings


def get_settings() -> ApplicationSettings:
    """Alias of :func:`get_application_settings` used by the CLI."""
    return get_application_settings()


app_config: ApplicationSettings = get_application_settings()
