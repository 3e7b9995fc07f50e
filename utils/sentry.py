"""Sentry integration for error tracking."""

from __future__ import annotations

import sentry_sdk

from config.settings import ProjectsSettings


def init_sentry(settings: ProjectsSettings) -> bool:
    """Initialise Sentry when a DSN is configured.

    Returns:
        True if the SDK was initialised, False when no DSN is set.
    """
    if not settings.sentry_dsn:
        return False
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        send_default_pii=False,
    )
    return True


def capture_exception(exc: BaseException) -> None:
    """Report an exception; a no-op when Sentry was never initialised."""
    sentry_sdk.capture_exception(exc)
