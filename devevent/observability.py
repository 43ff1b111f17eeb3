"""Logfire cloud observability initialization and instrumentation."""

import logging

import logfire

from devevent import __version__
from devevent.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings) -> bool:
    """
    Initialize Logfire and bridge stdlib logging into it.

    Call once at process startup, before the first database connection, so
    the PyMongo instrumentation sees every command.

    Args:
        settings: Application settings containing the Logfire token

    Returns:
        True when Logfire was configured, False when it stays disabled.
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="devevent",
            service_version=__version__,
            environment=settings.environment,
        )

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        # Needs the logfire[pymongo] extra
        try:
            logfire.instrument_pymongo()
        except Exception as instrument_error:
            logger.debug(f"PyMongo instrumentation skipped: {instrument_error}")

        logger.info("Logfire tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        # Continue running - observability is optional
        return False
