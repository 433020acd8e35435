"""
Runs the thumbnail janitor. Configuration is read from the environment (see
janitor_server.settings.ServerSettings); any problem at startup ends the
process with a non-zero exit status.
"""

import argparse as ap
import sys

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from janitor_background import background
from janitor_background.thumbnail_cleanup import ThumbnailCleanup
from janitor_server.database import (
    check_connection,
    create_database_engine,
    get_session,
)
from janitor_server.settings import load_settings
from janitor_server.store import ThumbnailStore
from thumbnail_janitor.client import PictrsClient
from thumbnail_janitor.exceptions import ConfigurationError, DatabaseConnectionError

parser = ap.ArgumentParser(
    description=(
        "Delete old thumbnails belonging to this instance from pict-rs, and "
        "clear their references in the database."
    )
)

parser.add_argument(
    "--once",
    help="Run a single cleanup cycle and exit, whatever CHECK_INTERVAL says.",
    action="store_true",
)

parser.add_argument(
    "--env-file",
    help="Path to a dotenv file to read configuration from.",
    type=str,
    default=".env",
)


def main(argv=None) -> int:
    args = parser.parse_args(argv)

    try:
        settings = load_settings(env_file=args.env_file)
    except ConfigurationError as e:
        logger.error("Invalid configuration, exiting! ({})", e)
        return 1

    if args.once:
        settings = settings.model_copy(update={"check_interval": 0})

    settings.setup_logs()
    logger.info("Starting thumbnail janitor")
    settings.report()

    try:
        engine = create_database_engine(settings)
    except (SQLAlchemyError, ValueError) as e:
        # The message can carry the raw URI, password and all.
        logger.error("DATABASE_URI is malformed, exiting! ({})", type(e).__name__)
        return 1

    try:
        check_connection(engine)
    except DatabaseConnectionError as e:
        logger.error("Failed to connect to database, exiting! ({})", e)
        engine.dispose()
        return 1

    session = get_session(engine)

    store = ThumbnailStore(
        session=session,
        instance_host=str(settings.instance_host),
        min_age_months=settings.thumbnail_min_age_months,
    )

    with PictrsClient(
        host=settings.pictrs_host,
        api_key=settings.pictrs_api_key,
        timeout=settings.pictrs_timeout,
    ) as client:
        task = ThumbnailCleanup(
            name="Thumbnail cleanup",
            store=store,
            client=client,
            query_limit=settings.query_limit,
            delete_on_not_found=settings.delete_on_not_found,
            soft_timeout=settings.soft_timeout,
        )

        try:
            background(task, check_interval=settings.check_interval)
        except SQLAlchemyError:
            logger.exception("Database error during cleanup cycle, exiting!")
            return 1
        finally:
            session.close()
            engine.dispose()

    return 0


if __name__ == "__main__":
    sys.exit(main())
