"""
Settings for the thumbnail janitor. These are read once, at startup, from the
environment (and optionally a dotenv file), and then passed explicitly to
everything that needs them. The settings object is immutable.
"""

import sys
from datetime import timedelta
from typing import Optional

from loguru import logger
from pydantic import Field, HttpUrl, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from thumbnail_janitor.exceptions import ConfigurationError

DEFAULT_CHECK_INTERVAL = 300
DEFAULT_THUMBNAIL_MIN_AGE_MONTHS = 3
DEFAULT_QUERY_LIMIT = 300

_POSTGRES_SCHEMES = ("postgres://", "postgresql://")
_POSTGRES_DRIVER_SCHEME = "postgresql+psycopg://"


def normalize_database_uri(uri: str) -> str:
    """
    Lemmy-style connection strings (postgres://user@host/db) are not accepted
    by SQLAlchemy, so map them onto the psycopg driver. Anything else (e.g. an
    explicit driver, or sqlite) is left alone.
    """

    for scheme in _POSTGRES_SCHEMES:
        if uri.startswith(scheme):
            return _POSTGRES_DRIVER_SCHEME + uri[len(scheme) :]

    return uri


class ServerSettings(BaseSettings):
    """
    Process-wide configuration for the janitor.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    instance_host: HttpUrl
    "Base URL of the instance; only thumbnails under this prefix are cleaned."
    check_interval: int = Field(default=DEFAULT_CHECK_INTERVAL, ge=0)
    "Seconds to sleep between cycles. Zero runs a single cycle and exits."
    thumbnail_min_age_months: int = Field(
        default=DEFAULT_THUMBNAIL_MIN_AGE_MONTHS, ge=0
    )
    "Only posts published longer ago than this are considered."
    query_limit: int = Field(default=DEFAULT_QUERY_LIMIT, ge=1)
    "Maximum number of thumbnails handled per cycle."

    database_uri: str
    pictrs_host: str
    pictrs_api_key: str
    pictrs_timeout: float = Field(default=30.0, gt=0)
    "Per-request timeout, in seconds, for calls to pict-rs."

    delete_on_not_found: bool = False
    "Whether a 404 from pict-rs still allows the database reference to be cleared."

    soft_timeout: Optional[timedelta] = None
    "Stop a cycle early once it has run for this long. Unset means no limit."

    log_level: str = "INFO"
    sql_echo: bool = False
    "Echo SQL statements."

    @field_validator("database_uri")
    @classmethod
    def _normalize_database_uri(cls, value: str) -> str:
        return normalize_database_uri(value)

    @field_validator("pictrs_host", "pictrs_api_key")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        value = value.upper()
        try:
            logger.level(value)
        except ValueError:
            raise ValueError(f"unknown log level '{value}'")
        return value

    def setup_logs(self):
        """
        Replace loguru's default sink with one at the configured level.
        """
        logger.remove()
        logger.add(sys.stderr, level=self.log_level)

    def report(self):
        """
        Log the configuration in use (without the API key).
        """

        if self.instance_host.scheme != "https":
            logger.warning(
                "INSTANCE_HOST {} does not have an HTTPS scheme, are you sure "
                "this is correct?",
                self.instance_host,
            )

        logger.info("INSTANCE_HOST set to '{}'", self.instance_host)
        logger.info("CHECK_INTERVAL set to {} seconds", self.check_interval)
        logger.info(
            "THUMBNAIL_MIN_AGE_MONTHS set to {}", self.thumbnail_min_age_months
        )
        logger.info("QUERY_LIMIT set to {}", self.query_limit)
        logger.info("PICTRS_HOST set to '{}'", self.pictrs_host)
        logger.info("DELETE_ON_NOT_FOUND set to {}", self.delete_on_not_found)
        if self.soft_timeout is not None:
            logger.info("SOFT_TIMEOUT set to {}", self.soft_timeout)


def load_settings(env_file=".env") -> ServerSettings:
    """
    Build the settings from the environment.

    Raises
    ------
    ConfigurationError
        If a required value is missing or a value is malformed.
    """
    try:
        return ServerSettings(_env_file=env_file)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e
