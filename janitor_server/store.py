"""
The record store: the three statements the janitor runs against the database.

    1. Count the candidate thumbnails.
    2. Select a bounded batch of candidate thumbnail URLs.
    3. Null out a single thumbnail reference by exact URL.

All values are bound as parameters. The candidate predicate is built in one
place, `candidate_filter`, which expects `instance_host` to already have been
validated as an HTTP(S) URL (ServerSettings does this).
"""

import calendar
from datetime import datetime, timezone
from typing import Callable

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .orm.post import Post


class ThumbnailRecord(BaseModel):
    """
    A row that still references a thumbnail on our image service.
    """

    thumbnail_url: str


def months_ago(now: datetime, months: int) -> datetime:
    """
    Step back a number of calendar months from now, clamping the day to the
    length of the target month (e.g. 31st May minus 3 months is 28th/29th Feb).
    """

    index = now.year * 12 + (now.month - 1) - months
    year, month = divmod(index, 12)
    month += 1

    day = min(now.day, calendar.monthrange(year, month)[1])

    return now.replace(year=year, month=month, day=day)


def candidate_filter(instance_host: str, cutoff: datetime) -> list:
    """
    The WHERE criteria shared by the count and select statements: a thumbnail
    is present, the post is older than the cutoff, and the thumbnail is
    hosted on our instance.

    The host prefix is matched with LIKE, with '%' and '_' escaped so they
    match literally.
    """

    return [
        Post.thumbnail_url.is_not(None),
        Post.published < cutoff,
        Post.thumbnail_url.startswith(instance_host, autoescape=True),
    ]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ThumbnailStore:
    """
    Queries and updates thumbnail references through a single session.
    """

    def __init__(
        self,
        session: Session,
        instance_host: str,
        min_age_months: int,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.session = session
        self.instance_host = instance_host
        self.min_age_months = min_age_months
        self.clock = clock

    def _criteria(self) -> list:
        cutoff = months_ago(self.clock(), self.min_age_months)
        return candidate_filter(self.instance_host, cutoff)

    def count_candidates(self) -> int:
        """
        Count the thumbnails that are eligible for cleanup.

        Raises
        ------
        SQLAlchemyError
            If the query fails; the janitor can not continue without it.
        """

        stmt = select(func.count()).select_from(Post).where(*self._criteria())

        try:
            count = self.session.execute(stmt).scalar_one()
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to count thumbnails with {query}: {e}", query=stmt, e=e
            )
            self.session.rollback()
            raise

        return count

    def fetch_candidates(self, limit: int) -> list[ThumbnailRecord]:
        """
        Select at most `limit` thumbnails that are eligible for cleanup. No
        ordering is guaranteed.

        Raises
        ------
        SQLAlchemyError
            If the query fails; the janitor can not continue without it.
        """

        stmt = select(Post.thumbnail_url).where(*self._criteria()).limit(limit)

        try:
            urls = self.session.execute(stmt).scalars().all()
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to query thumbnails with {query}: {e}", query=stmt, e=e
            )
            self.session.rollback()
            raise

        return [ThumbnailRecord(thumbnail_url=url) for url in urls]

    def clear_reference(self, url: str) -> int:
        """
        Set the thumbnail reference to NULL on every row whose URL is exactly
        `url`.

        Returns
        -------
        int
            The number of rows affected; normally 0 or 1.

        Raises
        ------
        SQLAlchemyError
            If the update fails. The transaction is rolled back first.
        """

        stmt = (
            update(Post)
            .where(Post.thumbnail_url == url)
            .values(thumbnail_url=None)
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.session.execute(stmt)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

        return result.rowcount
