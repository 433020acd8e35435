"""
The thumbnail cleanup task. On each call it counts the candidate thumbnails,
fetches a bounded batch of them, and for each one asks pict-rs to delete the
object before clearing the reference in the database.

A reference is only ever cleared once pict-rs has confirmed the object is
gone. Anything left uncleared stays a candidate and is tried again on the
next call.
"""

from datetime import datetime, timezone
from enum import Enum

from loguru import logger
from pydantic import ConfigDict
from sqlalchemy.exc import SQLAlchemyError

from janitor_server.logger import log_cycle_outcome, log_item_result, log_progress
from janitor_server.settings import DEFAULT_QUERY_LIMIT
from janitor_server.store import ThumbnailRecord, ThumbnailStore
from thumbnail_janitor.alias import alias_from_url
from thumbnail_janitor.client import PictrsClient
from thumbnail_janitor.deletion import DeletionStatus
from thumbnail_janitor.models.cycle import CycleOutcome, ItemResult

from .task import Task

PROGRESS_EVERY = 10


class NextAction(Enum):
    CLEAR = "clear"
    SKIP = "skip"


def next_action(status: DeletionStatus, delete_on_not_found: bool) -> NextAction:
    """
    Decide what to do with the database reference given how pict-rs
    responded to the delete request.
    """

    if status == DeletionStatus.DELETED:
        return NextAction.CLEAR

    if status == DeletionStatus.NOT_FOUND and delete_on_not_found:
        return NextAction.CLEAR

    return NextAction.SKIP


def clear_result(rows: int) -> ItemResult:
    if rows == 1:
        return ItemResult.CLEARED

    if rows > 1:
        return ItemResult.CLEARED_MANY_ROWS

    return ItemResult.CLEARED_NO_ROWS


CLEAR_ATTEMPTED = {
    ItemResult.CLEARED,
    ItemResult.CLEARED_NO_ROWS,
    ItemResult.CLEARED_MANY_ROWS,
    ItemResult.CLEAR_FAILED,
}


class ThumbnailCleanup(Task):
    """
    Deletes stale thumbnails from pict-rs and clears their references.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    store: ThumbnailStore
    "Where the thumbnail references live."
    client: PictrsClient
    "Where the thumbnail objects live."
    query_limit: int = DEFAULT_QUERY_LIMIT
    "Maximum number of thumbnails to handle per call."
    delete_on_not_found: bool = False
    "Clear the reference even when pict-rs has never heard of the alias."

    def on_call(self) -> CycleOutcome:
        return self.core()

    def core(self) -> CycleOutcome:
        """
        Run one full cycle.

        Raises
        ------
        SQLAlchemyError
            If the count or select statements fail. Errors while clearing a
            single reference are logged and do not propagate.
        """

        end_time = None
        if self.soft_timeout is not None:
            end_time = datetime.now(timezone.utc) + self.soft_timeout

        logger.info("Checking for thumbnails to clean")

        outcome = CycleOutcome(candidates=self.store.count_candidates())

        logger.info(
            "Database contains {} thumbnails that can be cleaned up",
            outcome.candidates,
        )

        if outcome.candidates == 0:
            return outcome

        records = self.store.fetch_candidates(limit=self.query_limit)

        for record in records:
            if end_time is not None and datetime.now(timezone.utc) > end_time:
                logger.warning(
                    "Soft timeout reached for {name}; stopping at {time}",
                    name=self.name,
                    time=datetime.now(timezone.utc),
                )
                outcome.timed_out = True
                break

            result = self.reconcile(record)
            outcome.results.append(result)

            if result in CLEAR_ATTEMPTED:
                outcome.processed += 1

                if outcome.processed % PROGRESS_EVERY == 0:
                    log_progress(outcome.processed)

        log_cycle_outcome(outcome)

        return outcome

    def reconcile(self, record: ThumbnailRecord) -> ItemResult:
        """
        Handle a single thumbnail: delete it remotely, then clear the
        reference if pict-rs says it is gone.
        """

        url = record.thumbnail_url
        alias = alias_from_url(url)

        if alias is None:
            log_item_result(ItemResult.INVALID_ALIAS, url=url)
            return ItemResult.INVALID_ALIAS

        deletion = self.client.delete(alias)

        if next_action(deletion.status, self.delete_on_not_found) == NextAction.SKIP:
            if deletion.status == DeletionStatus.NOT_FOUND:
                result = ItemResult.NOT_FOUND_KEPT
            else:
                result = ItemResult.DELETE_FAILED

            log_item_result(result, url=url, outcome=deletion)
            return result

        try:
            rows = self.store.clear_reference(url)
        except SQLAlchemyError as e:
            log_item_result(
                ItemResult.CLEAR_FAILED, url=url, outcome=deletion, error=e
            )
            return ItemResult.CLEAR_FAILED

        result = clear_result(rows)
        log_item_result(result, url=url, outcome=deletion, rows=rows)

        return result
