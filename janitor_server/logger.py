"""
Logging of per-item results. The cleanup cycle decides what happened to each
thumbnail; this module decides how loudly to say so.
"""

from typing import Optional

from loguru import logger

from thumbnail_janitor.deletion import DeletionStatus
from thumbnail_janitor.models.cycle import CycleOutcome, ItemResult
from thumbnail_janitor.models.deletion import DeletionOutcome

RESULT_LOG_FUNCTIONS = {
    ItemResult.INVALID_ALIAS: logger.warning,
    ItemResult.DELETE_FAILED: logger.error,
    ItemResult.NOT_FOUND_KEPT: logger.warning,
    ItemResult.CLEARED: logger.debug,
    ItemResult.CLEARED_NO_ROWS: logger.warning,
    ItemResult.CLEARED_MANY_ROWS: logger.warning,
    ItemResult.CLEAR_FAILED: logger.error,
}


def log_item_result(
    result: ItemResult,
    url: str,
    outcome: Optional[DeletionOutcome] = None,
    rows: Optional[int] = None,
    error: Optional[Exception] = None,
) -> None:
    """
    Log the result of handling a single thumbnail.

    Parameters
    ----------
    result : ItemResult
        What happened to this thumbnail.
    url : str
        The stored thumbnail URL.
    outcome : DeletionOutcome, optional
        The response classification from pict-rs, if we got that far.
    rows : int, optional
        Rows affected by the database update, if it ran.
    error : Exception, optional
        The database error, if the update failed.
    """

    alias = outcome.alias if outcome is not None else None

    if outcome is not None and outcome.status == DeletionStatus.NOT_FOUND:
        logger.warning("pict-rs: thumbnail '{}' not found", alias)

    messages = {
        ItemResult.INVALID_ALIAS: "Thumbnail URL '{url}' does not look valid, skipping",
        ItemResult.DELETE_FAILED: (
            "pict-rs: failed to delete thumbnail '{alias}'; {status} - {body}"
        ),
        ItemResult.NOT_FOUND_KEPT: (
            "Keeping reference to '{alias}' as clearing on 404 is disabled"
        ),
        ItemResult.CLEARED: "Thumbnail '{alias}' deleted and reference cleared",
        ItemResult.CLEARED_NO_ROWS: (
            "Database returned no rows affected, failed to clear thumbnail '{alias}'?"
        ),
        ItemResult.CLEARED_MANY_ROWS: (
            "Clearing thumbnail '{alias}' affected {rows} rows; duplicate URLs?"
        ),
        ItemResult.CLEAR_FAILED: (
            "Thumbnail '{alias}' was deleted but clearing {url} failed: {error}"
        ),
    }

    if (
        result == ItemResult.CLEARED
        and outcome is not None
        and outcome.status == DeletionStatus.NOT_FOUND
    ):
        messages[result] = (
            "Thumbnail '{alias}' already gone from pict-rs, reference cleared"
        )

    RESULT_LOG_FUNCTIONS[result](
        messages[result],
        url=url,
        alias=alias,
        status=outcome.http_status if outcome is not None else None,
        body=outcome.body if outcome is not None else None,
        rows=rows,
        error=error,
    )


def log_progress(processed: int) -> None:
    logger.info("Processed {} thumbnails", processed)


def log_cycle_outcome(outcome: CycleOutcome) -> None:
    logger.info(
        "Finished iteration, processed {processed} of {candidates} thumbnails "
        "({summary})",
        processed=outcome.processed,
        candidates=outcome.candidates,
        summary=outcome.summary(),
    )
