"""
Models describing the result of one cleanup cycle.
"""

from collections import Counter
from enum import Enum

from pydantic import BaseModel, Field


class ItemResult(Enum):
    INVALID_ALIAS = "invalid_alias"
    "The URL does not end in something that looks like a pict-rs alias."
    DELETE_FAILED = "delete_failed"
    "pict-rs did not confirm the deletion; the reference is kept."
    NOT_FOUND_KEPT = "not_found_kept"
    "pict-rs returned 404 and we are not allowed to clear on 404."
    CLEARED = "cleared"
    "The object is gone and exactly one reference was cleared."
    CLEARED_NO_ROWS = "cleared_no_rows"
    "The object is gone but the update touched no rows."
    CLEARED_MANY_ROWS = "cleared_many_rows"
    "The object is gone and more than one row shared the URL."
    CLEAR_FAILED = "clear_failed"
    "The object is gone but the database update failed."


class CycleOutcome(BaseModel):
    """
    Counters for a single pass over the candidate thumbnails.
    """

    candidates: int = 0
    "Number of candidates in the database at the start of the cycle."
    processed: int = 0
    "Number of items for which the database reference was cleared (or attempted)."
    results: list[ItemResult] = Field(default_factory=list)
    "Per-item results, in the order the items were handled."
    timed_out: bool = False
    "Whether the cycle stopped early because of its soft timeout."

    def summary(self) -> dict[str, int]:
        return {
            result.value: count for result, count in Counter(self.results).items()
        }
