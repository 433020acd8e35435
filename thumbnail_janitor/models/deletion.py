"""
Pydantic models describing the result of a delete request against pict-rs.
"""

from typing import Optional

from pydantic import BaseModel

from ..deletion import DeletionStatus


class DeletionOutcome(BaseModel):
    """
    The classified result of a single delete-by-alias request.
    """

    alias: str
    "The alias that we asked to delete."
    status: DeletionStatus
    "How the image service responded."
    http_status: Optional[int] = None
    "The HTTP status code, if a response was received at all."
    body: Optional[str] = None
    "Response body (or transport error) kept for diagnostics on failure."

