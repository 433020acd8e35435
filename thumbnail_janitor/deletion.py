"""
Possible results of asking the image service to delete an object.
"""

from enum import Enum


class DeletionStatus(Enum):
    DELETED = "deleted"
    "The image service confirmed the object was deleted (HTTP 200)."
    NOT_FOUND = "not_found"
    "The image service does not know about the object (HTTP 404)."
    FAILED = "failed"
    "Any other status code, or the request never completed."
