"""
Extraction of pict-rs aliases from stored thumbnail URLs.

Thumbnails served by pict-rs live at URLs like

    https://instance.example/pictrs/image/<uuid>.<ext>

and the final path segment is the alias that the image service knows the
object by. We only do a sanity check on the alias length here rather than a
full parse; anything that is too short to be a UUID is skipped.
"""

from typing import Optional
from urllib.parse import urlsplit

MINIMUM_ALIAS_LENGTH = 36
"Length of a canonical UUID, without the file extension."


def extract_alias(url: str) -> str:
    """
    Take the final '/'-delimited segment of the URL path.

    Parameters
    ----------
    url : str
        The stored thumbnail URL.

    Returns
    -------
    str
        The candidate alias. May be empty if the path ends in '/'.

    Raises
    ------
    ValueError
        If the URL can not be split into its components.
    """

    return urlsplit(url).path.split("/")[-1]


def is_valid_alias(alias: str) -> bool:
    return len(alias) >= MINIMUM_ALIAS_LENGTH


def alias_from_url(url: str) -> Optional[str]:
    """
    Returns the alias for this URL, or None if it does not look like one
    that pict-rs would have generated. None means 'skip', not 'error'.
    """

    try:
        alias = extract_alias(url)
    except ValueError:
        return None

    if not is_valid_alias(alias):
        return None

    return alias
