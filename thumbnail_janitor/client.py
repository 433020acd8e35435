"""
A small client for the pict-rs internal API. Only the delete endpoint is
needed here.
"""

from typing import Optional

import requests
from loguru import logger

from .deletion import DeletionStatus
from .models.deletion import DeletionOutcome

DELETE_ENDPOINT = "/internal/delete"
API_KEY_HEADER = "X-Api-Token"


def base_url_from_host(host: str) -> str:
    """
    The image service host may be given as `host:port` (plain HTTP is assumed,
    as it usually lives on an internal network) or as a full URL.
    """

    host = host.strip().rstrip("/")

    if "://" in host:
        return host

    return f"http://{host}"


class PictrsClient:
    """
    Issues delete-by-alias requests against pict-rs and classifies the result.
    A single HTTP session, carrying the API key header, is kept for the
    lifetime of the client. No retries happen here: a failed delete is
    simply re-attempted on the next cycle.
    """

    def __init__(self, host: str, api_key: str, timeout: Optional[float] = 30.0):
        self.base_url = base_url_from_host(host)
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({API_KEY_HEADER: api_key})

    def __enter__(self) -> "PictrsClient":
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.session.close()

    @property
    def delete_url(self) -> str:
        return self.base_url + DELETE_ENDPOINT

    def delete(self, alias: str) -> DeletionOutcome:
        """
        Ask pict-rs to delete the object with this alias.

        Parameters
        ----------
        alias : str
            The alias of the object to delete.

        Returns
        -------
        DeletionOutcome
            DELETED for a 200, NOT_FOUND for a 404, FAILED for anything else,
            including timeouts and connection errors.
        """

        try:
            response = self.session.post(
                self.delete_url, params={"alias": alias}, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.debug(
                "Request to delete {alias} did not complete: {e}", alias=alias, e=e
            )
            return DeletionOutcome(
                alias=alias, status=DeletionStatus.FAILED, body=str(e)
            )

        if response.status_code == 200:
            status = DeletionStatus.DELETED
        elif response.status_code == 404:
            status = DeletionStatus.NOT_FOUND
        else:
            return DeletionOutcome(
                alias=alias,
                status=DeletionStatus.FAILED,
                http_status=response.status_code,
                body=response.text,
            )

        return DeletionOutcome(
            alias=alias, status=status, http_status=response.status_code
        )
