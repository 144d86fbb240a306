"""
HTTP client for a remote Maven repository.

Uploads are plain HTTP PUTs. Missing credentials mean an anonymous
request: the upload is still attempted and the remote's authentication
response decides the outcome. Errors are surfaced, never retried here.
"""

import logging
from typing import Optional

import httpx

from ..errors import PublicationError
from ..schemas.workspace import Credentials


logger = logging.getLogger(__name__)


class MavenRepositoryClient:
    """
    Client for uploading files to a Maven repository.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.client = httpx.Client(timeout=timeout, transport=transport)

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "MavenRepositoryClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def _auth(credentials: Optional[Credentials]) -> Optional[httpx.BasicAuth]:
        if credentials is None:
            return None
        if credentials.username is None and credentials.password is None:
            return None
        return httpx.BasicAuth(credentials.username or "", credentials.password or "")

    def upload(
        self, url: str, content: bytes, credentials: Optional[Credentials] = None
    ) -> int:
        """Upload one file. Returns the HTTP status code."""
        try:
            response = self.client.put(
                url, content=content, auth=self._auth(credentials)
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Repository rejected upload to {url}: {e.response.status_code}")
            raise PublicationError(
                code="REMOTE_REJECTED",
                message=f"{e.response.status_code} {e.response.reason_phrase} for {url}",
                url=url,
                status_code=e.response.status_code,
                response_body=e.response.text,
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Failed to upload to {url}: {e}")
            raise PublicationError(
                code="NETWORK_ERROR",
                message=f"{type(e).__name__}: {e}",
                url=url,
            ) from e

        logger.debug(f"Uploaded {url}: {response.status_code}")
        return response.status_code
