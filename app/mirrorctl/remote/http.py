"""Blocking JSON fetches over HTTP.

Wraps an ``httpx.Client`` so transport failures, non-success statuses and
undecodable bodies all surface as typed errors carrying the request URL.
"""

import logging
import platform
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from mirrorctl import __version__
from mirrorctl.core.errors import HttpDecodeError, HttpRequestError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_TIMEOUT: float = 10.0


def user_agent() -> str:
    """Build the User-Agent header sent with every request."""
    return (
        f"mirrorctl/{__version__} ({platform.system().lower()} {platform.machine()}) "
        f"httpx/{httpx.__version__}"
    )


class JsonFetcher:
    """Fetches JSON documents and validates them into pydantic models.

    Attributes:
        client: The underlying httpx client.
    """

    def __init__(
        self,
        *,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            headers: Extra headers sent with every request.
            timeout: Per-request timeout in seconds.
            transport: Optional transport (tests pass httpx.MockTransport).
        """
        self.client = httpx.Client(
            headers={"User-Agent": user_agent(), **(headers or {})},
            timeout=httpx.Timeout(timeout),
            transport=transport,
            follow_redirects=True,
        )

    def get(self, url: str, model: type[ModelT]) -> ModelT:
        """GET a URL and validate the JSON body into a model.

        Args:
            url: Absolute URL to fetch.
            model: Pydantic model describing the expected body.

        Returns:
            The validated model instance.

        Raises:
            HttpRequestError: On transport failure or a non-2xx status.
            HttpDecodeError: If the body is not valid JSON for the model.
        """
        logger.debug("GET %s", url)
        try:
            response = self.client.get(url)
        except httpx.HTTPError as e:
            raise HttpRequestError(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise HttpRequestError(url, f"Server returned status {response.status_code}")

        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise HttpDecodeError(url, str(e)) from e

    def close(self) -> None:
        """Close the underlying connection pool."""
        self.client.close()
