"""Base API client for the Hashtrack service.

Handles bearer-token injection and maps every failure onto the
``hashtrack.exceptions`` taxonomy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from hashtrack.config import Config
from hashtrack.credentials import TokenStore
from hashtrack.exceptions import (
    ApiError,
    MalformedError,
    NetworkError,
    NotFoundError,
    RejectedError,
    ServerError,
    UnauthenticatedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _error_detail(response: httpx.Response) -> str:
    """Best-effort human message from an error response body."""
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        return str(data.get("message", data.get("error", response.text)))
    return response.text


def classify_response(response: httpx.Response) -> ApiError | None:
    """Map an HTTP status onto an ApiError, or None for success."""
    status = response.status_code
    if status < 400:
        return None

    detail = _error_detail(response)
    message = f"API error (HTTP {status}): {detail}"
    if status == 404:
        return NotFoundError(message, status)
    if status >= 500:
        return ServerError(message, status)
    return RejectedError(message, status)


def decode(data: Any, model: type[T]) -> T:
    """Validate decoded JSON into ``model`` or raise MalformedError.

    ``model`` may be a pydantic model or any type pydantic can adapt,
    such as ``list[Track]``.
    """
    try:
        return TypeAdapter(model).validate_python(data)
    except ValidationError as e:
        raise MalformedError(f"Unexpected response shape: {e.error_count()} validation error(s)") from e


def decode_response(response: httpx.Response, model: type[T]) -> T:
    """Parse a response body as JSON and validate it into ``model``."""
    try:
        data = response.json()
    except ValueError as e:
        raise MalformedError(f"Response is not valid JSON: {e}") from e
    return decode(data, model)


class HashtrackClient:
    """HTTP client for the Hashtrack API."""

    def __init__(
        self,
        config: Config,
        store: TokenStore,
        verbose: bool = False,
        http: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._verbose = verbose
        self._http = http or httpx.Client(timeout=config.timeout)

    @property
    def config(self) -> Config:
        return self._config

    def request(
        self,
        method: str,
        path: str,
        *,
        body: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        """Make an API request.

        Args:
            method: HTTP method (GET, POST, DELETE).
            path: API path (e.g. "/tracks"). Appended to the endpoint.
            body: JSON request body.
            params: Query parameters.
            authenticated: Attach the stored token as a bearer credential.

        Returns:
            The httpx.Response for a 2xx/3xx status.

        Raises:
            UnauthenticatedError: No stored token; nothing was sent.
            NetworkError: The request could not be completed.
            RejectedError, NotFoundError, ServerError: Error status codes.
        """
        url = self._config.base_url + path
        headers = self._build_headers(authenticated)

        self._log(f"{method} {url}")
        try:
            response = self._http.request(
                method=method,
                url=url,
                headers=headers,
                json=body,
                params=params,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e

        self._log(f"Response: {response.status_code}")
        error = classify_response(response)
        if error is not None:
            raise error
        return response

    @contextmanager
    def stream(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        authenticated: bool = True,
    ) -> Iterator[httpx.Response]:
        """Open a long-lived GET and yield the streaming response.

        The status is classified before yielding. The response is closed
        when the block exits; closing it from another thread aborts reads.
        """
        url = self._config.base_url + path
        headers = self._build_headers(authenticated)
        headers["Accept"] = "application/x-ndjson"

        self._log(f"STREAM {url}")
        try:
            with self._http.stream(
                "GET",
                url,
                headers=headers,
                params=params,
                timeout=httpx.Timeout(self._config.timeout, read=None),
            ) as response:
                self._log(f"Response: {response.status_code}")
                if response.status_code >= 400:
                    response.read()
                    error = classify_response(response)
                    if error is not None:
                        raise error
                yield response
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f"Stream from {url} failed: {e}") from e

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for GET requests."""
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for POST requests."""
        return self.request("POST", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        """Convenience method for DELETE requests."""
        return self.request("DELETE", path, **kwargs)

    def _build_headers(self, authenticated: bool) -> dict[str, str]:
        """Build request headers, failing fast when a token is required but absent."""
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if authenticated:
            token = self._store.load()
            if token is None:
                raise UnauthenticatedError("Not logged in")
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _log(self, message: str) -> None:
        if self._verbose:
            logger.info(message)
        else:
            logger.debug(message)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()
