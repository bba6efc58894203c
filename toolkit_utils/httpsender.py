"""An HTTP request sender with retries, timeouts and JSON helpers."""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Callable, Mapping, Optional, Protocol, Union

import requests

from .ioutil import Cancelled

_logger = logging.getLogger(__name__)

RetryFunc = Callable[[requests.Response], None]
StatusCodeFunc = Callable[[int], None]
HeadersFunc = Callable[[Mapping[str, str]], None]
RequestLike = Union[requests.Request, requests.PreparedRequest]


class HTTPClient(Protocol):
    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response: ...


class HTTPSenderError(Exception):
    """Raised when sending a request fails."""


class HTTPSenderUnmarshaledError(HTTPSenderError):
    """Raised when a response has an invalid status but a decodable JSON error body."""

    def __init__(self, body: Any) -> None:
        super().__init__("unmarshaled error")
        self.body = body


def _default_retry_func(response: requests.Response) -> None:
    if response.status_code >= 500:
        raise HTTPSenderError(f"invalid status code {response.status_code}")


def default_status_code_func(code: int) -> None:
    """Raise HTTPSenderError unless ``code`` is between 200 and 299."""
    if code < 200 or code > 299:
        raise HTTPSenderError("status code should be between 200 and 299")


def _cancelled(cancel: Optional[threading.Event]) -> bool:
    return cancel is not None and cancel.is_set()


class HTTPSender:
    """Sends HTTP requests, retrying on timeouts and on what ``retry_func`` rejects.

    ``retry_func`` raises an exception when a response should be retried; by
    default responses with a status code of 500 or above are retried.
    Timeouts are in seconds; ``None`` or 0 means no timeout.
    """

    def __init__(
        self,
        client: Optional[HTTPClient] = None,
        retry_func: Optional[RetryFunc] = None,
        retry_max: int = 0,
        retry_sleep: float = 0.0,
        timeout: Optional[float] = None,
    ) -> None:
        self._client: HTTPClient = client if client is not None else requests.Session()
        self._retry_func: RetryFunc = retry_func or _default_retry_func
        self._retry_max = retry_max
        self._retry_sleep = retry_sleep
        self._timeout = timeout

    def send(self, request: RequestLike) -> requests.Response:
        """Send ``request`` with the sender's default timeout."""
        return self.send_with_timeout(request, self._timeout)

    def send_with_timeout(self, request: RequestLike, timeout: Optional[float]) -> requests.Response:
        """Send ``request`` with ``timeout`` seconds for the whole exchange."""
        return self._send(self._prepare(request), timeout, None)

    @staticmethod
    def _prepare(request: RequestLike) -> requests.PreparedRequest:
        if isinstance(request, requests.Request):
            return request.prepare()
        return request

    def _send(
        self,
        request: requests.PreparedRequest,
        timeout: Optional[float],
        cancel: Optional[threading.Event],
    ) -> requests.Response:
        name = f"{request.method} request"
        if request.url:
            name += f" to {request.url}"
        deadline = None
        if timeout is not None and timeout > 0:
            name += f" with timeout {timeout}s"
            deadline = time.monotonic() + timeout
        else:
            timeout = None

        total = self._retry_max + 1
        tries = 0
        last_error: Optional[BaseException] = None
        for attempt in range(1, total + 1):
            label = f"{name} ({attempt}/{total})"
            tries += 1
            if _cancelled(cancel):
                raise HTTPSenderError("request context failed: context canceled") from Cancelled(
                    "context canceled"
                )

            _logger.debug("sending %s", label)
            try:
                response = self._client.send(request, timeout=timeout)
            except requests.Timeout as exc:
                last_error = exc
            except Exception as exc:
                raise HTTPSenderError(f"sending {label} failed: {exc}") from exc
            else:
                if _cancelled(cancel):
                    response.close()
                    raise HTTPSenderError("request context failed: context canceled") from Cancelled(
                        "context canceled"
                    )
                if deadline is not None and time.monotonic() > deadline:
                    response.close()
                    raise HTTPSenderError(
                        "request context failed: deadline exceeded"
                    ) from TimeoutError("deadline exceeded")
                try:
                    self._retry_func(response)
                except Exception as exc:
                    last_error = exc
                    response.close()
                else:
                    return response

            if attempt < total:
                _logger.error(
                    "sending %s failed, sleeping %ss and retrying... (%d retries left): %s",
                    label,
                    self._retry_sleep,
                    total - attempt,
                    last_error,
                )
                time.sleep(self._retry_sleep)

        raise HTTPSenderError(f"sending {name} failed after {tries} tries: {last_error}") from last_error

    def send_json(
        self,
        method: str,
        url: str,
        *,
        body_in: Any = None,
        headers_in: Optional[Mapping[str, str]] = None,
        headers_out: Optional[HeadersFunc] = None,
        host: str = "",
        status_code_func: Optional[StatusCodeFunc] = None,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
        decode_error: bool = False,
    ) -> Any:
        """Send a JSON request and return the decoded JSON response body.

        ``body_in`` is encoded as JSON when not None. ``status_code_func``
        raises for an invalid status (by default anything outside 2xx); then,
        with ``decode_error``, a JSON body is raised as HTTPSenderUnmarshaledError.
        Returns None when the response body is empty.
        """
        data = None
        if body_in is not None:
            try:
                data = (json.dumps(body_in) + "\n").encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise HTTPSenderError(f"marshaling body in failed: {exc}") from exc

        headers = dict(headers_in or {})
        if host:
            headers["Host"] = host
        try:
            request = requests.Request(method or "GET", url, data=data, headers=headers).prepare()
        except Exception as exc:
            raise HTTPSenderError(f"creating request failed: {exc}") from exc

        effective_timeout = self._timeout
        if timeout is not None and timeout > 0:
            effective_timeout = timeout

        try:
            response = self._send(request, effective_timeout, cancel)
        except HTTPSenderError as exc:
            raise HTTPSenderError(f"sending request failed: {exc}") from exc

        with response:
            if headers_out is not None:
                headers_out(response.headers)

            check = status_code_func or default_status_code_func
            try:
                check(response.status_code)
            except Exception as exc:
                if decode_error:
                    try:
                        body = json.loads(response.content)
                    except ValueError:
                        pass
                    else:
                        raise HTTPSenderUnmarshaledError(body) from exc
                raise HTTPSenderError(
                    f"validating status code {response.status_code} failed: {exc}"
                ) from exc

            content = response.content
            if not content:
                return None
            try:
                return json.loads(content)
            except ValueError as exc:
                raise HTTPSenderError(
                    f"unmarshaling failed: {exc} (json: {content!r})"
                ) from exc