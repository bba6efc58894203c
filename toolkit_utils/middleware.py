"""WSGI middlewares and helpers to chain them."""

from __future__ import annotations

import base64
import binascii
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote

WSGIApp = Callable[..., Iterable[bytes]]
Middleware = Callable[[WSGIApp], WSGIApp]

_REALM = "Basic Realm=Please enter your credentials"


def chain_http_middlewares(app: WSGIApp, *args: Optional[Middleware]) -> WSGIApp:
    """Wrap ``app`` in each middleware in turn; the last one is outermost."""
    return chain_http_middlewares_with_prefix(app, [], *args)


def _prefixed(inner: WSGIApp, middleware: Middleware, prefixes: Sequence[str]) -> WSGIApp:
    wrapped = middleware(inner)

    def app(environ, start_response):
        path = quote(environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", ""))
        if any(path.startswith(prefix) for prefix in prefixes):
            return wrapped(environ, start_response)
        return inner(environ, start_response)

    return app


def chain_http_middlewares_with_prefix(
    app: WSGIApp, prefixes: Sequence[str], *args: Optional[Middleware]
) -> WSGIApp:
    """Chain middlewares that only apply to paths starting with one of ``prefixes``.

    With no prefixes, the middlewares apply to every path. None entries are skipped.
    """
    prefixes = list(prefixes)
    for middleware in args:
        if middleware is None:
            continue
        app = middleware(app) if not prefixes else _prefixed(app, middleware, prefixes)
    return app


def _basic_auth(environ) -> Optional[Tuple[str, str]]:
    header = environ.get("HTTP_AUTHORIZATION", "")
    prefix = "Basic "
    if len(header) < len(prefix) or header[: len(prefix)].lower() != prefix.lower():
        return None
    try:
        decoded = base64.b64decode(header[len(prefix):], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    user, sep, pwd = decoded.partition(":")
    if not sep:
        return None
    return user, pwd


def http_middleware_basic_auth(username: str, password: str) -> Optional[Middleware]:
    """Return a middleware requiring HTTP basic auth, or None if both are empty."""
    if not username and not password:
        return None

    def middleware(app: WSGIApp) -> WSGIApp:
        def wrapped(environ, start_response):
            if _basic_auth(environ) != (username, password):
                start_response("401 Unauthorized", [("WWW-Authenticate", _REALM)])
                return [b""]
            return app(environ, start_response)

        return wrapped

    return middleware


def _with_headers(app: WSGIApp, headers: Mapping[str, str]) -> WSGIApp:
    def wrapped(environ, start_response):
        def patched(status, response_headers, exc_info=None):
            present = {name.lower() for name, _ in response_headers}
            extra: List[Tuple[str, str]] = [
                (name, value) for name, value in headers.items() if name.lower() not in present
            ]
            return start_response(status, extra + list(response_headers), exc_info)

        return app(environ, patched)

    return wrapped


def http_middleware_headers(headers: Mapping[str, str]) -> Middleware:
    """Return a middleware adding ``headers`` to responses, unless the app sets them."""
    headers = dict(headers)

    def middleware(app: WSGIApp) -> WSGIApp:
        return _with_headers(app, headers)

    return middleware


def http_middleware_content_type(content_type: str) -> Middleware:
    """Return a middleware setting the response Content-Type."""
    return http_middleware_headers({"Content-Type": content_type})


def http_middleware_cors_headers() -> Middleware:
    """Return a middleware adding permissive CORS headers."""
    return http_middleware_headers(
        {
            "Access-Control-Allow-Headers": "*",
            "Access-Control-Allow-Methods": "*",
            "Access-Control-Allow-Origin": "*",
        }
    )