import base64
from wsgiref.util import setup_testing_defaults

from toolkit_utils.middleware import (
    chain_http_middlewares,
    chain_http_middlewares_with_prefix,
    http_middleware_basic_auth,
    http_middleware_content_type,
    http_middleware_cors_headers,
    http_middleware_headers,
)


def make_app(calls, headers=None):
    def app(environ, start_response):
        calls.append(environ.get("PATH_INFO"))
        start_response("200 OK", list(headers or []))
        return [b"body"]

    return app


def call(app, path="/", authorization=None):
    environ = {"PATH_INFO": path}
    if authorization is not None:
        environ["HTTP_AUTHORIZATION"] = authorization
    setup_testing_defaults(environ)
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(environ, start_response))
    return captured["status"], captured["headers"], body


def basic(user, pwd):
    return "Basic " + base64.b64encode(f"{user}:{pwd}".encode()).decode()


def test_basic_auth_disabled_when_empty():
    assert http_middleware_basic_auth("", "") is None


def test_basic_auth_rejects_and_accepts():
    password = "password"
    calls = []
    app = chain_http_middlewares(make_app(calls), http_middleware_basic_auth("user", password))

    status, headers, body = call(app)
    assert status.startswith("401")
    assert headers["WWW-Authenticate"] == "Basic Realm=Please enter your credentials"
    assert calls == []

    status, _, _ = call(app, authorization=basic("user", "wrong"))
    assert status.startswith("401")

    status, _, body = call(app, authorization=basic("user", password))
    assert status == "200 OK"
    assert body == b"body"
    assert calls == ["/"]


def test_content_type():
    app = chain_http_middlewares(make_app([]), http_middleware_content_type("application/json"))
    _, headers, _ = call(app)
    assert headers["Content-Type"] == "application/json"


def test_app_headers_override_middleware_headers():
    app = chain_http_middlewares(
        make_app([], headers=[("X-Test", "app")]),
        http_middleware_headers({"X-Test": "middleware", "X-Other": "value"}),
    )
    _, headers, _ = call(app)
    assert headers["X-Test"] == "app"
    assert headers["X-Other"] == "value"


def test_cors_headers():
    app = chain_http_middlewares(make_app([]), http_middleware_cors_headers())
    _, headers, _ = call(app)
    assert headers["Access-Control-Allow-Headers"] == "*"
    assert headers["Access-Control-Allow-Methods"] == "*"
    assert headers["Access-Control-Allow-Origin"] == "*"


def test_none_middleware_is_skipped_and_order_is_kept():
    order = []

    def recorder(label):
        def middleware(app):
            def wrapped(environ, start_response):
                order.append(label)
                return app(environ, start_response)

            return wrapped

        return middleware

    app = chain_http_middlewares(make_app([]), recorder("first"), None, recorder("second"))
    status, _, _ = call(app)
    assert status == "200 OK"
    assert order == ["second", "first"]


def test_prefix_applies_only_to_matching_paths():
    app = chain_http_middlewares_with_prefix(
        make_app([]), ["/api"], http_middleware_content_type("application/json")
    )
    _, headers, _ = call(app, path="/api/items")
    assert headers["Content-Type"] == "application/json"
    _, headers, _ = call(app, path="/static/file")
    assert "Content-Type" not in headers