"""Tests for clutterbuck.routing.router — registration, dispatch, serve."""

import re
import threading

import pytest

from clutterbuck.context import get_context, set_header
from clutterbuck.errors import (
    ArgumentError,
    InvalidMatcherError,
    MethodNotAllowedError,
    NotFoundError,
    RouterSealedError,
)
from clutterbuck.http.request import Request
from clutterbuck.routing.router import Router


def _handler() -> str:
    return "ok"


def _app_router() -> Router:
    """The two-route table the rest of this module exercises."""
    router = Router()

    @router.get("/static-get")
    def static_get():
        return [200, [], ["Ohai!"]]

    @router.get(re.compile(r"^/regex-get/([^/]+)"))
    def regex_get(arg):
        return [200, [], [arg]]

    return router


class TestRegistration:
    def test_add_handler_appends(self) -> None:
        r = Router()
        r.add_handler("GET", "/a", _handler)
        r.add_handler("POST", "/b", _handler)
        assert [(route.verb, route.matcher) for route in r.routes] == [
            ("GET", "/a"),
            ("POST", "/b"),
        ]

    def test_add_handler_returns_handler(self) -> None:
        r = Router()
        assert r.add_handler("GET", "/", _handler) is _handler

    def test_get_registers_get_then_head(self) -> None:
        r = Router()
        r.get("/x", _handler)
        assert [route.verb for route in r.routes] == ["GET", "HEAD"]
        assert all(route.handler is _handler for route in r.routes)

    @pytest.mark.parametrize("verb", ["PUT", "POST", "DELETE", "PATCH"])
    def test_single_verb_wrappers(self, verb: str) -> None:
        r = Router()
        getattr(r, verb.lower())("/x", _handler)
        assert [route.verb for route in r.routes] == [verb]

    def test_decorator_form(self) -> None:
        r = Router()

        @r.post("/items")
        def create():
            return "created"

        assert create() == "created"
        assert r.routes[0].handler is create

    def test_get_decorator_form(self) -> None:
        r = Router()

        @r.get("/items")
        def items():
            return []

        assert callable(items)
        assert [route.verb for route in r.routes] == ["GET", "HEAD"]

    def test_route_decorator_custom_verb(self) -> None:
        r = Router()

        @r.route("PROPFIND", "/dav")
        def propfind():
            return "dav"

        assert r.routes[0].verb == "PROPFIND"

    def test_missing_handler(self) -> None:
        r = Router()
        with pytest.raises(ArgumentError, match="Must pass a handler"):
            r.add_handler("GET", "/")

    def test_non_callable_handler(self) -> None:
        r = Router()
        with pytest.raises(ArgumentError, match="not callable"):
            r.add_handler("GET", "/", "nope")  # type: ignore[arg-type]

    def test_non_string_verb(self) -> None:
        r = Router()
        with pytest.raises(ArgumentError):
            r.add_handler(None, "/", _handler)  # type: ignore[arg-type]

    def test_invalid_matcher(self) -> None:
        r = Router()
        with pytest.raises(InvalidMatcherError):
            r.get(42, _handler)  # type: ignore[arg-type]
        assert len(r) == 0

    def test_argument_error_is_type_error(self) -> None:
        r = Router()
        with pytest.raises(TypeError):
            r.add_handler("GET", "/", None)


class TestSealing:
    def test_not_sealed_initially(self) -> None:
        assert Router().sealed is False

    def test_seal_blocks_registration(self) -> None:
        r = Router()
        r.get("/", _handler)
        r.seal()
        assert r.sealed is True
        with pytest.raises(RouterSealedError):
            r.post("/", _handler)

    def test_sealed_error_is_runtime_error(self) -> None:
        r = Router()
        r.seal()
        with pytest.raises(RuntimeError):
            r.add_handler("GET", "/", _handler)

    def test_serve_seals(self) -> None:
        r = Router()
        r.get("/", _handler)
        r.serve(Request("GET", "/"))
        assert r.sealed is True

    def test_seal_is_idempotent(self) -> None:
        r = Router()
        r.get("/", _handler)
        r.seal()
        routes = r.routes
        r.seal()
        assert r.routes is routes

    def test_routes_is_tuple(self) -> None:
        r = Router()
        r.get("/", _handler)
        assert isinstance(r.routes, tuple)
        r.seal()
        assert isinstance(r.routes, tuple)

    def test_concurrent_first_requests(self) -> None:
        r = Router()
        r.get("/", _handler)
        statuses: list[int] = []
        lock = threading.Lock()

        def worker() -> None:
            response = r.serve(Request("GET", "/"))
            with lock:
                statuses.append(response.status)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert statuses == [200] * 8
        assert len(r.routes) == 2


class TestFindRoute:
    def test_empty_table_is_not_found(self) -> None:
        with pytest.raises(NotFoundError):
            Router().find_route("GET", "/")

    def test_unknown_path_is_not_found(self) -> None:
        r = Router()
        r.get("/a", _handler)
        with pytest.raises(NotFoundError) as exc_info:
            r.find_route("GET", "/b")
        assert exc_info.value.path == "/b"

    def test_wrong_verb_is_method_not_allowed(self) -> None:
        r = Router()
        r.get("/a", _handler)
        with pytest.raises(MethodNotAllowedError) as exc_info:
            r.find_route("POST", "/a")
        assert str(exc_info.value) == "POST not permitted on /a"
        assert exc_info.value.verb == "POST"
        assert exc_info.value.path == "/a"
        assert exc_info.value.allowed == ("GET", "HEAD")

    def test_verbs_are_case_sensitive(self) -> None:
        r = Router()
        r.get("/a", _handler)
        with pytest.raises(MethodNotAllowedError):
            r.find_route("get", "/a")

    def test_first_registered_wins(self) -> None:
        def first() -> str:
            return "first"

        def second() -> str:
            return "second"

        r = Router()
        r.get("/a", first)
        r.get("/a", second)
        assert r.find_route("GET", "/a").handler is first

    def test_wrong_verb_earlier_does_not_block(self) -> None:
        def poster() -> str:
            return "post"

        def getter() -> str:
            return "get"

        r = Router()
        r.post(re.compile(r"^/items"), poster)
        r.get("/items", getter)
        assert r.find_route("GET", "/items").handler is getter
        assert r.find_route("POST", "/items").handler is poster

    def test_pattern_before_literal(self) -> None:
        def pattern() -> str:
            return "pattern"

        r = Router()
        r.get(re.compile(r"^/a"), pattern)
        r.get("/a", _handler)
        assert r.find_route("GET", "/a").handler is pattern

    def test_allowed_verbs(self) -> None:
        r = Router()
        r.get("/a", _handler)
        r.put(re.compile("^/a$"), _handler)
        r.get("/a", _handler)
        assert r.allowed_verbs("/a") == ("GET", "HEAD", "PUT")
        assert r.allowed_verbs("/b") == ()


class TestServe:
    def test_simple_get(self) -> None:
        response = _app_router().serve(Request("GET", "/static-get"))
        assert response.status == 200
        assert response.body == ("Ohai!",)

    def test_simple_head(self) -> None:
        router = _app_router()
        get = router.serve(Request("GET", "/static-get"))
        head = router.serve(Request("HEAD", "/static-get"))
        assert head.status == 200
        assert head.body == ()
        assert head.headers == get.headers

    def test_head_keeps_content_length_of_stripped_body(self) -> None:
        head = _app_router().serve(Request("HEAD", "/static-get"))
        assert head.header("Content-Length") == "5"

    def test_not_found(self) -> None:
        response = _app_router().serve(Request("GET", "/non-existent"))
        assert response.status == 404
        assert response.content_type == "text/plain"
        assert response.text == "Not found"

    @pytest.mark.parametrize("verb", ["GET", "POST", "DELETE", "BREW"])
    def test_not_found_regardless_of_verb(self, verb: str) -> None:
        response = _app_router().serve(Request(verb, "/non-existent"))
        assert response.status == 404
        assert response.text == "Not found"

    def test_method_not_allowed(self) -> None:
        response = _app_router().serve(Request("POST", "/static-get"))
        assert response.status == 405
        assert response.content_type == "text/plain"
        assert response.text == "POST not permitted on /static-get"
        assert response.header("Allow") == "GET, HEAD"

    def test_regex_capture(self) -> None:
        response = _app_router().serve(Request("GET", "/regex-get/foo/bar"))
        assert response.status == 200
        assert response.body == ("foo",)

    def test_empty_path_is_root(self) -> None:
        r = Router()
        r.get("/", lambda: "root")
        response = r.serve(Request("GET", ""))
        assert response.status == 200
        assert response.text == '"root"'

    def test_context_path_is_normalized(self) -> None:
        r = Router()
        r.get("/", lambda: get_context().path)
        assert r.serve(Request("GET", "")).text == '"/"'

    def test_status_comes_from_handler(self) -> None:
        r = Router()
        r.post("/items", lambda: [201, [("Location", "/items/1")], ["{}"]])
        response = r.serve(Request("POST", "/items"))
        assert response.status == 201
        assert response.header("Location") == "/items/1"

    def test_only_first_handler_runs(self) -> None:
        calls: list[str] = []

        def first() -> str:
            calls.append("first")
            return "first"

        def second() -> str:
            calls.append("second")
            return "second"

        r = Router()
        r.get("/dup", first)
        r.get("/dup", second)
        r.serve(Request("GET", "/dup"))
        assert calls == ["first"]

    def test_idempotent(self) -> None:
        r = Router()
        r.get(re.compile(r"^/echo/(\w+)$"), lambda word: {"word": word})
        first = r.serve(Request("GET", "/echo/hi"))
        second = r.serve(Request("GET", "/echo/hi"))
        assert first == second

    def test_handler_header_opts_out_of_negotiation(self) -> None:
        r = Router()

        @r.get("/report")
        def report():
            set_header("Content-Type", "text/csv")
            return "a,b\n1,2\n"

        response = r.serve(Request("GET", "/report"))
        assert response.content_type == "text/csv"
        assert response.body == ("a,b\n1,2\n",)
        assert response.header("Content-Length") == "8"

    def test_headers_do_not_leak_between_requests(self) -> None:
        r = Router()
        seen: list[str | None] = []

        @r.get("/h")
        def h():
            seen.append(get_context().get_header("X-Seen"))
            set_header("X-Seen", "yes")
            return {}

        r.serve(Request("GET", "/h"))
        r.serve(Request("GET", "/h"))
        assert seen == [None, None]

    def test_handler_exceptions_propagate(self) -> None:
        r = Router()

        @r.get("/boom")
        def boom():
            raise ZeroDivisionError

        with pytest.raises(ZeroDivisionError):
            r.serve(Request("GET", "/boom"))

    def test_head_on_not_found_has_no_body(self) -> None:
        response = _app_router().serve(Request("HEAD", "/missing"))
        assert response.status == 404
        assert response.body == ()

    def test_custom_verb(self) -> None:
        r = Router()
        r.add_handler("PURGE", "/cache", lambda: {"purged": True})
        assert r.serve(Request("PURGE", "/cache")).status == 200
        assert r.serve(Request("GET", "/cache")).status == 405
