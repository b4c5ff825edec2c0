"""
Tests for the locale prefix middleware

Exercises the interceptor through a real Starlette stack with TestClient.
"""

import inspect

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request as StarletteRequest

from uri_locale.interceptor import InterceptorOptions, Redirect, build_config
from uri_locale.middleware.locale_prefix import LocalePrefixMiddleware, facts_from_request
from utils.mocks import RecordingResolver, make_app, make_interceptor


class TestLocalePrefixMiddlewareBasics:
    def test_is_base_http_middleware(self):
        assert issubclass(LocalePrefixMiddleware, BaseHTTPMiddleware)

    def test_dispatch_is_coroutine(self):
        assert inspect.iscoroutinefunction(LocalePrefixMiddleware.dispatch)


class TestFactsFromRequest:
    def _request(self, **scope_overrides):
        scope = {
            "type": "http",
            "method": "GET",
            "scheme": "https",
            "server": ("shop.example.com", 443),
            "path": "/de/café",
            "raw_path": b"/de/caf%C3%A9",
            "query_string": b"x=1&y=2",
            "headers": [(b"host", b"shop.example.com")],
            "client": ("203.0.113.7", 51234),
        }
        scope.update(scope_overrides)
        return StarletteRequest(scope)

    def test_extracts_all_facts(self):
        facts = facts_from_request(self._request())
        assert facts.path == "/de/caf%C3%A9"
        assert facts.scheme == "https"
        assert facts.host == "203.0.113.7"
        assert facts.port == 51234
        assert facts.query_string == "x=1&y=2"

    def test_falls_back_to_decoded_path(self):
        facts = facts_from_request(self._request(raw_path=None, path="/de/shop"))
        assert facts.path == "/de/shop"

    @pytest.mark.parametrize("path, quoted", [("/de/a#b/c", "/de/a%23b/c"), ("/de/a?b/c", "/de/a%3Fb/c")])
    def test_decoded_path_requoted(self, path, quoted):
        facts = facts_from_request(self._request(raw_path=None, path=path))
        assert facts.path == quoted

    def test_decoded_path_keeps_whole_path_in_redirect(self, resolver):
        facts = facts_from_request(self._request(raw_path=None, path="/de/a#b/c", query_string=b"x=1"))
        decision = make_interceptor("en", ["en"]).evaluate(facts, resolver)
        assert decision == Redirect("/en/a%23b/c?x=1")

    def test_raw_path_query_suffix_stripped(self):
        facts = facts_from_request(self._request(raw_path=b"/de/shop?x=1"))
        assert facts.path == "/de/shop"

    def test_missing_client(self):
        facts = facts_from_request(self._request(client=None))
        assert facts.host is None
        assert facts.port is None


class TestLocalePrefixMiddleware:
    def test_supported_locale_reaches_handler(self, en_fr_config):
        client = TestClient(make_app(en_fr_config), follow_redirects=False)
        response = client.get("/fr/shop")
        assert response.status_code == 200
        assert response.json() == {"locale": "fr", "canonical": "fr", "rest": "shop"}

    def test_locale_bound_in_context(self, en_fr_config):
        client = TestClient(make_app(en_fr_config), follow_redirects=False)
        response = client.get("/fr")
        assert response.json() == {"locale": "fr", "context": "fr"}

    def test_unsupported_locale_redirected(self, en_fr_config):
        client = TestClient(make_app(en_fr_config), follow_redirects=False)
        response = client.get("/de/shop?x=1")
        assert response.status_code == 302
        assert response.headers["location"] == "/en/shop?x=1"

    def test_root_redirected_to_home(self, en_fr_config):
        client = TestClient(make_app(en_fr_config), follow_redirects=False)
        response = client.get("/")
        assert response.status_code == 302
        assert response.headers["location"] == "/en"

    def test_location_is_relative(self, en_fr_config):
        client = TestClient(make_app(en_fr_config), base_url="https://shop.example.com", follow_redirects=False)
        response = client.get("/de/cart")
        assert response.headers["location"] == "/en/cart"

    def test_percent_encoding_preserved(self, en_fr_config):
        client = TestClient(make_app(en_fr_config), follow_redirects=False)
        response = client.get("/de/caf%C3%A9")
        assert response.headers["location"] == "/en/caf%C3%A9"

    def test_following_redirect_lands_on_default_locale(self, en_fr_config):
        client = TestClient(make_app(en_fr_config))
        response = client.get("/shop/item")
        assert response.status_code == 200
        assert response.json()["locale"] == "en"
        assert response.json()["rest"] == "item"

    def test_region_locale_bound_in_wire_form(self):
        config = build_config("en_US", InterceptorOptions(supported_locales=["en_US", "pt_BR"]))
        client = TestClient(make_app(config), follow_redirects=False)
        response = client.get("/pt-BR/loja")
        assert response.status_code == 200
        assert response.json()["locale"] == "pt-br"
        assert response.json()["canonical"] == "pt_BR"

    def test_hyphenated_default_redirect_lands_on_handler(self):
        config = build_config("en-US", InterceptorOptions(supported_locales=["en-US", "fr"]))
        client = TestClient(make_app(config))
        response = client.get("/de/shop")
        assert response.status_code == 200
        assert response.json() == {"locale": "en-us", "canonical": "en_US", "rest": "shop"}
        assert [r.headers["location"] for r in response.history] == ["/en-us/shop"]

    def test_custom_redirect_status_code(self, en_fr_config):
        client = TestClient(make_app(en_fr_config, redirect_status_code=301), follow_redirects=False)
        response = client.get("/de/shop")
        assert response.status_code == 301

    def test_excluded_paths_bypass_negotiation(self, en_fr_config):
        client = TestClient(make_app(en_fr_config, exclude_paths=["/health"]), follow_redirects=False)
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_exclusion_matches_whole_segments(self, en_fr_config):
        client = TestClient(make_app(en_fr_config, exclude_paths=["/health"]), follow_redirects=False)
        response = client.get("/healthcheck")
        assert response.status_code == 302

    def test_custom_resolver_factory_used(self, en_fr_config):
        resolver = RecordingResolver()
        app = FastAPI()
        app.add_middleware(LocalePrefixMiddleware, config=en_fr_config, resolver_factory=lambda request: resolver)

        @app.get("/{locale}/plain")
        async def plain(locale: str):
            return {"ok": True}

        client = TestClient(app, follow_redirects=False)
        assert client.get("/de/plain").status_code == 302
        assert resolver.bound == []

        assert client.get("/fr/plain").status_code == 200
        assert [tag.canonical for tag in resolver.bound] == ["fr"]


class TestLocalePrefixMiddlewareFailures:
    def test_missing_resolver_yields_500(self, en_fr_config):
        client = TestClient(
            make_app(en_fr_config, resolver_factory=lambda request: None),
            raise_server_exceptions=False,
        )
        response = client.get("/fr/shop")
        assert response.status_code == 500
        error = response.json()["error"]
        assert error["error_code"] == "LOCALE_INTERCEPTOR_FAILED"
        assert error["details"]["kind"] == "LOCALE_RESOLVER_UNAVAILABLE"
        assert error["path"] == "/fr/shop"

    def test_missing_resolver_propagates(self, en_fr_config):
        from uri_locale.exceptions import LocaleInterceptorError

        client = TestClient(make_app(en_fr_config, resolver_factory=lambda request: None))
        with pytest.raises(LocaleInterceptorError):
            client.get("/fr/shop")
