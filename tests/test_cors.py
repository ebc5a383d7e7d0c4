import pytest

from core.cors import ALLOW_HEADERS, DISALLOWED_ORIGIN, CorsPolicy


class TestWildcard:
    @pytest.mark.parametrize("origin", ["https://app.example", "http://localhost:5173", "null"])
    def test_any_origin_is_permitted(self, origin):
        assert CorsPolicy(None).allow_origin(origin) == origin

    def test_no_origin_gives_literal_wildcard(self):
        headers = CorsPolicy(None).headers_for(None)

        assert headers["Access-Control-Allow-Origin"] == "*"
        assert "Vary" not in headers


class TestAllowList:
    policy = CorsPolicy(("https://app.example", "https://admin.example"))

    def test_listed_origin_is_echoed(self):
        assert self.policy.allow_origin("https://admin.example") == "https://admin.example"

    @pytest.mark.parametrize(
        "origin",
        ["https://evil.example", "https://app.example/", "HTTPS://APP.EXAMPLE", "", None],
    )
    def test_unlisted_origin_gets_sentinel(self, origin):
        assert self.policy.allow_origin(origin) == DISALLOWED_ORIGIN

    def test_sentinel_response_varies_on_origin(self):
        headers = self.policy.headers_for("https://evil.example")

        assert headers["Access-Control-Allow-Origin"] == "null"
        assert headers["Vary"] == "Origin"


def test_fixed_headers_always_present():
    headers = CorsPolicy(("https://app.example",)).headers_for("https://evil.example")

    assert headers["Access-Control-Allow-Methods"] == "POST, OPTIONS"
    assert headers["Access-Control-Allow-Headers"] == ALLOW_HEADERS
    assert headers["Access-Control-Max-Age"] == "600"
