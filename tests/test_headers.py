"""
Unit tests for header assembly and response header translation
"""

import pytest

from core.headers import (
    CORS_HEADERS,
    DEFAULT_USER_AGENT,
    FORWARDED_REQUEST_HEADERS,
    HeaderBuilder,
    HeaderMap,
    title_case,
)


class TestHeaderMap:
    def test_lookup_is_case_insensitive(self):
        headers = HeaderMap({"Accept-Language": "en"})
        assert headers["accept-language"] == "en"
        assert headers["ACCEPT-LANGUAGE"] == "en"
        assert "Accept-language" in headers

    def test_keys_are_lowercase(self):
        headers = HeaderMap({"Range": "bytes=0-1", "X-Other": "1"})
        assert sorted(headers) == ["range", "x-other"]
        assert len(headers) == 2

    def test_lowercase_entry_wins_over_other_casings(self):
        headers = HeaderMap({"RANGE": "upper", "range": "lower", "Range": "title"})
        assert headers["range"] == "lower"

    def test_first_mixed_case_entry_kept(self):
        headers = HeaderMap({"RANGE": "upper", "Range": "title"})
        assert headers["range"] == "upper"

    def test_missing_key(self):
        headers = HeaderMap()
        assert headers.get("accept") is None
        with pytest.raises(KeyError):
            headers["accept"]
        assert 42 not in headers


class TestTitleCase:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("content-type", "Content-Type"),
            ("last-modified", "Last-Modified"),
            ("etag", "Etag"),
            ("CACHE-CONTROL", "Cache-Control"),
        ],
    )
    def test_recasing(self, name, expected):
        assert title_case(name) == expected


class TestBuildForwardHeaders:
    """Tests for merging the h blob, caller headers and the default user agent"""

    def setup_method(self):
        self.builder = HeaderBuilder()

    def test_default_user_agent_when_none_supplied(self):
        assert self.builder.build_forward_headers({}, {}) == {"user-agent": DEFAULT_USER_AGENT}

    def test_empty_user_agent_replaced_by_default(self):
        headers = self.builder.build_forward_headers({"user-agent": ""}, {"User-Agent": ""})
        assert headers["user-agent"] == DEFAULT_USER_AGENT

    def test_caller_user_agent_kept(self):
        headers = self.builder.build_forward_headers({}, {"User-Agent": "Player/1.0"})
        assert headers["user-agent"] == "Player/1.0"

    def test_blob_takes_priority_over_caller(self):
        headers = self.builder.build_forward_headers(
            {"referer": "https://blob.example/"},
            {"Referer": "https://caller.example/"},
        )
        assert headers["referer"] == "https://blob.example/"

    def test_empty_blob_value_falls_back_to_caller(self):
        headers = self.builder.build_forward_headers({"accept": ""}, {"Accept": "*/*"})
        assert headers["accept"] == "*/*"

    def test_whitelisted_caller_headers_lookup_any_casing(self):
        incoming = {
            "RANGE": "bytes=0-99",
            "accept": "video/*",
            "Accept-Encoding": "gzip",
            "ACCEPT-LANGUAGE": "de",
            "Origin": "https://app.example",
        }
        headers = self.builder.build_forward_headers({}, incoming)
        assert headers["range"] == "bytes=0-99"
        assert headers["accept"] == "video/*"
        assert headers["accept-encoding"] == "gzip"
        assert headers["accept-language"] == "de"
        assert headers["origin"] == "https://app.example"

    def test_non_whitelisted_caller_headers_never_forwarded(self):
        incoming = {
            "Cookie": "session=secret",
            "Authorization": "Bearer secret",
            "X-Forwarded-For": "10.0.0.1",
            "Host": "proxy.local",
            "Accept": "*/*",
        }
        explicit = {"x-token": "abc"}
        headers = self.builder.build_forward_headers(explicit, incoming)

        assert set(headers) <= set(FORWARDED_REQUEST_HEADERS) | set(explicit)
        assert "cookie" not in headers
        assert "authorization" not in headers
        assert headers["x-token"] == "abc"

    def test_explicit_blob_may_carry_any_header(self):
        headers = self.builder.build_forward_headers({"authorization": "Bearer from-blob"}, {})
        assert headers["authorization"] == "Bearer from-blob"

    def test_keys_are_lowercase(self):
        headers = self.builder.build_forward_headers({"X-Mixed": "1"}, {"Range": "bytes=0-"})
        assert all(key == key.lower() for key in headers)


class TestBuildResponseHeaders:
    """Tests for the caller-facing response headers"""

    def setup_method(self):
        self.builder = HeaderBuilder()

    def test_cors_and_final_url_always_present(self):
        headers = self.builder.build_response_headers({}, "https://example.com/final")
        for name, value in CORS_HEADERS.items():
            assert headers[name] == value
        assert headers["X-Final-Url"] == "https://example.com/final"

    def test_content_type_defaults_to_octet_stream(self):
        headers = self.builder.build_response_headers({"etag": "x"}, "https://example.com/")
        assert headers["Content-Type"] == "application/octet-stream"

    def test_passthrough_whitelist_recased(self):
        upstream = {
            "CONTENT-TYPE": "application/vnd.apple.mpegurl",
            "content-length": "120",
            "Accept-Ranges": "bytes",
            "content-range": "bytes 0-119/500",
            "cache-control": "max-age=60",
            "ETag": '"abc"',
            "last-modified": "Wed, 21 Oct 2015 07:28:00 GMT",
            "expires": "Thu, 22 Oct 2015 07:28:00 GMT",
        }
        headers = self.builder.build_response_headers(upstream, "https://example.com/")
        assert headers["Content-Type"] == "application/vnd.apple.mpegurl"
        assert headers["Content-Length"] == "120"
        assert headers["Accept-Ranges"] == "bytes"
        assert headers["Content-Range"] == "bytes 0-119/500"
        assert headers["Cache-Control"] == "max-age=60"
        assert headers["Etag"] == '"abc"'
        assert headers["Last-Modified"] == "Wed, 21 Oct 2015 07:28:00 GMT"
        assert headers["Expires"] == "Thu, 22 Oct 2015 07:28:00 GMT"

    def test_other_upstream_headers_dropped(self):
        upstream = {"set-cookie": "a=b", "server": "nginx", "content-encoding": "gzip"}
        headers = self.builder.build_response_headers(upstream, "https://example.com/")
        assert "Set-Cookie" not in headers
        assert "set-cookie" not in headers
        assert "Server" not in headers
        assert "Content-Encoding" not in headers
