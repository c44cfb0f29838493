"""Tests for SharedKey request signing."""

import base64
import itertools
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from azblob.auth.connection import ConnectionConfig
from azblob.auth.request import SignableRequest
from azblob.auth.sharedkey import (
    API_VERSION,
    SharedKeySigner,
    build_canonicalized_headers,
    build_canonicalized_resource,
    build_string_to_sign,
    compute_signature,
    format_http_date,
)


SIGNING_TIME = datetime(2025, 12, 4, 10, 30, 0, tzinfo=timezone.utc)
SIGNING_DATE = "Thu, 04 Dec 2025 10:30:00 GMT"


@pytest.fixture
def config():
    """Account 'acct' with key b'x' * 32."""
    key = base64.b64encode(b"x" * 32).decode()
    return ConnectionConfig.parse(
        f"DefaultEndpointsProtocol=https;AccountName=acct;AccountKey={key};"
        "EndpointSuffix=core.windows.net"
    )


@pytest.fixture
def signer(config):
    return SharedKeySigner(config)


class TestCanonicalizedHeaders:
    """Test canonicalized x-ms- headers."""

    def test_sorted_lines_with_trailing_newline(self):
        """Test each header becomes 'name:value\\n', sorted."""
        headers = {
            "x-ms-version": "2019-12-12",
            "x-ms-date": SIGNING_DATE,
            "x-ms-blob-type": "BlockBlob",
        }

        assert build_canonicalized_headers(headers) == (
            "x-ms-blob-type:BlockBlob\n"
            f"x-ms-date:{SIGNING_DATE}\n"
            "x-ms-version:2019-12-12\n"
        )

    def test_non_ms_headers_excluded(self):
        """Test that only x-ms- headers are included."""
        headers = {
            "content-type": "text/plain",
            "Authorization": "SharedKey acct:sig",
            "x-ms-meta-owner": "me",
        }

        assert build_canonicalized_headers(headers) == "x-ms-meta-owner:me\n"

    def test_prefix_match_is_case_sensitive(self):
        """Test the x-ms- prefix is matched on the name as stored."""
        headers = {"X-MS-Version": "2019-12-12", "x-ms-date": SIGNING_DATE}

        assert build_canonicalized_headers(headers) == f"x-ms-date:{SIGNING_DATE}\n"

    def test_values_kept_verbatim(self):
        """Test header values are not trimmed or collapsed."""
        headers = {"x-ms-meta-note": "a  b "}

        assert build_canonicalized_headers(headers) == "x-ms-meta-note:a  b \n"

    def test_empty_headers(self):
        """Test no x-ms- headers yields an empty string."""
        assert build_canonicalized_headers({}) == ""

    def test_invariant_under_insertion_order(self):
        """Test every insertion order produces the same string."""
        items = [
            ("x-ms-version", "2019-12-12"),
            ("x-ms-date", SIGNING_DATE),
            ("x-ms-meta-a", "1"),
            ("x-ms-blob-type", "AppendBlob"),
        ]
        results = {
            build_canonicalized_headers(dict(order))
            for order in itertools.permutations(items)
        }

        assert len(results) == 1


class TestCanonicalizedResource:
    """Test canonicalized query parameters."""

    def test_no_parameters(self):
        """Test empty parameters yield an empty string."""
        assert build_canonicalized_resource({}) == ""

    def test_sorted_parameters(self):
        """Test parameters are sorted by key and each prefixed by newline."""
        params = {"restype": "container", "comp": "list", "prefix": "logs-"}

        assert build_canonicalized_resource(params) == (
            "\ncomp:list\nprefix:logs-\nrestype:container"
        )

    def test_all_parameters_included(self):
        """Test no parameter is filtered out."""
        params = {"timeout": "30", "comp": "appendblock", "custom": "x"}

        assert build_canonicalized_resource(params) == (
            "\ncomp:appendblock\ncustom:x\ntimeout:30"
        )

    def test_invariant_under_insertion_order(self):
        """Test every insertion order produces the same string."""
        items = [("restype", "container"), ("comp", "list"), ("prefix", "a")]
        results = {
            build_canonicalized_resource(dict(order))
            for order in itertools.permutations(items)
        }

        assert len(results) == 1


class TestStringToSign:
    """Test the SharedKey string-to-sign layout."""

    def test_get_request(self):
        """Test a bare GET: all standard fields empty."""
        request = SignableRequest(
            "GET",
            httpx.URL("https://acct.blob.core.windows.net/container/blob"),
            headers={"x-ms-date": SIGNING_DATE, "x-ms-version": API_VERSION},
        )

        expected = (
            "GET" + "\n" * 12
            + f"x-ms-date:{SIGNING_DATE}\nx-ms-version:2019-12-12\n"
            + "/acct/container/blob"
        )
        assert build_string_to_sign(request, "acct") == expected

    def test_put_with_body_and_query(self):
        """Test content length, content type and query parameters."""
        request = SignableRequest(
            "PUT",
            httpx.URL("https://acct.blob.core.windows.net/container/blob?comp=appendblock"),
            headers={
                "content-type": "text/plain; charset=utf-8",
                "x-ms-date": SIGNING_DATE,
                "x-ms-version": API_VERSION,
            },
            body=b"hello",
        )

        lines = build_string_to_sign(request, "acct").split("\n")

        assert lines[0] == "PUT"
        assert lines[3] == "5"
        assert lines[5] == "text/plain; charset=utf-8"
        assert lines[-2] == "/acct/container/blob"
        assert lines[-1] == "comp:appendblock"

    def test_zero_content_length_is_empty(self):
        """Test an empty body gives an empty Content-Length field."""
        request = SignableRequest(
            "PUT",
            httpx.URL("https://acct.blob.core.windows.net/container/blob"),
            body=b"",
        )

        assert build_string_to_sign(request, "acct").split("\n")[3] == ""

    def test_standard_headers_case_insensitive(self):
        """Test standard headers are looked up regardless of casing."""
        request = SignableRequest(
            "GET",
            httpx.URL("https://acct.blob.core.windows.net/container/blob"),
            headers={"RANGE": "bytes=0-9", "If-Match": '"etag"'},
        )

        lines = build_string_to_sign(request, "acct").split("\n")

        assert lines[8] == '"etag"'
        assert lines[11] == "bytes=0-9"

    def test_path_is_percent_encoded(self):
        """Test the resource path uses the encoded URL path."""
        request = SignableRequest(
            "GET",
            httpx.URL("https://acct.blob.core.windows.net/container/my%20blob"),
        )

        assert build_string_to_sign(request, "acct").endswith("/acct/container/my%20blob")


class TestComputeSignature:
    """Test HMAC-SHA256 signatures against reference digests."""

    def test_known_answer_empty_string(self):
        assert compute_signature("", b"x" * 32) == (
            "tAY7dWx76kWOomWudRctruQ4zwTQKtshhbLyfB/L38Y="
        )

    def test_known_answer_get(self):
        string_to_sign = (
            "GET" + "\n" * 12
            + f"x-ms-date:{SIGNING_DATE}\nx-ms-version:2019-12-12\n"
            + "/acct/container/blob"
        )

        assert compute_signature(string_to_sign, b"x" * 32) == (
            "Jm321vqF6Y+Oq5EEtVfbWCGnaMbryMalZmWEgx2yN1M="
        )


class TestSharedKeySigner:
    """Test signing a request in place."""

    def test_sets_date_version_and_authorization(self, signer):
        """Test the three headers added by signing."""
        request = SignableRequest(
            "GET", httpx.URL("https://acct.blob.core.windows.net/container/blob")
        )

        signer.sign(request, now=SIGNING_TIME)

        assert request.headers["x-ms-date"] == SIGNING_DATE
        assert request.headers["x-ms-version"] == "2019-12-12"
        assert request.headers["Authorization"] == (
            "SharedKey acct:Jm321vqF6Y+Oq5EEtVfbWCGnaMbryMalZmWEgx2yN1M="
        )

    def test_known_answer_append_block(self, signer):
        """Test a PUT with body, content type and query parameter."""
        request = SignableRequest(
            "PUT",
            httpx.URL("https://acct.blob.core.windows.net/container/blob?comp=appendblock"),
            headers={"content-type": "text/plain; charset=utf-8"},
            body=b"hello",
        )

        signer.sign(request, now=SIGNING_TIME)

        assert request.headers["Authorization"] == (
            "SharedKey acct:ejJoZxM7eCzP5Zy+1Y664oe2jKRudOFSc8wmaKd66dE="
        )

    def test_default_time_is_now(self, signer):
        """Test x-ms-date defaults to the current time."""
        request = SignableRequest(
            "GET", httpx.URL("https://acct.blob.core.windows.net/container/blob")
        )

        signer.sign(request)

        parsed = datetime.strptime(request.headers["x-ms-date"], "%a, %d %b %Y %H:%M:%S GMT")
        delta = datetime.now(timezone.utc) - parsed.replace(tzinfo=timezone.utc)
        assert abs(delta.total_seconds()) < 60

    def test_signature_independent_of_header_order(self, signer):
        """Test permuted metadata headers produce the same signature."""
        url = httpx.URL("https://acct.blob.core.windows.net/container/blob")
        first = SignableRequest(
            "PUT", url, headers={"x-ms-meta-a": "1", "x-ms-meta-b": "2"}, body=b"x"
        )
        second = SignableRequest(
            "PUT", url, headers={"x-ms-meta-b": "2", "x-ms-meta-a": "1"}, body=b"x"
        )

        signer.sign(first, now=SIGNING_TIME)
        signer.sign(second, now=SIGNING_TIME)

        assert first.headers["Authorization"] == second.headers["Authorization"]


class TestFormatHttpDate:
    """Test RFC 1123 date formatting."""

    def test_utc(self):
        assert format_http_date(SIGNING_TIME) == SIGNING_DATE

    def test_other_timezone_converted(self):
        moment = datetime(2025, 12, 4, 12, 30, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_http_date(moment) == SIGNING_DATE
