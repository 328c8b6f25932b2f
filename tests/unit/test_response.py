"""
Unit tests for HTTP response reading.
"""

import pytest

from rawhttp.http.response import (
    HTTPResponse,
    ReaderState,
    ResponseReader,
    parse_content_length,
    read_response,
)


def response_bytes(*header_lines: str, body: bytes = b"", status: str = "HTTP/1.1 200 OK") -> bytes:
    head = "\r\n".join([status, *header_lines, "", ""]).encode("utf-8")
    return head + body


class TestResponseReader:
    """Tests for ResponseReader."""

    def test_simple_response(self, make_stream, ok_response):
        response = read_response(make_stream(ok_response))

        assert response.status_line == "HTTP/1.1 200 OK"
        assert response.headers == {"content-length": "2"}
        assert response.body == b"OK"

    def test_reader_reaches_done(self, make_stream, ok_response):
        reader = ResponseReader(make_stream(ok_response))

        reader.read()

        assert reader.state is ReaderState.DONE

    def test_body_stops_at_content_length(self, make_stream):
        """Extra bytes are left on the stream, not appended."""
        stream = make_stream(response_bytes("Content-Length: 5", body=b"hello world"))

        response = read_response(stream)

        assert response.body == b"hello"
        assert stream.remaining == b" world"

    def test_missing_content_length_means_empty_body(self, make_stream):
        stream = make_stream(response_bytes("Content-Type: text/plain", body=b"pending data"))

        response = read_response(stream)

        assert response.body == b""
        assert stream.remaining == b"pending data"

    def test_short_body_is_not_an_error(self, make_stream):
        stream = make_stream(response_bytes("Content-Length: 100", body=b"0123456789"))

        response = read_response(stream)

        assert response.body == b"0123456789"
        assert response.is_truncated

    @pytest.mark.parametrize("value", ["abc", "", "5.0", "0x10", "1 2", "-", "²", "١٢"])
    def test_invalid_content_length(self, make_stream, value):
        stream = make_stream(response_bytes(f"Content-Length: {value}", body=b"hello"))

        assert read_response(stream).body == b""

    @pytest.mark.parametrize("value", ["0", "-5"])
    def test_non_positive_content_length(self, make_stream, value):
        stream = make_stream(response_bytes(f"Content-Length: {value}", body=b"hello"))

        assert read_response(stream).body == b""

    def test_malformed_header_discarded(self, make_stream):
        stream = make_stream(response_bytes(
            "X-Good: 1",
            "this line has no colon",
            "Content-Length: 3",
            body=b"abc",
        ))

        response = read_response(stream)

        assert response.headers == {"x-good": "1", "content-length": "3"}
        assert response.body == b"abc"

    def test_header_names_lowercased_values_trimmed(self, make_stream):
        stream = make_stream(response_bytes("Content-TYPE:   text/html  "))

        assert read_response(stream).headers == {"content-type": "text/html"}

    def test_value_split_on_first_colon(self, make_stream):
        stream = make_stream(response_bytes("Location: http://example.com:8080/x"))

        headers = read_response(stream).headers

        assert headers["location"] == "http://example.com:8080/x"

    def test_duplicate_header_last_wins(self, make_stream):
        stream = make_stream(response_bytes("X-Id: 1", "x-id: 2"))

        assert read_response(stream).headers == {"x-id": "2"}

    def test_bare_lf_response(self, make_stream):
        stream = make_stream(b"HTTP/1.1 204 No Content\nContent-Length: 0\n\n")

        response = read_response(stream)

        assert response.status_code == 204
        assert response.body == b""

    def test_body_read_in_bounded_chunks(self, make_stream):
        body = b"x" * 2500
        stream = make_stream(response_bytes("Content-Length: 2500", body=body + b"tail"))

        response = ResponseReader(stream, chunk_size=1000).read()

        assert response.body == body
        assert max(stream.read_sizes) == 1000
        assert stream.remaining == b"tail"

    def test_binary_body(self, make_stream, png_bytes):
        stream = make_stream(response_bytes(f"Content-Length: {len(png_bytes)}", body=png_bytes))

        assert read_response(stream).body == png_bytes

    def test_empty_stream(self, make_stream):
        response = read_response(make_stream(b""))

        assert response.status_line == ""
        assert response.headers == {}
        assert response.body == b""

    def test_each_read_starts_fresh(self, make_stream):
        stream = make_stream(
            response_bytes("X-First: 1", "Content-Length: 1", body=b"a")
            + response_bytes("Content-Length: 1", body=b"b", status="HTTP/1.1 404 Not Found")
        )
        reader = ResponseReader(stream)

        first = reader.read()
        second = reader.read()

        assert first.headers == {"x-first": "1", "content-length": "1"}
        assert second.status_line == "HTTP/1.1 404 Not Found"
        assert second.headers == {"content-length": "1"}
        assert second.body == b"b"

    def test_invalid_chunk_size(self, make_stream):
        with pytest.raises(ValueError):
            ResponseReader(make_stream(), chunk_size=0)


class TestHTTPResponse:
    """Tests for the HTTPResponse descriptor."""

    def test_status_parts(self):
        response = HTTPResponse("HTTP/1.1 404 Not Found")

        assert response.version == "HTTP/1.1"
        assert response.status_code == 404
        assert response.reason == "Not Found"

    @pytest.mark.parametrize("line", ["", "garbage", "HTTP/1.1 abc Oops"])
    def test_malformed_status_line(self, line):
        assert HTTPResponse(line).status_code is None

    def test_get_header_case_insensitive(self):
        response = HTTPResponse("HTTP/1.1 200 OK", {"content-type": "text/plain"})

        assert response.get_header("Content-Type") == "text/plain"
        assert response.get_header("X-Missing", "none") == "none"

    def test_text(self):
        assert HTTPResponse("HTTP/1.1 200 OK", body="héllo".encode()).text() == "héllo"

    def test_not_truncated_without_length(self):
        assert not HTTPResponse("HTTP/1.1 200 OK", body=b"x").is_truncated


class TestParseContentLength:
    @pytest.mark.parametrize("value, expected", [
        (None, None),
        ("42", 42),
        (" 42 ", 42),
        ("+7", 7),
        ("-3", -3),
        ("abc", None),
        ("", None),
        ("4.2", None),
    ])
    def test_values(self, value, expected):
        assert parse_content_length(value) == expected
