"""Tests for wren.http.response — Response value and body helpers."""

import pytest

from wren.http.response import Response


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == ""
        assert r.status == 200
        assert r.content_type == "text/html; charset=utf-8"

    def test_body_bytes_from_str(self) -> None:
        assert Response(body="héllo").body_bytes == "héllo".encode()

    def test_body_bytes_passthrough(self) -> None:
        assert Response(body=b"raw").body_bytes == b"raw"

    def test_text_from_bytes(self) -> None:
        assert Response(body=b"hello").text == "hello"

    def test_frozen(self) -> None:
        r = Response()
        with pytest.raises(AttributeError):
            r.status = 404  # type: ignore[misc]
