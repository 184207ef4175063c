"""HTTP response produced by ``Views.html()``.

A plain value: the rendered page, its status and content type. Writing
it to the wire belongs to whatever server hosts the views.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Response:
    """A rendered page and its status."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes, for the hosting server to send."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
