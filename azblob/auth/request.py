"""Signable HTTP request representation."""

from dataclasses import dataclass, field
from typing import Dict, Optional
from urllib.parse import urlsplit

import httpx


@dataclass
class SignableRequest:
    """An outgoing request that can be signed before it is sent.

    Header names keep the casing they were set with; lookups through
    :meth:`get_header` are case-insensitive.
    """

    method: str
    url: httpx.URL
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    @property
    def query_params(self) -> Dict[str, str]:
        """Decoded query parameters of the target URL, in URL order."""
        return dict(self.url.params.items())

    @property
    def path(self) -> str:
        """Percent-encoded path component of the target URL."""
        return urlsplit(str(self.url)).path

    @property
    def content_length(self) -> int:
        return len(self.body) if self.body else 0

    def get_header(self, name: str) -> str:
        """Return a header value by case-insensitive name, or ``""``."""
        name_lower = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name_lower:
                return value
        return ""

    def to_httpx(self) -> httpx.Request:
        return httpx.Request(
            self.method,
            self.url,
            headers=self.headers,
            content=self.body,
        )
