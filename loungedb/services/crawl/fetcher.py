from __future__ import annotations

import logging
from typing import BinaryIO, Dict, Optional

import httpx

from ..errors import FetchError

logger = logging.getLogger(__name__)


class Fetcher:
    """Single-shot HTTP GET that streams the body into a sink.

    No retries; one call issues exactly one request. Pacing between calls is
    the caller's job (see ``run_stage``).
    """

    def __init__(
        self,
        *,
        timeout: float = 15.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout = float(timeout)
        self.headers = headers or {"User-Agent": "loungedb-crawler/0.1", "Accept": "application/json"}
        self._client = httpx.Client(
            timeout=self.timeout,
            headers=self.headers,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch(self, url: str, sink: BinaryIO) -> int:
        """Stream ``url`` into ``sink``; return the number of bytes written."""
        written = 0
        try:
            with self._client.stream("GET", url) as resp:
                resp.raise_for_status()
                for chunk in resp.iter_bytes():
                    sink.write(chunk)
                    written += len(chunk)
        except httpx.HTTPError as exc:
            raise FetchError(url, exc) from exc
        logger.debug("Fetched %s (%d bytes)", url, written)
        return written

