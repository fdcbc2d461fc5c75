import asyncio

import httpx

from app.logging.logger import Log
from app.rendering.exceptions import LogoLoadError


class LogoLoader:
    """Fetches logo images over HTTP with a timeout and an in-process cache."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None
        self._cache: dict[str, bytes] = {}

    async def fetch(self, url: str) -> bytes:
        """Return logo bytes for the URL.

        Raises:
            LogoLoadError: on timeout, transport failure, non-2xx status or empty body.
        """
        cached = self._cache.get(url)
        if cached is not None:
            return cached
        try:
            response = await asyncio.wait_for(
                self._get_client().get(url, timeout=self._timeout_seconds),
                timeout=self._timeout_seconds,
            )
            response.raise_for_status()
        except asyncio.TimeoutError as exc:
            raise LogoLoadError(
                f"Logo fetch timed out for {url} after {self._timeout_seconds}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise LogoLoadError(f"Logo fetch failed for {url}: {exc}") from exc
        if not response.content:
            raise LogoLoadError(f"Logo fetch returned an empty body for {url}")
        self._cache[url] = response.content
        return response.content

    async def load(self, url: str | None, trace_id: str | None = None) -> bytes | None:
        """Best-effort variant of fetch: failures are logged and yield None."""
        if not url:
            return None
        try:
            return await self.fetch(url)
        except LogoLoadError as exc:
            Log.warning(f"Rendering without logo: {exc}", trace_id=trace_id)
            return None

    def clear_cache(self) -> None:
        self._cache.clear()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": "docpipeline-pdf-renderer/1.0"},
                follow_redirects=True,
            )
        return self._client
