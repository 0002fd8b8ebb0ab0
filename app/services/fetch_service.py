from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import httpx

from app.core.config import Settings, get_settings
from app.core.exceptions import NetworkError, RemoteHostNotAllowedError
from app.core.logging import configure_logging

logger = configure_logging()

DEFAULT_CONTENT_TYPE = "image/png"


@dataclass
class RemoteImage:
    url: str
    content: bytes
    content_type: str


class RemoteImageFetcher:
    """جلب الصور من روابط بعيدة عبر httpx مع مهلة محددة."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.transport = transport

    async def fetch(self, url: str) -> RemoteImage:
        self._check_host(url)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.fetch_timeout,
                follow_redirects=True,
                headers={"User-Agent": self.settings.user_agent},
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("فشل جلب الصورة من %s: %s", url, exc)
            raise NetworkError(f"failed to fetch {url}: {exc}") from exc

        content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
        content_type = content_type.split(";", 1)[0].strip() or DEFAULT_CONTENT_TYPE
        logger.info("تم جلب الصورة من %s (%d بايت)", url, len(response.content))
        return RemoteImage(url=url, content=response.content, content_type=content_type)

    def _check_host(self, url: str) -> None:
        allowed = [host.lower() for host in self.settings.allowed_remote_hosts]
        if not allowed:
            return

        hostname = (urlparse(url).hostname or "").lower()
        if not any(hostname == host or hostname.endswith(f".{host}") for host in allowed):
            raise RemoteHostNotAllowedError(f"host not allowed: {hostname or url}")
