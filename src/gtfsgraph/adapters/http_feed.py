"""Remote feed download over HTTP with retries for transient failures."""

from __future__ import annotations

import zipfile
from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger

import httpx
from httpx_retries import Retry, RetryTransport

from gtfsgraph.adapters.csv_source import ZipFeedSource
from gtfsgraph.config.http import FeedDownloadConfig, RetryPolicy

log = getLogger(__name__)


class FeedDownloadError(RuntimeError):
    """Raised when a remote feed cannot be downloaded or is not a zip archive."""

    def __init__(self, message: str, *, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=("GET", "HEAD"),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
        backoff_jitter=policy.backoff_jitter,
    )


def build_feed_client(
    config: FeedDownloadConfig, *, transport: httpx.BaseTransport | None = None
) -> httpx.Client:
    """HTTP client whose transport retries per ``config.retry``.

    ``transport`` replaces the network transport underneath the retry layer.
    """

    retry_transport = RetryTransport(transport=transport, retry=build_retry(config.retry))
    return httpx.Client(
        transport=retry_transport,
        timeout=config.timeout_seconds,
        follow_redirects=config.follow_redirects,
        headers={"User-Agent": config.user_agent},
    )


def _default_client_factory(config: FeedDownloadConfig) -> httpx.Client:
    return build_feed_client(config)


@dataclass(slots=True)
class HttpFeedDownloader:
    config: FeedDownloadConfig = field(default_factory=FeedDownloadConfig)
    client_factory: Callable[[FeedDownloadConfig], httpx.Client] = field(
        default=_default_client_factory
    )

    def fetch(self, url: str) -> bytes:
        log.info("Downloading feed from %s", url)
        with self.client_factory(self.config) as client:
            try:
                response = client.get(url)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise FeedDownloadError(
                    f"Feed download failed with HTTP {exc.response.status_code}: {url}",
                    url=url,
                    status_code=exc.response.status_code,
                ) from exc
            except httpx.HTTPError as exc:
                raise FeedDownloadError(f"Feed download failed: {url}: {exc}", url=url) from exc
        log.info("Downloaded %s bytes", len(response.content))
        return response.content

    def __call__(self, url: str) -> ZipFeedSource:
        payload = self.fetch(url)
        try:
            return ZipFeedSource(payload)
        except zipfile.BadZipFile as exc:
            raise FeedDownloadError(f"Downloaded feed is not a zip archive: {url}", url=url) from exc
