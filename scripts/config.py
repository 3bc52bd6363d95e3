"""Run settings and per-site configuration."""

from __future__ import annotations

from dataclasses import dataclass
from zoneinfo import ZoneInfo

LABEL_LOCALES = {"en", "zh"}


@dataclass(frozen=True)
class Settings:
    max_items_per_site: int = 10
    request_delay: float = 2.0
    request_timeout: float = 60.0
    max_redirects: int = 5
    date_backfill_limit: int = 10
    title_backfill_limit: int = 10
    backfill_batch_size: int = 5
    backfill_batch_delay: float = 0.2
    backfill_timeout: float = 20.0
    site_retries: int = 1
    timezone: str = "Asia/Shanghai"
    label_locale: str = "en"

    def __post_init__(self):
        if self.max_items_per_site <= 0:
            raise ValueError("max_items_per_site must be positive")
        if self.request_delay < 0 or self.backfill_batch_delay < 0:
            raise ValueError("Delays must be non-negative")
        if self.request_timeout <= 0 or self.backfill_timeout <= 0:
            raise ValueError("Timeouts must be positive")
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")
        if self.backfill_batch_size <= 0:
            raise ValueError("backfill_batch_size must be positive")
        if self.date_backfill_limit < 0 or self.title_backfill_limit < 0:
            raise ValueError("Backfill limits must be non-negative")
        if self.site_retries < 0:
            raise ValueError("site_retries must be non-negative")
        if self.label_locale not in LABEL_LOCALES:
            raise ValueError(f"label_locale must be one of {sorted(LABEL_LOCALES)}")
        try:
            ZoneInfo(self.timezone)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {self.timezone}") from exc

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@dataclass(frozen=True)
class SiteConfig:
    source: str
    name: str
    url: str
    fetch_url: str
    extractor: str
    timeout: float | None = None

    def __post_init__(self):
        if not self.source:
            raise ValueError("Site source key cannot be empty")
        if not self.url.startswith(("http://", "https://")):
            raise ValueError(f"Site URL must be absolute: {self.url}")
        if not self.fetch_url.startswith(("http://", "https://")):
            raise ValueError(f"Fetch URL must be absolute: {self.fetch_url}")
