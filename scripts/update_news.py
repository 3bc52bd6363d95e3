#!/usr/bin/env python3
"""Build the daily AI and design news snapshot from the configured sites."""

from __future__ import annotations

import argparse
import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from scripts.config import LABEL_LOCALES, Settings, SiteConfig
from scripts.extractors import Extractor
from scripts.fetching import FetchCapability, FetchError, Fetcher, create_session
from scripts.heuristics import iso, relative_label, utc_now
from scripts.models import NormalizedItem, RawItem, SiteRecord, Snapshot
from scripts.sites import build_extractor, select_sites, site_keys
from scripts.translate import GoogleTranslator, TranslationCache, translate_snapshot

logger = logging.getLogger(__name__)

ExtractorFactory = Callable[[SiteConfig, Settings, FetchCapability, datetime], Extractor]


def normalize_item(source: str, index: int, raw: RawItem, now: datetime, locale: str = "en") -> NormalizedItem:
    return NormalizedItem(
        id=f"{source}-{index + 1:03d}",
        title=raw.title,
        url=raw.url,
        summary=raw.summary,
        tags=tuple(raw.tags),
        published_at=raw.published_at,
        published_at_relative=relative_label(raw.published_at, now, locale),
    )


def build_site_record(site: SiteConfig, items: list[RawItem], settings: Settings, now: datetime) -> SiteRecord:
    kept = [it for it in items if it.title and it.url.startswith(("http://", "https://"))]
    kept = kept[: settings.max_items_per_site]
    return SiteRecord(
        source=site.source,
        source_name=site.name,
        source_url=site.url,
        updated_at=now,
        updated_at_relative=relative_label(now, now, settings.label_locale),
        items=tuple(normalize_item(site.source, i, raw, now, settings.label_locale) for i, raw in enumerate(kept)),
    )


def collect_site(
    site: SiteConfig,
    settings: Settings,
    fetcher: FetchCapability,
    now: datetime,
    extractor_factory: ExtractorFactory = build_extractor,
) -> tuple[list[RawItem], dict[str, Any]]:
    start = time.perf_counter()
    items: list[RawItem] = []
    error = None
    attempts = 0
    while True:
        attempts += 1
        try:
            items = extractor_factory(site, settings, fetcher, now).collect()
            error = None
            break
        except FetchError as exc:
            error = str(exc)
            if attempts > settings.site_retries:
                break
            logger.warning("%s: fetch failed (%s), retrying", site.source, exc)
        except Exception as exc:
            error = f"{type(exc).__name__}: {exc}"
            break

    elapsed_ms = int((time.perf_counter() - start) * 1000)
    if error:
        logger.warning("%s: giving up after %d attempt(s): %s", site.source, attempts, error)
    else:
        logger.info("%s: %d items in %d ms", site.source, len(items), elapsed_ms)
    status = {
        "source": site.source,
        "sourceName": site.name,
        "ok": error is None,
        "itemCount": min(len(items), settings.max_items_per_site),
        "durationMs": elapsed_ms,
        "attempts": attempts,
        "error": error,
    }
    return items, status


def run_all(
    sites: list[SiteConfig],
    settings: Settings,
    fetcher: FetchCapability,
    now: datetime,
    extractor_factory: ExtractorFactory = build_extractor,
) -> tuple[Snapshot, list[dict[str, Any]]]:
    records: list[SiteRecord] = []
    statuses: list[dict[str, Any]] = []
    for i, site in enumerate(sites):
        logger.info("Fetching %s (%s)", site.name, site.fetch_url)
        items, status = collect_site(site, settings, fetcher, now, extractor_factory)
        records.append(build_site_record(site, items, settings, now))
        statuses.append(status)
        if settings.request_delay > 0 and i < len(sites) - 1:
            time.sleep(settings.request_delay)

    snapshot = Snapshot(date=now.astimezone(settings.tz).strftime("%Y-%m-%d"), sites=tuple(records))
    return snapshot, statuses


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def write_snapshot(path: Path, snapshot: Snapshot) -> None:
    write_json(path, snapshot.to_dict())


def status_payload(statuses: list[dict[str, Any]], now: datetime) -> dict[str, Any]:
    return {
        "generatedAt": iso(now),
        "sites": statuses,
        "successfulSites": sum(1 for s in statuses if s["ok"]),
        "failedSites": [s["source"] for s in statuses if not s["ok"]],
        "zeroItemSites": [s["source"] for s in statuses if s["ok"] and not s["itemCount"]],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Aggregate AI news and design blog updates into a daily snapshot")
    parser.add_argument("--output-dir", default="data", help="Directory for output JSON files")
    parser.add_argument("--max-items", type=int, default=10, help="Max items kept per site")
    parser.add_argument("--delay", type=float, default=2.0, help="Seconds to wait between sites")
    parser.add_argument("--timeout", type=float, default=60.0, help="Default request timeout in seconds")
    parser.add_argument("--sites", default="", help=f"Comma-separated site keys ({', '.join(site_keys())})")
    parser.add_argument("--retries", type=int, default=1, help="Retries per site after a transport error")
    parser.add_argument("--label-locale", choices=sorted(LABEL_LOCALES), default="en", help="Relative time labels")
    parser.add_argument("--translate", action="store_true", help="Translate non-Chinese titles to Chinese")
    parser.add_argument("--translate-max-new", type=int, default=80, help="Max new EN->ZH title translations per run")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    settings = Settings(
        max_items_per_site=args.max_items,
        request_delay=args.delay,
        request_timeout=args.timeout,
        site_retries=args.retries,
        label_locale=args.label_locale,
    )
    keys = [k.strip() for k in args.sites.split(",") if k.strip()]
    sites = select_sites(keys)

    now = utc_now()
    output_dir = Path(args.output_dir)
    snapshot_path = output_dir / "today.json"
    status_path = output_dir / "source-status.json"
    title_cache_path = output_dir / "title-zh-cache.json"

    session = create_session()
    with Fetcher(session, timeout=settings.request_timeout, max_redirects=settings.max_redirects) as fetcher:
        snapshot, statuses = run_all(sites, settings, fetcher, now)

        cache = None
        if args.translate:
            cache = TranslationCache(title_cache_path).load()
            snapshot = translate_snapshot(
                snapshot,
                GoogleTranslator(session),
                cache,
                max_new=max(0, args.translate_max_new),
            )

    write_snapshot(snapshot_path, snapshot)
    write_json(status_path, status_payload(statuses, now))
    total = sum(len(site.items) for site in snapshot.sites)
    print(f"Wrote: {snapshot_path} ({len(snapshot.sites)} sites, {total} items)")
    print(f"Wrote: {status_path}")
    if cache is not None:
        cache.save()
        print(f"Wrote: {title_cache_path} ({len(cache)} entries)")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
