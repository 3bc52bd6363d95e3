import json
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import mock

from scripts.config import Settings, SiteConfig
from scripts.extractors import ListingExtractor, ListingProfile
from scripts.fetching import FetchError
from scripts.models import RawItem, SiteRecord, Snapshot
from scripts.sites import SITES, select_sites, site_keys
from scripts.update_news import build_site_record, main, run_all, write_snapshot

NOW = datetime(2026, 2, 19, 12, 0, tzinfo=timezone.utc)
SETTINGS = Settings(request_delay=0, backfill_batch_delay=0)


class DownFetcher:
    def __init__(self):
        self.calls = 0

    def fetch(self, url, headers=None, timeout=None, max_redirects=None):
        self.calls += 1
        raise FetchError(url, "Request timeout")


class PageFetcher:
    def __init__(self, pages):
        self.pages = pages

    def fetch(self, url, headers=None, timeout=None, max_redirects=None):
        if url not in self.pages:
            raise FetchError(url, "HTTP 404: Not Found", status_code=404)
        return self.pages[url]


BLOG = SiteConfig("blog", "Blog", "https://blog.example.com/", "https://blog.example.com/posts", "listing")
BLOG_PROFILE = ListingProfile(selector="article", link_contains=("/posts/",))
BLOG_HTML = """<body>
<article><a href="/posts/agents"><h2>Building agents for design review</h2></a><time datetime="2026-02-18">Feb 18</time></article>
<article><a href="/posts/typography"><h2>Notes on variable typography</h2></a><time datetime="2026-02-11">Feb 11</time></article>
<article><a href="/posts/undated"><h2>An undated studio update</h2></a></article>
</body>"""


def blog_factory(site, settings, fetcher, now):
    return ListingExtractor(site, settings, fetcher, now, BLOG_PROFILE)


class PipelineTests(unittest.TestCase):
    def test_every_site_present_under_total_failure(self):
        fetcher = DownFetcher()
        snapshot, statuses = run_all(SITES, SETTINGS, fetcher, NOW)

        self.assertEqual([s.source for s in snapshot.sites], site_keys())
        for record, site in zip(snapshot.sites, SITES):
            self.assertEqual(record.items, ())
            self.assertEqual(record.source_url, site.url)
        self.assertTrue(all(not s["ok"] for s in statuses))
        self.assertTrue(all(s["attempts"] == 2 for s in statuses))

    def test_unexpected_error_is_not_retried(self):
        class Broken:
            def collect(self):
                raise RuntimeError("selector exploded")

        snapshot, statuses = run_all([BLOG], SETTINGS, PageFetcher({}), NOW, lambda *a: Broken())
        self.assertEqual(snapshot.sites[0].items, ())
        self.assertEqual(statuses[0]["attempts"], 1)
        self.assertIn("selector exploded", statuses[0]["error"])

    def test_transport_error_retried_once(self):
        outcomes = [FetchError(BLOG.fetch_url, "Request timeout"), [RawItem("Recovered post title", "https://blog.example.com/posts/r")]]

        class Flaky:
            def collect(self):
                result = outcomes.pop(0)
                if isinstance(result, Exception):
                    raise result
                return result

        snapshot, statuses = run_all([BLOG], SETTINGS, PageFetcher({}), NOW, lambda *a: Flaky())
        self.assertTrue(statuses[0]["ok"])
        self.assertEqual(statuses[0]["attempts"], 2)
        self.assertEqual(snapshot.sites[0].items[0].id, "blog-001")

    def test_items_normalized_and_ordered(self):
        fetcher = PageFetcher({BLOG.fetch_url: BLOG_HTML})
        snapshot, _ = run_all([BLOG], SETTINGS, fetcher, NOW, blog_factory)
        items = snapshot.to_dict()["sites"][0]["items"]

        self.assertEqual([it["id"] for it in items], ["blog-001", "blog-002", "blog-003"])
        self.assertEqual(items[0]["title"], "Building agents for design review")
        self.assertEqual(items[0]["publishedAt"], "2026-02-18T00:00:00Z")
        self.assertEqual(items[0]["publishedAtRelative"], "1 days ago")
        self.assertEqual(items[0]["thumbnail"], "")
        self.assertIsNone(items[2]["publishedAt"])
        self.assertEqual(items[2]["publishedAtRelative"], "")

    def test_idempotent_for_identical_documents(self):
        fetcher = PageFetcher({BLOG.fetch_url: BLOG_HTML})
        first, _ = run_all([BLOG], SETTINGS, fetcher, NOW, blog_factory)
        second, _ = run_all([BLOG], SETTINGS, fetcher, NOW + timedelta(minutes=1), blog_factory)
        dump = lambda snap: [site["items"] for site in snap.to_dict()["sites"]]
        strip = lambda sites: [[{k: v for k, v in it.items() if k != "publishedAtRelative"} for it in s] for s in sites]
        self.assertEqual(strip(dump(first)), strip(dump(second)))
        again, _ = run_all([BLOG], SETTINGS, fetcher, NOW, blog_factory)
        self.assertEqual(json.dumps(dump(first)), json.dumps(dump(again)))

    def test_snapshot_date_uses_configured_timezone(self):
        late = datetime(2026, 2, 19, 20, 0, tzinfo=timezone.utc)
        snapshot, _ = run_all([], SETTINGS, PageFetcher({}), late)
        self.assertEqual(snapshot.date, "2026-02-20")

    def test_cap_applied_to_site_record(self):
        items = [RawItem(f"Post number {i}", f"https://blog.example.com/posts/{i}") for i in range(15)]
        record = build_site_record(BLOG, items, Settings(max_items_per_site=5), NOW)
        self.assertEqual(len(record.items), 5)
        self.assertEqual(record.items[-1].id, "blog-005")

    def test_chinese_labels(self):
        items = [RawItem("模型发布会回顾", "https://blog.example.com/posts/1", published_at=NOW - timedelta(hours=3))]
        record = build_site_record(BLOG, items, Settings(label_locale="zh"), NOW)
        self.assertEqual(record.items[0].published_at_relative, "3小时前")
        self.assertEqual(record.updated_at_relative, "刚刚")


class SiteSelectionTests(unittest.TestCase):
    def test_select_sites_keeps_configuration_order(self):
        self.assertEqual([s.source for s in select_sites(["openai", "microsoft"])], ["microsoft", "openai"])

    def test_unknown_site_key(self):
        with self.assertRaises(ValueError):
            select_sites(["nope"])

    def test_site_keys_unique(self):
        self.assertEqual(len(site_keys()), len(set(site_keys())))
        self.assertEqual(len(site_keys()), 19)


class OutputTests(unittest.TestCase):
    def test_write_snapshot_keeps_unicode(self):
        snapshot = Snapshot(
            date="2026-02-19",
            sites=(SiteRecord("jiqizhixin", "机器之心", "https://www.jiqizhixin.com/", NOW, "just now"),),
        )
        with TemporaryDirectory() as td:
            path = Path(td) / "out" / "today.json"
            write_snapshot(path, snapshot)
            text = path.read_text(encoding="utf-8")
        self.assertIn("机器之心", text)
        data = json.loads(text)
        self.assertEqual(data["sites"][0]["updatedAt"], "2026-02-19T12:00:00Z")
        self.assertEqual(data["sites"][0]["items"], [])

    def test_main_writes_snapshot_and_status(self):
        snapshot = Snapshot(
            date="2026-02-19",
            sites=(SiteRecord("openai", "OpenAI", "https://openai.com/zh-Hans-CN/news/", NOW, "just now"),),
        )
        status = {
            "source": "openai",
            "sourceName": "OpenAI",
            "ok": True,
            "itemCount": 0,
            "durationMs": 5,
            "attempts": 1,
            "error": None,
        }
        with TemporaryDirectory() as td, mock.patch("scripts.update_news.run_all", return_value=(snapshot, [status])):
            code = main(["--output-dir", td, "--sites", "openai", "--delay", "0"])
            today = json.loads((Path(td) / "today.json").read_text(encoding="utf-8"))
            report = json.loads((Path(td) / "source-status.json").read_text(encoding="utf-8"))
            self.assertFalse((Path(td) / "title-zh-cache.json").exists())
        self.assertEqual(code, 0)
        self.assertEqual(today["sites"][0]["source"], "openai")
        self.assertEqual(report["zeroItemSites"], ["openai"])

    def test_main_rejects_unknown_site(self):
        with self.assertRaises(ValueError):
            main(["--sites", "nope"])


if __name__ == "__main__":
    unittest.main()
