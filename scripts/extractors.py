"""Site extractors: turn a fetched listing page or feed into ranked RawItems."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

import feedparser
from bs4 import BeautifulSoup, Tag

from scripts.config import Settings, SiteConfig
from scripts.fetching import FetchCapability, FetchError, run_in_batches
from scripts.heuristics import (
    EPOCH,
    HEADING_SELECTOR,
    SUMMARY_SELECTOR,
    UTC,
    clean_text,
    closest,
    first_text,
    infer_tags,
    is_chrome_text,
    is_relevant,
    normalize_url,
    origin_of,
    page_date,
    page_title,
    resolve_date,
    resolve_url,
    split_leading_date,
    title_from_url,
)
from scripts.models import RawItem

logger = logging.getLogger(__name__)

RELEVANCE_POLICIES = {"partition", "relevant_only", "none"}
CONTAINER_TAGS = ("article", "li")
CONTAINER_HINTS = ("card", "post", "article", "story", "item", "teaser")
SUMMARY_LIMIT = 300


@dataclass(frozen=True)
class ListingProfile:
    """Selectors and filters for one site's listing page."""

    selector: str
    fallback_selector: str | None = "a[href]"
    link_contains: tuple[str, ...] = ()
    link_excludes: tuple[str, ...] = ()
    title_selector: str = HEADING_SELECTOR
    prefer_link_text: bool = False
    title_from_text: bool = True
    min_title: int = 6
    max_title: int = 200
    exclude_titles: tuple[str, ...] = ()
    relevance: str = "partition"
    min_primary: int | None = 1
    date_backfill: bool = True

    def __post_init__(self):
        if self.relevance not in RELEVANCE_POLICIES:
            raise ValueError(f"Unknown relevance policy: {self.relevance}")


def item_is_relevant(item: RawItem) -> bool:
    return is_relevant(item.title) or is_relevant(item.summary)


def title_key(title: str) -> str:
    return clean_text(title).lower()


def dedupe_items(items: Iterable[RawItem]) -> list[RawItem]:
    """First occurrence wins by normalized URL, then by normalized title."""
    out: list[RawItem] = []
    by_url: dict[str, RawItem] = {}
    by_title: dict[str, RawItem] = {}
    for item in items:
        url_key = normalize_url(item.url)
        tkey = title_key(item.title)
        kept = by_url.get(url_key)
        if kept is None and len(tkey) > 10:
            kept = by_title.get(tkey)
        if kept is not None:
            if kept.published_at is None and item.published_at is not None:
                kept.published_at = item.published_at
            continue
        by_url[url_key] = item
        if len(tkey) > 10:
            by_title[tkey] = item
        out.append(item)
    return out


def sort_by_date(items: Iterable[RawItem]) -> list[RawItem]:
    # stable: equal dates keep their incoming order
    return sorted(items, key=lambda it: it.published_at or EPOCH, reverse=True)


def select_items(items: list[RawItem], cap: int, policy: str = "partition") -> list[RawItem]:
    """Relevant first selection under the cap, then newest first."""
    position = {id(it): i for i, it in enumerate(items)}
    if policy == "none":
        chosen = sort_by_date(items)[:cap]
    else:
        relevant = [it for it in items if item_is_relevant(it)]
        other = [] if policy == "relevant_only" else [it for it in items if not item_is_relevant(it)]
        chosen = sort_by_date(relevant)[:cap]
        chosen += sort_by_date(other)[: cap - len(chosen)]
    chosen.sort(key=lambda it: position[id(it)])
    return sort_by_date(chosen)


def node_dates(*nodes: Tag | None) -> list[str]:
    out: list[str] = []
    for node in nodes:
        if node is None:
            continue
        for t in node.select("time[datetime], [datetime]"):
            out.append(t.get("datetime") or "")
        el = node.select_one("[class*='date'], time")
        if el is not None:
            out.append(el.get_text(" ", strip=True))
    return out


class Extractor:
    relevance = "partition"
    date_backfill = False

    def __init__(
        self,
        site: SiteConfig,
        settings: Settings,
        fetcher: FetchCapability,
        now: datetime,
        profile: ListingProfile | None = None,
    ):
        self.site = site
        self.settings = settings
        self.fetcher = fetcher
        self.now = now
        self.profile = profile

    @property
    def cap(self) -> int:
        return self.settings.max_items_per_site

    def collect(self) -> list[RawItem]:
        document = self.fetcher.fetch(
            self.site.fetch_url,
            timeout=self.site.timeout or self.settings.request_timeout,
            max_redirects=self.settings.max_redirects,
        )
        return self.extract(document, self.site.fetch_url)

    def extract(self, document: str, base_url: str) -> list[RawItem]:
        if not document or not document.strip():
            return []
        return self.finalize(self.candidates(document, base_url))

    def candidates(self, document: str, base_url: str) -> list[RawItem]:
        raise NotImplementedError

    def finalize(self, items: list[RawItem]) -> list[RawItem]:
        items = dedupe_items(items)
        self.backfill(items)
        return select_items(items, self.cap, self.relevance)

    def valid_title(self, title: str, min_len: int = 6, max_len: int = 200, exclude: Iterable[str] = ()) -> bool:
        if len(title) < min_len or len(title) > max_len:
            return False
        if is_chrome_text(title):
            return False
        return not any(x in title for x in exclude)

    def make_item(
        self,
        title: str,
        url: str,
        summary: str = "",
        dates: Iterable[str | None] = (),
        tag_text: str = "",
        meta: dict | None = None,
    ) -> RawItem:
        title = clean_text(title)
        summary = clean_text(summary)
        tags = infer_tags(title, f"{summary} {tag_text}".strip())
        if not summary or summary == title:
            summary = title[:150]
        return RawItem(
            title=title,
            url=url,
            summary=summary[:SUMMARY_LIMIT],
            published_at=resolve_date(*[d for d in dates if d], url=url, now=self.now),
            tags=tags,
            meta=meta or {},
        )

    def fetch_page(self, url: str) -> str:
        return self.fetcher.fetch(
            url,
            timeout=self.settings.backfill_timeout,
            max_redirects=self.settings.max_redirects,
        )

    def backfill(self, items: list[RawItem]) -> None:
        """Fetch article pages once each for missing titles and, when enabled, missing dates."""
        titles = [it for it in items if it.meta.get("title_backfill")][: self.settings.title_backfill_limit]
        dates: list[RawItem] = []
        if self.date_backfill:
            ordered = sorted(items, key=lambda it: not item_is_relevant(it))
            dates = [it for it in ordered if it.published_at is None][: self.settings.date_backfill_limit]
        targets = list({id(it): it for it in titles + dates}.values())
        if not targets:
            return

        pages = run_in_batches(
            self.fetch_page,
            [it.url for it in targets],
            batch_size=self.settings.backfill_batch_size,
            delay=self.settings.backfill_batch_delay,
        )
        want_title = {id(it) for it in titles}
        want_date = {id(it) for it in dates}
        for item, html in zip(targets, pages):
            if not html:
                logger.debug("No article page for %s", item.url)
                continue
            if id(item) in want_title:
                self.apply_title(item, page_title(html))
            if id(item) in want_date:
                dt = page_date(html, self.now)
                if dt:
                    item.published_at = dt
                else:
                    logger.debug("No publication date for %s", item.url)

    def apply_title(self, item: RawItem, title: str) -> None:
        title = clean_text(title)
        if not title or not self.valid_title(title):
            return
        if item.summary == item.title[:150]:
            item.summary = title[:150]
        item.title = title
        item.tags = infer_tags(title, item.summary)


class ListingExtractor(Extractor):
    """Selector-driven extractor parameterized by a ListingProfile."""

    def __init__(self, site, settings, fetcher, now, profile=None):
        if profile is None:
            raise ValueError(f"Listing extractor for {site.source} needs a profile")
        super().__init__(site, settings, fetcher, now, profile)
        self.relevance = profile.relevance
        self.date_backfill = profile.date_backfill

    def candidates(self, document: str, base_url: str) -> list[RawItem]:
        soup = BeautifulSoup(document, "html.parser")
        origin = origin_of(base_url) or origin_of(self.site.url)
        items = self.scan(soup, self.profile.selector, origin)

        wanted = self.profile.min_primary if self.profile.min_primary is not None else self.cap
        fallback = self.profile.fallback_selector
        if fallback and len(dedupe_items(items)) < wanted:
            logger.debug("%s: primary pass found %d items, trying %r", self.site.source, len(items), fallback)
            items.extend(self.scan(soup, fallback, origin))
        return items

    def scan(self, soup: BeautifulSoup, selector: str, origin: str) -> list[RawItem]:
        out: list[RawItem] = []
        for node in soup.select(selector):
            if len(out) >= self.cap * 3:
                break
            item = self.read_node(node, origin)
            if item is not None:
                out.append(item)
        return out

    def accepts_url(self, url: str) -> bool:
        p = self.profile
        key = normalize_url(url)
        if key.rstrip("/") in {normalize_url(self.site.fetch_url).rstrip("/"), origin_of(url)}:
            return False
        if p.link_contains and not any(x in url for x in p.link_contains):
            return False
        return not any(x in url for x in p.link_excludes)

    def pick_anchor(self, node: Tag) -> Tag | None:
        if node.name == "a":
            return node
        for a in node.select("a[href]"):
            url = resolve_url(a.get("href"), origin_of(self.site.url))
            if url and self.accepts_url(url):
                return a
        parent = node.find_parent("a")
        return parent if parent is not None and parent.get("href") else None

    def article_urls(self, node: Tag, origin: str) -> set[str]:
        urls: set[str] = set()
        for a in node.select("a[href]"):
            url = resolve_url(a.get("href"), origin)
            if url and self.accepts_url(url):
                urls.add(normalize_url(url))
        return urls

    def card_for(self, node: Tag, anchor: Tag, origin: str) -> Tag | None:
        """The element holding this article's heading, summary and dates, if it holds no other article."""
        if anchor is node:
            card = closest(anchor, CONTAINER_TAGS, CONTAINER_HINTS)
        elif any(parent is node for parent in anchor.parents):
            card = closest(anchor, CONTAINER_TAGS, CONTAINER_HINTS, boundary=node)
        else:
            card = node
        if card is not None and len(self.article_urls(card, origin)) > 1:
            return None
        return card

    def card_heading(self, card: Tag | None) -> str:
        # headings nested in a smaller card belong to that card's article
        if card is None:
            return ""
        for el in card.select(self.profile.title_selector):
            if closest(el, CONTAINER_TAGS, CONTAINER_HINTS, boundary=card) is card:
                text = clean_text(el.get_text(" "))
                if text:
                    return text
        return ""

    def read_title(self, anchor: Tag, card: Tag | None) -> tuple[str, str | None]:
        p = self.profile
        link_date = None
        link_text = ""
        if p.title_from_text:
            link_date, link_text = split_leading_date(clean_text(anchor.get_text(" ")))
            if not self.valid_title(link_text, p.min_title, p.max_title, p.exclude_titles):
                link_text = ""

        if p.prefer_link_text and link_text:
            return link_text, link_date
        title = first_text(anchor, p.title_selector) or self.card_heading(card) or link_text
        return title, link_date

    def read_node(self, node: Tag, origin: str) -> RawItem | None:
        p = self.profile
        anchor = self.pick_anchor(node)
        if anchor is None:
            return None
        url = resolve_url(anchor.get("href"), origin)
        if not url or not self.accepts_url(url):
            return None

        card = self.card_for(node, anchor, origin)
        title, link_date = self.read_title(anchor, card)
        title = clean_text(title)
        if not self.valid_title(title, p.min_title, p.max_title, p.exclude_titles):
            return None

        scope = card
        parent = anchor.parent
        if scope is None and parent is not None and parent.name not in {"body", "html", "[document]"}:
            scope = parent if len(self.article_urls(parent, origin)) <= 1 else None
        summary = first_text(scope, SUMMARY_SELECTOR)
        if summary == title:
            summary = ""
        return self.make_item(title, url, summary, dates=[link_date, *node_dates(scope or anchor)])


class FeedExtractor(Extractor):
    """RSS / Atom source; scans the HTML listing when the feed is unusable."""

    relevance = "none"

    def __init__(self, site, settings, fetcher, now, profile=None):
        super().__init__(site, settings, fetcher, now, profile)
        self.fallback = ListingExtractor(site, settings, fetcher, now, profile) if profile else None
        if profile is not None:
            self.relevance = profile.relevance

    def collect(self) -> list[RawItem]:
        try:
            items = super().collect()
        except FetchError as exc:
            if self.fallback is None:
                raise
            logger.warning("%s: feed unavailable (%s), scanning listing page", self.site.source, exc)
            items = []
        if items or self.fallback is None:
            return items

        html = self.fetcher.fetch(
            self.site.url,
            timeout=self.site.timeout or self.settings.request_timeout,
            max_redirects=self.settings.max_redirects,
        )
        return self.fallback.extract(html, self.site.url)

    def candidates(self, document: str, base_url: str) -> list[RawItem]:
        parsed = feedparser.parse(document.encode("utf-8"))
        origin = origin_of(self.site.url)
        out: list[RawItem] = []
        for entry in parsed.entries:
            title = clean_text(entry.get("title"))
            url = resolve_url(entry.get("link"), origin)
            if not title or not url:
                continue
            raw_summary = entry.get("summary") or entry.get("description") or ""
            summary = BeautifulSoup(raw_summary, "html.parser").get_text(" ")
            dates = [entry.get("published"), entry.get("updated"), entry.get("pubDate")]
            struct = entry.get("published_parsed") or entry.get("updated_parsed")
            if struct:
                dates.append(datetime(*struct[:6], tzinfo=UTC).isoformat())
            tag_text = " ".join(str(t.get("term") or "") for t in entry.get("tags") or [])
            out.append(self.make_item(title, url, summary, dates=dates, tag_text=tag_text))
        return out


class GoogleDesignExtractor(Extractor):
    """Scans raw HTML for /library/ article links, then reads each card."""

    date_backfill = True
    link_re = re.compile(r"""href=["']([^"']*/library/[^"']*?)["']""", re.I)

    def article_link(self, link: str) -> bool:
        if "/category/" in link or "/tags/" in link or "#" in link:
            return False
        return link.rstrip("/") not in {"/library", f"{origin_of(self.site.url)}/library"}

    def candidates(self, document: str, base_url: str) -> list[RawItem]:
        soup = BeautifulSoup(document, "html.parser")
        origin = origin_of(self.site.url)

        links: list[str] = []
        for m in self.link_re.finditer(document):
            link = m.group(1).replace("&amp;", "&")
            if not self.article_link(link):
                continue
            url = resolve_url(link, origin)
            if url and url not in links:
                links.append(url)
            if len(links) >= self.cap * 3:
                break

        out: list[RawItem] = []
        for url in links:
            item = self.read_card(soup, url, origin)
            if item is not None:
                out.append(item)

        if not out:
            logger.debug("%s: no cards found, scanning /library/ anchors", self.site.source)
            for a in soup.select("a[href*='/library/']"):
                if len(out) >= self.cap * 3:
                    break
                href = a.get("href") or ""
                url = resolve_url(href, origin)
                if not url or not self.article_link(href):
                    continue
                title = clean_text(a.get_text(" "))
                if self.valid_title(title, exclude=("Skip", "View")):
                    out.append(self.make_item(title, url))
        return out

    def find_anchor(self, soup: BeautifulSoup, url: str, origin: str) -> Tag | None:
        rel = url[len(origin):] if url.startswith(origin) else url
        for candidate in (rel, url):
            a = soup.find("a", href=candidate)
            if a is not None:
                return a
        tail = rel.rstrip("/").split("/")[-1]
        if not tail:
            return None
        return soup.find("a", href=lambda h: bool(h) and tail in h)

    def read_card(self, soup: BeautifulSoup, url: str, origin: str) -> RawItem | None:
        anchor = self.find_anchor(soup, url, origin)
        title = summary = category = ""
        if anchor is not None:
            title = first_text(anchor, HEADING_SELECTOR)
            card = closest(anchor, ("article", "section", "li"), ("card",)) or anchor.parent
            if len(title) < 5:
                sibling = anchor.find_previous_sibling(["h1", "h2", "h3", "h4"]) or anchor.find_next_sibling(
                    ["h1", "h2", "h3", "h4"]
                )
                title = (
                    first_text(card, "h1, h2, h3, h4")
                    or (clean_text(sibling.get_text(" ")) if sibling else "")
                    or clean_text(anchor.get_text(" "))
                )
            summary = first_text(card, "p")
            category = first_text(card, "a[href*='/category/'], a[href*='/tags/']")

        if len(title) < 5:
            title = title_from_url(url)
        if not self.valid_title(title, min_len=5, exclude=("Skip", "View")):
            return None
        return self.make_item(title, url, summary, tag_text=category)


class HeadlineExtractor(Extractor):
    """Homepage scanner that starts from headline elements and walks to their links."""

    relevance = "none"
    date_backfill = True
    heading_selector = "h1, h2, h3, h4, [class*='title'], [class*='headline']"
    min_heading = 10
    skip_titles: tuple[str, ...] = ()
    skip_links: tuple[str, ...] = ("#", "javascript:")

    def skip_title(self, title: str) -> bool:
        return any(x in title for x in self.skip_titles)

    def link_allowed(self, link: str) -> bool:
        if not link or link == "/":
            return False
        return not any(x in link for x in self.skip_links)

    def scan_headings(self, soup: BeautifulSoup, origin: str) -> list[RawItem]:
        out: list[RawItem] = []
        for el in soup.select(self.heading_selector):
            if len(out) >= self.cap * 2:
                break
            title = clean_text(el.get_text(" "))
            if len(title) < self.min_heading or len(title) > 200 or self.skip_title(title):
                continue

            anchor = el if el.name == "a" and el.get("href") else el.select_one("a[href]")
            if anchor is None:
                parent = closest(el, ("div", "article", "section", "li", "a"))
                if parent is not None:
                    anchor = parent if parent.name == "a" else parent.select_one("a[href]")
            if anchor is None:
                continue
            link = (anchor.get("href") or "").strip()
            if not self.link_allowed(link):
                continue
            url = resolve_url(link, origin)
            if not url:
                continue

            block = closest(el, ("div", "article", "section", "li"))
            summary = first_text(block, SUMMARY_SELECTOR) if block is not None else ""
            if not summary and block is not None:
                text = clean_text(block.get_text(" "))
                idx = text.find(title)
                if idx >= 0:
                    summary = text[idx + len(title) : idx + len(title) + 150].strip()
            if summary == title:
                summary = ""
            out.append(self.make_item(title, normalize_url(url), summary, dates=node_dates(block)))
        return out


class JiqizhixinExtractor(HeadlineExtractor):
    skip_titles = ("机器之心", "AI Shortlist", "SOTA！模型", "通讯会员", "PRO通讯会员")
    skip_links = (
        "#",
        "javascript:",
        "/inbox",
        "/m/",
        "/ai_shortlist",
        "aihaohaoyong.com",
        "/short_urls",
    )
    article_re = re.compile(r"/(?:reference|articles|news)/|/\d{4}/\d{2}/\d{2}/")
    html_url_res = (
        re.compile(r"""href=["']([^"']*(?:reference|articles|news)[^"']*)["']""", re.I),
        re.compile(r"""https?://[^\s"'<>]*jiqizhixin\.com/(?:reference|articles|news)/[^\s"'<>\\]+""", re.I),
    )
    script_url_re = re.compile(r"""https?://[^\s"'<>\\]+(?:reference|articles|news)[^\s"'<>\\]+""", re.I)
    uuid_re = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.I)

    def skip_title(self, title: str) -> bool:
        if "PRO" in title and "会员" in title:
            return True
        return super().skip_title(title) or title == "机器之心文章"

    def is_article(self, link: str) -> bool:
        if self.article_re.search(link):
            return True
        return "jiqizhixin.com" in link

    def candidates(self, document: str, base_url: str) -> list[RawItem]:
        soup = BeautifulSoup(document, "html.parser")
        origin = origin_of(self.site.url)
        items = self.scan_headings(soup, origin)
        if len(dedupe_items(items)) < self.cap:
            items.extend(self.scan_anchors(soup, origin))
        if len(dedupe_items(items)) < self.cap:
            items.extend(self.scan_html(soup, document, origin))
        if len(dedupe_items(items)) < self.cap:
            items.extend(self.scan_scripts(soup))
        return items

    def slug_title(self, url: str) -> str:
        tail = url.rstrip("/").split("/")[-1]
        if self.uuid_re.match(tail):
            return ""
        return title_from_url(url)

    def scan_anchors(self, soup: BeautifulSoup, origin: str) -> list[RawItem]:
        out: list[RawItem] = []
        for a in soup.select("a[href]"):
            if len(out) >= self.cap * 3:
                break
            link = (a.get("href") or "").strip()
            if not self.link_allowed(link) or not self.is_article(link):
                continue
            url = resolve_url(link, origin)
            if not url:
                continue
            url = normalize_url(url)

            weak = False
            title = clean_text(a.get_text(" "))
            block = closest(a, ("div", "article", "section", "li"))
            if len(title) < 5 and block is not None:
                title = first_text(block, "h1, h2, h3, h4, [class*='title'], [class*='headline']")
            if len(title) < 5 and a.parent is not None:
                weak = True
                title = clean_text(a.parent.get_text("\n").split("\n")[0])[:100]
            if len(title) < 5:
                title = self.slug_title(url)
                if not title:
                    continue
            if not self.valid_title(title, exclude=("Skip",)) or self.skip_title(title):
                continue

            summary = first_text(block, SUMMARY_SELECTOR) if block is not None else ""
            out.append(
                self.make_item(
                    title,
                    url,
                    summary,
                    meta={"title_backfill": weak or title == self.slug_title(url)},
                )
            )
        return out

    def scan_html(self, soup: BeautifulSoup, document: str, origin: str) -> list[RawItem]:
        out: list[RawItem] = []
        for pattern in self.html_url_res:
            for m in pattern.finditer(document):
                if len(out) >= self.cap * 3:
                    return out
                link = (m.group(1) if m.groups() else m.group(0)).replace("&amp;", "&").replace("&#39;", "'")
                if not self.link_allowed(link):
                    continue
                url = resolve_url(link, origin)
                if not url:
                    continue
                a = soup.find("a", href=m.group(1)) if m.groups() else None
                title = ""
                if a is not None:
                    title = clean_text(a.get("title") or a.get("data-title") or a.get_text(" "))
                if len(title) < 5:
                    context = document[m.end() : m.end() + 1000]
                    near = re.search(r">\s*([^<>]{10,100}?)\s*<", context)
                    title = clean_text(near.group(1)) if near else ""
                if len(title) < 5 or "PRO" in title or "会员" in title or not self.valid_title(title):
                    continue
                out.append(self.make_item(title, normalize_url(url), meta={"title_backfill": a is None}))
        return out

    def scan_scripts(self, soup: BeautifulSoup) -> list[RawItem]:
        out: list[RawItem] = []
        for script in soup.find_all("script"):
            body = script.string or ""
            if not any(k in body for k in ("articles", "news", "list")):
                continue
            for m in self.script_url_re.finditer(body):
                if len(out) >= self.cap:
                    return out
                url = resolve_url(m.group(0).replace("&amp;", "&"), origin_of(self.site.url))
                if not url:
                    continue
                context = body[max(0, m.start() - 500) : m.end() + 500]
                found = re.search(r"""["']?title["']?\s*:\s*["']([^"']+)["']""", context, re.I)
                title = clean_text(found.group(1)) if found else ""
                backfill = False
                if len(title) < 5:
                    title = self.slug_title(url)
                    backfill = True
                if not title or self.skip_title(title) or not self.valid_title(title):
                    continue
                out.append(self.make_item(title, normalize_url(url), meta={"title_backfill": backfill}))
        return out


class QbitaiExtractor(HeadlineExtractor):
    skip_titles = ("量子位", "QbitAI")

    def candidates(self, document: str, base_url: str) -> list[RawItem]:
        soup = BeautifulSoup(document, "html.parser")
        origin = origin_of(self.site.url)
        items = self.scan_headings(soup, origin)
        if len(dedupe_items(items)) < self.cap:
            items.extend(self.scan_articles(soup, origin))
        return items

    def scan_articles(self, soup: BeautifulSoup, origin: str) -> list[RawItem]:
        out: list[RawItem] = []
        for node in soup.select("article, [class*='article'], [class*='post'], [class*='news'], a[href*='/202']"):
            if len(out) >= self.cap * 2:
                break
            a = node if node.name == "a" else node.select_one("a[href]")
            link = (a.get("href") or "") if a is not None else ""
            if "/202" not in link:
                continue
            url = resolve_url(link, origin)
            title = first_text(node, "h1, h2, h3, h4, [class*='title']")
            if not url or len(title) < 10 or self.skip_title(title):
                continue
            summary = first_text(node, "p, [class*='summary'], [class*='excerpt']")
            out.append(self.make_item(title, normalize_url(url), summary, dates=node_dates(node)))
        return out


EXTRACTOR_TYPES: dict[str, type[Extractor]] = {
    "listing": ListingExtractor,
    "feed": FeedExtractor,
    "google_design": GoogleDesignExtractor,
    "jiqizhixin": JiqizhixinExtractor,
    "qbitai": QbitaiExtractor,
}
