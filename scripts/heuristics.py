"""Shared extraction heuristics: URLs, relevance, tags, dates and relative labels."""

from __future__ import annotations

import json
import re
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import unquote, urljoin, urlparse

from bs4 import BeautifulSoup, Tag
from dateutil import parser as dtparser

UTC = timezone.utc
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

AI_KEYWORDS = [
    "ai",
    "artificial intelligence",
    "machine learning",
    "deep learning",
    "人工智能",
    "copilot",
    "gemini",
    "生成式",
    "chatgpt",
    "gpt",
    "assistant",
    "agent",
    "auto",
    "smart",
    "neural",
    "llm",
    "模型",
    "firefly",
    "claude",
    "dall-e",
    "midjourney",
    "stable diffusion",
]

TAG_KEYWORDS: list[tuple[str, list[str]]] = [
    ("AI", ["ai", "artificial intelligence", "machine learning", "人工智能"]),
    ("设计系统", ["design system", "design kit", "组件", "component"]),
    ("用户体验", ["ux", "user experience", "用户体验", "界面设计"]),
    ("工具", ["tool", "toolkit", "工具", "平台"]),
    ("生成式", ["generative", "生成式", "生成", "create"]),
    ("Copilot", ["copilot", "助手", "assistant"]),
    ("Firefly", ["firefly", "adobe firefly"]),
    ("Gemini", ["gemini", "google gemini"]),
    ("Claude", ["claude", "anthropic"]),
    ("ChatGPT", ["chatgpt", "gpt", "openai"]),
]
DEFAULT_TAGS = ["设计", "AI"]

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "sept": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

MONTH_DAY_YEAR_RE = re.compile(r"\b([A-Za-z]{3,9})\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b")
LEADING_DATE_RE = re.compile(
    r"^\s*((?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?\s+\d{1,2},\s+\d{4})\s*(.*)$",
    re.I | re.S,
)
YEAR_RE = re.compile(r"(?<!\d)(19|20)\d{2}(?!\d)")
URL_DATE_RE = re.compile(r"/((?:19|20)\d{2})/(\d{1,2})/(?:(\d{1,2})/)?")
ISO_DATE_RE = re.compile(
    r"(?<!\d)(?:19|20)\d{2}-\d{2}-\d{2}(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?(?!\d)"
)

CHROME_TEXTS = {
    "skip to content",
    "skip to main content",
    "read more",
    "learn more",
    "view all",
    "see all",
    "see more",
    "load more",
    "blog",
    "news",
    "home",
    "menu",
    "subscribe",
    "sign in",
    "log in",
    "share",
    "next",
    "previous",
    "featured",
    "latest",
}
CHROME_PREFIXES = ("skip to", "read more", "view all", "see all")

HEADING_SELECTOR = "h1, h2, h3, h4, [class*='title'], [class*='heading'], [class*='headline']"
SUMMARY_SELECTOR = "p, [class*='summary'], [class*='excerpt'], [class*='description'], [class*='deck']"

PAGE_DATE_META = [
    ("property", "article:published_time"),
    ("property", "og:published_time"),
    ("property", "og:article:published_time"),
    ("itemprop", "datePublished"),
    ("name", "article:published_time"),
    ("name", "publish-date"),
    ("name", "publish_date"),
    ("name", "publishdate"),
    ("name", "pubdate"),
    ("name", "parsely-pub-date"),
    ("name", "sailthru.date"),
    ("name", "dc.date"),
    ("name", "dc.date.issued"),
    ("name", "date"),
]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def iso(dt: datetime | None) -> str | None:
    if not dt:
        return None
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def clean_text(text: str | None) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def has_cjk(text: str) -> bool:
    return bool(re.search(r"[\u4e00-\u9fff]", text or ""))


def origin_of(url: str) -> str:
    try:
        parsed = urlparse(url)
    except Exception:
        return ""
    if not parsed.scheme or not parsed.netloc:
        return ""
    return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}"


def normalize_url(raw_url: str, base: str | None = None) -> str:
    """Canonical dedup key: origin + path, without query string or fragment."""
    try:
        s = raw_url.strip()
        if base and not urlparse(s).scheme:
            s = urljoin(base, s)
        parsed = urlparse(s)
        if not parsed.scheme or not parsed.netloc:
            return raw_url
        return f"{parsed.scheme.lower()}://{parsed.netloc.lower()}{parsed.path}"
    except Exception:
        return raw_url


def resolve_url(href: str | None, origin: str) -> str | None:
    h = (href or "").strip()
    if not h or h.startswith("#"):
        return None
    if h.lower().startswith(("javascript:", "mailto:", "tel:", "data:")):
        return None
    if h.startswith("//"):
        h = "https:" + h
    try:
        full = urljoin(origin.rstrip("/") + "/", h)
        parsed = urlparse(full)
    except Exception:
        return None
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        return None
    return full


def is_relevant(text: str | None) -> bool:
    lowered = (text or "").lower()
    if not lowered:
        return False
    return any(k in lowered for k in AI_KEYWORDS)


def infer_tags(title: str, summary: str) -> list[str]:
    text = f"{title} {summary}".lower()
    tags = [tag for tag, keywords in TAG_KEYWORDS if any(k in text for k in keywords)]
    return tags or list(DEFAULT_TAGS)


def is_chrome_text(text: str) -> bool:
    t = clean_text(text).lower().rstrip(" →>»›.")
    if not t:
        return True
    if t in CHROME_TEXTS:
        return True
    return t.startswith(CHROME_PREFIXES)


def split_leading_date(text: str) -> tuple[str | None, str]:
    """Split 'May 13, 2025Start building...' into its date and title parts."""
    m = LEADING_DATE_RE.match(text or "")
    if not m:
        return None, text
    return m.group(1), m.group(2).strip()


def title_from_url(url: str) -> str:
    try:
        path = urlparse(url).path
    except Exception:
        return ""
    parts = [p for p in path.split("/") if p]
    if not parts:
        return ""
    slug = unquote(parts[-1])
    if slug.lower().endswith((".html", ".htm")):
        slug = slug.rsplit(".", 1)[0]
    if not slug or re.fullmatch(r"[\d_-]+", slug):
        return ""
    if re.fullmatch(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", slug, re.I):
        return ""
    words = [w for w in re.split(r"[-_]+", slug) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def _as_utc(dt: datetime) -> datetime:
    if not dt.tzinfo:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_relative_time(text: str, now: datetime) -> datetime | None:
    text = (text or "").strip()
    if not text:
        return None

    m = re.search(r"(\d+)\s*分钟前", text) or re.search(r"(\d+)\s*(?:minutes?|mins?)\s+ago", text, re.I)
    if m:
        return now - timedelta(minutes=int(m.group(1)))

    m = re.search(r"(\d+)\s*小时前", text) or re.search(r"(\d+)\s*(?:hours?|hrs?)\s+ago", text, re.I)
    if m:
        return now - timedelta(hours=int(m.group(1)))

    m = re.search(r"(\d+)\s*天前", text) or re.search(r"(\d+)\s*days?\s+ago", text, re.I)
    if m:
        return now - timedelta(days=int(m.group(1)))

    if "昨天" in text or text.lower() == "yesterday":
        return now - timedelta(days=1)

    m = re.search(r"(?<!\d)(\d{1,2})月(\d{1,2})日", text)
    if m and not YEAR_RE.search(text):
        try:
            candidate = datetime(now.year, int(m.group(1)), int(m.group(2)), tzinfo=UTC)
        except ValueError:
            return None
        if candidate > now:
            candidate = candidate.replace(year=now.year - 1)
        return candidate

    return None


def parse_date_text(value: Any, now: datetime) -> datetime | None:
    """Parse one explicit date signal. Returns None rather than guessing."""
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = _as_utc(value)
        return dt if dt <= now else None

    s = clean_text(str(value))
    if not s:
        return None

    dt: datetime | None = None
    m = re.search(r"((?:19|20)\d{2})\s*年\s*(\d{1,2})\s*月\s*(\d{1,2})\s*日", s)
    if m:
        try:
            dt = datetime(int(m.group(1)), int(m.group(2)), int(m.group(3)), tzinfo=UTC)
        except ValueError:
            dt = None

    # ISO dates embedded in bylines such as "2026-02-18 · 5 min read"
    m = ISO_DATE_RE.search(s) if dt is None else None
    if m:
        try:
            dt = _as_utc(dtparser.isoparse(m.group(0).replace(" ", "T")))
        except (ValueError, OverflowError):
            dt = None

    if dt is None and YEAR_RE.search(s):
        try:
            dt = _as_utc(dtparser.parse(s, default=datetime(1970, 1, 1)))
        except Exception:
            dt = None

    if dt is None:
        m = MONTH_DAY_YEAR_RE.search(s)
        if m and m.group(1).lower() in MONTHS:
            try:
                dt = datetime(int(m.group(3)), MONTHS[m.group(1).lower()], int(m.group(2)), tzinfo=UTC)
            except ValueError:
                dt = None

    if dt is None:
        dt = parse_relative_time(s, now)

    if dt is None or dt > now:
        return None
    return dt


def date_from_url(url: str, now: datetime) -> datetime | None:
    try:
        path = urlparse(url).path
    except Exception:
        return None
    m = URL_DATE_RE.search(path + "/")
    if not m:
        return None
    year, month = int(m.group(1)), int(m.group(2))
    day = int(m.group(3)) if m.group(3) else 1
    try:
        dt = datetime(year, month, day, tzinfo=UTC)
    except ValueError:
        return None
    return dt if dt <= now else None


def resolve_date(*candidates: Any, url: str | None = None, now: datetime) -> datetime | None:
    for candidate in candidates:
        dt = parse_date_text(candidate, now)
        if dt:
            return dt
    if url:
        return date_from_url(url, now)
    return None


def _walk_json_ld(node: Any, key: str) -> list[str]:
    found: list[str] = []
    if isinstance(node, dict):
        value = node.get(key)
        if isinstance(value, str) and value.strip():
            found.append(value)
        for child in node.values():
            if isinstance(child, (dict, list)):
                found.extend(_walk_json_ld(child, key))
    elif isinstance(node, list):
        for child in node:
            found.extend(_walk_json_ld(child, key))
    return found


def page_date(html: str, now: datetime) -> datetime | None:
    """Publication date from an article page's structured metadata."""
    soup = BeautifulSoup(html, "html.parser")

    blocks: list[Any] = []
    for script in soup.find_all("script", type=lambda t: t and "ld+json" in t):
        try:
            blocks.append(json.loads(script.string or script.get_text() or ""))
        except Exception:
            continue
    for key in ("datePublished", "dateCreated"):
        for block in blocks:
            for raw in _walk_json_ld(block, key):
                dt = parse_date_text(raw, now)
                if dt:
                    return dt

    for attr, name in PAGE_DATE_META:
        for meta in soup.find_all("meta", attrs={attr: re.compile(rf"^{re.escape(name)}$", re.I)}):
            dt = parse_date_text(meta.get("content"), now)
            if dt:
                return dt

    for t in soup.select("time[datetime]"):
        dt = parse_date_text(t.get("datetime"), now)
        if dt:
            return dt
    for t in soup.select("time"):
        dt = parse_date_text(t.get_text(" ", strip=True), now)
        if dt:
            return dt
    return None


def page_title(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for attr, name in (("property", "og:title"), ("name", "twitter:title"), ("name", "title")):
        meta = soup.find("meta", attrs={attr: name})
        if meta and clean_text(meta.get("content")):
            return clean_text(meta.get("content"))
    h1 = soup.find("h1")
    if h1 and clean_text(h1.get_text(" ")):
        return clean_text(h1.get_text(" "))
    if soup.title and soup.title.string:
        title = clean_text(soup.title.string)
        return re.split(r"\s+[|\-–]\s+", title)[0].strip()
    return ""


def first_text(node: Tag | None, selector: str) -> str:
    if node is None:
        return ""
    found = node.select_one(selector)
    return clean_text(found.get_text(" ")) if found else ""


def closest(
    node: Tag,
    names: tuple[str, ...] = (),
    class_hints: tuple[str, ...] = (),
    boundary: Tag | None = None,
) -> Tag | None:
    """Nearest ancestor matching a tag name or class hint. Stops at body, or at boundary which is returned."""
    for parent in node.parents:
        if parent is boundary:
            return boundary
        if not isinstance(parent, Tag) or parent.name in {"[document]", "html", "body"}:
            return None
        if parent.name in names:
            return parent
        classes = " ".join(parent.get("class") or []).lower()
        if classes and any(h in classes for h in class_hints):
            return parent
    return None


def relative_label(ts: datetime | None, now: datetime, locale: str = "en") -> str:
    if ts is None:
        return ""
    diff = now - ts
    minutes = int(diff.total_seconds() // 60)
    hours = int(diff.total_seconds() // 3600)
    days = diff.days
    months = days // 30
    years = days // 365

    zh = locale == "zh"
    if minutes < 1:
        return "刚刚" if zh else "just now"
    if minutes < 60:
        return f"{minutes}分钟前" if zh else f"{minutes} minutes ago"
    if hours < 24:
        return f"{hours}小时前" if zh else f"{hours} hours ago"
    if days < 7:
        return f"{days}天前" if zh else f"{days} days ago"
    if months < 12:
        return f"{months}个月前" if zh else f"{months} months ago"
    return f"{years}年前" if zh else f"{years} years ago"
