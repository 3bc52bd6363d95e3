"""Configured source sites, their listing profiles and the extractor registry."""

from __future__ import annotations

from datetime import datetime

from scripts.config import Settings, SiteConfig
from scripts.extractors import EXTRACTOR_TYPES, Extractor, ListingProfile
from scripts.fetching import FetchCapability

CARD_SELECTOR = "article, [class*='article'], [class*='post']"
BLOG_CARD_SELECTOR = "article, [class*='post'], [class*='article'], [class*='blog']"

SITES: list[SiteConfig] = [
    SiteConfig("microsoft", "Microsoft Design", "https://microsoft.design/", "https://microsoft.design/", "listing"),
    SiteConfig("google", "Google Design", "https://design.google/", "https://design.google/", "google_design"),
    SiteConfig("figma", "Figma", "https://www.figma.com", "https://www.figma.com/blog/", "listing"),
    SiteConfig("anthropic", "Anthropic", "https://www.anthropic.com", "https://www.anthropic.com/news", "listing"),
    SiteConfig("openai", "OpenAI", "https://openai.com/zh-Hans-CN/news/", "https://openai.com/news/rss.xml", "feed"),
    SiteConfig("googleai", "Google AI", "https://ai.google/products/", "https://ai.google/products/", "listing"),
    SiteConfig(
        "aws",
        "AWS",
        "https://aws.amazon.com/cn/machine-learning/",
        "https://aws.amazon.com/blogs/machine-learning/",
        "listing",
    ),
    SiteConfig("aibase", "AIBase", "https://www.aibase.com/zh/news", "https://www.aibase.com/zh/news", "listing"),
    SiteConfig("jiqizhixin", "机器之心", "https://www.jiqizhixin.com/", "https://www.jiqizhixin.com/", "jiqizhixin"),
    SiteConfig("qbitai", "量子位", "https://www.qbitai.com/", "https://www.qbitai.com/", "qbitai"),
    SiteConfig(
        "techcrunch",
        "TechCrunch AI",
        "https://techcrunch.com/category/artificial-intelligence/",
        "https://techcrunch.com/category/artificial-intelligence/",
        "listing",
    ),
    SiteConfig(
        "googledeepmind",
        "Google DeepMind",
        "https://blog.google/innovation-and-ai/models-and-research/google-deepmind/",
        "https://blog.google/innovation-and-ai/models-and-research/google-deepmind/",
        "listing",
    ),
    SiteConfig("material", "Material Design", "https://m3.material.io/blog", "https://m3.material.io/blog", "listing"),
    SiteConfig("metaai", "Meta AI", "https://ai.meta.com/blog/", "https://ai.meta.com/blog/", "listing"),
    SiteConfig("github", "GitHub Blog", "https://github.blog/ai-and-ml/", "https://github.blog/ai-and-ml/feed/", "feed"),
    SiteConfig(
        "adobe",
        "Adobe Blog",
        "https://blog.adobe.com/en/topics/artificial-intelligence",
        "https://blog.adobe.com/en/topics/artificial-intelligence",
        "listing",
        timeout=90.0,
    ),
    SiteConfig("mapbox", "Mapbox", "https://www.mapbox.com/blog", "https://www.mapbox.com/blog", "listing"),
    SiteConfig("googleresearch", "Google Research", "https://research.google/blog/", "https://research.google/blog/", "listing"),
    SiteConfig("rundown", "The Rundown AI", "https://www.therundown.ai/", "https://www.therundown.ai/", "listing"),
]

PROFILES: dict[str, ListingProfile] = {
    "microsoft": ListingProfile(selector=CARD_SELECTOR),
    "figma": ListingProfile(
        selector="article, [class*='post'], [class*='article'], a[href*='/blog/']",
        link_contains=("/blog/",),
    ),
    "anthropic": ListingProfile(
        selector="article, [class*='post'], [class*='article'], a[href*='/news/']",
        link_contains=("/news/",),
        relevance="none",
    ),
    "openai": ListingProfile(
        selector="article, a[href*='/index/']",
        link_contains=("/index/",),
        relevance="none",
    ),
    "googleai": ListingProfile(
        selector="article, [class*='post'], [class*='article'], a[href*='/products/'], a[href*='/blog/']",
        relevance="none",
    ),
    "aws": ListingProfile(
        selector=f"{BLOG_CARD_SELECTOR}, a[href*='/machine-learning/']",
        link_contains=("/blogs/machine-learning/",),
        relevance="none",
    ),
    "aibase": ListingProfile(
        selector="a[href^='/news/'], a[href*='/zh/news/']",
        fallback_selector="article, [class*='article'], [class*='news']",
        link_contains=("/news/",),
        relevance="none",
    ),
    "techcrunch": ListingProfile(
        selector="a[href*='/202']",
        fallback_selector="article",
        link_contains=("/202",),
        prefer_link_text=True,
        min_title=10,
        relevance="none",
        min_primary=None,
        date_backfill=False,
    ),
    "googledeepmind": ListingProfile(
        selector="article, [class*='article'], [class*='post'], [class*='story'], a[href*='/innovation-and-ai/']",
        link_contains=("/innovation-and-ai/",),
        relevance="none",
    ),
    "material": ListingProfile(
        selector="a[href*='/blog/']",
        link_contains=("/blog/",),
        link_excludes=("#main_content", "/blog#"),
        prefer_link_text=True,
        min_title=5,
        exclude_titles=("Skip",),
        date_backfill=False,
    ),
    "metaai": ListingProfile(
        selector="a[href*='/blog/']",
        link_contains=("/blog/",),
        relevance="none",
    ),
    "github": ListingProfile(
        selector="article, a[href*='/blog/']",
        relevance="none",
    ),
    "adobe": ListingProfile(
        selector=f"{BLOG_CARD_SELECTOR}, a[href*='/blog/']",
        relevance="none",
    ),
    "mapbox": ListingProfile(selector=f"{BLOG_CARD_SELECTOR}, a[href*='/blog/']", link_contains=("/blog/",)),
    "googleresearch": ListingProfile(
        selector=f"{BLOG_CARD_SELECTOR}, a[href*='/blog/']",
        link_contains=("/blog/",),
        relevance="none",
    ),
    "rundown": ListingProfile(
        selector="article, [class*='article'], [class*='post'], [class*='news'], a[href*='/news/'], a[href*='/posts/']",
        link_contains=("/news/", "/posts/", "/p/"),
        relevance="none",
    ),
}


def site_keys() -> list[str]:
    return [site.source for site in SITES]


def select_sites(keys: list[str] | None) -> list[SiteConfig]:
    """Configured sites filtered to the given keys, in configuration order."""
    if not keys:
        return list(SITES)
    unknown = sorted(set(keys) - set(site_keys()))
    if unknown:
        raise ValueError(f"Unknown site key(s): {', '.join(unknown)}")
    wanted = set(keys)
    return [site for site in SITES if site.source in wanted]


def build_extractor(site: SiteConfig, settings: Settings, fetcher: FetchCapability, now: datetime) -> Extractor:
    try:
        kind = EXTRACTOR_TYPES[site.extractor]
    except KeyError:
        raise ValueError(f"Unknown extractor type {site.extractor!r} for {site.source}") from None
    return kind(site, settings, fetcher, now, PROFILES.get(site.source))
