"""Best-effort EN -> ZH title translation with a bounded on-disk cache."""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Protocol

import requests

from scripts.heuristics import has_cjk
from scripts.models import Snapshot

logger = logging.getLogger(__name__)

GTX_URL = "https://translate.googleapis.com/translate_a/single"
MYMEMORY_URL = "https://api.mymemory.translated.net/get"


@dataclass(frozen=True)
class Translated:
    text: str


@dataclass(frozen=True)
class Unavailable:
    original: str


class Translator(Protocol):
    def translate(self, text: str) -> Translated | Unavailable: ...


class GoogleTranslator:
    def __init__(self, session: requests.Session, target: str = "zh-CN", timeout: float = 12.0):
        self.session = session
        self.target = target
        self.timeout = timeout

    def translate(self, text: str) -> Translated | Unavailable:
        s = (text or "").strip()
        if not s:
            return Unavailable(text)
        for backend in (self._gtx, self._mymemory):
            try:
                out = backend(s)
            except Exception as exc:
                logger.debug("%s failed for %r: %s", backend.__name__.lstrip("_"), s[:40], exc)
                continue
            if out and out != s and has_cjk(out):
                return Translated(out)
        return Unavailable(text)

    def _gtx(self, s: str) -> str | None:
        r = self.session.get(
            GTX_URL,
            params={"client": "gtx", "sl": "auto", "tl": self.target, "dt": "t", "q": s},
            timeout=self.timeout,
        )
        r.raise_for_status()
        payload = r.json()
        if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
            return None
        return "".join(str(seg[0]) for seg in payload[0] if isinstance(seg, list) and seg and seg[0]).strip()

    def _mymemory(self, s: str) -> str | None:
        r = self.session.get(
            MYMEMORY_URL,
            params={"q": s, "langpair": f"en|{self.target.split('-')[0]}"},
            timeout=self.timeout,
        )
        r.raise_for_status()
        data = r.json().get("responseData") or {}
        return str(data.get("translatedText") or "").strip() or None


def cache_key(text: str) -> str:
    return hashlib.sha1(text.strip().encode("utf-8")).hexdigest()


class TranslationCache:
    """JSON file of sha1(text) -> translation; the oldest entries go first when full."""

    def __init__(self, path: Path, max_entries: int = 1000, evict_count: int = 500):
        self.path = path
        self.max_entries = max_entries
        self.evict_count = evict_count
        self.entries: dict[str, str] = {}

    def load(self) -> "TranslationCache":
        if not self.path.exists():
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except Exception as exc:
            logger.warning("Ignoring unreadable translation cache %s: %s", self.path, exc)
            return self
        if isinstance(data, dict):
            self.entries = {str(k): str(v) for k, v in data.items() if str(k).strip() and str(v).strip()}
        return self

    def get(self, text: str) -> str | None:
        return self.entries.get(cache_key(text))

    def put(self, text: str, translation: str) -> None:
        self.entries[cache_key(text)] = translation
        if len(self.entries) > self.max_entries:
            for key in list(self.entries)[: self.evict_count]:
                del self.entries[key]

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.entries, ensure_ascii=False, indent=2), encoding="utf-8")

    def __len__(self) -> int:
        return len(self.entries)


def translate_snapshot(snapshot: Snapshot, translator: Translator, cache: TranslationCache, max_new: int = 80) -> Snapshot:
    """New snapshot with non-Chinese titles replaced by their translations."""
    translated_now = 0
    sites = []
    for site in snapshot.sites:
        items = []
        for item in site.items:
            title = item.title
            if not title or has_cjk(title):
                items.append(item)
                continue
            zh = cache.get(title)
            if zh is None and translated_now < max_new:
                result = translator.translate(title)
                translated_now += 1
                if isinstance(result, Translated):
                    zh = result.text
                    cache.put(title, zh)
            items.append(replace(item, title=zh) if zh else item)
        sites.append(replace(site, items=tuple(items)))
    logger.info("Translated %d new titles (%d cached)", translated_now, len(cache))
    return replace(snapshot, sites=tuple(sites))
