from __future__ import annotations

import asyncio
import logging
from io import BytesIO
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup
from pdfminer.high_level import extract_text as pdf_extract_text

from .config import Settings
from .models import Evidence, ScrapeOutcome, SearchOutcome


logger = logging.getLogger(__name__)

NO_EVIDENCE = "No relevant online content found."

HTML_TYPES = {"text/html", "application/xhtml+xml"}
GENERIC_TYPES = {"", "application/octet-stream", "binary/octet-stream", "application/download"}


class SearchProviderError(RuntimeError):
    """A search query failed or produced no results."""


class ScrapeError(RuntimeError):
    """A page could not be fetched or turned into text."""


class WebSearchClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return self.settings.enable_search and bool(self.settings.serp_api_key)

    async def search(self, queries: Sequence[str]) -> List[SearchOutcome]:
        if not self.enabled:
            logger.info("Web search disabled; skipping %d queries", len(queries))
            return []
        async with httpx.AsyncClient(
            timeout=self.settings.search_timeout,
            headers={"User-Agent": self.settings.user_agent},
            transport=self.transport,
        ) as client:
            tasks = [self._search_single(client, query) for query in queries]
            return list(await asyncio.gather(*tasks))

    async def _search_single(self, client: httpx.AsyncClient, query: str) -> SearchOutcome:
        params = {
            "q": query,
            "api_key": self.settings.serp_api_key,
            "num": self.settings.results_per_query,
        }
        try:
            resp = await asyncio.wait_for(
                client.get(self.settings.serp_endpoint, params=params),
                self.settings.search_timeout,
            )
            resp.raise_for_status()
            data = resp.json()
            links = [
                entry["link"]
                for entry in data.get("organic_results") or []
                if isinstance(entry, dict) and entry.get("link")
            ]
            if not links:
                raise SearchProviderError("no organic results")
        except Exception as exc:
            logger.warning("Search error for %r: %s", query, exc)
            return SearchOutcome(query=query, error=str(exc) or exc.__class__.__name__)
        return SearchOutcome(query=query, links=links)


def merge_links(outcomes: Iterable[SearchOutcome], cap: int) -> List[str]:
    """Unique links across all queries in first-seen order, truncated to cap."""
    seen = dict.fromkeys(link for outcome in outcomes for link in outcome.links)
    return list(seen)[: max(cap, 0)]


class WebScraper:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.html_timeout,
            headers={"User-Agent": self.settings.user_agent},
            follow_redirects=True,
            transport=self.transport,
        )

    async def fetch_bulk(self, urls: Sequence[str]) -> Evidence:
        async with self._client() as client:
            tasks = [self._fetch_single(client, url) for url in urls]
            outcomes = list(await asyncio.gather(*tasks))
        texts = [outcome.text for outcome in outcomes if outcome.text]
        evidence = Evidence(outcomes=outcomes, text="\n\n".join(texts) or NO_EVIDENCE)
        if evidence.failed:
            logger.info("Scraped %d/%d sources (%d failed)", evidence.used, len(outcomes), evidence.failed)
        return evidence

    async def fetch(self, url: str) -> ScrapeOutcome:
        async with self._client() as client:
            return await self._fetch_single(client, url)

    async def _fetch_single(self, client: httpx.AsyncClient, url: str) -> ScrapeOutcome:
        try:
            if not url:
                raise ScrapeError("empty url")
            timeout = self.settings.pdf_timeout if _has_pdf_suffix(url) else self.settings.html_timeout
            resp = await asyncio.wait_for(client.get(url, timeout=timeout), timeout)
            resp.raise_for_status()
            kind = self._content_kind(resp, url)
            if kind == "pdf":
                raw = await asyncio.to_thread(self._extract_pdf, resp.content)
            else:
                raw = self._extract_html(resp.text)
        except Exception as exc:
            logger.warning("Scrape failed for %s: %s", url, exc)
            return ScrapeOutcome(url=url, error=str(exc) or exc.__class__.__name__)
        return ScrapeOutcome(url=url, text=self._normalize(raw), kind=kind)

    @staticmethod
    def _content_kind(resp: httpx.Response, url: str) -> str:
        ctype = resp.headers.get("Content-Type", "").split(";")[0].strip().lower()
        if ctype == "application/pdf":
            return "pdf"
        if ctype in HTML_TYPES or ctype.startswith("text/"):
            return "html"
        if ctype in GENERIC_TYPES:
            return "pdf" if _has_pdf_suffix(url) else "html"
        raise ScrapeError(f"unsupported content type {ctype}")

    @staticmethod
    def _extract_html(html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup(["script", "style", "noscript", "svg"]):
            tag.decompose()
        root = soup.body or soup
        return root.get_text(separator=" ", strip=True)

    @staticmethod
    def _extract_pdf(content: bytes) -> str:
        return pdf_extract_text(BytesIO(content)) or ""

    def _normalize(self, text: str) -> str:
        return " ".join(text.split())[: self.settings.max_evidence_chars]


def _has_pdf_suffix(url: str) -> bool:
    return urlparse(url).path.lower().endswith(".pdf")
