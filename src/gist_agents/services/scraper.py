# src/gist_agents/services/scraper.py
"""
Web scraper de artigos (httpx + BeautifulSoup) com mock mode.

Responsabilidades:
    - Buscar o HTML de uma URL (`fetch`) e verificar acessibilidade (`is_accessible`)
    - Extrair título, descrição, autor, data, imagem, idioma e corpo do texto
      (`parse_html`, puro e testável sem rede)

Mock mode:
    - `fetch` retorna um artigo canônico para qualquer URL, sem I/O
    - `is_accessible` retorna True

Falhas de rede/HTTP ou HTML sem conteúdo levantam `ScrapeError`.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, Mapping, Optional

import httpx
from bs4 import BeautifulSoup

from gist_agents.core.errors import utc_now_iso
from gist_agents.core.exceptions import ScrapeError
from gist_agents.models.article import ArticleData

logger = logging.getLogger("gist_agents.services.scraper")

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; GistAgents/0.1)"

_NOISE_TAGS = ("script", "style", "nav", "header", "footer", "aside", "form", "iframe", "noscript")
_NOISE_CLASS_TOKENS = ("ad", "ads", "advertisement", "sidebar", "comment", "comments", "related", "share")
_CONTENT_SELECTORS = (
    "article",
    "[itemprop=articleBody]",
    ".article-body",
    ".article-content",
    ".post-content",
    ".entry-content",
    ".story-body",
    "main",
    ".content",
)
_DATE_SELECTORS = (
    ("meta", {"property": "article:published_time"}, "content"),
    ("meta", {"name": "pubdate"}, "content"),
    ("meta", {"name": "date"}, "content"),
    ("time", {"datetime": True}, "datetime"),
)
_HANGUL = re.compile(r"[가-힣]")
_WHITESPACE = re.compile(r"\s+")

MOCK_ARTICLE_CONTENT = (
    "Major economies announced a coordinated shift in trade policy this week, "
    "signalling a new phase for global supply chains. Analysts expect the changes "
    "to affect semiconductor and automotive exports first, with ripple effects "
    "across logistics and energy markets. Officials said implementation details "
    "will follow over the next six months, while industry groups called for "
    "clearer timelines and transitional support for affected manufacturers."
)


def _clean(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def _meta(soup: BeautifulSoup, name: str) -> Optional[str]:
    for attrs in ({"property": name}, {"name": name}):
        tag = soup.find("meta", attrs=attrs)
        if tag is not None and tag.get("content"):
            return _clean(tag["content"])
    return None


def _has_noise_class(tag: Any) -> bool:
    tokens = list(tag.get("class") or []) + [tag.get("id") or ""]
    for token in tokens:
        lowered = str(token).lower()
        if lowered in _NOISE_CLASS_TOKENS or lowered.startswith("ad-"):
            return True
    return False


def _first(values: Iterable[Optional[str]]) -> Optional[str]:
    for value in values:
        if value:
            return value
    return None


def parse_html(html: str, url: str) -> ArticleData:
    """Extrai um ArticleData do HTML (sem rede)."""
    soup = BeautifulSoup(html or "", "html.parser")

    h1 = soup.find("h1")
    title_tag = soup.find("title")
    title = _first(
        [
            _meta(soup, "og:title"),
            _meta(soup, "twitter:title"),
            _clean(h1.get_text(" ")) if h1 else None,
            _clean(title_tag.get_text(" ")) if title_tag else None,
        ]
    ) or ""

    published_at = None
    for tag_name, attrs, attr in _DATE_SELECTORS:
        tag = soup.find(tag_name, attrs=attrs)
        if tag is not None and tag.get(attr):
            published_at = _clean(tag[attr])
            break

    language = _detect_language(soup, html)
    description = _first([_meta(soup, "description"), _meta(soup, "og:description")])
    author = _meta(soup, "author")
    image_url = _first([_meta(soup, "og:image"), _meta(soup, "twitter:image")])

    content = _extract_content(soup)

    return ArticleData(
        url=url,
        title=title,
        content=content,
        description=description,
        author=author,
        published_at=published_at,
        image_url=image_url,
        language=language,
        metadata={"scraped_at": utc_now_iso(), "content_length": len(content)},
    )


def _detect_language(soup: BeautifulSoup, html: str) -> str:
    html_tag = soup.find("html")
    if html_tag is not None and html_tag.get("lang"):
        return str(html_tag["lang"]).strip()[:2].lower()
    meta = soup.find("meta", attrs={"http-equiv": "Content-Language"})
    if meta is not None and meta.get("content"):
        return str(meta["content"]).strip()[:2].lower()
    return "ko" if _HANGUL.search(html or "") else "en"


def _extract_content(soup: BeautifulSoup) -> str:
    for tag in soup.find_all(list(_NOISE_TAGS)):
        tag.decompose()
    for tag in soup.find_all(_has_noise_class):
        tag.decompose()

    for selector in _CONTENT_SELECTORS:
        node = soup.select_one(selector)
        if node is not None:
            text = _clean(node.get_text(" "))
            if len(text) > 200:
                return text

    # pai com o maior volume de texto entre os <p>
    best_text = ""
    for paragraph in soup.find_all("p"):
        parent = paragraph.parent
        if parent is None:
            continue
        text = _clean(parent.get_text(" "))
        if len(text) > len(best_text):
            best_text = text
    if best_text:
        return best_text

    body = soup.find("body")
    return _clean(body.get_text(" ")) if body is not None else ""


class WebScraperService:
    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        *,
        mock_mode: bool = False,
        client: Optional[httpx.Client] = None,
    ):
        self.config: Dict[str, Any] = dict(config or {})
        self._mock_mode = bool(mock_mode or self.config.get("mock_mode", False))
        self._user_agent = str(self.config.get("user_agent") or DEFAULT_USER_AGENT)
        self._timeout = float(self.config.get("timeout", 30))
        self._client = client

    def is_mock_mode(self) -> bool:
        return self._mock_mode

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = {
            "User-Agent": self._user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
        }
        if self._client is not None:
            return self._client.request(method, url, headers=headers, follow_redirects=True, **kwargs)
        with httpx.Client(timeout=self._timeout, follow_redirects=True, headers=headers) as client:
            return client.request(method, url, **kwargs)

    def fetch(self, url: str) -> ArticleData:
        if self._mock_mode:
            return self.mock_article(url)

        try:
            response = self._request("GET", url)
        except httpx.HTTPError as exc:
            raise ScrapeError(f"Failed to fetch URL: {url} ({exc})", url=url) from exc

        if response.status_code != 200:
            raise ScrapeError(
                f"HTTP error {response.status_code} while fetching {url}",
                url=url,
                status_code=response.status_code,
            )
        if not response.text.strip():
            raise ScrapeError(f"Empty response body: {url}", url=url)

        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        return parse_html(response.text, url)

    def is_accessible(self, url: str) -> bool:
        if self._mock_mode:
            return True
        try:
            response = self._request("HEAD", url)
        except httpx.HTTPError as exc:
            logger.warning("HEAD %s failed: %s", url, exc)
            return False
        return 200 <= response.status_code < 400

    @staticmethod
    def mock_article(url: str) -> ArticleData:
        return ArticleData(
            url=url,
            title="[Mock] Global policy shift reshapes supply chains",
            content=MOCK_ARTICLE_CONTENT,
            description="[Mock] Trade policy changes and their impact on industry.",
            author="Mock Reporter",
            published_at="2026-01-01T00:00:00+00:00",
            image_url="https://images.example.com/mock/article.jpg",
            language="en",
            metadata={"mock": True},
        )
