# tests/services/test_scraper.py
"""Cobre: parse_html (sem rede), mock mode e erros HTTP do WebScraperService."""

import httpx
import pytest

from gist_agents.core.exceptions import ScrapeError
from gist_agents.services.scraper import WebScraperService, parse_html

BODY = " ".join(["Markets reacted calmly to the new tariff schedule announced on Monday."] * 5)

HTML = f"""
<html lang="en-US">
  <head>
    <title>Fallback title</title>
    <meta property="og:title" content="Tariff schedule announced">
    <meta name="description" content="New tariffs take effect next month.">
    <meta name="author" content="Jane Doe">
    <meta property="og:image" content="https://cdn.example.com/tariffs.jpg">
    <meta property="article:published_time" content="2026-03-02T09:00:00Z">
    <script>var tracking = true;</script>
  </head>
  <body>
    <nav>Home | World | Business</nav>
    <article>
      <p>{BODY}</p>
      <div class="ad-banner">Buy now!</div>
    </article>
    <footer>Copyright</footer>
  </body>
</html>
"""


def test_parse_html_extracts_article():
    article = parse_html(HTML, "https://news.example.com/tariffs")
    assert article.title == "Tariff schedule announced"
    assert article.description == "New tariffs take effect next month."
    assert article.author == "Jane Doe"
    assert article.image_url == "https://cdn.example.com/tariffs.jpg"
    assert article.published_at == "2026-03-02T09:00:00Z"
    assert article.language == "en"
    assert article.content == BODY
    assert "Buy now" not in article.content
    assert "tracking" not in article.content


def test_parse_html_detects_korean_without_lang():
    article = parse_html("<html><body><h1>제목</h1><p>한국어 본문입니다.</p></body></html>", "https://x.test/a")
    assert article.language == "ko"
    assert article.title == "제목"
    assert "한국어 본문입니다." in article.content


def test_mock_mode_returns_canonical_article():
    scraper = WebScraperService(mock_mode=True)
    article = scraper.fetch("https://news.example.com/any")
    assert scraper.is_accessible("https://news.example.com/any") is True
    assert article.url == "https://news.example.com/any"
    assert article.content_length > 100
    assert article.metadata["mock"] is True


def test_fetch_over_http():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, text=HTML)))
    scraper = WebScraperService(client=client)
    assert scraper.is_accessible("https://news.example.com/tariffs") is True
    assert scraper.fetch("https://news.example.com/tariffs").title == "Tariff schedule announced"


@pytest.mark.parametrize("response", [httpx.Response(404, text="nope"), httpx.Response(200, text="  ")])
def test_fetch_errors_are_typed(response):
    client = httpx.Client(transport=httpx.MockTransport(lambda r: response))
    scraper = WebScraperService(client=client)
    with pytest.raises(ScrapeError) as exc_info:
        scraper.fetch("https://news.example.com/missing")
    assert exc_info.value.url == "https://news.example.com/missing"
    assert exc_info.value.service == "scraper"


def test_network_error_makes_url_inaccessible():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    scraper = WebScraperService(client=httpx.Client(transport=httpx.MockTransport(handler)))
    assert scraper.is_accessible("https://news.example.com/down") is False
    with pytest.raises(ScrapeError, match="Failed to fetch URL"):
        scraper.fetch("https://news.example.com/down")
