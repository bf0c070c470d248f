"""Web page extractor - fetch, strip chrome, pick the main content area."""

import logging
from urllib.parse import urlsplit

import httpx
from bs4 import BeautifulSoup

from docsense.errors import FetchFailed, InvalidUrl, NoContent, NotFound
from docsense.extractors.http import BROWSER_USER_AGENT, DEFAULT_TIMEOUT_SECONDS, http_client
from docsense.ingest.normalizer import collapse_whitespace, count_meaningful_words, normalize_text
from docsense.models.documents import ExtractionResult

logger = logging.getLogger(__name__)

STRIP_SELECTOR = "script, style, nav, header, footer, aside, .advertisement, .ads"

CONTENT_SELECTORS = (
    "main",
    "article",
    ".content",
    ".main-content",
    ".post-content",
    ".entry-content",
    "#content",
    ".container",
)

MIN_CANDIDATE_CHARS = 100


def validate_url(url: str | None) -> str:
    """Return the URL stripped, or raise InvalidUrl.

    Accepts absolute http(s) URLs with a host only.
    """
    candidate = (url or "").strip()
    try:
        parts = urlsplit(candidate)
    except ValueError as e:
        raise InvalidUrl("Invalid URL provided") from e

    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidUrl("Invalid URL provided")

    return candidate


def _element_text(elements: list) -> str:
    return collapse_whitespace(" ".join(el.get_text(" ") for el in elements))


def parse_html(html: str, url: str) -> tuple[str, str]:
    """Extract (title, text) from an HTML document.

    Title comes from <title>, then the first <h1>, then the URL host. Content
    is the longest of the candidate areas, or the whole body when no
    candidate has more than MIN_CANDIDATE_CHARS characters.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = ""
    if soup.title is not None:
        title = collapse_whitespace(soup.title.get_text())
    if not title:
        h1 = soup.find("h1")
        if h1 is not None:
            title = collapse_whitespace(h1.get_text(" "))
    if not title:
        title = urlsplit(url).hostname or url

    for element in soup.select(STRIP_SELECTOR):
        element.decompose()

    content = ""
    for selector in CONTENT_SELECTORS:
        text = _element_text(soup.select(selector))
        if len(text) > len(content):
            content = text

    if len(content) < MIN_CANDIDATE_CHARS:
        body = soup.body if soup.body is not None else soup
        content = collapse_whitespace(body.get_text(" "))

    return title, content


async def extract_url(
    url: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> ExtractionResult:
    """Fetch a web page and extract its readable text.

    Args:
        url: Absolute http(s) URL
        client: Optional httpx client (for testing with mocks)
        timeout: Fetch timeout in seconds

    Raises:
        InvalidUrl: If the URL is malformed
        FetchFailed: On DNS, connection, timeout or non-404 HTTP errors
        NotFound: If the page answers 404
        NoContent: If nothing readable remains after cleanup
    """
    url = validate_url(url)

    async with http_client(client, timeout) as http:
        try:
            response = await http.get(
                url,
                headers={"User-Agent": BROWSER_USER_AGENT},
                timeout=timeout,
                follow_redirects=True,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Fetch failed for {url}: {type(e).__name__}")
            raise FetchFailed("Could not connect to the provided URL") from e

    if response.status_code == 404:
        raise NotFound("URL not found (404)")
    if response.is_error:
        raise FetchFailed(f"Failed to fetch URL (HTTP {response.status_code})")

    title, content = parse_html(response.text, url)

    if count_meaningful_words(normalize_text(content)) == 0:
        raise NoContent("Could not extract meaningful content from URL")

    return ExtractionResult(title=title, raw_text=content, original_url=url)
