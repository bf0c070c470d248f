"""YouTube metadata extractor.

Scrapes the public watch page (no official API, no transcript) and recovers
title, description, channel, keywords and view count with ordered regex
strategies. Each field accepts the first match that passes its quality gate.
"""

import html
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from urllib.parse import parse_qs, urlsplit

import httpx

from docsense.errors import AccessError, InsufficientMetadata, InvalidInput
from docsense.extractors.http import BROWSER_HEADERS, DEFAULT_TIMEOUT_SECONDS, http_client
from docsense.models.documents import ExtractionResult

logger = logging.getLogger(__name__)

WATCH_URL = "https://www.youtube.com/watch"

MAX_CONTENT_CHARS = 4000
MAX_KEYWORD_CHARS = 200
MIN_CONTENT_CHARS = 20

_YOUTUBE_URL = re.compile(
    r"^(https?://)?(www\.|m\.)?"
    r"(youtube\.com/watch\?(.*&)?v=|youtu\.be/|youtube\.com/embed/|youtube\.com/v/)",
    re.IGNORECASE,
)
_UNICODE_ESCAPE = re.compile(r"\\u([0-9a-fA-F]{4})")

ACCESS_SUGGESTION = "Please try a different public YouTube video that is accessible in your region."
METADATA_SUGGESTION = (
    "Try a video with a detailed title and description, or a video from a channel "
    "that provides good metadata."
)


def decode_escapes(value: str) -> str:
    """Decode JSON-style escapes and HTML entities found in page source."""
    value = _UNICODE_ESCAPE.sub(lambda m: chr(int(m.group(1), 16)), value)
    value = value.replace("\\n", " ").replace('\\"', '"').replace("\\", "")
    return html.unescape(value).strip()


@dataclass(frozen=True)
class MetadataField:
    """One metadata field recovered by trying patterns in order."""

    name: str
    patterns: tuple[re.Pattern[str], ...]
    accept: Callable[[str], bool] = field(default=bool)
    clean: Callable[[str], str] = field(default=decode_escapes)

    def extract(self, page: str) -> str:
        """Return the first cleaned match that passes ``accept``, else ""."""
        for pattern in self.patterns:
            match = pattern.search(page)
            if not match or not match.group(1):
                continue
            value = self.clean(match.group(1))
            if self.accept(value):
                return value
        return ""


def _clean_title(value: str) -> str:
    return decode_escapes(value.replace(" - YouTube", ""))


def _clean_keywords(value: str) -> str:
    return value.replace('"', "").replace(",", " ").strip()[:MAX_KEYWORD_CHARS]


TITLE = MetadataField(
    name="title",
    patterns=(
        re.compile(r"<title>([^<]+)</title>"),
        re.compile(r'"title":"([^"]+)"'),
        re.compile(r'property="og:title" content="([^"]+)"'),
        re.compile(r'<meta name="title" content="([^"]+)"'),
        re.compile(r'"videoDetails":\s*{[^}]*"title":"([^"]+)"'),
    ),
    accept=lambda v: len(v) > 5,
    clean=_clean_title,
)

DESCRIPTION = MetadataField(
    name="description",
    patterns=(
        re.compile(r'"shortDescription":"((?:[^"\\]|\\.)+)"'),
        re.compile(r'"description":{"simpleText":"((?:[^"\\]|\\.)+)"}'),
        re.compile(r'property="og:description" content="([^"]+)"'),
        re.compile(r'<meta name="description" content="([^"]+)"'),
        re.compile(r'"videoDetails":\s*{[^}]*"shortDescription":"((?:[^"\\]|\\.)+)"'),
    ),
    accept=lambda v: len(v) > 20,
)

CHANNEL = MetadataField(
    name="channel",
    patterns=(
        re.compile(r'"ownerChannelName":"([^"]+)"'),
        re.compile(r'"author":"([^"]+)"'),
        re.compile(r'property="og:site_name" content="([^"]+)"'),
    ),
    accept=lambda v: bool(v) and "YouTube" not in v,
)

KEYWORDS = MetadataField(
    name="keywords",
    patterns=(re.compile(r'"keywords":\[([^\]]+)\]'),),
    clean=_clean_keywords,
)

VIEW_COUNT = MetadataField(
    name="view_count",
    patterns=(re.compile(r'"viewCount":"(\d+)"'),),
    clean=lambda v: v,
)


@dataclass(frozen=True)
class VideoMetadata:
    """Fields scraped from a watch page."""

    title: str = ""
    description: str = ""
    channel: str = ""
    keywords: str = ""
    view_count: int | None = None

    def to_text(self) -> str:
        """Join the available fields into one bounded text blob."""
        parts = [
            self.title,
            f"Channel: {self.channel}" if self.channel else "",
            self.description,
            f"Tags: {self.keywords}" if self.keywords else "",
            f"Views: {self.view_count:,}." if self.view_count is not None else "",
        ]
        return ". ".join(p for p in parts if p)[:MAX_CONTENT_CHARS]


def parse_watch_page(page: str) -> VideoMetadata:
    """Apply every field strategy to the page source."""
    views = VIEW_COUNT.extract(page)
    return VideoMetadata(
        title=TITLE.extract(page),
        description=DESCRIPTION.extract(page),
        channel=CHANNEL.extract(page),
        keywords=KEYWORDS.extract(page),
        view_count=int(views) if views else None,
    )


def parse_video_id(url: str | None) -> str:
    """Extract the video ID from a recognized YouTube URL.

    Raises:
        InvalidInput: If the URL is missing, not a YouTube video link, or has no ID
    """
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidInput("No YouTube URL provided")

    if not _YOUTUBE_URL.match(candidate):
        raise InvalidInput(
            "Invalid YouTube URL. Please provide a valid YouTube video link.",
            suggestion="Use a link like https://www.youtube.com/watch?v=<id> or https://youtu.be/<id>.",
        )

    if not re.match(r"^https?://", candidate, re.IGNORECASE):
        candidate = f"https://{candidate}"

    try:
        parts = urlsplit(candidate)
    except ValueError as e:
        raise InvalidInput("Failed to parse YouTube URL") from e

    host = (parts.hostname or "").lower()
    video_id = ""
    if host.endswith("youtu.be"):
        video_id = parts.path.lstrip("/")
    else:
        video_id = parse_qs(parts.query).get("v", [""])[0]
        for marker in ("/embed/", "/v/"):
            if not video_id and marker in parts.path:
                video_id = parts.path.split(marker, 1)[1]

    video_id = video_id.split("&")[0].split("?")[0].split("/")[0].strip()
    if not video_id:
        raise InvalidInput("Could not extract video ID from YouTube URL")

    return video_id


async def extract_youtube(
    url: str,
    client: httpx.AsyncClient | None = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> ExtractionResult:
    """Fetch a YouTube watch page and turn its metadata into text.

    Args:
        url: YouTube video URL (watch, youtu.be, embed or /v/ shapes)
        client: Optional httpx client (for testing with mocks)
        timeout: Fetch timeout in seconds

    Raises:
        InvalidInput: If the URL is not a recognized video link
        AccessError: On network failure or a non-2xx page
        InsufficientMetadata: If the combined metadata is too short
    """
    video_id = parse_video_id(url)

    async with http_client(client, timeout) as http:
        try:
            response = await http.get(
                WATCH_URL,
                params={"v": video_id},
                headers=BROWSER_HEADERS,
                timeout=timeout,
                follow_redirects=True,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"YouTube page fetch failed for {video_id}: {type(e).__name__}")
            raise AccessError(
                "Unable to access YouTube video information. The video may be private, "
                "age-restricted, region-blocked, or temporarily unavailable.",
                suggestion=ACCESS_SUGGESTION,
            ) from e

    metadata = parse_watch_page(response.text)
    content = metadata.to_text()

    if len(content.strip()) < MIN_CONTENT_CHARS:
        raise InsufficientMetadata(
            "Could not extract sufficient content from YouTube video. The video may have "
            "very limited metadata or may be restricted.",
            suggestion=METADATA_SUGGESTION,
        )

    title = metadata.title if len(metadata.title) >= 5 else f"YouTube Video {video_id}"
    return ExtractionResult(title=title, raw_text=content, original_url=url.strip())
