"""Tests for the YouTube metadata extractor."""

import re

import httpx
import pytest

from docsense.errors import AccessError, InsufficientMetadata, InvalidInput
from docsense.extractors.youtube import (
    MetadataField,
    VideoMetadata,
    decode_escapes,
    extract_youtube,
    parse_video_id,
    parse_watch_page,
)

WATCH_PAGE = """
<html><head><title>Intro to Kubernetes Networking - YouTube</title>
<meta property="og:site_name" content="YouTube">
</head><body><script>
var ytInitialPlayerResponse = {"videoDetails":{"videoId":"abc123XYZ_-",
"title":"Intro to Kubernetes Networking",
"keywords":["kubernetes","networking","devops"],
"shortDescription":"A walkthrough of pod networking,\\nservices and ingress \\u0026 more.",
"viewCount":"123456","author":"Cloud Academy"},
"ownerChannelName":"Cloud Academy"};
</script></body></html>
"""


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestParseVideoId:
    @pytest.mark.parametrize(
        ("url", "video_id"),
        [
            ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://youtube.com/watch?feature=share&v=dQw4w9WgXcQ&t=10", "dQw4w9WgXcQ"),
            ("https://m.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://youtu.be/dQw4w9WgXcQ?t=42", "dQw4w9WgXcQ"),
            ("youtu.be/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://www.youtube.com/embed/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
            ("https://www.youtube.com/v/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ],
    )
    def test_recognized_shapes(self, url: str, video_id: str) -> None:
        assert parse_video_id(url) == video_id

    @pytest.mark.parametrize(
        "url",
        [
            None,
            "",
            "https://youtube.com/notavideo",
            "https://vimeo.com/12345",
            "https://www.youtube.com/watch?v=",
            "https://youtu.be/",
        ],
    )
    def test_rejected(self, url: str | None) -> None:
        with pytest.raises(InvalidInput):
            parse_video_id(url)


class TestMetadataParsing:
    """Test the ordered strategy lists."""

    def test_decode_escapes(self) -> None:
        assert decode_escapes('Rock \\u0026 Roll\\nLive &amp; \\"loud\\"') == 'Rock & Roll Live & "loud"'

    def test_parse_watch_page(self) -> None:
        metadata = parse_watch_page(WATCH_PAGE)

        assert metadata.title == "Intro to Kubernetes Networking"
        assert metadata.channel == "Cloud Academy"
        assert metadata.description == "A walkthrough of pod networking, services and ingress & more."
        assert metadata.keywords == "kubernetes networking devops"
        assert metadata.view_count == 123456

    def test_field_skips_matches_failing_acceptance(self) -> None:
        """A too-short first match falls through to the next pattern."""
        page = '<title>Hi</title> property="og:title" content="A proper video title"'

        assert parse_watch_page(page).title == "A proper video title"

    def test_description_from_video_details(self) -> None:
        """A too-short top-level description falls through to videoDetails."""
        page = (
            '"shortDescription":"Too short" '
            '"videoDetails":{"videoId":"abc","shortDescription":"A longer description kept in video details."}'
        )

        assert parse_watch_page(page).description == "A longer description kept in video details."

    def test_channel_ignores_youtube_site_name(self) -> None:
        page = 'property="og:site_name" content="YouTube"'
        assert parse_watch_page(page).channel == ""

    def test_field_with_no_match(self) -> None:
        field = MetadataField(name="x", patterns=(re.compile(r'"x":"([^"]+)"'),))
        assert field.extract("nothing here") == ""

    def test_to_text(self) -> None:
        metadata = VideoMetadata(
            title="Budget walkthrough",
            channel="Finance Weekly",
            description="How we plan the quarterly budget.",
            keywords="budget finance",
            view_count=1500,
        )

        assert metadata.to_text() == (
            "Budget walkthrough. Channel: Finance Weekly. How we plan the quarterly budget.. "
            "Tags: budget finance. Views: 1,500."
        )

    def test_to_text_is_bounded(self) -> None:
        metadata = VideoMetadata(title="t" * 10, description="d" * 5000)
        assert len(metadata.to_text()) == 4000


class TestExtractYoutube:
    """Test fetch and error mapping."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=WATCH_PAGE)

        url = "https://youtu.be/abc123XYZ_-"
        async with _client(handler) as client:
            result = await extract_youtube(url, client=client)

        assert seen[0].url.params["v"] == "abc123XYZ_-"
        assert seen[0].url.host == "www.youtube.com"
        assert result.title == "Intro to Kubernetes Networking"
        assert "Channel: Cloud Academy" in result.raw_text
        assert result.original_url == url

    @pytest.mark.asyncio
    async def test_unparseable_url_makes_no_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        async with _client(handler) as client:
            with pytest.raises(InvalidInput):
                await extract_youtube("https://youtube.com/notavideo", client=client)

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        async with _client(lambda request: httpx.Response(403)) as client:
            with pytest.raises(AccessError) as exc_info:
                await extract_youtube("https://youtu.be/private1", client=client)

        assert exc_info.value.suggestion

    @pytest.mark.asyncio
    async def test_network_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with _client(handler) as client:
            with pytest.raises(AccessError):
                await extract_youtube("https://youtu.be/slow1", client=client)

    @pytest.mark.asyncio
    async def test_insufficient_metadata(self) -> None:
        async with _client(lambda request: httpx.Response(200, text="<html></html>")) as client:
            with pytest.raises(InsufficientMetadata):
                await extract_youtube("https://youtu.be/empty1", client=client)

    @pytest.mark.asyncio
    async def test_title_fallback(self) -> None:
        page = '"shortDescription":"A long enough description of the video content."'
        async with _client(lambda request: httpx.Response(200, text=page)) as client:
            result = await extract_youtube("https://youtu.be/vid42", client=client)

        assert result.title == "YouTube Video vid42"
