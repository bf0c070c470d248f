"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator, Callable
from datetime import date

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from docsense.config import Settings
from docsense.db.models import Base
from docsense.main import create_app
from docsense.services import Services, build_in_memory_services


def _escape_pdf_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: list[str]) -> bytes:
    """Build a one-page PDF whose text layer holds ``lines`` (Helvetica)."""
    ops = []
    y = 740
    for line in lines:
        ops.append(f"BT /F1 11 Tf 40 {y} Td ({_escape_pdf_text(line)}) Tj ET")
        y -= 16
    stream = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n".encode()
    out += f"startxref\n{xref_at}\n%%EOF\n".encode()
    return bytes(out)


class FakeWeb:
    """httpx.MockTransport handler serving canned responses by full URL."""

    def __init__(self) -> None:
        self.pages: dict[str, httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def add(self, url: str, status_code: int = 200, text: str = "") -> None:
        self.pages[url] = httpx.Response(
            status_code, text=text, headers={"content-type": "text/html"}
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.pages.get(str(request.url), httpx.Response(404, text="not found"))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class Clock:
    """Settable calendar-day clock."""

    def __init__(self, day: date) -> None:
        self.day = day

    def __call__(self) -> date:
        return self.day


@pytest.fixture
def pdf_builder() -> Callable[[list[str]], bytes]:
    return build_pdf


@pytest.fixture
def finance_pdf() -> bytes:
    return build_pdf(
        [
            "Q3 financial budget report discussing revenue and accounting.",
            "The quarterly budget review covers operating expenses, capital allocation",
            "and forecast accuracy for the finance team.",
        ]
    )


@pytest.fixture
def blank_pdf() -> bytes:
    """A PDF page with no text layer (what an image-only scan looks like)."""
    return build_pdf([])


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment: in-memory stores, heuristic classifier."""
    return Settings(
        _env_file=None,
        database_url=None,
        redis_url=None,
        llm_api_key=None,
        password_hasher="plaintext",
        daily_request_limit=5,
    )


@pytest.fixture
def fake_web() -> FakeWeb:
    return FakeWeb()


@pytest.fixture
def clock() -> Clock:
    return Clock(date(2026, 3, 2))


@pytest.fixture
def services(settings: Settings, fake_web: FakeWeb, clock: Clock) -> Services:
    return build_in_memory_services(settings, http_client=fake_web.client(), today=clock)


@pytest.fixture
def client(services: Services) -> TestClient:
    """Test client over an app with injected in-memory services."""
    return TestClient(create_app(services))


@pytest.fixture
def register_and_login(client: TestClient) -> Callable[..., dict[str, str]]:
    """Create an account and return Bearer auth headers for it."""

    def _login(email: str = "ada@example.com", password: str = "secret123") -> dict[str, str]:
        response = client.post(
            "/auth/register", json={"email": email, "name": "Ada", "password": password}
        )
        assert response.status_code == 201, response.text
        response = client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        client.cookies.clear()
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _login


@pytest_asyncio.fixture
async def sqlite_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine with all tables created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'docsense.db'}",
        poolclass=NullPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=sqlite_engine, expire_on_commit=False)
