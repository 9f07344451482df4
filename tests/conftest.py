"""
Shared fixtures: a throwaway SQLite database per test and an HTTP client bound to it.
"""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import school_cms.models  # noqa: F401  (registers every table on Base.metadata)
from school_cms.config import settings
from school_cms.database import Base, build_engine, build_session_factory, get_db
from school_cms.main import app
from school_cms.utils.auth import hash_password

ADMIN_PASSWORD = "gallery-admin"

_admin_hash = hash_password(ADMIN_PASSWORD, rounds=4)


async def create_database(path):
    """File-backed so concurrent sessions see the same data."""
    engine = build_engine(f"sqlite+aiosqlite:///{path}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = await create_database(tmp_path / "school.db")
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def admin_password(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", _admin_hash)
    return ADMIN_PASSWORD


@pytest_asyncio.fixture
async def client(session_factory, admin_password):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def item_data():
    """Factory for GalleryItemCreate payloads (as dicts)."""
    def make(title="Sports day", **overrides):
        data = {
            "title": title,
            "category": "SPORTS",
            "type": "IMAGE",
            "file_path": f"/uploads/gallery/{title.lower().replace(' ', '-')}.webp",
            "file_name": f"{title.lower().replace(' ', '-')}.webp",
            "original_name": f"{title}.jpg",
            "file_size": 20480,
            "mime_type": "image/webp",
        }
        data.update(overrides)
        return data
    return make


@pytest.fixture
def admin_headers(admin_password):
    return {"X-CMS-Password": admin_password}


@pytest_asyncio.fixture
async def make_database(tmp_path):
    """Extra databases for tests that move data between two stores."""
    engines = []

    async def make(name):
        engine = await create_database(tmp_path / name)
        engines.append(engine)
        return build_session_factory(engine)

    yield make
    for engine in engines:
        await engine.dispose()
