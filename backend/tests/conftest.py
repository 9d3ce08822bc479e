from __future__ import annotations

import os
import tempfile

# до импорта приложения: модульный app не должен создавать ./assets
os.environ.setdefault("POKEDEX_ASSETS_DIR", tempfile.mkdtemp(prefix="pokedex-assets-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pokedex.api.main import create_app
from pokedex.config import Settings
from pokedex.core.assets import AssetStore
from pokedex.core.forms import search_key
from pokedex.core.lifecycle import CreatureLifecycle
from pokedex.db.base import Base
from pokedex.db.deps import get_db
from pokedex.db.models import Creature
import pokedex.db.session as db_session
import pokedex.db.init_db as db_init

BASE_URL = "http://pokedex.test:3000"


@pytest.fixture(scope="session")
def engine():
    # SQLite in-memory (один коннект на всю сессию тестов)
    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    return eng


@pytest.fixture(scope="session")
def TestingSessionLocal(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture(scope="session", autouse=True)
def _patch_db(engine, TestingSessionLocal):
    # патчим "боевые" engine/SessionLocal на тестовые
    db_session.engine = engine
    db_session.SessionLocal = TestingSessionLocal

    db_init.engine = engine

    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_tables(TestingSessionLocal):
    yield
    with TestingSessionLocal() as s:
        s.execute(delete(Creature))
        s.commit()


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        database_url="sqlite+pysqlite:///:memory:",
        assets_dir=tmp_path / "assets",
        public_base_url=BASE_URL,
        page_size=20,
    )


@pytest.fixture()
def assets(settings):
    store = AssetStore(settings.assets_dir, settings.public_base_url)
    store.ensure()
    return store


@pytest.fixture()
def db(TestingSessionLocal):
    s = TestingSessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def lifecycle(db, assets):
    return CreatureLifecycle(db, assets, page_size=20)


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app, TestingSessionLocal):
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def add_creature(TestingSessionLocal, assets):
    """Insert a row directly, bypassing the lifecycle manager."""

    def _add(id: int, name: str, types=None, image=None, **stats) -> int:
        with TestingSessionLocal() as s:
            s.add(
                Creature(
                    id=id,
                    name=name,
                    name_key=search_key(name),
                    types=list(types or []),
                    image=image or assets.placeholder_url,
                    **stats,
                )
            )
            s.commit()
        return id

    return _add
