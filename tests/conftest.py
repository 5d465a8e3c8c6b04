"""
Shared fixtures: a pinned clock, predictable label ids and a session
wired to the default kitchen catalog.
"""

from __future__ import annotations

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from kitchen_labels import data
from kitchen_labels.app import create_app
from kitchen_labels.catalog import CategoryCatalog
from kitchen_labels.config import Settings, get_settings
from kitchen_labels.session import LabelSession

FIXED_NOW = datetime(2024, 1, 10, 9, 30)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class CountingIds:
    def __init__(self, prefix: str = "L"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}{self.count:04d}"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(FIXED_NOW)


@pytest.fixture
def ids() -> CountingIds:
    return CountingIds()


@pytest.fixture
def catalog() -> CategoryCatalog:
    return CategoryCatalog(data.default_categories())


@pytest.fixture
def session(catalog: CategoryCatalog, clock: FakeClock, ids: CountingIds) -> LabelSession:
    return LabelSession(catalog, clock=clock, id_factory=ids)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(label_font_path=None, output_dir=str(tmp_path / "output"), log_level="DEBUG")


@pytest.fixture
def client(test_settings: Settings, session: LabelSession) -> TestClient:
    return TestClient(create_app(test_settings, session=session))


@pytest.fixture
def fresh_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
