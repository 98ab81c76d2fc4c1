import pytest
from fastapi.testclient import TestClient

from bookshop.config import Settings
from bookshop.main import create_app
from bookshop.storage import CatalogStore


@pytest.fixture
def catalog_path(tmp_path):
    return tmp_path / "data" / "books.json"


@pytest.fixture
def store(catalog_path):
    return CatalogStore(catalog_path)


@pytest.fixture
def settings(catalog_path):
    return Settings(
        catalog_path=catalog_path,
        api_urls=("http://shop.test",),
        refresh_interval=5.0,
        request_timeout=1.0,
        log_level="INFO",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
