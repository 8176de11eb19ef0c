from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from services.deals import DealService
from services.storage import Storage


@pytest.fixture
def storage(tmp_path) -> Storage:
    return Storage(tmp_path / "data" / "deals.json")


@pytest.fixture
def service(storage: Storage) -> DealService:
    return DealService(storage)


@pytest.fixture
def client(service: DealService):
    settings = Settings(data_file=service.storage.path)
    with TestClient(create_app(settings, service)) as c:
        yield c
