from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from rls_playground.core.session_store import session_store
from rls_playground.engines import BindingRegistry, default_registry
from rls_playground.main import app


@pytest.fixture(scope="module")
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def _clear_sessions() -> Generator[None, None, None]:
    session_store.clear()
    yield
    session_store.clear()


@pytest.fixture
def registry() -> BindingRegistry:
    return default_registry()
