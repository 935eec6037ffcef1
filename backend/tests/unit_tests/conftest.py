import pytest

from tests.unit_tests.fakes import FakeStore


@pytest.fixture
def store(monkeypatch: pytest.MonkeyPatch) -> FakeStore:
    fake_store = FakeStore()
    fake_store.install(monkeypatch)
    return fake_store
