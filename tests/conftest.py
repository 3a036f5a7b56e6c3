from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from harmonipy.domain.lookup import SourceRegistry

from tests.helpers.releases import FakeSource, make_release

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> Iterator[None]:
    for name in (
        "HARMONIPY_REGIONS",
        "HARMONIPY_PROVIDERS",
        "HARMONIPY_PRIMARY_PROVIDER",
        "HARMONIPY_PREFERENCES_FILE",
        "HARMONIPY_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HARMONIPY_DATA_DIR", str(tmp_path_factory.mktemp("harmonipy-data")))
    yield


@pytest.fixture
def alpha() -> FakeSource:
    return FakeSource("Alpha", default=make_release("Alpha"), domains=("alpha.test",))


@pytest.fixture
def beta() -> FakeSource:
    return FakeSource("Beta", default=make_release("Beta"), domains=("beta.test",))


@pytest.fixture
def registry(alpha: FakeSource, beta: FakeSource) -> SourceRegistry:
    return SourceRegistry([alpha, beta])
