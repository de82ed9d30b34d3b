from __future__ import annotations

import pytest

from cake import config
from tests.pages import sample_page


@pytest.fixture
def page() -> str:
    return sample_page()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    for key in config.ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATH", str(tmp_path / "missing.conf"))
