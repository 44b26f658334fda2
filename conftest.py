from __future__ import annotations

import pytest

_ENVIRONMENT_KEYS = (
    "STRAINSTAR_CONFIG_PATH",
    "STRAINSTAR_SECTION_LENGTH_MS",
    "STRAINSTAR_DECAY_WEIGHT",
    "STRAINSTAR_OUTPUT_INDENT",
    "STRAINSTAR_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_strainstar_environment(monkeypatch):
    for key in _ENVIRONMENT_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
