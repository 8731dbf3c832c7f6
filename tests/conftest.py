import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

ENV_KEYS = ("DC_MAP_WIDTH", "DC_MAP_HEIGHT", "DC_ROOM_COUNT", "DC_DEPTH", "DC_SEED", "DC_VIEW_RANGE", "DC_LOG_LEVEL")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep the developer's own settings file and DC_* variables out of every test."""
    from dungeon_crawler import config

    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    user_file = tmp_path / "user-config" / "settings.yaml"
    monkeypatch.setattr(config, "user_settings_path", lambda: user_file)
    return user_file
