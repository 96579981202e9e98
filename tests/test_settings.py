"""
Tests for Settings
==================
Tests for the YAML settings loader in aliaskit/settings.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from aliaskit import settings
from aliaskit.settings import get_setting, reload_settings, resolve_path


@pytest.fixture
def custom_config(tmp_path, monkeypatch):
    """Point ALIASKIT_CONFIG at a temporary app.yaml."""
    path = tmp_path / "app.yaml"
    path.write_text(
        "allocator:\n"
        "  separator: '-'\n"
        "  nested:\n"
        "    value: 3\n",
        encoding="utf-8",
    )
    monkeypatch.setenv(settings.CONFIG_ENV_VAR, str(path))
    reload_settings()
    yield path
    monkeypatch.delenv(settings.CONFIG_ENV_VAR, raising=False)
    reload_settings()


class TestGetSetting:
    """Tests for dotted-path lookups."""

    def test_bundled_values(self):
        assert get_setting("allocator.separator") == "_"
        assert get_setting("allocator.sparse_divisor") == 8
        assert get_setting("corpus.path") == "data/names.json"

    def test_missing_key_returns_default(self):
        assert get_setting("allocator.nope") is None
        assert get_setting("allocator.nope", 5) == 5

    def test_path_through_scalar_returns_default(self):
        assert get_setting("allocator.separator.deeper", "x") == "x"

    def test_env_override(self, custom_config):
        assert get_setting("allocator.separator") == "-"
        assert get_setting("allocator.nested.value") == 3
        assert get_setting("corpus.path") is None

    def test_missing_config_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv(settings.CONFIG_ENV_VAR, str(tmp_path / "absent.yaml"))
        reload_settings()
        try:
            with pytest.raises(FileNotFoundError):
                get_setting("allocator.separator")
        finally:
            monkeypatch.delenv(settings.CONFIG_ENV_VAR)
            reload_settings()


class TestResolvePath:
    """Tests for resolve_path."""

    def test_relative_to_package(self):
        path = resolve_path("data/names.json")
        assert path == (settings.PACKAGE_ROOT / "data" / "names.json").resolve()
        assert path.exists()

    def test_relative_to_base(self, tmp_path):
        assert resolve_path("x.json", base=tmp_path) == (tmp_path / "x.json").resolve()

    def test_absolute_unchanged(self, tmp_path):
        target = tmp_path / "names.json"
        assert resolve_path(str(target)) == target

    def test_none_rejected(self):
        with pytest.raises(ValueError):
            resolve_path(None)
