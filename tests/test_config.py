"""
Tests for configuration management.
"""

import json

import pytest

from kintone_cli.config import ConfigManager, KintoneConfig
from kintone_cli.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove kintone environment variables."""
    for name in ("BASE_URL", "API_TOKEN", "USERNAME", "PASSWORD", "CONFIG_DIR"):
        monkeypatch.delenv(f"KINTONE_{name}", raising=False)


class TestKintoneConfig:
    """Tests for KintoneConfig."""

    def test_defaults_not_configured(self):
        assert KintoneConfig().is_configured() is False

    def test_configured_with_api_token(self):
        config = KintoneConfig(base_url="https://example.cybozu.com", api_token="abc")
        assert config.is_configured() is True
        assert config.get_partial_auth() == {"apiToken": "abc"}

    def test_configured_with_password(self):
        config = KintoneConfig(base_url="https://example.cybozu.com", username="alice", password="pw")
        assert config.is_configured() is True
        assert config.get_partial_auth() == {"username": "alice", "password": "pw"}

    def test_username_without_password_not_configured(self):
        config = KintoneConfig(base_url="https://example.cybozu.com", username="alice")
        assert config.is_configured() is False

    def test_no_credentials_means_session(self):
        assert KintoneConfig(base_url="https://x").get_partial_auth() == {}

    def test_from_dict_ignores_unknown_keys(self):
        config = KintoneConfig.from_dict({"base_url": "https://x", "legacy": True})
        assert config.base_url == "https://x"


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_load_missing_file(self, tmp_path):
        manager = ConfigManager(tmp_path)
        assert manager.get() == KintoneConfig()

    def test_save_and_reload(self, tmp_path):
        manager = ConfigManager(tmp_path)
        manager.update(base_url="https://example.cybozu.com", api_token="abc", timeout=5)

        data = json.loads((tmp_path / "config.json").read_text())
        assert data["base_url"] == "https://example.cybozu.com"

        reloaded = ConfigManager(tmp_path).get()
        assert reloaded.api_token == "abc"
        assert reloaded.timeout == 5

    def test_api_token_replaces_password_auth(self, tmp_path):
        """Test switching from password to API token authentication."""
        manager = ConfigManager(tmp_path)
        manager.update(username="u", password="p")
        manager.update(api_token="TOKEN")

        config = ConfigManager(tmp_path).get()
        assert config.get_partial_auth() == {"apiToken": "TOKEN"}
        assert config.username == ""
        assert config.password == ""

    def test_username_replaces_api_token_auth(self, tmp_path):
        """Test switching from API token to password authentication."""
        manager = ConfigManager(tmp_path)
        manager.update(api_token="TOKEN")
        manager.update(username="u", password="p")

        config = ConfigManager(tmp_path).get()
        assert config.api_token == ""
        assert config.get_partial_auth() == {"username": "u", "password": "p"}

    def test_password_change_keeps_username(self, tmp_path):
        manager = ConfigManager(tmp_path)
        manager.update(username="u", password="p")
        manager.update(password="new")
        assert manager.get().get_partial_auth() == {"username": "u", "password": "new"}

    def test_update_unknown_key(self, tmp_path):
        with pytest.raises(ConfigurationError):
            ConfigManager(tmp_path).update(colour="blue")

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        ConfigManager(tmp_path).update(base_url="https://file.cybozu.com", api_token="file")
        monkeypatch.setenv("KINTONE_API_TOKEN", "env")

        config = ConfigManager(tmp_path).get()
        assert config.base_url == "https://file.cybozu.com"
        assert config.api_token == "env"

    def test_config_dir_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("KINTONE_CONFIG_DIR", str(tmp_path))
        assert ConfigManager().config_file == tmp_path / "config.json"

    def test_invalid_file(self, tmp_path):
        (tmp_path / "config.json").write_text("not json")
        with pytest.raises(ConfigurationError):
            ConfigManager(tmp_path).load()

    def test_clear(self, tmp_path):
        manager = ConfigManager(tmp_path)
        manager.update(base_url="https://x")
        manager.clear()
        assert not (tmp_path / "config.json").exists()
        assert manager.get().base_url == ""
