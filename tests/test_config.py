import json

import pytest

from homefs.core.config import DEFAULT_SETTINGS, ConfigManager
from homefs.core.exceptions import ConfigurationError


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config" / "config.json"


def test_missing_file_is_created_with_defaults(config_file):
    config = ConfigManager(config_file)
    assert config_file.exists()
    assert json.loads(config_file.read_text(encoding="utf-8")) == DEFAULT_SETTINGS
    assert config.get("server_port") == DEFAULT_SETTINGS["server_port"]


def test_file_values_fill_in_over_defaults(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(json.dumps({"server_port": 9100}), encoding="utf-8")
    config = ConfigManager(config_file)
    assert config.get("server_port") == 9100
    assert config.get("log_level") == "INFO"


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
def test_unusable_file_falls_back_to_defaults(config_file, content):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(content, encoding="utf-8")
    config = ConfigManager(config_file)
    assert config.get("server_host") == DEFAULT_SETTINGS["server_host"]


def test_overrides_win_but_are_not_saved(config_file):
    config = ConfigManager(config_file)
    config.apply_overrides(server_port=9200, server_host=None, bogus="x")
    assert config.get("server_port") == 9200
    assert config.get("server_host") == DEFAULT_SETTINGS["server_host"]
    assert config.get("bogus") is None
    assert json.loads(config_file.read_text(encoding="utf-8"))["server_port"] == DEFAULT_SETTINGS["server_port"]


class TestHomePath:
    def test_resolves_configured_directory(self, config_file, tmp_path):
        config = ConfigManager(config_file)
        config.apply_overrides(home_path=str(tmp_path))
        assert config.get_home_path() == tmp_path.resolve()

    def test_missing_directory_is_a_configuration_error(self, config_file, tmp_path):
        config = ConfigManager(config_file)
        config.apply_overrides(home_path=str(tmp_path / "absent"))
        with pytest.raises(ConfigurationError):
            config.get_home_path()

    def test_file_is_not_a_home(self, config_file, tmp_path):
        a_file = tmp_path / "plain.txt"
        a_file.write_text("x", encoding="utf-8")
        config = ConfigManager(config_file)
        config.apply_overrides(home_path=str(a_file))
        with pytest.raises(ConfigurationError):
            config.get_home_path()


class TestSearchPacing:
    @pytest.mark.parametrize("value, expected", [
        (1, 0.001),
        (0, 0.0),
        (-5, 0.0),
        ("250", 0.25),
        ("fast", 0.001),
    ])
    def test_milliseconds_become_seconds(self, config_file, value, expected):
        config = ConfigManager(config_file)
        config.apply_overrides(search_pacing_ms=value)
        assert config.get_search_pacing() == pytest.approx(expected)
