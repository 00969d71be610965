# tests/core/test_config_management.py
import json

import pytest

from rssit.model import ParserSettings
from rssit.utils.config_manager import ConfigManager
from rssit.utils.path_utils import PathUtils

# A small, predictable configuration for the tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "INFO"
    },
    "parser": {
        "min_link_words": 5,
        "min_cluster_size": 2,
        "with_class_names": False,
        "unknown_option": "ignored"
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Points the ConfigManager singleton at a temporary settings.json and
    restores the packaged configuration afterwards.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    monkeypatch.setattr(PathUtils, "get_settings_file", lambda: settings_file)

    manager = ConfigManager()
    manager.reset()
    yield manager, settings_file

    monkeypatch.undo()
    manager.reset()


def test_packaged_settings_file_exists():
    assert PathUtils.get_settings_file().is_file()


def test_config_manager_is_a_singleton():
    assert ConfigManager() is ConfigManager()


def test_config_manager_load(config_env):
    manager, _ = config_env
    config = manager.get_all()
    assert config["debug"]["level"] == "INFO"
    assert config["parser"]["min_link_words"] == 5


def test_config_manager_get_nested(config_env):
    manager, _ = config_env
    assert manager.get_nested("parser.min_cluster_size") == 2
    assert manager.get_nested("non.existent.key", "default") == "default"
    assert manager.get_nested("debug.level.deeper", "default") == "default"


def test_config_manager_set_nested_casts_to_existing_type(config_env):
    manager, _ = config_env

    manager.set_nested("parser.min_cluster_size", "7")
    assert manager.get_nested("parser.min_cluster_size") == 7

    manager.set_nested("parser.with_class_names", "true")
    assert manager.get_nested("parser.with_class_names") is True

    manager.set_nested("new_section.enabled", "yes")
    assert manager.get_nested("new_section.enabled") == "yes"


def test_config_manager_set_nested_refuses_non_dict(config_env):
    manager, _ = config_env
    assert manager.set_nested("debug.level.deeper", "x") is False


def test_config_manager_reset_discards_changes(config_env):
    manager, _ = config_env
    manager.set_nested("parser.min_link_words", "9")
    manager.reset()
    assert manager.get_nested("parser.min_link_words") == 5


def test_broken_settings_file_yields_empty_config(config_env):
    manager, settings_file = config_env
    settings_file.write_text("{ not json")
    manager.reset()
    assert manager.get_all() == {}


def test_parser_settings_from_config(config_env):
    settings = ParserSettings.from_config()
    assert settings.min_link_words == 5
    assert settings.min_cluster_size == 2
    # Not configured, so the model default applies.
    assert settings.min_title_words == 3


def test_parser_settings_overrides_win(config_env):
    settings = ParserSettings.from_config(min_cluster_size=10, with_class_names=None)
    assert settings.min_cluster_size == 10
    assert settings.with_class_names is False


def test_configure_logger_sets_levels():
    import logging

    from rssit.utils.configure_logging import LogWithTqdm, configure_logger

    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logger("debug", {"rssit.services": "ERROR"}, {"noisy.lib": "CRITICAL"})
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1 and isinstance(root.handlers[0], LogWithTqdm)
        assert logging.getLogger("rssit.services").level == logging.ERROR
        assert logging.getLogger("noisy.lib").level == logging.CRITICAL
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("rssit.services").setLevel(logging.NOTSET)
