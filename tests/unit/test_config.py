"""Unit tests for configuration."""

import pytest

from sprig.core.config import Config, get_config, split_key


@pytest.fixture
def config(tmp_path):
    return Config(tmp_path / "config")


def test_fallback(config):
    assert config.get("core", "missing") is None
    assert config.get("core", "missing", "dflt") == "dflt"
    assert config.default_branch == "master"
    assert config.color is True
    assert config.log_level == "WARNING"


def test_repo_overrides_global(config):
    config.set("init", "defaultbranch", "global-main", global_config=True)
    assert Config(config.repo_config_path).default_branch == "global-main"

    config.set("init", "defaultbranch", "repo-main")
    assert Config(config.repo_config_path).default_branch == "repo-main"


def test_environment_overrides_files(config, monkeypatch):
    config.set("color", "ui", "true")
    monkeypatch.setenv("SPRIG_COLOR_UI", "false")

    assert config.color is False


def test_get_bool_values(config):
    config.set("x", "on", "Yes")
    config.set("x", "off", "0")
    config.set("x", "odd", "maybe")

    assert config.get_bool("x", "on") is True
    assert config.get_bool("x", "off", True) is False
    assert config.get_bool("x", "odd", True) is True


def test_unset(config):
    config.set("core", "loglevel", "debug")
    assert config.log_level == "DEBUG"

    assert config.unset("core", "loglevel")
    assert not config.unset("core", "loglevel")
    assert Config(config.repo_config_path).log_level == "WARNING"


def test_list_all(config):
    config.set("user", "name", "Repo")
    config.set("user", "name", "Global", global_config=True)

    values = config.list_all()

    assert values["user"]["name"] == "Repo"
    assert values["user"]["name (global)"] == "Global"
    assert config.list_all(global_only=True) == {"user": {"name (global)": "Global"}}


def test_set_without_repo():
    with pytest.raises(ValueError):
        Config().set("core", "x", "y")


def test_split_key():
    assert tuple(split_key("init.defaultbranch")) == ("init", "defaultbranch")
    assert tuple(split_key("a.b.c")) == ("a", "b.c")
    assert tuple(split_key("loglevel")) == ("core", "loglevel")


def test_get_config_for_repo(repo):
    assert get_config(repo).repo_config_path == repo.config_file
    assert get_config().repo_config_path is None
