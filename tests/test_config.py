import logging

import pytest

from mcbots.config import Config, load_config, setup_logger


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("PORT", "LOG_INFO"):
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_defaults(clean_env):
    assert load_config() == Config(port="8080", log_info=False)


def test_environment_values(clean_env, monkeypatch):
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.setenv("LOG_INFO", "true")
    assert load_config() == Config(port="9090", log_info=True)


def test_log_info_requires_exact_true(clean_env, monkeypatch):
    monkeypatch.setenv("LOG_INFO", "TRUE")
    assert load_config().log_info is False


def test_env_file_is_loaded(clean_env):
    (clean_env / ".env").write_text("PORT=7070\nLOG_INFO=true\n")
    config = load_config()
    assert config.port == "7070"
    assert config.log_info is True


def test_environment_beats_env_file(clean_env, monkeypatch):
    (clean_env / ".env").write_text("PORT=7070\n")
    monkeypatch.setenv("PORT", "6060")
    assert load_config().port == "6060"


def test_setup_logger_verbose(root_logger, capsys):
    setup_logger(Config(log_info=True))
    assert root_logger.level == logging.DEBUG
    logging.getLogger("mcbots.sample").info("spawned")
    assert "spawned" in capsys.readouterr().out


def test_setup_logger_quiet(root_logger, capsys):
    setup_logger(Config(log_info=False))
    assert root_logger.level == logging.WARNING
    logging.getLogger("mcbots.sample").info("hidden")
    logging.getLogger("mcbots.sample").warning("shown")
    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "shown" in out