# tests/test_config.py
import textwrap

import pytest

from freshers_notifier.config import load_config

SETTINGS = textwrap.dedent("""\
    scraper:
      index_url: "https://jobs.test/"
      poll_interval_minutes: 15
    telegram:
      bot_token: "${TEST_BOT_TOKEN}"
      channel_id: -1001234
    storage:
      state_path: "data/seen.json"
    logging:
      level: "DEBUG"
""")


@pytest.fixture
def settings_file(tmp_path):
    def _write(text: str):
        path = tmp_path / "settings.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def no_env(tmp_path):
    return tmp_path / "missing.env"


def test_load_config_resolves_env_and_defaults(settings_file, no_env, monkeypatch):
    monkeypatch.setenv("TEST_BOT_TOKEN", "123:abc")

    config = load_config(settings_path=settings_file(SETTINGS), env_path=no_env)

    assert config.telegram.bot_token == "123:abc"
    assert config.telegram.channel_id == "-1001234"
    assert config.scraper.index_url == "https://jobs.test/"
    assert config.scraper.poll_interval_minutes == 15
    assert config.scraper.posting_selector == ".entry-title > a"
    assert config.scraper.recent_limit == 10
    assert config.state_path == "data/seen.json"
    assert config.log_level == "DEBUG"


def test_unset_env_var_is_an_error(settings_file, no_env, monkeypatch):
    monkeypatch.delenv("TEST_BOT_TOKEN", raising=False)

    with pytest.raises(ValueError, match="TEST_BOT_TOKEN"):
        load_config(settings_path=settings_file(SETTINGS), env_path=no_env)


def test_missing_section_is_an_error(settings_file, no_env):
    text = 'scraper:\n  index_url: "https://jobs.test/"\n'

    with pytest.raises(ValueError, match="telegram"):
        load_config(settings_path=settings_file(text), env_path=no_env)


def test_missing_required_key_names_the_section(settings_file, no_env, monkeypatch):
    monkeypatch.setenv("TEST_BOT_TOKEN", "123:abc")
    text = SETTINGS.replace('  index_url: "https://jobs.test/"\n', "")

    with pytest.raises(ValueError, match="'scraper'.*index_url"):
        load_config(settings_path=settings_file(text), env_path=no_env)


def test_missing_file_is_an_error(tmp_path, no_env):
    with pytest.raises(FileNotFoundError):
        load_config(settings_path=tmp_path / "nope.yaml", env_path=no_env)
