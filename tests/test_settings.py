import pathlib

import pytest

import settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("SWEEPER_HOME", "XDG_CONFIG_HOME", "LOCALAPPDATA"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(settings.platform, "system", lambda: "Linux")
    return monkeypatch


def test_override_wins(clean_env, tmp_path):
    clean_env.setenv("SWEEPER_HOME", str(tmp_path))
    clean_env.setenv("XDG_CONFIG_HOME", "/elsewhere")
    assert settings.get_leaderboard_dir() == tmp_path


def test_xdg_config_home(clean_env, tmp_path):
    clean_env.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert settings.get_leaderboard_dir() == tmp_path / "termsweeper"


def test_home_config_fallback(clean_env, tmp_path):
    clean_env.setattr(settings.pathlib.Path, "home", classmethod(lambda cls: tmp_path))
    assert settings.get_leaderboard_dir() == tmp_path / ".config" / "termsweeper"


def test_windows_uses_local_app_data(clean_env, tmp_path):
    clean_env.setattr(settings.platform, "system", lambda: "Windows")
    clean_env.setenv("LOCALAPPDATA", str(tmp_path))
    assert settings.get_leaderboard_dir() == tmp_path / "termsweeper"


def test_windows_without_local_app_data_fails(clean_env):
    clean_env.setattr(settings.platform, "system", lambda: "Windows")
    with pytest.raises(RuntimeError):
        settings.get_leaderboard_dir()


def test_leaderboard_path(clean_env, tmp_path):
    assert settings.get_leaderboard_path(tmp_path) == tmp_path / "leaderboard.txt"
    clean_env.setenv("SWEEPER_HOME", str(tmp_path))
    assert settings.get_leaderboard_path() == pathlib.Path(tmp_path) / "leaderboard.txt"
