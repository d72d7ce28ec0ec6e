import os
import pathlib
import platform

APP_DIR_NAME = "termsweeper"
LEADERBOARD_FILE = "leaderboard.txt"


# Returns the directory the leaderboard lives in. SWEEPER_HOME wins when set,
# otherwise the per-user config location for the current operating system.
def get_leaderboard_dir() -> pathlib.Path:
    override = os.getenv("SWEEPER_HOME")
    if override:
        return pathlib.Path(override)

    if platform.system() == "Windows":
        local_app_data = os.getenv("LOCALAPPDATA")
        if local_app_data is None:
            raise RuntimeError("LOCALAPPDATA environment variable not set")
        return pathlib.Path(local_app_data) / APP_DIR_NAME

    xdg_config_home = os.getenv("XDG_CONFIG_HOME")
    if xdg_config_home:
        return pathlib.Path(xdg_config_home) / APP_DIR_NAME
    return pathlib.Path.home() / ".config" / APP_DIR_NAME


def get_leaderboard_path(directory=None) -> pathlib.Path:
    if directory is None:
        directory = get_leaderboard_dir()
    return pathlib.Path(directory) / LEADERBOARD_FILE
