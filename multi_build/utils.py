import os
import platform
from enum import Enum


class OperatingSystem(Enum):
    windows = "Windows"
    macos = "MacOS"
    linux = "Linux"
    unknown = "Unknown"

    @classmethod
    def current(cls):
        match platform.system():
            case "Windows":
                return cls.windows
            case "Darwin":
                return cls.macos
            case "Linux":
                return cls.linux
            case _:
                return cls.unknown

    @classmethod
    def monospace_font(cls):
        match cls.current():
            case cls.windows:
                return "Lucida Console"
            case cls.macos:
                return "Monaco"
            case _:
                return "Monospace"


def get_app_dir(app_name: str) -> str:
    """Returns the config folder for the application.

    Adapted from `click.get_app_dir` to be able to avoid click dependencies for the GUI.
    """
    if OperatingSystem.current() == OperatingSystem.windows:
        folder = os.environ.get("APPDATA")
        if folder is None:
            folder = os.path.expanduser("~")
        return os.path.join(folder, app_name)
    elif OperatingSystem.current() == OperatingSystem.macos:
        return os.path.join(
            os.path.expanduser("~/Library/Application Support"), app_name
        )
    return os.path.join(
        os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
        app_name.lower(),
    )
